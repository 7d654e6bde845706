# ontoalgebra/ontology_to_ttl.py
"""
Ontology → Turtle projection.

``to_turtle`` is the canonical, deterministic text embedded in logs and
CLI output: same ontology value, byte-identical text.  ``to_graph``
builds the equivalent rdflib graph for exporting other RDF formats.
Neither is a round-trip format.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from rdflib import Graph, Literal, Namespace, URIRef
from rdflib.namespace import RDF, RDFS, XSD

from ontoalgebra.ontology import (
    REFERENCE_PREFIX,
    SCALAR_TYPE_PREFIX,
    as_mapping,
    is_reference,
    is_scalar_type,
)

BASE_NS_TEMPLATE = "http://example.org/{id}#"


def base_namespace(ontology_id: Any) -> str:
    return BASE_NS_TEMPLATE.format(id=ontology_id)


def _is_typed_literal(value: Any) -> bool:
    return isinstance(value, dict) and "type" in value and "value" in value


def _lexical(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _quote(value: Any) -> str:
    text = _lexical(value)
    text = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{text}"'


def _items(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = data.get(key)
    return [x for x in items if isinstance(x, dict)] if isinstance(items, list) else []


def _parents(cls: Dict[str, Any]) -> List[Any]:
    parents = cls.get("superClasses")
    return parents if isinstance(parents, list) else []


def _properties(inst: Dict[str, Any]) -> List[Tuple[Any, Any]]:
    props = inst.get("properties")
    return list(props.items()) if isinstance(props, dict) else []


# ── Text projection ─────────────────────────────────────────────────

def _header(data: Dict[str, Any]) -> List[str]:
    return [
        f"@prefix : <{base_namespace(data.get('id'))}> .",
        f"@prefix rdfs: <{RDFS}> .",
        f"@prefix xsd: <{XSD}> .",
        f"# Ontology: {data.get('name')}",
    ]


def _class_lines(data: Dict[str, Any]) -> List[str]:
    lines = ["# Classes"]
    for cls in _items(data, "classes"):
        lines.append(f":{cls.get('id')} a rdfs:Class .")
        for parent in _parents(cls):
            lines.append(f":{cls.get('id')} rdfs:subClassOf :{parent} .")
    return lines


def _relation_lines(data: Dict[str, Any]) -> List[str]:
    lines = ["# Relations"]
    for rel in _items(data, "relations"):
        rid = rel.get("id")
        # no rdf: prefix in the header
        lines.append(f":{rid} a <{RDF.Property}> .")
        if rel.get("domain"):
            lines.append(f":{rid} rdfs:domain :{rel['domain']} .")
        if rel.get("range"):
            rng = rel["range"]
            term = rng if is_scalar_type(rng) else f":{rng}"
            lines.append(f":{rid} rdfs:range {term} .")
    return lines


def _instance_lines(data: Dict[str, Any]) -> List[str]:
    lines = ["# Instances"]
    for inst in _items(data, "instances"):
        iid = inst.get("id")
        if inst.get("classId"):
            lines.append(f":{iid} a :{inst['classId']} .")
        for prop_id, value in _properties(inst):
            if _is_typed_literal(value):
                obj = f"{_quote(value['value'])}^^{value['type']}"
            elif is_reference(value):
                obj = value
            else:
                obj = _quote(value)
            lines.append(f":{iid} :{prop_id} {obj} .")
    return lines


def to_turtle(ontology: Any) -> str:
    data = as_mapping(ontology)
    blocks = [
        _header(data),
        _class_lines(data),
        _relation_lines(data),
        _instance_lines(data),
    ]
    return "\n\n".join("\n".join(block) for block in blocks) + "\n"


# ── rdflib graph ────────────────────────────────────────────────────

def _datatype(tag: str, base: Namespace) -> URIRef:
    if tag.startswith(SCALAR_TYPE_PREFIX):
        return XSD[tag[len(SCALAR_TYPE_PREFIX):]]
    if "://" in tag:
        return URIRef(tag)
    return base[tag.lstrip(REFERENCE_PREFIX)]


def to_graph(ontology: Any, base_ns: Optional[str] = None) -> Graph:
    data = as_mapping(ontology)
    BASE = Namespace(base_ns or base_namespace(data.get("id")))

    g = Graph()
    g.bind("", BASE)
    g.bind("rdfs", RDFS)
    g.bind("xsd", XSD)

    # classes
    for cls in _items(data, "classes"):
        node = BASE[str(cls.get("id"))]
        g.add((node, RDF.type, RDFS.Class))
        for parent in _parents(cls):
            g.add((node, RDFS.subClassOf, BASE[str(parent)]))

    # relations
    for rel in _items(data, "relations"):
        prop = BASE[str(rel.get("id"))]
        g.add((prop, RDF.type, RDF.Property))
        if rel.get("domain"):
            g.add((prop, RDFS.domain, BASE[str(rel["domain"])]))
        if rel.get("range"):
            rng = str(rel["range"])
            g.add((prop, RDFS.range, _datatype(rng, BASE)))

    # instances
    for inst in _items(data, "instances"):
        node = BASE[str(inst.get("id"))]
        if inst.get("classId"):
            g.add((node, RDF.type, BASE[str(inst["classId"])]))
        for prop_id, value in _properties(inst):
            pred = BASE[str(prop_id)]
            if _is_typed_literal(value):
                obj = Literal(_lexical(value["value"]), datatype=_datatype(str(value["type"]), BASE))
            elif is_reference(value):
                obj = BASE[value[len(REFERENCE_PREFIX):]]
            else:
                obj = Literal(_lexical(value))
            g.add((node, pred, obj))

    return g
