# ontoalgebra/extraction.py
"""
Recover a JSON object from free-form LLM output.

Strategies are tried in order and the first one that yields a JSON
object wins:

  1. the whole text is a JSON document
  2. the interior of a fenced block labelled ``json``
  3. the greedy span from the first ``{`` to the last ``}``

Every strategy is total: it returns ``None`` instead of raising.
Only objects count; a bare list or scalar is not a usable result.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, Optional, Tuple

from ontoalgebra.errors import ExtractionError
from ontoalgebra.verbosity import get_logger

_log = get_logger("ontoalgebra.extraction")

_FENCED_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_BRACED_RE = re.compile(r"\{.*\}", re.DOTALL)


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


def parse_whole(text: str) -> Optional[Dict[str, Any]]:
    return _loads_object(text.strip())


def parse_fenced(text: str) -> Optional[Dict[str, Any]]:
    m = _FENCED_RE.search(text)
    if not m:
        return None
    return _loads_object(m.group(1).strip())


def parse_braced(text: str) -> Optional[Dict[str, Any]]:
    m = _BRACED_RE.search(text)
    if not m:
        return None
    return _loads_object(m.group(0))


Strategy = Callable[[str], Optional[Dict[str, Any]]]

STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("whole", parse_whole),
    ("fenced", parse_fenced),
    ("braced", parse_braced),
)


def extract_json(text: str) -> Dict[str, Any]:
    if not isinstance(text, str):
        raise ExtractionError(repr(text))
    for name, strategy in STRATEGIES:
        data = strategy(text)
        if data is not None:
            _log.debug("Extracted JSON via %s strategy (%d keys)", name, len(data))
            return data
    _log.info("JSON extraction failed on %d chars of LLM output", len(text))
    raise ExtractionError(text)
