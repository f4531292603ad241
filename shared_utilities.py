"""Shared helpers and defaults for the QCA analysis tools.

Contains the command-line parsing helpers and the CSV writer used by
``qca_analysis`` so the defaults live in one place.
"""

from __future__ import annotations

import csv
import dataclasses
import json
import os
from typing import Any, Dict, Iterable, cast

import numpy as np

from clifford_automaton import PRESETS
from laurent_matrix import validate_rule_matrix


def safe_json_loads(s: str) -> Dict[str, Any]:
    """Parse JSON string with fallback for malformed input.

    Args:
        s: JSON string to parse

    Returns:
        Parsed JSON as dictionary, empty dict if parsing fails
    """
    if not isinstance(s, str):
        return {}

    try:
        result = json.loads(s)
        return cast(Dict[str, Any], result) if isinstance(result, dict) else {}
    except (json.JSONDecodeError, ValueError):
        pass

    # Try fallback for malformed quotes
    try:
        result = json.loads(s.replace("''", '"').replace('""', '"'))
        return cast(Dict[str, Any], result) if isinstance(result, dict) else {}
    except (json.JSONDecodeError, ValueError):
        return {}


def parse_rule_matrix(text: str) -> np.ndarray:
    """Resolve a preset name (``glider``) or a JSON 2x6 matrix into a rule matrix.

    A JSON object with a ``"rule_matrix"`` key is accepted as well, so saved
    analysis reports can be fed back in.
    """
    name = text.strip()
    if name.lower() in PRESETS:
        return PRESETS[name.lower()].copy()

    try:
        value = json.loads(name)
    except json.JSONDecodeError:
        obj = safe_json_loads(name)
        if not obj:
            raise ValueError(
                f"Unknown rule {text!r}; use one of {sorted(PRESETS)} or a JSON 2x6 matrix"
            ) from None
        value = obj
    if isinstance(value, dict):
        if "rule_matrix" not in value:
            raise ValueError("JSON object must contain a 'rule_matrix' entry")
        value = value["rule_matrix"]
    return validate_rule_matrix(value)


def write_trajectory_csv(path: str, points: Iterable[Any]) -> int:
    """Write dataclass rows to ``path`` (header from the first row); return row count."""
    rows = [dataclasses.asdict(p) if dataclasses.is_dataclass(p) else dict(p) for p in points]
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="") as f:
        if not rows:
            return 0
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)
    return len(rows)


# Constants to replace magic numbers
DEFAULT_LATTICE_SIZE = 20
DEFAULT_TIME_STEPS = 20
DEFAULT_POSITION = 10
DEFAULT_MAX_SEARCH_OPERATORS = 16
