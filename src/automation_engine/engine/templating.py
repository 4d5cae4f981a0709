"""Placeholder substitution for step data templates.

A string value may reference an earlier step's output with `<<stepId.field>>`,
e.g. `"Hi <<ee0b4bc6.assignedTo>>! This is a friendly reminder."`.

Rules:
- A string that is exactly one marker resolves to a copy of the referenced
  value, keeping its type. A missing reference resolves to `None`.
- Markers embedded in other text are replaced by their string form: strings
  as-is, `None`/missing as `""`, anything else as compact JSON.
- Markers need exactly two dot-separated segments; any other shape is treated
  as missing.

Resolution never raises.
"""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

MARKER_RE = re.compile(r"<<(.+?)>>")

_MISSING = object()


class StepOutput(Protocol):
    step: str
    output: Mapping[str, Any]


def lookup_output(results: Sequence[StepOutput], step_id: str, field: str) -> Any:
    """Return `field` from the first recorded output of `step_id`, or `None`."""

    value = _lookup(results, step_id, field)
    return None if value is _MISSING else value


def _lookup(results: Sequence[StepOutput], step_id: str, field: str) -> Any:
    for result in results:
        if result.step == step_id:
            output = result.output
            if isinstance(output, Mapping) and field in output:
                return output[field]
            return _MISSING
    return _MISSING


def _resolve_marker(results: Sequence[StepOutput], reference: str) -> Any:
    parts = reference.split(".")
    if len(parts) != 2 or not all(p.strip() for p in parts):
        return _MISSING
    step_id, field = (p.strip() for p in parts)
    return _lookup(results, step_id, field)


def stringify(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def render_string(template: str, results: Sequence[StepOutput]) -> Any:
    whole = MARKER_RE.fullmatch(template)
    if whole is not None and "<<" not in whole.group(1) and ">>" not in whole.group(1):
        value = _resolve_marker(results, whole.group(1))
        return None if value is _MISSING else copy.deepcopy(value)

    return MARKER_RE.sub(lambda m: stringify(_resolve_marker(results, m.group(1))), template)


def resolve_template(data: Any, results: Sequence[StepOutput]) -> Any:
    """Deep-walk `data`, resolving markers in every string.

    Mappings recurse key-wise and lists/tuples element-wise (returned as lists).
    Other scalars pass through. `data` itself is left untouched.
    """

    if isinstance(data, str):
        return render_string(data, results)
    if isinstance(data, Mapping):
        return {key: resolve_template(value, results) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [resolve_template(item, results) for item in data]
    return data
