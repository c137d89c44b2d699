"""Turns pydantic's located errors into path-tagged violations."""

from __future__ import annotations

from typing import Iterable, List, Union

from pydantic import ValidationError

from DesignAwareness.errors import ErrorKind, Violation

# Constraint failures on otherwise well-typed values
_RANGE_ERRORS = {
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
    "enum",
}
_FORMAT_ERRORS = {
    "string_pattern_mismatch",
}


def format_loc(loc: Iterable[Union[int, str]]) -> str:
    """('sessions', 2, 'data', 0, 1) -> 'sessions[2].data[0][1]'"""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def kind_for(error_type: str) -> ErrorKind:
    if error_type in _RANGE_ERRORS:
        return ErrorKind.RANGE
    if error_type in _FORMAT_ERRORS:
        return ErrorKind.FORMAT
    return ErrorKind.STRUCTURAL


def violations_from_pydantic(exc: ValidationError) -> List[Violation]:
    return [
        Violation(kind_for(error["type"]), format_loc(error["loc"]), error["msg"])
        for error in exc.errors(include_url=False)
    ]
