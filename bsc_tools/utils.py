#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Shared helpers: number parsing, error type and JSON I/O."""

from __future__ import annotations

import json
import math
import re
import sys
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Union

# Longest numeric prefix, same as JavaScript parseFloat
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass
class BscError(Exception):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": True,
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


def parse_number(value: Any, default: float) -> float:
    """
    Parse a numeric string, falling back to ``default``.

    "96" -> 96.0, "4.2/5" -> 4.2, "96%" -> 96.0, "" / None / "abc" -> default.
    Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else default

    match = _NUMBER_PREFIX.match(str(value).strip())
    if not match:
        return default
    try:
        number = float(match.group(0))
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def round_half_up(value: float) -> int:
    """Round .5 away from zero instead of to the even neighbour."""
    if not math.isfinite(value):
        return 0
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        number = parse_number(value, float("nan"))
        return int(number) if math.isfinite(number) else default


def load_json_input(source: Union[str, None] = None) -> Union[Dict[str, Any], list]:
    """Load a JSON object or array from a file path, or stdin when path is None or '-'."""
    try:
        if source is None or source == "-":
            data = json.load(sys.stdin)
        else:
            with open(source, encoding="utf-8") as fh:
                data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise BscError(
            code="INVALID_JSON",
            message=f"invalid JSON input: {exc}",
        ) from exc
    except OSError as exc:
        raise BscError(
            code="INVALID_INPUT",
            message=f"cannot read input: {exc}",
        ) from exc

    if not isinstance(data, (dict, list)):
        raise BscError(
            code="INVALID_INPUT",
            message="input must be a JSON object or array",
        )
    return data


def print_json(data: Any, compact: bool = False) -> None:
    if compact:
        print(json.dumps(data, ensure_ascii=False))
    else:
        print(json.dumps(data, ensure_ascii=False, indent=2))


def print_error(err: BscError) -> None:
    print_json(err.to_dict())


def handle_error(err: BscError) -> None:
    print_error(err)
    sys.exit(2)
