"""Shared input and output helpers for CLI commands."""

import json
import sys
from dataclasses import asdict, is_dataclass
from typing import Any


def to_plain(data: Any) -> Any:
    """Convert result dataclasses (or lists of them) into JSON-ready data."""
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, list):
        return [to_plain(item) for item in data]
    return data


def print_json(data: Any) -> None:
    print(json.dumps(to_plain(data), indent=2, ensure_ascii=False))


def read_input(value: str) -> str:
    """Return an argument's text, reading stdin when it is "-"."""
    if value == "-":
        return sys.stdin.read()
    return value
