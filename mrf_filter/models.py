#!/usr/bin/env python3
"""Decoded shape of one reporting-structure entry."""
from dataclasses import dataclass
from typing import Any, Tuple


class RecordDecodeError(ValueError):
    """An array element is valid JSON but not a well-formed record."""


@dataclass(frozen=True)
class Plan:
    name: str = ""


@dataclass(frozen=True)
class FileLocation:
    description: str = ""
    location: str = ""


def _string(obj: dict, key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise RecordDecodeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _objects(obj: dict, key: str) -> list:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise RecordDecodeError(f"'{key}' must be an array, got {type(value).__name__}")
    for item in value:
        if item is not None and not isinstance(item, dict):
            raise RecordDecodeError(f"'{key}' items must be objects, got {type(item).__name__}")
    return [item or {} for item in value]


@dataclass(frozen=True)
class Record:
    """One element of the ``reporting_structure`` array.

    Only the fields the filters need are kept; everything else in the
    element is ignored.
    """
    plans: Tuple[Plan, ...] = ()
    files: Tuple[FileLocation, ...] = ()

    @classmethod
    def from_json(cls, obj: Any) -> "Record":
        """Build a record from a decoded element.

        Missing or null fields decode to empty values, a null element to an
        empty record. Wrong types raise :class:`RecordDecodeError`.
        """
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise RecordDecodeError(f"record must be an object, got {type(obj).__name__}")
        plans = tuple(Plan(name=_string(p, "plan_name")) for p in _objects(obj, "reporting_plans"))
        files = tuple(
            FileLocation(description=_string(f, "description"), location=_string(f, "location"))
            for f in _objects(obj, "in_network_files")
        )
        return cls(plans=plans, files=files)
