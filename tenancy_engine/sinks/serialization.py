"""JSON-ready conversion of billing and settlement records for the sinks.

Money is written as an exact decimal string and enums by value, so a
consumer can rebuild every amount without float rounding.
"""

from dataclasses import fields, is_dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from tenancy_engine.exceptions import SinkError


def to_dict(record: Any) -> dict[str, Any]:
    """Convert an output record to a JSON-ready dictionary.

    Raises
    ------
    SinkError
        If the record is neither a dataclass instance nor a dict.
    """
    if is_dataclass(record) and not isinstance(record, type):
        return dataclass_to_dict(record)
    if isinstance(record, dict):
        return record
    raise SinkError(f"Cannot serialize {type(record).__name__} record")


def dataclass_to_dict(record: Any) -> dict[str, Any]:
    """Field-by-field conversion; nested charge lines and meters become dicts."""
    return {f.name: serialize_value(getattr(record, f.name)) for f in fields(record)}


def serialize_value(value: Any) -> Any:
    """Serialize a single field value.

    Enums are checked before plain strings because the model enums
    subclass ``str``.
    """
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    if isinstance(value, dict):
        return {serialize_value(k): serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    raise SinkError(f"Unsupported value of type {type(value).__name__}")
