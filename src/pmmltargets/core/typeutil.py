"""Value typing: detect, parse, cast and compare values by declared data type.

Python representations per :class:`~pmmltargets.core.types.DataType`:

* ``string``  -> :class:`str`
* ``integer`` -> :class:`int`
* ``float``   -> :class:`numpy.float32` (single precision)
* ``double``  -> :class:`float`
* ``boolean`` -> :class:`bool`
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pmmltargets.core.errors import TypeCheckError
from pmmltargets.core.types import DataType

_TRUE_STRINGS = frozenset({"true", "1"})
_FALSE_STRINGS = frozenset({"false", "0"})


def get_data_type(value: Any) -> DataType:
    """Return the data type whose representation *value* already has.

    Raises:
        TypeCheckError: If *value* is not a supported scalar.
    """
    if isinstance(value, (bool, np.bool_)):
        return DataType.BOOLEAN
    if isinstance(value, (int, np.integer)):
        return DataType.INTEGER
    if isinstance(value, np.float32):
        return DataType.FLOAT
    if isinstance(value, (float, np.floating)):
        return DataType.DOUBLE
    if isinstance(value, str):
        return DataType.STRING
    raise TypeCheckError(None, value)


def parse(data_type: DataType, text: str) -> Any:
    """Parse the string form of a value into *data_type*.

    Raises:
        TypeCheckError: If *text* is not a valid literal of *data_type*.
    """
    match data_type:
        case DataType.STRING:
            return text
        case DataType.INTEGER:
            try:
                return int(text)
            except ValueError:
                return _to_integer(_parse_double(data_type, text))
        case DataType.FLOAT:
            return np.float32(_parse_double(data_type, text))
        case DataType.DOUBLE:
            return _parse_double(data_type, text)
        case DataType.BOOLEAN:
            lowered = text.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise TypeCheckError(data_type, text)
        case _:
            raise TypeCheckError(data_type, text)


def cast(data_type: DataType, value: Any) -> Any:
    """Convert *value* to the representation of *data_type*.

    Strings are parsed.  Numbers are converted only when no information
    is lost in a way the target type cannot express, e.g. ``2.0`` casts
    to integer ``2`` but ``2.5`` does not.

    Raises:
        TypeCheckError: If the conversion is not possible.
    """
    if isinstance(value, str):
        return parse(data_type, value)

    value_type = get_data_type(value)

    match data_type:
        case DataType.STRING:
            if value_type == DataType.BOOLEAN:
                return "true" if value else "false"
            return str(value)
        case DataType.INTEGER:
            if value_type in (DataType.BOOLEAN, DataType.INTEGER):
                return int(value)
            return _to_integer(float(value))
        case DataType.FLOAT:
            return np.float32(value)
        case DataType.DOUBLE:
            return float(value)
        case DataType.BOOLEAN:
            if value_type == DataType.BOOLEAN:
                return bool(value)
            if value == 0:
                return False
            if value == 1:
                return True
            raise TypeCheckError(data_type, value)
        case _:
            raise TypeCheckError(data_type, value)


def parse_or_cast(data_type: DataType, value: Any) -> Any:
    """Parse *value* if it is a string, cast it otherwise."""
    if isinstance(value, str):
        return parse(data_type, value)
    return cast(data_type, value)


def equals(data_type: DataType, left: Any, right: Any) -> bool:
    """Compare two values after casting both to *data_type*.

    Numeric types compare numerically, so ``1`` equals ``1.0`` as doubles.
    """
    return bool(cast(data_type, left) == cast(data_type, right))


def _parse_double(data_type: DataType, text: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise TypeCheckError(data_type, text) from exc


def _to_integer(value: float) -> int:
    if not value.is_integer():
        raise TypeCheckError(DataType.INTEGER, value)
    return int(value)
