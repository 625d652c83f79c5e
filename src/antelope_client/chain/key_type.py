"""Curve tags for keys and signatures."""

from __future__ import annotations
from enum import IntEnum
from typing import Union

from ..runtime.errors import UnsupportedCurveError, ValidationError


UNKNOWN_PREFIX = "UNKNOWN"


class KeyType(IntEnum):
    """Curve tag, also the first byte of a key or signature on the wire."""

    K1 = 0
    R1 = 1
    WA = 2

    @classmethod
    def from_(cls, value: Union[KeyType, str, int]) -> KeyType:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValidationError(f"Unknown key type: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedCurveError(f"Unknown key type index: {value}")

    @property
    def is_curve(self) -> bool:
        """Whether keys of this type support arithmetic (generate, sign, recover)."""
        return self in (KeyType.K1, KeyType.R1)


def key_type_from_index(index: int) -> Union[KeyType, int]:
    """Known ``KeyType`` for a wire tag, or the raw tag when it is not known."""
    try:
        return KeyType(index)
    except ValueError:
        return index


def key_type_name(key_type: Union[KeyType, int]) -> str:
    """Text tag of a key type; unknown wire tags render as ``UNKNOWN<tag>``."""
    if isinstance(key_type, KeyType):
        return key_type.name
    return f"{UNKNOWN_PREFIX}{key_type}"


def parse_key_type_name(name: str) -> Union[KeyType, int]:
    """
    Inverse of ``key_type_name``.

    Raises:
        ValidationError: Unknown name, or an ``UNKNOWN<tag>`` whose tag is
            known or does not fit a byte
    """
    suffix = name[len(UNKNOWN_PREFIX):]
    if name.startswith(UNKNOWN_PREFIX) and suffix.isdigit():
        tag = int(suffix)
        if tag > 0xFF or isinstance(key_type_from_index(tag), KeyType):
            raise ValidationError(f"Invalid unknown key type: {name!r}")
        return tag
    return KeyType.from_(name)
