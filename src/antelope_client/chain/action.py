"""
Actions and their authorizations.
"""

from __future__ import annotations
import logging
from collections.abc import Mapping
from typing import Any, Optional, Type, Union

from ..runtime.errors import MissingABIError, ValidationError
from .abi import ABI
from .base import ABISerializableObject
from .bytes import Bytes
from .name import Name
from .struct import Field, Struct

logger = logging.getLogger(__name__)


class PermissionLevel(Struct):
    """``actor@permission`` authorization."""

    abi_name = "permission_level"
    abi_fields = [
        Field("actor", Name),
        Field("permission", Name),
    ]

    @classmethod
    def normalize(cls, value: Any) -> Any:
        if isinstance(value, str):
            actor, sep, permission = value.partition("@")
            if not sep:
                raise ValidationError(f"Invalid permission level: {value!r}")
            return {"actor": actor, "permission": permission}
        return value

    def __str__(self) -> str:
        return f"{self.actor}@{self.permission}"


class Action(Struct):
    """
    Contract action.

    ``data`` always holds the encoded action payload. Typed payloads are
    encoded on construction; plain dicts need the contract ABI.
    """

    abi_name = "action"
    abi_fields = [
        Field("account", Name),
        Field("name", Name),
        Field("authorization", PermissionLevel, array=True),
        Field("data", Bytes),
    ]

    @classmethod
    def normalize(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            data = value.get("data")
            if isinstance(data, ABISerializableObject) and not isinstance(data, Bytes):
                # Import here to avoid circular imports
                from ..serializer import Serializer
                value = {**value, "data": Serializer.encode(data)}
        return value

    @classmethod
    def from_(cls, value: Any, abi: Optional[Union[ABI, dict, str]] = None) -> Action:
        """
        Create an action.

        Args:
            value: Action instance or mapping; ``data`` may be bytes, hex, a
                typed value, or a plain dict when ``abi`` is given
            abi: ABI of the contract the action belongs to

        Raises:
            MissingABIError: ``data`` is a plain dict and no ABI was given, or the
                ABI does not define the action
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping) and isinstance(value.get("data"), Mapping):
            if abi is None:
                raise MissingABIError(
                    f"An ABI is required to encode the data of action {value.get('name')}"
                )
            from ..serializer import Serializer
            abi = ABI.from_(abi)
            type_name = abi.get_action_type(value.get("name"))
            if type_name is None:
                raise MissingABIError(
                    f"ABI does not define action {value.get('name')}",
                    details={"account": str(value.get("account")), "name": str(value.get("name"))},
                )
            logger.debug("Encoding %s::%s data as %s", value.get("account"), value.get("name"), type_name)
            data = Serializer.encode(value["data"], type_name, abi=abi)
            value = {**value, "data": data}
        return super().from_(value)

    def decode_data(self, type_or_abi: Union[Type[ABISerializableObject], ABI, dict, str]) -> Any:
        """
        Decode ``data`` with a Struct class or the contract ABI.

        Raises:
            MissingABIError: The ABI does not define this action
        """
        from ..serializer import Serializer
        if isinstance(type_or_abi, type):
            return Serializer.decode(self.data, type_or_abi)
        abi = ABI.from_(type_or_abi)
        type_name = abi.get_action_type(self.name)
        if type_name is None:
            raise MissingABIError(f"ABI does not define action {self.name}")
        return Serializer.decode(self.data, type_name, abi=abi)
