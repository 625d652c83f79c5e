"""
Schema-driven serialization.

Resolves ABI type expressions and converts values between their typed,
binary and JSON forms.
"""

from .resolver import ResolvedField, ResolvedType, TypeKind, TypeResolver
from .serializer import Serializer, resolve

__all__ = [
    "Serializer",
    "resolve",
    "ResolvedField",
    "ResolvedType",
    "TypeKind",
    "TypeResolver",
]
