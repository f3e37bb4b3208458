"""
Schema - interface documents, type descriptors and type coercion.
"""

from .coerce import EncodedValue, decode, encode, encode_all, format_value
from .models import InterfaceSchema, MethodSpec, Mutability, Parameter
from .registry import SchemaRegistry
from .types import TypeKind, TypeSpec, parse_type

__all__ = [
    "EncodedValue",
    "InterfaceSchema",
    "MethodSpec",
    "Mutability",
    "Parameter",
    "SchemaRegistry",
    "TypeKind",
    "TypeSpec",
    "decode",
    "encode",
    "encode_all",
    "format_value",
    "parse_type",
]
