"""
Type descriptors for interface documents.

A parameter or return type is a closed set of primitives (string, integer
with bit-width, bool, address, bytes) plus arrays and structs of these.
Tokens follow ABI conventions: ``uint64``, ``address[]``, ``tuple[3]`` with
``components``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from ..errors import SchemaError


class TypeKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "bool"
    ADDRESS = "address"
    BYTES = "bytes"
    ARRAY = "array"
    STRUCT = "struct"


ALIASES = {
    "boolean": "bool",
    "uint": "uint256",
    "int": "int256",
    "integer": "int256",
    "number": "uint64",
}

_INT_TOKEN = re.compile(r"^(u?)int(\d+)$")
_ARRAY_SUFFIX = re.compile(r"^(.*)\[(\d*)\]$")


@dataclass(frozen=True)
class StructField:
    name: str
    type: "TypeSpec"


@dataclass(frozen=True)
class TypeSpec:
    kind: TypeKind
    bits: int = 0
    signed: bool = False
    item: Optional["TypeSpec"] = None
    length: Optional[int] = None
    fields: tuple[StructField, ...] = ()
    maximum: Optional[int] = field(default=None, compare=False)

    # ---- integer bounds ----

    @property
    def min_value(self) -> int:
        if self.kind is not TypeKind.INTEGER:
            raise AttributeError("min_value is only defined for integers")
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        if self.kind is not TypeKind.INTEGER:
            raise AttributeError("max_value is only defined for integers")
        upper = (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1
        if self.maximum is not None:
            return min(upper, self.maximum)
        return upper

    @property
    def is_composite(self) -> bool:
        return self.kind in (TypeKind.ARRAY, TypeKind.STRUCT)

    def with_maximum(self, maximum: Optional[int]) -> "TypeSpec":
        if maximum is None:
            return self
        if self.kind is not TypeKind.INTEGER:
            raise SchemaError(f"'max' only applies to integer types, not {self}")
        return replace(self, maximum=maximum)

    def __str__(self) -> str:
        if self.kind is TypeKind.INTEGER:
            return f"{'int' if self.signed else 'uint'}{self.bits}"
        if self.kind is TypeKind.ARRAY:
            assert self.item is not None
            return f"{self.item}[{'' if self.length is None else self.length}]"
        if self.kind is TypeKind.STRUCT:
            inner = ",".join(f"{f.type} {f.name}" for f in self.fields)
            return f"tuple({inner})"
        return self.kind.value


STRING = TypeSpec(TypeKind.STRING)
BOOLEAN = TypeSpec(TypeKind.BOOLEAN)
ADDRESS = TypeSpec(TypeKind.ADDRESS)
BYTES = TypeSpec(TypeKind.BYTES)


def integer(bits: int, signed: bool = False) -> TypeSpec:
    if bits < 8 or bits > 256 or bits % 8:
        raise SchemaError(f"Invalid integer width: {bits}")
    return TypeSpec(TypeKind.INTEGER, bits=bits, signed=signed)


def array_of(item: TypeSpec, length: Optional[int] = None) -> TypeSpec:
    return TypeSpec(TypeKind.ARRAY, item=item, length=length)


def struct_of(*fields: tuple[str, TypeSpec]) -> TypeSpec:
    return TypeSpec(
        TypeKind.STRUCT,
        fields=tuple(StructField(name, spec) for name, spec in fields),
    )


def parse_type(token: str, components: Optional[list[dict[str, Any]]] = None) -> TypeSpec:
    """
    Parse a type token into a TypeSpec.

    Args:
        token: Type token (e.g. ``uint64``, ``address[]``, ``tuple[2]``)
        components: Struct fields for ``tuple`` tokens, ABI style

    Raises:
        SchemaError: Unknown token, bad width, or missing/unexpected components
    """
    if not isinstance(token, str) or not token.strip():
        raise SchemaError(f"Type token must be a non-empty string, got {token!r}")
    token = token.strip()

    match = _ARRAY_SUFFIX.match(token)
    if match:
        inner, size = match.groups()
        length = None
        if size:
            length = int(size)
            if length == 0:
                raise SchemaError(f"Fixed array length must be positive: {token}")
        return array_of(parse_type(inner, components), length)

    token = ALIASES.get(token, token)

    if token == "tuple":
        if not components:
            raise SchemaError("tuple type requires non-empty 'components'")
        return _parse_struct(components)
    if components:
        raise SchemaError(f"'components' given for non-tuple type {token}")

    if token == "string":
        return STRING
    if token == "bool":
        return BOOLEAN
    if token == "address":
        return ADDRESS
    if token == "bytes":
        return BYTES

    match = _INT_TOKEN.match(token)
    if match:
        unsigned, width = match.groups()
        return integer(int(width), signed=not unsigned)

    raise SchemaError(f"Unknown type token: {token}")


def _parse_struct(components: list[dict[str, Any]]) -> TypeSpec:
    fields: list[StructField] = []
    seen: set[str] = set()
    for index, component in enumerate(components):
        if not isinstance(component, dict):
            raise SchemaError(f"Struct component #{index} must be an object")
        name = component.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaError(f"Struct component #{index} is missing 'name'")
        if name in seen:
            raise SchemaError(f"Duplicate struct field: {name}")
        seen.add(name)
        spec = parse_type(component.get("type", ""), component.get("components"))
        fields.append(StructField(name, spec))
    return TypeSpec(TypeKind.STRUCT, fields=tuple(fields))


def parse_descriptor(descriptor: Any) -> TypeSpec:
    """Parse a ``returns`` descriptor: a bare token or ``{type, components}``."""
    if isinstance(descriptor, str):
        return parse_type(descriptor)
    if isinstance(descriptor, dict):
        return parse_type(descriptor.get("type", ""), descriptor.get("components"))
    raise SchemaError(f"Invalid type descriptor: {descriptor!r}")
