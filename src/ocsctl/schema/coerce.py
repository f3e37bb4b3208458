"""
Type Coercion Engine - operator text <-> schema-typed values.

Pure and side-effect free: no network, no signing.

- ``encode(type, raw_text)`` parses what the operator typed.
- ``decode(type, reply)`` validates a JSON reply from the remote.
- ``format_value(type, value)`` renders a value back to operator text.

Composite values (arrays, structs) are entered as JSON; the first bad
element raises with a positional path so the operator can find it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Sequence

from ..errors import (
    CoercionError,
    IntegerOverflowError,
    InvalidAddressError,
    InvalidBooleanError,
    InvalidBytesError,
    InvalidIntegerError,
    LengthMismatchError,
    MalformedValueError,
)
from ..utils import hex_to_bytes
from .addresses import EVM_ADDRESSES, AddressFormat
from .types import TypeKind, TypeSpec

TRUE_TOKENS = frozenset({"true", "1"})
FALSE_TOKENS = frozenset({"false", "0"})


@dataclass(frozen=True)
class EncodedValue:
    """A value that has been checked against its declared type."""

    type: TypeSpec
    value: Any

    @property
    def wire(self) -> Any:
        """JSON-safe form sent to the remote endpoint."""
        return to_wire(self.type, self.value)


def encode(spec: TypeSpec, raw_text: str, addresses: AddressFormat = EVM_ADDRESSES) -> EncodedValue:
    """
    Coerce operator-entered text into a typed value.

    Raises:
        CoercionError: One of its subclasses, located by ``path`` for composites
    """
    if not isinstance(raw_text, str):
        raise MalformedValueError(f"Expected text input, got {type(raw_text).__name__}")
    if spec.is_composite:
        try:
            parsed = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise MalformedValueError(f"Expected JSON for {spec}: {exc.msg}") from exc
        return EncodedValue(spec, _coerce(spec, parsed, "", addresses=addresses))
    return EncodedValue(spec, _coerce(spec, raw_text, "", addresses=addresses))


def encode_all(
    specs: Sequence[TypeSpec],
    raw_args: Sequence[str],
    names: Sequence[str] = (),
    addresses: AddressFormat = EVM_ADDRESSES,
) -> list[EncodedValue]:
    """Encode positional arguments; errors are located by parameter name."""
    encoded = []
    for index, (spec, raw) in enumerate(zip(specs, raw_args)):
        label = names[index] if index < len(names) else f"#{index}"
        try:
            encoded.append(encode(spec, raw, addresses))
        except CoercionError as exc:
            raise exc.at(join_path(label, exc.path)) from exc
    return encoded


def decode(spec: TypeSpec, reply: Any, addresses: AddressFormat = EVM_ADDRESSES) -> Any:
    """
    Validate and convert a JSON reply into a typed value.

    Integers may arrive as JSON numbers, decimal strings or 0x-hex strings.

    Raises:
        CoercionError: If the reply does not fit ``spec``
    """
    return _coerce(spec, reply, "", strict_text=False, addresses=addresses)


def format_value(spec: TypeSpec, value: Any) -> str:
    """Render a typed value as operator text (inverse of ``encode``)."""
    if spec.is_composite:
        return json.dumps(to_wire(spec, value))
    if spec.kind is TypeKind.BOOLEAN:
        return "true" if value else "false"
    if spec.kind is TypeKind.BYTES:
        return "0x" + bytes(value).hex()
    return str(value)


def to_wire(spec: TypeSpec, value: Any) -> Any:
    kind = spec.kind
    if kind is TypeKind.INTEGER:
        return str(value)
    if kind is TypeKind.BYTES:
        return "0x" + bytes(value).hex()
    if kind is TypeKind.ARRAY:
        assert spec.item is not None
        return [to_wire(spec.item, item) for item in value]
    if kind is TypeKind.STRUCT:
        return {f.name: to_wire(f.type, value[f.name]) for f in spec.fields}
    return value


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def join_path(prefix: str, path: str) -> str:
    if not path:
        return prefix
    if path.startswith("["):
        return prefix + path
    return f"{prefix}.{path}"


def _coerce(
    spec: TypeSpec,
    value: Any,
    path: str,
    strict_text: bool = True,
    addresses: AddressFormat = EVM_ADDRESSES,
) -> Any:
    kind = spec.kind
    if kind is TypeKind.ARRAY:
        return _coerce_array(spec, value, path, strict_text, addresses)
    if kind is TypeKind.STRUCT:
        return _coerce_struct(spec, value, path, strict_text, addresses)
    if kind is TypeKind.INTEGER:
        return _coerce_integer(spec, value, path)
    if kind is TypeKind.BOOLEAN:
        return _coerce_boolean(value, path)
    if kind is TypeKind.ADDRESS:
        return _coerce_address(value, path, addresses)
    if kind is TypeKind.BYTES:
        return _coerce_bytes(value, path)
    if kind is TypeKind.STRING:
        if isinstance(value, str):
            return value
        if strict_text and isinstance(value, (int, float)) and not isinstance(value, bool):
            # JSON element like [1, 2] for a string[] parameter
            return str(value)
        raise MalformedValueError(f"Expected string, got {_describe(value)}", path)
    raise MalformedValueError(f"Unsupported type {spec}", path)


def _coerce_integer(spec: TypeSpec, value: Any, path: str) -> int:
    if isinstance(value, bool):
        raise InvalidIntegerError(f"Expected integer, got {_describe(value)}", path)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip().replace("_", "")
        try:
            if text.lower().startswith(("0x", "-0x")):
                number = int(text, 16)
            else:
                if not text.lstrip("+-").isdigit():
                    raise ValueError(text)
                number = int(text, 10)
        except ValueError as exc:
            raise InvalidIntegerError(f"Not an integer: {value!r}", path) from exc
    else:
        raise InvalidIntegerError(f"Expected integer, got {_describe(value)}", path)

    if number < spec.min_value or number > spec.max_value:
        raise IntegerOverflowError(
            f"{number} out of range for {spec} [{spec.min_value}, {spec.max_value}]",
            path,
        )
    return number


def _coerce_boolean(value: Any, path: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUE_TOKENS:
            return True
        if token in FALSE_TOKENS:
            return False
    raise InvalidBooleanError(f"Expected true/false/1/0, got {value!r}", path)


def _coerce_address(value: Any, path: str, addresses: AddressFormat) -> str:
    if not isinstance(value, str):
        raise InvalidAddressError(f"Expected address, got {_describe(value)}", path)
    text = value.strip()
    if not addresses.matches(text):
        raise InvalidAddressError(f"Malformed {addresses.name} address: {value!r}", path)
    if not addresses.checksum_ok(text):
        raise InvalidAddressError(f"Address checksum mismatch: {value!r}", path)
    return addresses.normalize(text)


def _coerce_bytes(value: Any, path: str) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise InvalidBytesError(f"Expected 0x-hex bytes, got {_describe(value)}", path)
    text = value.strip()
    if not text.startswith(("0x", "0X")):
        raise InvalidBytesError(f"Bytes must be 0x-prefixed hex: {value!r}", path)
    try:
        return hex_to_bytes(text)
    except ValueError as exc:
        raise InvalidBytesError(f"Invalid hex bytes: {value!r}", path) from exc


def _coerce_array(
    spec: TypeSpec, value: Any, path: str, strict_text: bool, addresses: AddressFormat
) -> list[Any]:
    assert spec.item is not None
    if not isinstance(value, list):
        raise MalformedValueError(f"Expected JSON array for {spec}, got {_describe(value)}", path)
    if spec.length is not None and len(value) != spec.length:
        raise LengthMismatchError(
            f"Expected {spec.length} element(s) for {spec}, got {len(value)}", path
        )
    return [
        _coerce(spec.item, item, f"{path}[{index}]", strict_text, addresses)
        for index, item in enumerate(value)
    ]


def _coerce_struct(
    spec: TypeSpec, value: Any, path: str, strict_text: bool, addresses: AddressFormat
) -> dict[str, Any]:
    names = [f.name for f in spec.fields]
    if isinstance(value, list):
        if len(value) != len(spec.fields):
            raise LengthMismatchError(
                f"Expected {len(spec.fields)} field(s) for {spec}, got {len(value)}", path
            )
        value = dict(zip(names, value))
    if not isinstance(value, dict):
        raise MalformedValueError(f"Expected JSON object for {spec}, got {_describe(value)}", path)

    unknown = sorted(set(value) - set(names))
    if unknown:
        raise MalformedValueError(f"Unknown field(s): {', '.join(unknown)}", path)

    result: dict[str, Any] = {}
    for f in spec.fields:
        field_path = join_path(path, f.name) if path else f.name
        if f.name not in value:
            raise MalformedValueError("Missing field", field_path)
        result[f.name] = _coerce(f.type, value[f.name], field_path, strict_text, addresses)
    return result


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__
