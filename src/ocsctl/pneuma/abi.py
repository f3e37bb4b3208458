"""
ABI calldata for contract methods.

The canonical transaction payload embeds the ABI encoding of the call
(4-byte Keccak selector + eth-abi argument encoding), so the signature
binds the exact typed arguments and not only their text form.
"""

from __future__ import annotations

from typing import Any, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError

from ..errors import EncodingFailedError
from ..schema.coerce import EncodedValue
from ..schema.models import MethodSpec
from ..schema.types import TypeKind, TypeSpec
from ..utils import keccak256


def abi_type(spec: TypeSpec) -> str:
    """ABI type string for a TypeSpec (structs become ``(t1,t2)`` tuples)."""
    if spec.kind is TypeKind.ARRAY:
        assert spec.item is not None
        suffix = "" if spec.length is None else str(spec.length)
        return f"{abi_type(spec.item)}[{suffix}]"
    if spec.kind is TypeKind.STRUCT:
        return "(" + ",".join(abi_type(f.type) for f in spec.fields) + ")"
    return str(spec)


def abi_value(spec: TypeSpec, value: Any) -> Any:
    if spec.kind is TypeKind.ARRAY:
        assert spec.item is not None
        return [abi_value(spec.item, item) for item in value]
    if spec.kind is TypeKind.STRUCT:
        return tuple(abi_value(f.type, value[f.name]) for f in spec.fields)
    return value


def method_selector(method: MethodSpec) -> bytes:
    input_types = [abi_type(t) for t in method.parameter_types]
    sig = f"{method.name}({','.join(input_types)})"
    return keccak256(sig.encode("utf-8"))[:4]


def encode_call(method: MethodSpec, args: Sequence[EncodedValue]) -> str:
    """
    ABI-encode a method call.

    Returns:
        0x-prefixed hex encoded calldata

    Raises:
        EncodingFailedError: If eth-abi rejects a value
    """
    input_types = [abi_type(t) for t in method.parameter_types]
    values = [abi_value(arg.type, arg.value) for arg in args]

    try:
        encoded_args = encode(input_types, values) if values else b""
    except (EncodingError, TypeError, ValueError) as exc:
        raise EncodingFailedError(f"ABI encoding failed for {method.name}: {exc}") from exc

    return "0x" + method_selector(method).hex() + encoded_args.hex()
