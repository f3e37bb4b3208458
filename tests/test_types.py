"""Tests for type token parsing."""

from __future__ import annotations

import pytest

from ocsctl.errors import SchemaError
from ocsctl.schema.types import (
    ADDRESS,
    BOOLEAN,
    TypeKind,
    array_of,
    integer,
    parse_descriptor,
    parse_type,
    struct_of,
)


class TestPrimitiveTokens:
    def test_sized_integers(self) -> None:
        assert parse_type("uint64") == integer(64)
        assert parse_type("int8") == integer(8, signed=True)

    def test_aliases(self) -> None:
        assert parse_type("uint") == integer(256)
        assert parse_type("int") == integer(256, signed=True)
        assert parse_type("integer") == integer(256, signed=True)
        assert parse_type("number") == integer(64)
        assert parse_type("boolean") == BOOLEAN

    def test_simple_kinds(self) -> None:
        assert parse_type("address") == ADDRESS
        assert parse_type("string").kind is TypeKind.STRING
        assert parse_type("bytes").kind is TypeKind.BYTES

    @pytest.mark.parametrize("token", ["float", "uint7", "uint264", "uint0", "int1024", "", "u64"])
    def test_unknown_tokens_rejected(self, token: str) -> None:
        with pytest.raises(SchemaError):
            parse_type(token)


class TestCompositeTokens:
    def test_dynamic_array(self) -> None:
        spec = parse_type("bool[]")
        assert spec == array_of(BOOLEAN)
        assert spec.length is None

    def test_fixed_array(self) -> None:
        assert parse_type("uint8[3]") == array_of(integer(8), 3)

    def test_nested_array(self) -> None:
        spec = parse_type("uint8[][2]")
        assert spec.length == 2
        assert spec.item == array_of(integer(8))

    def test_zero_length_array_rejected(self) -> None:
        with pytest.raises(SchemaError):
            parse_type("uint8[0]")

    def test_tuple_with_components(self) -> None:
        spec = parse_type(
            "tuple",
            [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint32"}],
        )
        assert spec == struct_of(("to", ADDRESS), ("amount", integer(32)))

    def test_tuple_array(self) -> None:
        spec = parse_type("tuple[]", [{"name": "flag", "type": "bool"}])
        assert spec.kind is TypeKind.ARRAY
        assert spec.item is not None and spec.item.kind is TypeKind.STRUCT

    def test_tuple_without_components_rejected(self) -> None:
        with pytest.raises(SchemaError):
            parse_type("tuple")

    def test_components_on_primitive_rejected(self) -> None:
        with pytest.raises(SchemaError):
            parse_type("uint8", [{"name": "x", "type": "bool"}])

    def test_duplicate_struct_fields_rejected(self) -> None:
        with pytest.raises(SchemaError):
            parse_type("tuple", [{"name": "x", "type": "bool"}, {"name": "x", "type": "bool"}])

    def test_descriptor_forms(self) -> None:
        assert parse_descriptor("uint64") == integer(64)
        assert parse_descriptor({"type": "address[]"}) == array_of(ADDRESS)
        with pytest.raises(SchemaError):
            parse_descriptor(42)


class TestIntegerBounds:
    def test_unsigned_bounds(self) -> None:
        spec = integer(8)
        assert (spec.min_value, spec.max_value) == (0, 255)

    def test_signed_bounds(self) -> None:
        spec = integer(16, signed=True)
        assert (spec.min_value, spec.max_value) == (-32768, 32767)

    def test_maximum_narrows_upper_bound(self) -> None:
        spec = integer(64).with_maximum(1000)
        assert spec.max_value == 1000
        # The bound does not change type identity
        assert spec == integer(64)

    def test_maximum_on_non_integer_rejected(self) -> None:
        with pytest.raises(SchemaError):
            ADDRESS.with_maximum(5)

    def test_str(self) -> None:
        assert str(integer(32, signed=True)) == "int32"
        assert str(array_of(integer(8), 2)) == "uint8[2]"
