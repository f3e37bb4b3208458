"""Tests for interface document loading."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from conftest import ALICE, CONTRACT, INTERFACE_DOC
from ocsctl.errors import SchemaError
from ocsctl.schema.models import InterfaceSchema, Mutability
from ocsctl.schema.types import integer
from ocsctl.utils import to_checksum_address


def _doc() -> dict[str, Any]:
    return copy.deepcopy(INTERFACE_DOC)


class TestLoading:
    def test_methods_in_document_order(self, schema: InterfaceSchema) -> None:
        names = [m.name for m in schema.list()]
        assert names == ["balance_of", "get_name", "get_info", "transfer", "batch_pay"]
        assert len(schema) == 5

    def test_contract_is_checksummed(self, schema: InterfaceSchema) -> None:
        assert schema.contract == to_checksum_address(CONTRACT)

    def test_lookup(self, schema: InterfaceSchema) -> None:
        method = schema.lookup("balance_of")
        assert method is not None
        assert method.mutability is Mutability.VIEW
        assert method.returns == integer(64)
        assert method.display_label == "Balance of an account"
        assert schema.lookup("nope") is None
        assert "transfer" in schema

    def test_legacy_keys(self, schema: InterfaceSchema) -> None:
        method = schema.lookup("get_info")
        assert method is not None
        assert method.mutability is Mutability.VIEW
        assert method.parameters == ()
        assert method.returns is None
        assert method.display_label == "get_info"

    def test_parameter_metadata(self, schema: InterfaceSchema) -> None:
        method = schema.lookup("transfer")
        assert method is not None
        to, amount = method.parameters
        assert to.example == ALICE
        assert amount.max == 1000000
        assert amount.type.max_value == 1000000
        assert method.signature() == "transfer(to: address, amount: uint64)"

    def test_schema_is_read_only(self, schema: InterfaceSchema) -> None:
        with pytest.raises(TypeError):
            schema._methods["x"] = schema.list()[0]  # type: ignore[index]

    def test_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "exec_interface.json"
        path.write_text(json.dumps(INTERFACE_DOC), encoding="utf-8")
        assert len(InterfaceSchema.from_path(path)) == 5


class TestRejections:
    def test_duplicate_method_names(self) -> None:
        doc = _doc()
        doc["methods"].append(copy.deepcopy(doc["methods"][0]))
        with pytest.raises(SchemaError, match="Duplicate method"):
            InterfaceSchema.from_dict(doc)

    def test_unknown_type_token(self) -> None:
        doc = _doc()
        doc["methods"][0]["parameters"][0]["type"] = "float"
        with pytest.raises(SchemaError, match="Unknown type token"):
            InterfaceSchema.from_dict(doc)

    def test_missing_required_field_lists_problems(self) -> None:
        doc = _doc()
        del doc["methods"][1]["name"]
        with pytest.raises(SchemaError) as excinfo:
            InterfaceSchema.from_dict(doc)
        assert excinfo.value.errors == ["$.methods[1]: 'name' is a required property"]
        assert excinfo.value.fatal

    def test_malformed_parameter_list(self) -> None:
        doc = _doc()
        doc["methods"][0]["parameters"] = {"owner": "address"}
        with pytest.raises(SchemaError):
            InterfaceSchema.from_dict(doc)

    def test_unknown_mutability(self) -> None:
        doc = _doc()
        doc["methods"][0]["mutability"] = "pure"
        with pytest.raises(SchemaError):
            InterfaceSchema.from_dict(doc)

    def test_call_with_returns(self) -> None:
        doc = _doc()
        doc["methods"][3]["returns"] = "bool"
        with pytest.raises(SchemaError, match="cannot declare 'returns'"):
            InterfaceSchema.from_dict(doc)

    def test_bad_contract_address(self) -> None:
        doc = _doc()
        doc["contract"] = "oct1234"
        with pytest.raises(SchemaError, match="contract address"):
            InterfaceSchema.from_dict(doc)

    def test_duplicate_parameter(self) -> None:
        doc = _doc()
        params = doc["methods"][3]["parameters"]
        params.append(copy.deepcopy(params[0]))
        with pytest.raises(SchemaError, match="duplicate parameter"):
            InterfaceSchema.from_dict(doc)

    def test_max_on_non_integer(self) -> None:
        doc = _doc()
        doc["methods"][3]["parameters"][0]["max"] = 10
        with pytest.raises(SchemaError):
            InterfaceSchema.from_dict(doc)

    def test_not_an_object(self) -> None:
        with pytest.raises(SchemaError):
            InterfaceSchema.from_dict([])

    def test_empty_methods(self) -> None:
        with pytest.raises(SchemaError):
            InterfaceSchema.from_dict({"contract": CONTRACT, "methods": []})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SchemaError, match="not found"):
            InterfaceSchema.from_path(tmp_path / "missing.json")

    def test_invalid_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SchemaError, match="not valid JSON"):
            InterfaceSchema.from_path(path)
