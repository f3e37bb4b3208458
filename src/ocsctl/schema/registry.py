"""
Bundled JSON Schemas for interface documents.

Structural checks only (required keys, value kinds, enums). Type tokens,
duplicate names and addresses are checked by ``models`` after this passes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

from ..errors import SchemaError

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
INTERFACE_SCHEMA = "exec_interface.schema.json"


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path = SCHEMA_DIR

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return cls()

    def validate_instance(self, instance: Any, schema_filename: str) -> None:
        """
        Raises:
            SchemaError: Listing every violation as ``<json path>: <message>``
        """
        validator = _compiled(self.schema_root / schema_filename)
        problems = sorted(
            f"{error.json_path}: {error.message}" for error in validator.iter_errors(instance)
        )
        if problems:
            raise SchemaError(
                f"Interface document failed validation ({len(problems)} problem(s)).",
                errors=problems,
            )


@lru_cache(maxsize=8)
def _compiled(path: Path) -> jsonschema.protocols.Validator:
    schema = load_json(path)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def load_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"{path} is not valid JSON: {exc}") from exc
