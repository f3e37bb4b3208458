"""
Interface Schema - typed, read-only view of a method-interface document.

The document names one contract and its callable methods. Each method is
either a ``view`` (read-only query) or a ``call`` (signed transaction).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from ..errors import CoercionError, SchemaError
from .addresses import EVM_ADDRESSES, AddressFormat
from .coerce import encode
from .registry import INTERFACE_SCHEMA, SchemaRegistry, load_json
from .types import ADDRESS, TypeSpec, parse_descriptor, parse_type

LEGACY_KEYS = {"type": "mutability", "params": "parameters"}


class Mutability(str, Enum):
    VIEW = "view"
    CALL = "call"


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeSpec
    example: Optional[str] = None

    @property
    def max(self) -> Optional[int]:
        return self.type.maximum


@dataclass(frozen=True)
class MethodSpec:
    name: str
    mutability: Mutability
    parameters: tuple[Parameter, ...] = ()
    returns: Optional[TypeSpec] = None
    label: str = ""

    @property
    def arity(self) -> int:
        return len(self.parameters)

    @property
    def parameter_types(self) -> tuple[TypeSpec, ...]:
        return tuple(p.type for p in self.parameters)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parameters)

    @property
    def display_label(self) -> str:
        return self.label or self.name

    def signature(self) -> str:
        params = ", ".join(f"{p.name}: {p.type}" for p in self.parameters)
        text = f"{self.name}({params})"
        if self.returns is not None:
            text += f" -> {self.returns}"
        return text


@dataclass(frozen=True)
class InterfaceSchema:
    """Immutable mapping of method name -> MethodSpec, in document order."""

    contract: str
    _methods: Mapping[str, MethodSpec] = field(repr=False)
    addresses: AddressFormat = field(default=EVM_ADDRESSES, repr=False, compare=False)

    def lookup(self, name: str) -> Optional[MethodSpec]:
        return self._methods.get(name)

    def list(self) -> tuple[MethodSpec, ...]:
        return tuple(self._methods.values())

    def __len__(self) -> int:
        return len(self._methods)

    def __iter__(self) -> Iterator[MethodSpec]:
        return iter(self._methods.values())

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    # ---- construction ----

    @classmethod
    def from_dict(
        cls,
        document: Any,
        registry: SchemaRegistry | None = None,
        addresses: AddressFormat = EVM_ADDRESSES,
    ) -> "InterfaceSchema":
        """
        Parse an interface document.

        Args:
            document: Decoded JSON document
            registry: Schema registry for structural validation
            addresses: Address format of the target network; applies to the
                contract and to every address-typed value

        Raises:
            SchemaError: Structural problems, duplicate names, unknown type tokens
        """
        if not isinstance(document, dict):
            raise SchemaError("Interface document must be a JSON object.")
        document = _normalize(document)

        registry = registry or SchemaRegistry.default()
        registry.validate_instance(document, INTERFACE_SCHEMA)

        try:
            contract = encode(ADDRESS, document["contract"], addresses).value
        except CoercionError as exc:
            raise SchemaError(f"Invalid contract address: {exc}") from exc

        methods: dict[str, MethodSpec] = {}
        for index, entry in enumerate(document["methods"]):
            method = _parse_method(entry, index)
            if method.name in methods:
                raise SchemaError(f"Duplicate method name: {method.name}")
            methods[method.name] = method

        return cls(contract=contract, _methods=MappingProxyType(methods), addresses=addresses)

    @classmethod
    def from_path(
        cls,
        path: Path,
        registry: SchemaRegistry | None = None,
        addresses: AddressFormat = EVM_ADDRESSES,
    ) -> "InterfaceSchema":
        if not path.exists():
            raise SchemaError(f"Interface document not found: {path}")
        return cls.from_dict(load_json(path), registry=registry, addresses=addresses)


def _normalize(document: dict[str, Any]) -> dict[str, Any]:
    """Map legacy method keys (``type``, ``params``) to their current names."""
    document = copy.deepcopy(document)
    methods = document.get("methods")
    if isinstance(methods, list):
        for entry in methods:
            if not isinstance(entry, dict):
                continue
            for legacy, current in LEGACY_KEYS.items():
                if legacy in entry and current not in entry:
                    entry[current] = entry.pop(legacy)
    return document


def _parse_method(entry: dict[str, Any], index: int) -> MethodSpec:
    name = entry["name"]
    where = f"method {name!r} (#{index})"
    mutability = Mutability(entry["mutability"])

    parameters = []
    seen: set[str] = set()
    for param in entry["parameters"]:
        pname = param["name"]
        if pname in seen:
            raise SchemaError(f"{where}: duplicate parameter {pname!r}")
        seen.add(pname)
        try:
            spec = parse_type(param["type"], param.get("components"))
            spec = spec.with_maximum(param.get("max"))
        except SchemaError as exc:
            raise SchemaError(f"{where}, parameter {pname!r}: {exc}") from exc
        example = param.get("example")
        parameters.append(
            Parameter(pname, spec, None if example is None else str(example))
        )

    returns = None
    if "returns" in entry:
        if mutability is Mutability.CALL:
            raise SchemaError(f"{where}: call methods cannot declare 'returns'")
        try:
            returns = parse_descriptor(entry["returns"])
        except SchemaError as exc:
            raise SchemaError(f"{where}, returns: {exc}") from exc

    return MethodSpec(
        name=name,
        mutability=mutability,
        parameters=tuple(parameters),
        returns=returns,
        label=entry.get("label", ""),
    )
