"""Declarations checked by the substitutability engine.

Types are described, not defined: a TypeDescriptor names its parent and tags
every operation it mentions as either ``Inherited`` (defer to the parent) or
``Overridden`` (local behavior). Contracts attach a pure predicate over
``(input, output)`` to an operation name; a type declares the contracts its
subtypes must honor.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

Predicate = Callable[[Any, Any], bool]
Implementation = Callable[[Any], Any]


@dataclass(frozen=True)
class Contract:
    operation: str
    predicate: Predicate
    description: str = ""

    def accepts(self, sample: Any, output: Any) -> bool:
        return bool(self.predicate(sample, output))


@dataclass(frozen=True)
class Inherited:
    """Operation defers to the nearest ancestor that overrides it."""


@dataclass(frozen=True)
class Overridden:
    implementation: Implementation
    description: str = ""


INHERITED = Inherited()

OperationVariant = Union[Inherited, Overridden]


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class TypeDescriptor:
    name: str
    parent: Optional[str] = None
    operations: Mapping[str, OperationVariant] = field(default_factory=dict)
    contracts: Mapping[str, Contract] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("TypeDescriptor.name must be non-empty")
        for op_name, variant in (self.operations or {}).items():
            if not isinstance(variant, (Inherited, Overridden)):
                raise TypeError(
                    f"{self.name}.{op_name}: expected Inherited or Overridden, got {type(variant).__name__}"
                )
        for op_name, contract in (self.contracts or {}).items():
            if contract.operation != op_name:
                raise ValueError(
                    f"{self.name}: contract keyed '{op_name}' describes operation '{contract.operation}'"
                )
        object.__setattr__(self, "operations", _freeze(self.operations))
        object.__setattr__(self, "contracts", _freeze(self.contracts))

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def overrides(self, operation: str) -> bool:
        return isinstance(self.operations.get(operation), Overridden)


def declare(
    name: str,
    parent: Optional[str] = None,
    *,
    operations: Optional[Mapping[str, Union[OperationVariant, Implementation]]] = None,
    contracts: Optional[Mapping[str, Union[Contract, Predicate]]] = None,
) -> TypeDescriptor:
    """Build a TypeDescriptor from plain callables.

    Bare callables in ``operations`` become ``Overridden``; bare callables in
    ``contracts`` become a ``Contract`` for that operation name.
    """
    ops: dict = {}
    for op_name, value in (operations or {}).items():
        if isinstance(value, (Inherited, Overridden)):
            ops[op_name] = value
        elif callable(value):
            ops[op_name] = Overridden(value)
        else:
            raise TypeError(f"{name}.{op_name}: operation must be callable, Inherited or Overridden")

    cons: dict = {}
    for op_name, value in (contracts or {}).items():
        if isinstance(value, Contract):
            cons[op_name] = value
        elif callable(value):
            cons[op_name] = Contract(operation=op_name, predicate=value)
        else:
            raise TypeError(f"{name}.{op_name}: contract must be a Contract or predicate callable")

    return TypeDescriptor(name=name, parent=parent, operations=ops, contracts=cons)
