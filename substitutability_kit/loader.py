"""Load type hierarchies from YAML or JSON declarations.

Document format:

    schema_version: "1.0"
    types:
      - name: Reptile
        contracts:
          move: {type: startswith, template: "{name} "}
        operations:
          move: {returns: "{name} crawls away"}
      - name: Snake
        parent: Reptile
        operations:
          move: {returns: "{name} slithers away"}
    samples:
      - {name: Kaa}
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Union

import yaml
from pydantic import ValidationError

from .contracts import INHERITED, Overridden, TypeDescriptor
from .engine import SubstitutabilityChecker
from .errors import ConfigurationError
from .predicates import contract_from_rule, render, validate_template
from .schemas import HierarchyDeclaration, OperationSpec, TypeDeclaration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Hierarchy:
    types: Mapping[str, TypeDescriptor]
    samples: Tuple[Any, ...] = ()
    description: str = ""

    def __getitem__(self, name: str) -> TypeDescriptor:
        return self.types[name]

    def checker(self, **kwargs) -> SubstitutabilityChecker:
        return SubstitutabilityChecker(self.types, **kwargs)

    def check(self, type_name: str, sample_inputs=None):
        """Check ``type_name`` against its ancestors, defaulting to the declared samples."""
        samples = self.samples if sample_inputs is None else sample_inputs
        return self.checker().check(type_name, samples)


def _implementation(type_name: str, op_name: str, spec: OperationSpec) -> Overridden:
    if spec.behavior == "returns":
        template = spec.returns
        validate_template(template, "returns template")

        def implementation(sample):
            return render(template, sample)
    elif spec.behavior == "raises":
        message = spec.raises

        def implementation(sample):
            raise NotImplementedError(message)
    else:
        value = spec.value

        def implementation(sample):
            return value

    implementation.__qualname__ = f"{type_name}.{op_name}"
    return Overridden(implementation, description=spec.description)


def _descriptor(decl: TypeDeclaration) -> TypeDescriptor:
    operations: Dict[str, Any] = {}
    for op_name, spec in decl.operations.items():
        if spec == "inherited":
            operations[op_name] = INHERITED
        else:
            try:
                operations[op_name] = _implementation(decl.name, op_name, spec)
            except ConfigurationError as exc:
                raise ConfigurationError(f"{decl.name}.{op_name}: {exc}") from exc

    contracts = {}
    for op_name, rule in decl.contracts.items():
        try:
            contracts[op_name] = contract_from_rule(op_name, rule)
        except ConfigurationError as exc:
            raise ConfigurationError(f"{decl.name}.{op_name}: {exc}") from exc

    return TypeDescriptor(name=decl.name, parent=decl.parent, operations=operations, contracts=contracts)


def hierarchy_from_dict(data: Mapping[str, Any]) -> Hierarchy:
    """Validate a declaration document and build immutable descriptors."""
    try:
        declaration = HierarchyDeclaration.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid hierarchy declaration: {exc}") from exc

    types: Dict[str, TypeDescriptor] = {}
    for decl in declaration.types:
        if decl.name in types:
            raise ConfigurationError(f"duplicate type declaration: {decl.name}")
        types[decl.name] = _descriptor(decl)

    logger.debug("loaded %d type declaration(s), %d sample(s)", len(types), len(declaration.samples))
    return Hierarchy(
        types=MappingProxyType(types),
        samples=tuple(declaration.samples),
        description=declaration.description or "",
    )


def load_hierarchy(path: Union[str, Path]) -> Hierarchy:
    """
    Load a hierarchy declaration from a .yaml/.yml or .json file.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ConfigurationError
        If the document is malformed or fails validation.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Hierarchy declaration not found: {path}")

    with open(path, "r") as f:
        try:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"{path}: unparseable declaration: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: declaration must be a mapping")

    logger.info("loading hierarchy declaration from %s", path)
    return hierarchy_from_dict(data)
