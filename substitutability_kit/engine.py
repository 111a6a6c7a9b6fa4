"""Sampling-based substitutability checks.

For a type and its ancestor chain, every operation that an ancestor describes
with a contract is evaluated through the type's effective implementation
(its own override, else the nearest ancestor's) on each sample input. Outputs
the contract rejects are collected as violations; nothing is raised for them.

An empty violation set is evidence for the sampled inputs only. Sampling
cannot prove that two behaviors agree on every input.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .contracts import Contract, TypeDescriptor
from .errors import ConfigurationError, InsufficientSamplesError
from .logging_setup import check_id_ctx
from .report import (
    DIVERGENCE_REASON,
    STATUS_ADDED,
    STATUS_INHERITED,
    STATUS_OVERRIDDEN,
    ContractGap,
    Violation,
    ViolationReport,
)
from .settings import settings

logger = logging.getLogger(__name__)

_DETAIL_MAX_CHARS = 200


def _short_repr(value: Any) -> str:
    text = repr(value)
    if len(text) > _DETAIL_MAX_CHARS:
        return text[: _DETAIL_MAX_CHARS - 3] + "..."
    return text


def _index_types(types: Union[Mapping[str, TypeDescriptor], Iterable[TypeDescriptor], None]) -> Dict[str, TypeDescriptor]:
    if types is None:
        return {}
    if isinstance(types, Mapping):
        for key, descriptor in types.items():
            if key != descriptor.name:
                raise ConfigurationError(f"type index key '{key}' does not match declared name '{descriptor.name}'")
        return dict(types)
    index: Dict[str, TypeDescriptor] = {}
    for descriptor in types:
        if descriptor.name in index and index[descriptor.name] is not descriptor:
            raise ConfigurationError(f"duplicate type declaration: {descriptor.name}")
        index[descriptor.name] = descriptor
    return index


class SubstitutabilityChecker:
    """Check subtypes against the contracts declared by their ancestors.

    The checker holds an immutable index of type declarations and no other
    state; ``check`` may be called concurrently.
    """

    def __init__(
        self,
        types: Union[Mapping[str, TypeDescriptor], Iterable[TypeDescriptor], None] = None,
        *,
        min_sample_inputs: Optional[int] = None,
        max_ancestor_depth: Optional[int] = None,
    ):
        self._types = _index_types(types)
        self.min_sample_inputs = settings.min_sample_inputs if min_sample_inputs is None else min_sample_inputs
        self.max_ancestor_depth = settings.max_ancestor_depth if max_ancestor_depth is None else max_ancestor_depth
        if self.min_sample_inputs < 1:
            raise ConfigurationError("min_sample_inputs must be at least 1")

    @property
    def types(self) -> Mapping[str, TypeDescriptor]:
        return dict(self._types)

    def resolve(self, type_: Union[TypeDescriptor, str]) -> TypeDescriptor:
        if isinstance(type_, TypeDescriptor):
            return type_
        descriptor = self._types.get(type_)
        if descriptor is None:
            raise ConfigurationError(f"unknown type: {type_}")
        return descriptor

    def ancestors(self, type_: Union[TypeDescriptor, str]) -> List[TypeDescriptor]:
        """Return the ancestor chain, nearest first, excluding the type itself.

        Raises ConfigurationError on a cycle, an unresolved parent, or a chain
        deeper than ``max_ancestor_depth``.
        """
        descriptor = self.resolve(type_)
        seen = {descriptor.name}
        chain: List[TypeDescriptor] = []
        current = descriptor
        while current.parent is not None:
            parent_name = current.parent
            if parent_name in seen:
                cycle = " -> ".join([descriptor.name] + [t.name for t in chain] + [parent_name])
                logger.error("ancestor cycle detected: %s", cycle)
                raise ConfigurationError(f"ancestor cycle: {cycle}")
            parent = self._types.get(parent_name)
            if parent is None:
                logger.error("unresolved ancestor %s referenced by %s", parent_name, current.name)
                raise ConfigurationError(f"{current.name}: unknown parent type '{parent_name}'")
            chain.append(parent)
            if len(chain) > self.max_ancestor_depth:
                logger.error("ancestor chain of %s exceeds %d levels", descriptor.name, self.max_ancestor_depth)
                raise ConfigurationError(
                    f"{descriptor.name}: ancestor chain deeper than {self.max_ancestor_depth}"
                )
            seen.add(parent_name)
            current = parent
        return chain

    def check(self, type_: Union[TypeDescriptor, str], sample_inputs: Sequence[Any]) -> ViolationReport:
        """Evaluate every contracted operation of ``type_`` on ``sample_inputs``.

        Returns a fresh ViolationReport. Raises ConfigurationError for an
        unresolvable chain and InsufficientSamplesError when an operation
        needs validating but too few samples were given.
        """
        token = check_id_ctx.set(uuid.uuid4().hex[:12])
        try:
            return self._check(self.resolve(type_), list(sample_inputs))
        finally:
            check_id_ctx.reset(token)

    def _check(self, descriptor: TypeDescriptor, samples: List[Any]) -> ViolationReport:
        ancestors = self.ancestors(descriptor)
        chain = [descriptor] + ancestors

        # Root-first so the report lists operations in declaration order
        op_names: Dict[str, None] = {}
        for t in reversed(chain):
            for name in t.contracts:
                op_names.setdefault(name, None)
            for name in t.operations:
                op_names.setdefault(name, None)

        violations: List[Violation] = []
        gaps: List[ContractGap] = []
        statuses: List[Tuple[str, str]] = []
        total_checks = 0
        failed_checks = 0

        for op in op_names:
            contract_owner = next((t for t in ancestors if op in t.contracts), None)
            impl_owner = next((t for t in chain if t.overrides(op)), None)
            known_to_ancestors = any(op in t.operations or op in t.contracts for t in ancestors)

            if descriptor.overrides(op):
                status = STATUS_OVERRIDDEN if known_to_ancestors else STATUS_ADDED
            else:
                status = STATUS_INHERITED
            statuses.append((op, status))

            if contract_owner is None:
                gap = ContractGap(operation=op, message=f"no ancestor of {descriptor.name} declares a contract for '{op}'")
                logger.warning("contract gap: %s.%s", descriptor.name, op)
                gaps.append(gap)
                continue

            if impl_owner is None:
                gap = ContractGap(
                    operation=op,
                    category="unimplemented",
                    message=f"'{op}' is contracted by {contract_owner.name} but not implemented along {descriptor.name}'s chain",
                )
                logger.warning("unimplemented operation: %s.%s", descriptor.name, op)
                gaps.append(gap)
                continue

            if len(samples) < self.min_sample_inputs:
                raise InsufficientSamplesError(
                    f"{descriptor.name}.{op}: need at least {self.min_sample_inputs} sample input(s), got {len(samples)}"
                )

            contract = contract_owner.contracts[op]
            implementation = impl_owner.operations[op].implementation
            violation, failures = self._sample_operation(
                op, contract, implementation, samples,
                contract_owner=contract_owner.name, implemented_by=impl_owner.name,
            )
            total_checks += len(samples)
            failed_checks += failures
            if violation is not None:
                violations.append(violation)

        report = ViolationReport(
            type_name=descriptor.name,
            ancestors=tuple(t.name for t in ancestors),
            violations=tuple(violations),
            gaps=tuple(gaps),
            operations=tuple(statuses),
            total_checks=total_checks,
            failed_checks=failed_checks,
        )
        logger.info(
            "substitutability check type=%s operations=%d checks=%d violations=%d gaps=%d",
            descriptor.name, len(statuses), total_checks, len(violations), len(gaps),
        )
        return report

    @staticmethod
    def _sample_operation(
        op: str,
        contract: Contract,
        implementation,
        samples: List[Any],
        *,
        contract_owner: str,
        implemented_by: str,
    ) -> Tuple[Optional[Violation], int]:
        first: Optional[Tuple[Any, str, str]] = None
        failures = 0

        for sample in samples:
            try:
                output = implementation(sample)
            except Exception as exc:
                failures += 1
                if first is None:
                    first = (sample, "implementation_error", f"{type(exc).__name__}: {exc}")
                continue

            try:
                accepted = contract.accepts(sample, output)
            except Exception as exc:
                failures += 1
                if first is None:
                    first = (sample, "predicate_error", f"{type(exc).__name__}: {exc}")
                continue

            if not accepted:
                failures += 1
                if first is None:
                    first = (sample, "behavior_divergence", f"output={_short_repr(output)}")

        if first is None:
            return None, 0

        failing_input, category, detail = first
        return (
            Violation(
                operation=op,
                failing_input=failing_input,
                reason=DIVERGENCE_REASON,
                contract_owner=contract_owner,
                implemented_by=implemented_by,
                category=category,
                failed_samples=failures,
                detail=detail,
            ),
            failures,
        )


def check(
    type_: Union[TypeDescriptor, str],
    sample_inputs: Sequence[Any],
    types: Union[Mapping[str, TypeDescriptor], Iterable[TypeDescriptor], None] = None,
) -> ViolationReport:
    """One-shot ``SubstitutabilityChecker(types).check(type_, sample_inputs)``."""
    return SubstitutabilityChecker(types).check(type_, sample_inputs)
