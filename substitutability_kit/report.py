"""Results of a substitutability check."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .error_taxonomy import FindingTaxonomy

DIVERGENCE_REASON = "behavior diverges from inherited contract"

# Operation status values
STATUS_INHERITED = "inherited"
STATUS_OVERRIDDEN = "overridden"
STATUS_ADDED = "added"


@dataclass(frozen=True)
class Violation:
    """One operation whose sampled behavior an ancestor contract rejected.

    Equality goes through ``input_repr`` rather than the sample object, so
    reports stay equal for samples that are not equal to themselves (NaN).
    """
    operation: str
    failing_input: Any = field(compare=False)
    reason: str
    contract_owner: str
    implemented_by: str
    category: str = "behavior_divergence"
    failed_samples: int = 1
    detail: Optional[str] = None
    input_repr: str = field(init=False, default="")

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_repr", repr(self.failing_input))

    @property
    def severity(self) -> str:
        return FindingTaxonomy.severity_level(self.category)


@dataclass(frozen=True)
class ContractGap:
    operation: str
    message: str
    category: str = "contract_gap"

    @property
    def severity(self) -> str:
        return FindingTaxonomy.severity_level(self.category)


@dataclass(frozen=True)
class ViolationReport:
    type_name: str
    ancestors: Tuple[str, ...]
    violations: Tuple[Violation, ...] = ()
    gaps: Tuple[ContractGap, ...] = ()
    operations: Tuple[Tuple[str, str], ...] = ()
    total_checks: int = 0
    failed_checks: int = 0

    @property
    def ok(self) -> bool:
        """True when no sampled input contradicted an ancestor contract.

        Sampling is evidence, not proof: an empty report says nothing about
        inputs that were not sampled.
        """
        return not self.violations

    @property
    def pass_rate(self) -> float:
        if self.total_checks == 0:
            return 0.0
        return (self.total_checks - self.failed_checks) / self.total_checks

    @property
    def violated_operations(self) -> List[str]:
        return [v.operation for v in self.violations]

    def status_of(self, operation: str) -> Optional[str]:
        return dict(self.operations).get(operation)

    def operations_with_status(self, status: str) -> List[str]:
        return [name for name, st in self.operations if st == status]

    @property
    def inherited(self) -> List[str]:
        return self.operations_with_status(STATUS_INHERITED)

    @property
    def overridden(self) -> List[str]:
        return self.operations_with_status(STATUS_OVERRIDDEN)

    @property
    def added(self) -> List[str]:
        return self.operations_with_status(STATUS_ADDED)

    def to_dict(self) -> Dict[str, Any]:
        """Export as a JSON-friendly dict (sample inputs are passed through as-is)."""
        return {
            "type": self.type_name,
            "ancestors": list(self.ancestors),
            "ok": self.ok,
            "total_checks": self.total_checks,
            "failed_checks": self.failed_checks,
            "pass_rate": self.pass_rate,
            "operations": {name: st for name, st in self.operations},
            "violations": [
                {
                    "operation": v.operation,
                    "failing_input": v.failing_input,
                    "reason": v.reason,
                    "category": v.category,
                    "severity": v.severity,
                    "contract_owner": v.contract_owner,
                    "implemented_by": v.implemented_by,
                    "failed_samples": v.failed_samples,
                    "detail": v.detail,
                }
                for v in self.violations
            ],
            "gaps": [
                {"operation": g.operation, "category": g.category, "severity": g.severity, "message": g.message}
                for g in self.gaps
            ],
        }
