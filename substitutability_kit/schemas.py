"""
Pydantic models for hierarchy declarations and check reports.
These define the exact data formats read and written by the kit.
"""
from pydantic import BaseModel, Field, model_validator
from typing import Any, Dict, List, Literal, Optional, Union

from .report import ViolationReport


BEHAVIOR_FIELDS = ("returns", "value", "raises")


class OperationSpec(BaseModel):
    """
    Locally defined (overridden) behavior, expressed without code.

    Exactly one of:
    1. returns: template formatted with the sample input ("{name} slithers away")
    2. value: constant returned for every input (null included)
    3. raises: message of a NotImplementedError raised for every input
    """
    returns: Optional[str] = Field(None, description="Output template, e.g. '{name} crawls away'")
    value: Optional[Any] = Field(None, description="Constant output")
    raises: Optional[str] = Field(None, description="Raise NotImplementedError with this message")
    description: str = Field("", description="Human-readable note")

    @model_validator(mode="after")
    def _exactly_one_behavior(self):
        given = [k for k in BEHAVIOR_FIELDS if k in self.model_fields_set]
        if len(given) != 1:
            raise ValueError(f"operation needs exactly one of returns/value/raises, got {given or 'none'}")
        if given[0] != "value" and getattr(self, given[0]) is None:
            raise ValueError(f"operation '{given[0]}' must be a string")
        return self

    @property
    def behavior(self) -> str:
        """Which of returns/value/raises was declared."""
        return next(k for k in BEHAVIOR_FIELDS if k in self.model_fields_set)


class TypeDeclaration(BaseModel):
    """One declared type: parent reference, operations, and contracts for subtypes."""
    name: str = Field(..., min_length=1, description="Type name (identity)")
    parent: Optional[str] = Field(None, description="Parent type name; omitted for a root")
    operations: Dict[str, Union[Literal["inherited"], OperationSpec]] = Field(
        default_factory=dict, description="Operation name -> 'inherited' or an OperationSpec"
    )
    contracts: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Operation name -> predicate rule (see predicates module)"
    )


class HierarchyDeclaration(BaseModel):
    """A whole declaration document."""
    schema_version: str = Field("1.0", description="Declaration schema version")
    description: Optional[str] = Field(None, description="Free-form description")
    types: List[TypeDeclaration] = Field(..., min_length=1, description="Declared types")
    samples: List[Any] = Field(default_factory=list, description="Representative sample inputs")


class SummaryStats(BaseModel):
    """Summary of sampled checks."""
    pass_rate: float = Field(..., ge=0, le=1, description="Fraction of sampled checks passed (0–1)")
    total_checks: int = Field(..., ge=0, description="Total (operation, sample) evaluations")
    failed_checks: int = Field(..., ge=0, description="Evaluations whose output the contract rejected")


class ViolationModel(BaseModel):
    operation: str
    failing_input: Any = None
    reason: str
    category: str
    severity: str
    contract_owner: str
    implemented_by: str
    failed_samples: int = Field(..., ge=1)
    detail: Optional[str] = None


class GapModel(BaseModel):
    operation: str
    category: str
    severity: str
    message: str


class ReportModel(BaseModel):
    """Serializable ViolationReport."""
    schema_version: str = Field("1.0", description="Report schema version")
    type: str = Field(..., description="Checked type name")
    ancestors: List[str] = Field(default_factory=list, description="Ancestor chain, nearest first")
    ok: bool = Field(..., description="True when no sampled input violated a contract")
    summary: SummaryStats
    operations: Dict[str, str] = Field(default_factory=dict, description="inherited | overridden | added")
    violations: List[ViolationModel] = Field(default_factory=list)
    gaps: List[GapModel] = Field(default_factory=list)
    digest: Optional[str] = Field(None, description="sha256 of the canonical report body")
    signature_alg: Optional[str] = Field(None, description="Signature algorithm, if signed")
    signature: Optional[str] = Field(None, description="Signature hex, if signed")

    @classmethod
    def from_report(cls, report: ViolationReport, **extra: Any) -> "ReportModel":
        data = report.to_dict()
        return cls(
            type=data["type"],
            ancestors=data["ancestors"],
            ok=data["ok"],
            summary=SummaryStats(
                pass_rate=data["pass_rate"],
                total_checks=data["total_checks"],
                failed_checks=data["failed_checks"],
            ),
            operations=data["operations"],
            violations=[ViolationModel(**v) for v in data["violations"]],
            gaps=[GapModel(**g) for g in data["gaps"]],
            **extra,
        )
