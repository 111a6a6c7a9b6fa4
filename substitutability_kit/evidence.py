"""Digests and signatures for serialized check reports.

Both cover the body of the ``ReportModel`` that ``evidence_model`` emits: the
model dump without its own digest/signature fields. A report that survives a
JSON round trip therefore still verifies.

Signing is HMAC-SHA256 keyed by `SUBSTITUTABILITY_SIGNING_KEY`; without a key
reports carry a digest only.
"""

from __future__ import annotations

import hmac
import hashlib
import json
import os
from typing import Optional, Tuple, Union

from .report import ViolationReport
from .schemas import ReportModel

SIGNATURE_ALG = "hmac-sha256"

_EVIDENCE_FIELDS = {"digest", "signature_alg", "signature"}


def _signing_key() -> Optional[bytes]:
    key = os.getenv("SUBSTITUTABILITY_SIGNING_KEY", "").strip()
    return key.encode("utf-8") if key else None


def _as_model(report: Union[ViolationReport, ReportModel]) -> ReportModel:
    if isinstance(report, ReportModel):
        return report
    return ReportModel.from_report(report)


def _body(model: ReportModel) -> bytes:
    # Sample inputs are arbitrary objects; repr keeps the encoding total.
    payload = model.model_dump(exclude=_EVIDENCE_FIELDS)
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=repr).encode("utf-8")


def report_digest(report: Union[ViolationReport, ReportModel]) -> str:
    return "sha256:" + hashlib.sha256(_body(_as_model(report))).hexdigest()


def sign_report(report: Union[ViolationReport, ReportModel]) -> Optional[Tuple[str, str]]:
    """Return (alg, signature_hex) over the report body, or None without a key."""
    key = _signing_key()
    if key is None:
        return None
    return SIGNATURE_ALG, hmac.new(key, _body(_as_model(report)), hashlib.sha256).hexdigest()


def evidence_model(report: ViolationReport) -> ReportModel:
    """Serializable report with its digest and, when a key is configured, a signature."""
    model = ReportModel.from_report(report)
    signed = sign_report(model)
    return model.model_copy(update={
        "digest": report_digest(model),
        "signature_alg": signed[0] if signed else None,
        "signature": signed[1] if signed else None,
    })


def verify_evidence(model: ReportModel) -> bool:
    """True when the model's digest and signature both match its body."""
    key = _signing_key()
    if key is None or model.signature_alg != SIGNATURE_ALG or not model.signature:
        return False
    if model.digest != report_digest(model):
        return False
    expected = hmac.new(key, _body(model), hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, model.signature.lower())
