from __future__ import annotations

import json
from collections import defaultdict
from dataclasses import asdict
from pathlib import Path

from ruleflow.audit import utc_now_iso
from ruleflow.models import AddressPolicy, MessageDetail, ValidationReport, ValidationStats

REPORT_SCHEMA = "ruleflow.validation_report.v1"


def _safe_rate(numer: int, denom: int) -> float:
    return 0.0 if denom <= 0 else numer / denom


def _round4(x: float) -> float:
    return round(x, 4)


def messages_dict() -> dict[str, list[str]]:
    return defaultdict(list)


def build_report(
    *,
    run_id: str,
    schema: str,
    address_policy: AddressPolicy,
    total: int,
    accepted: int,
    rejected: int,
    records_by_message: dict[str, list[str]],
) -> ValidationReport:
    """
    records_by_message: mensaje de Failure -> ids de registro que lo produjeron.
    Un registro rechazado puede aparecer bajo varios mensajes (errores acumulados).
    """
    details = [
        MessageDetail(message=message, count=len(record_ids), examples=record_ids[:3])
        for message, record_ids in sorted(records_by_message.items())
    ]

    notes = [
        "count is the number of records whose Failure contained the message",
        "a rejected record may contribute to several messages",
        "examples are record ids (the 'id' field, else the 1-based row number)",
    ]

    return ValidationReport(
        run_id=run_id,
        generated_utc=utc_now_iso(),
        schema=schema,
        address_policy=address_policy,
        totals=ValidationStats(total=total, accepted=accepted, rejected=rejected),
        message_details=details,
        notes=notes,
    )


def write_report(path: Path, report: ValidationReport) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    totals = report.totals

    payload: dict[str, object] = {
        "schema": REPORT_SCHEMA,
        "run_id": report.run_id,
        "generated_utc": report.generated_utc,
        "record_schema": report.schema,
        "address_policy": {
            "policy_id": report.address_policy.policy_id,
            "min_number": report.address_policy.min_number,
            "street": str(report.address_policy.street),
        },
        "totals": {
            **asdict(totals),
            "acceptance_rate": _round4(_safe_rate(totals.accepted, totals.total)),
            "rejection_rate": _round4(_safe_rate(totals.rejected, totals.total)),
        },
        "message_details": [asdict(d) for d in report.message_details],
        "notes": report.notes,
    }

    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
