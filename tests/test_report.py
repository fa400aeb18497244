from __future__ import annotations

import json
from pathlib import Path

from ruleflow.audit import AuditLogger
from ruleflow.models import AddressPolicy
from ruleflow.report import build_report, write_report


def test_write_report_payload(tmp_path: Path) -> None:
    report = build_report(
        run_id="r-1",
        schema="address",
        address_policy=AddressPolicy(),
        total=0,
        accepted=0,
        rejected=0,
        records_by_message={"Too small": ["1", "2", "3", "4"]},
    )
    write_report(tmp_path / "report.json", report)

    payload = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert "gate" not in payload
    assert payload["totals"]["acceptance_rate"] == 0.0
    assert payload["message_details"][0]["examples"] == ["1", "2", "3"]
    assert payload["address_policy"]["street"] == "capitalize"


def test_audit_logger_appends_jsonl(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "decision_log.jsonl"
    audit = AuditLogger(log_path, run_id="r-1")
    audit.log("INFO", "run", "run_started", "started", rows=2)
    audit.log("WARN", "validate", "record_rejected", "failed", record_id="7", reason="Too small")

    events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [e["event"] for e in events] == ["run_started", "record_rejected"]
    assert events[0]["extra"] == {"rows": 2}
    assert events[1]["record_id"] == "7"
    assert events[1]["extra"] is None
