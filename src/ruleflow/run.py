from __future__ import annotations

import argparse
import hashlib
import json
import platform
import sys
import uuid
from collections.abc import Mapping
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ruleflow.address import build_address_rules
from ruleflow.audit import AuditLogger, StageTimer, utc_now_iso
from ruleflow.io import InputFormatError, read_forms, write_csv
from ruleflow.models import AddressPolicy, FormData, StreetPolicy
from ruleflow.report import build_report, messages_dict, write_report
from ruleflow.result import Failure, Success
from ruleflow.rule import Rule

RUNNER_VERSION = "0.1.0"
MANIFEST_SCHEMA = "ruleflow.run_manifest.v1"
SCHEMAS = ("address", "postal")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ruleflow - batch validation of address forms")
    parser.add_argument("--input", type=Path, required=True)
    parser.add_argument(
        "--format",
        type=str,
        default="auto",
        choices=["auto", "csv", "json", "txt"],
        help="Input format: auto (extension), csv, json, txt-delimited",
    )
    parser.add_argument(
        "--schema",
        type=str,
        default="address",
        choices=list(SCHEMAS),
        help="address: number+street, postal: number+street+zip",
    )
    parser.add_argument(
        "--street-policy",
        type=StreetPolicy,
        default=StreetPolicy.CAPITALIZE,
        choices=list(StreetPolicy),
    )
    parser.add_argument("--min-number", type=int, default=AddressPolicy.min_number)
    parser.add_argument("--out", type=Path, default=Path("artifacts"))
    parser.add_argument("--run-label", type=str, default="")
    return parser.parse_args()


def _safe_label(value: str) -> str:
    value = value.strip()
    if not value:
        return "run"
    return "".join(c if c.isalnum() or c in {"-", "_"} else "_" for c in value)


def _run_key(run_id: str, label: str) -> str:
    stamp = datetime.now(UTC).strftime("%Y-%m-%d_%H%M%SZ")
    return f"{stamp}__{_safe_label(label)}__{run_id[:8]}"


def _sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _write_json(path: Path, payload: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _record_id(form: FormData, row_no: int) -> str:
    return form.get("id", "").strip() or str(row_no)


def select_reader(schema: str, policy: AddressPolicy) -> Rule[FormData, Any]:
    rules = build_address_rules(policy)
    if schema == "address":
        return rules.read_address
    if schema == "postal":
        return rules.read_postal_address
    raise ValueError(f"Unknown schema '{schema}'. Use {'|'.join(SCHEMAS)}")


def main() -> int:
    args = parse_args()
    run_id = str(uuid.uuid4())
    run_label = args.run_label.strip() or args.input.stem
    run_key = _run_key(run_id, run_label)

    run_dir = args.out / "runs" / run_key
    run_dir.mkdir(parents=True, exist_ok=True)

    decision_log_path = run_dir / "decision_log.jsonl"
    accepted_path = run_dir / "accepted.csv"
    rejected_path = run_dir / "rejected.csv"
    report_path = run_dir / "validation_report.json"
    manifest_path = run_dir / "run_manifest.json"

    audit = AuditLogger(decision_log_path, run_id)
    total_timer = StageTimer()

    address_policy = AddressPolicy(min_number=args.min_number, street=args.street_policy)

    manifest: dict[str, Any] = {
        "schema": MANIFEST_SCHEMA,
        "runner": {"version": RUNNER_VERSION, "component": "ruleflow.run"},
        "run": {
            "run_id": run_id,
            "run_key": run_key,
            "run_label": run_label,
            "folder": str(run_dir),
            "generated_utc": utc_now_iso(),
            "status": "RUNNING",
        },
        "environment": {
            "python_version": platform.python_version(),
            "platform": f"{platform.system().lower()}-{platform.release()}",
            "argv": sys.argv,
        },
        "input": {
            "path": str(args.input),
            "format": args.format,
            "sha256": _sha256_file(args.input) if args.input.exists() else None,
        },
        "validation": {
            "record_schema": args.schema,
            "address_policy": {**asdict(address_policy), "street": str(address_policy.street)},
        },
        "artifacts": {
            "decision_log": decision_log_path.name,
            "accepted": accepted_path.name,
            "rejected": rejected_path.name,
            "validation_report": report_path.name,
            "run_manifest": manifest_path.name,
        },
    }
    _write_json(manifest_path, manifest)

    audit.log(
        "INFO",
        "run",
        "run_started",
        "Validation run started",
        run_key=run_key,
        input_path=str(args.input),
        input_format=args.format,
        record_schema=args.schema,
    )

    ingest_timer = StageTimer()
    try:
        forms = read_forms(args.input, input_format=args.format)
    except InputFormatError as exc:
        manifest["run"]["status"] = "FAILED"
        manifest["run"]["failed_stage"] = "ingest"
        manifest["run"]["error"] = str(exc)
        manifest["run"]["generated_utc"] = utc_now_iso()
        _write_json(manifest_path, manifest)
        audit.log("ERROR", "ingest", "input_invalid", str(exc), elapsed_ms=ingest_timer.elapsed_ms())
        return 2

    audit.log(
        "INFO",
        "ingest",
        "input_loaded",
        "Input file loaded",
        elapsed_ms=ingest_timer.elapsed_ms(),
        rows=len(forms),
    )

    reader = select_reader(args.schema, address_policy)

    records_by_message = messages_dict()
    accepted_out: list[dict[str, object]] = []
    rejected_out: list[dict[str, object]] = []

    validate_timer = StageTimer()

    for row_no, form in enumerate(forms, start=1):
        record_id = _record_id(form, row_no)

        match reader(form):
            case Success(value=record):
                accepted_out.append({"record_id": record_id, **asdict(record)})
            case Failure(messages=messages):
                for message in dict.fromkeys(messages):
                    records_by_message[message].append(record_id)
                rejected_out.append(
                    {**form, "record_id": record_id, "reject_reasons": " | ".join(messages)}
                )
                audit.log(
                    "WARN",
                    "validate",
                    "record_rejected",
                    "Record failed validation",
                    record_id=record_id,
                    reason=" | ".join(messages),
                )

    audit.log(
        "INFO",
        "validate",
        "validation_completed",
        "Validation completed",
        elapsed_ms=validate_timer.elapsed_ms(),
        total=len(forms),
        accepted=len(accepted_out),
        rejected=len(rejected_out),
    )

    write_csv(accepted_path, accepted_out)
    write_csv(rejected_path, rejected_out)

    report = build_report(
        run_id=run_id,
        schema=args.schema,
        address_policy=address_policy,
        total=len(forms),
        accepted=len(accepted_out),
        rejected=len(rejected_out),
        records_by_message=dict(records_by_message),
    )
    write_report(report_path, report)

    audit.log("INFO", "report", "report_written", "Validation report written", path=report_path.name)

    manifest["counts"] = {
        "total": len(forms),
        "accepted": len(accepted_out),
        "rejected": len(rejected_out),
    }
    manifest["run"]["elapsed_ms_total"] = total_timer.elapsed_ms()
    manifest["run"]["status"] = "SUCCESS"
    manifest["run"]["generated_utc"] = utc_now_iso()
    _write_json(manifest_path, manifest)

    audit.log(
        "INFO",
        "run",
        "run_finished",
        "Validation run finished",
        elapsed_ms=total_timer.elapsed_ms(),
        status=manifest["run"]["status"],
    )

    print(f"run_id={run_id}")
    print(f"run_key={run_key}")
    print(f"run_dir={run_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
