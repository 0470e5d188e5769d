from __future__ import annotations

import pytest

from paneltrack.domain.ports import TabularParseError
from paneltrack.domain.reconciliation import BatchRun, BatchState, ReconciliationReport


def _unreadable(payload: bytes, *, filename: str | None = None) -> list[dict[str, object]]:
    raise TabularParseError(f"cannot decode {filename}")


def test_batch_walks_forward() -> None:
    run = BatchRun()

    for state in (
        BatchState.PARSING,
        BatchState.ROW_PROCESSING,
        BatchState.PERSISTING,
        BatchState.REPORTED,
    ):
        run.advance(state)

    assert run.report.ok


def test_batch_cannot_skip_or_leave_final_state() -> None:
    run = BatchRun()

    with pytest.raises(RuntimeError, match="idle -> persisting"):
        run.advance(BatchState.PERSISTING)

    run.fail("boom")
    with pytest.raises(RuntimeError):
        run.advance(BatchState.PARSING)


def test_parse_failure_fails_the_run() -> None:
    run = BatchRun()

    rows = run.parse(_unreadable, b"...", filename="upload.bin")

    assert rows is None
    assert run.report.state is BatchState.FAILED
    assert run.report.errors == ["Unreadable file: cannot decode upload.bin"]


def test_report_to_dict_is_a_copy() -> None:
    report = ReconciliationReport(errors=["Row 2: nope"], failed=1, total=1)

    data = report.to_dict()
    data["errors"].append("extra")

    assert report.errors == ["Row 2: nope"]
    assert data["state"] == "idle"
