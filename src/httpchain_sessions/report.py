"""Session reports.

Report data (summary statistics, timing analysis and per-request entries) is
gathered from a session's log into plain dataclasses first; rendering turns
that structure into a self-contained HTML document and writing puts it on
disk. Chain container entries are not rendered on their own: their steps are
already logged individually and appear as independent entries.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, Environment, select_autoescape

from .constants import REPORT_FILE_PREFIX, REPORT_FILE_SUFFIX, LogEntryType
from .exceptions import ReportError
from .models import ChainLogEntry, RequestLogEntry, Session, to_ms, utcnow
from .report_template import HTML_TEMPLATE
from .validation import is_passed

logger = logging.getLogger(__name__)

_env = Environment(
    loader=BaseLoader(),
    autoescape=select_autoescape(enabled_extensions=("html", "xml"), default_for_string=True),
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")

ANY = "(any)"


@dataclass
class ReportSummary:
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    success_rate: float = 0
    validations_passed: int = 0
    validations_failed: int = 0
    validation_rate: float = 0
    chain_requests: int = 0
    single_requests: int = 0
    chain_count: int = 0


@dataclass
class TimedRequest:
    number: int
    method: str
    url: str
    timestamp: datetime
    offset_ms: int
    interval_ms: int


@dataclass
class TimingAnalysis:
    items: list[TimedRequest]
    average_interval_ms: int
    session_duration_ms: int


@dataclass
class Comparison:
    dimension: str
    expected: str
    actual: str
    passed: bool


@dataclass
class ReportEntry:
    number: int
    kind: str
    name: str | None
    method: str
    url: str
    status: int
    status_text: str
    content_type: str
    passed: bool
    reason: str
    timestamp: datetime
    request_headers: str
    request_body: str
    response_body: str
    extracted: str | None
    comparisons: list[Comparison] = field(default_factory=list)


@dataclass
class SessionReport:
    session_id: str
    status: str
    start_time: datetime
    end_time: datetime | None
    execution_time_ms: int | None
    log_count: int
    summary: ReportSummary
    timing: TimingAnalysis | None
    entries: list[ReportEntry]
    generated_at: datetime = field(default_factory=utcnow)


def _rate(part: int, total: int) -> float:
    return round(part / total, 2) if total else 0


def _dump(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def request_entries(session: Session) -> list[RequestLogEntry]:
    """Log entries that carry a request and its response, in log order."""
    return [entry for entry in session.logs if isinstance(entry, RequestLogEntry)]


def summarize(session: Session) -> ReportSummary:
    entries = request_entries(session)
    summary = ReportSummary(total_requests=len(entries))

    for entry in entries:
        if is_passed(entry.validation, entry.body_validation):
            summary.successful_requests += 1

        checks = (entry.validation.status, entry.validation.content_type, entry.body_validation.matched)
        summary.validations_passed += sum(checks)
        summary.validations_failed += len(checks) - sum(checks)

        if entry.type == LogEntryType.REQUEST:
            summary.chain_requests += 1
        else:
            summary.single_requests += 1

    summary.failed_requests = summary.total_requests - summary.successful_requests
    summary.success_rate = _rate(summary.successful_requests, summary.total_requests)
    summary.validation_rate = _rate(summary.validations_passed, summary.validations_passed + summary.validations_failed)
    summary.chain_count = sum(1 for entry in session.logs if isinstance(entry, ChainLogEntry))
    return summary


def analyze_timing(session: Session) -> TimingAnalysis | None:
    """Offsets and intervals of the session's requests, or None when there are none."""
    numbered = sorted(enumerate(request_entries(session), start=1), key=lambda pair: pair[1].timestamp)
    if not numbered:
        return None

    items: list[TimedRequest] = []
    previous: datetime | None = None
    for number, entry in numbered:
        items.append(
            TimedRequest(
                number=number,
                method=entry.request.method.value,
                url=entry.request.url,
                timestamp=entry.timestamp,
                offset_ms=to_ms(entry.timestamp - session.start_time),
                interval_ms=to_ms(entry.timestamp - previous) if previous is not None else 0,
            )
        )
        previous = entry.timestamp

    intervals = [item.interval_ms for item in items[1:]]
    return TimingAnalysis(
        items=items,
        average_interval_ms=math.floor(sum(intervals) / len(intervals) + 0.5) if intervals else 0,
        session_duration_ms=to_ms(items[-1].timestamp - items[0].timestamp),
    )


def compare(entry: RequestLogEntry) -> list[Comparison]:
    """Expected against actual, one row per validation dimension."""
    expect = entry.expectations
    response = entry.response

    if expect is not None and expect.body_regex:
        expected_body = f"matches /{expect.body_regex}/"
    elif expect is not None and expect.has_body:
        expected_body = _dump(expect.body) if expect.body is not None else "null"
    else:
        expected_body = ANY

    return [
        Comparison(
            dimension="Status",
            expected=str(expect.status) if expect is not None and expect.status is not None else ANY,
            actual=str(response.status),
            passed=entry.validation.status,
        ),
        Comparison(
            dimension="Content-Type",
            expected=expect.content_type if expect is not None and expect.content_type else ANY,
            actual=response.content_type,
            passed=entry.validation.content_type,
        ),
        Comparison(
            dimension="Body",
            expected=expected_body,
            actual=_dump(response.body),
            passed=entry.body_validation.matched,
        ),
    ]


def build_entry(number: int, entry: RequestLogEntry) -> ReportEntry:
    return ReportEntry(
        number=number,
        kind="chain-step" if entry.type == LogEntryType.REQUEST else "single",
        name=entry.name,
        method=entry.request.method.value,
        url=entry.request.url,
        status=entry.response.status,
        status_text=entry.response.status_text,
        content_type=entry.response.content_type,
        passed=is_passed(entry.validation, entry.body_validation),
        reason=entry.body_validation.reason,
        timestamp=entry.timestamp,
        request_headers=_dump(entry.request.headers or {}),
        request_body=_dump(entry.request.data),
        response_body=_dump(entry.response.body),
        extracted=_dump(entry.extracted) if entry.extracted else None,
        comparisons=compare(entry),
    )


def build_report(session: Session) -> SessionReport:
    return SessionReport(
        session_id=session.session_id,
        status=session.status.value,
        start_time=session.start_time,
        end_time=session.end_time,
        execution_time_ms=session.execution_time_ms,
        log_count=len(session.logs),
        summary=summarize(session),
        timing=analyze_timing(session),
        entries=[build_entry(number, entry) for number, entry in enumerate(request_entries(session), start=1)],
    )


def render_html(report: SessionReport) -> str:
    return _env.from_string(HTML_TEMPLATE).render(report=report)


def report_filename(session_id: str) -> str:
    return f"{REPORT_FILE_PREFIX}{_UNSAFE_FILENAME_CHARS.sub('_', session_id)}{REPORT_FILE_SUFFIX}"


def write_report(session: Session, reports_dir: Path) -> Path:
    """Render the session report and write it as HTML.

    Args:
        session: Session to report on.
        reports_dir: Directory to write the report to (created if missing).

    Returns:
        Absolute path to the written report file.

    Raises:
        ReportError: If the report cannot be written.
    """
    html = render_html(build_report(session))
    filepath = (reports_dir / report_filename(session.session_id)).resolve()

    try:
        reports_dir.mkdir(parents=True, exist_ok=True)
        filepath.write_text(html, encoding="utf-8")
    except OSError as e:
        raise ReportError(f"Cannot write report '{filepath}': {str(e)}") from None

    logger.info(f"Report for session {session.session_id} written to {filepath}")
    return filepath
