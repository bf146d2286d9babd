"""
Report generation over a ledger snapshot.

    build(request)     -> ReportData    filter + aggregate, no rendering
    generate(request)  -> ReportResult  build, render, publish the file

Rendering runs in a worker thread. The rendered bytes are written to a
temporary file in the report directory and renamed into place only once
complete, so a cancelled or failed generation never leaves a partial
report behind.
"""
import asyncio
import logging
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ledgerflow.core.audit import AuditLog
from ledgerflow.core.exceptions import UnsupportedFormat, ValidationError
from ledgerflow.schemas.business import BusinessProfile
from ledgerflow.schemas.common import parse_input
from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.report import (
    OutstandingRow,
    ReportData,
    ReportKind,
    ReportRequest,
    ReportResult,
    SummaryStats,
    TransactionRow,
)
from ledgerflow.schemas.transaction import Transaction
from ledgerflow.services.business_service import BusinessAggregator
from ledgerflow.utils.dates import range_end, range_start

logger = logging.getLogger(__name__)

SUMMARY_TRANSACTION_LIMIT = 10


def report_file_name(kind: ReportKind, on: date, extension: str = "pdf") -> str:
    return f"ledgerflow-{kind.value}-report-{on.strftime('%Y-%m-%d')}.{extension}"


def outstanding_rows(customers: List[Customer]) -> List[OutstandingRow]:
    """Non-zero balances, largest absolute amount first. Ties keep their input order."""
    outstanding = sorted((c for c in customers if c.balance != 0), key=lambda c: abs(c.balance), reverse=True)
    return [
        OutstandingRow(
            name=c.name,
            phone=c.phone,
            amount=abs(c.balance),
            status="Will Give" if c.balance > 0 else "Will Get",
        )
        for c in outstanding
    ]


def transaction_rows(transactions: List[Transaction], customers: List[Customer]) -> List[TransactionRow]:
    names: Dict[int, str] = {c.id: c.name for c in customers}
    return [
        TransactionRow(
            date=t.date,
            customer_name=names.get(t.customer_id, "Unknown"),
            description=t.description,
            type=t.type,
            amount=t.amount,
            running_balance=t.running_balance,
        )
        for t in transactions
    ]


class ReportGenerator:
    def __init__(
        self,
        renderer,
        output_dir: Path,
        today: Callable[[], date] = date.today,
        latency: float = 0.0,
        profile: Callable[[], BusinessProfile] = BusinessProfile,
    ):
        self._renderer = renderer
        self._profile = profile
        self._output_dir = Path(output_dir)
        self._today = today
        self._latency = latency

    @property
    def supported_format(self) -> str:
        return self._renderer.format

    def build(self, request: Any) -> ReportData:
        request = parse_input(ReportRequest, request)
        try:
            kind = ReportKind(request.kind)
        except ValueError:
            raise ValidationError(
                f"Unknown report kind '{request.kind}' "
                f"(expected one of: {', '.join(k.value for k in ReportKind)})",
                field="kind",
            )

        start = range_start(request.start_date)
        end = range_end(request.end_date)
        if start > end:
            raise ValidationError("start_date must not be after end_date", field="start_date")

        in_range = [t for t in request.transactions if start <= t.date <= end]
        data = ReportData(
            kind=kind,
            business_name=self._profile().name,
            start=start,
            end=end,
            generated_on=self._today(),
        )

        if kind == ReportKind.OUTSTANDING:
            data.outstanding = outstanding_rows(request.customers)
        elif kind == ReportKind.SUMMARY:
            totals = BusinessAggregator.get_totals(request.customers)
            data.summary = SummaryStats(
                customer_count=totals.customer_count,
                outstanding_count=BusinessAggregator.outstanding_count(request.customers),
                total_to_receive=totals.total_to_receive,
                total_to_pay=totals.total_to_pay,
                net_balance=totals.net_balance,
            )
            # caller decides the order; the summary shows the first few as given
            data.transactions = transaction_rows(in_range[:SUMMARY_TRANSACTION_LIMIT], request.customers)
        else:
            data.transactions = transaction_rows(in_range, request.customers)
        return data

    async def generate(self, request: Any) -> ReportResult:
        """
        Build and render a report file.

        Raises:
            UnsupportedFormat: format is not the renderer's
            ValidationError: unknown kind, inverted date range, malformed snapshot
        """
        request = parse_input(ReportRequest, request)
        requested = (request.format or "").lower()
        if requested != self.supported_format:
            raise UnsupportedFormat(request.format, self.supported_format)

        data = self.build(request)
        file_name = report_file_name(data.kind, data.generated_on, self.supported_format)

        if self._latency:
            await asyncio.sleep(self._latency)
        content = await asyncio.to_thread(self._renderer.render, data)

        path = self._publish(file_name, content)
        logger.info(f"Report {file_name} written ({len(content)} bytes)")
        AuditLog.log_report(data.kind.value, file_name, data.row_count)
        return ReportResult(file_name=file_name, path=path, data=data)

    def _publish(self, file_name: str, content: bytes) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        target = self._output_dir / file_name
        fd, tmp_name = tempfile.mkstemp(dir=self._output_dir, prefix=".partial-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target

    def list_reports(self) -> List[Path]:
        if not self._output_dir.exists():
            return []
        return sorted(p for p in self._output_dir.iterdir() if p.is_file() and not p.name.startswith(".partial-"))

    def find_report(self, file_name: str) -> Optional[Path]:
        for path in self.list_reports():
            if path.name == file_name:
                return path
        return None
