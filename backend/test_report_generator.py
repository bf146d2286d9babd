"""ReportGenerator: filtering, ordering, file naming, formats and cancellation."""
import asyncio
import time
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from ledgerflow.core.exceptions import UnsupportedFormat, ValidationError
from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.report import ReportKind, ReportRequest
from ledgerflow.schemas.transaction import Transaction
from ledgerflow.services.pdf_service import PdfReportRenderer
from ledgerflow.services.report_service import ReportGenerator, report_file_name

NOW = datetime(2024, 2, 1, tzinfo=timezone.utc)
TODAY = date(2024, 2, 15)


def customer(cid, balance, name=None) -> Customer:
    return Customer(
        id=cid, name=name or f"C{cid}", phone=f"90000{cid:05d}",
        balance=Decimal(str(balance)), created_at=NOW, last_transaction=NOW,
    )


def txn(tid, cid, when, amount=10, kind="credit", running=10) -> Transaction:
    return Transaction(
        id=tid, customer_id=cid, type=kind, amount=Decimal(str(amount)),
        description=f"t{tid}", date=when, running_balance=Decimal(str(running)),
    )


class SlowRenderer:
    format = "pdf"

    def render(self, data):
        time.sleep(0.5)
        return b"%PDF-slow"


@pytest.fixture
def generator(report_dir):
    return ReportGenerator(PdfReportRenderer(), output_dir=report_dir, today=lambda: TODAY)


def request(kind, customers=(), transactions=(), **kwargs):
    params = dict(
        kind=kind,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        customers=list(customers),
        transactions=list(transactions),
    )
    params.update(kwargs)
    return ReportRequest(**params)


def test_outstanding_excludes_settled_and_orders_by_absolute_balance(generator):
    customers = [customer(1, 500, "Asha"), customer(2, -800, "Bala"), customer(3, 0, "Chitra")]

    data = generator.build(request("outstanding", customers))

    assert [r.name for r in data.outstanding] == ["Bala", "Asha"]
    assert [r.amount for r in data.outstanding] == [Decimal("800"), Decimal("500")]
    assert [r.status for r in data.outstanding] == ["Will Get", "Will Give"]
    assert data.outstanding[0].phone == customers[1].phone


def test_outstanding_ties_keep_input_order(generator):
    customers = [customer(1, 300), customer(2, -300), customer(3, 300), customer(4, 900)]

    data = generator.build(request("outstanding", customers))

    assert [r.name for r in data.outstanding] == ["C4", "C1", "C2", "C3"]


def test_transactions_filtered_inclusively_and_kept_in_given_order(generator):
    transactions = [
        txn(1, 1, datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc)),
        txn(2, 1, datetime(2023, 12, 31, 23, 59, tzinfo=timezone.utc)),
        txn(3, 2, datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)),
        txn(4, 9, datetime(2024, 1, 15, tzinfo=timezone.utc)),
        txn(5, 1, datetime(2024, 2, 1, tzinfo=timezone.utc)),
    ]

    data = generator.build(request("transactions", [customer(1, 0), customer(2, 0)], transactions))

    assert [r.description for r in data.transactions] == ["t1", "t3", "t4"]
    assert [r.customer_name for r in data.transactions] == ["C1", "C2", "Unknown"]


def test_datetime_bounds_are_used_as_given(generator):
    transactions = [
        txn(1, 1, datetime(2024, 1, 10, 9, tzinfo=timezone.utc)),
        txn(2, 1, datetime(2024, 1, 10, 18, tzinfo=timezone.utc)),
    ]

    data = generator.build(request(
        "transactions", [customer(1, 0)], transactions,
        start_date=datetime(2024, 1, 10, 12, tzinfo=timezone.utc),
        end_date=datetime(2024, 1, 10, 18, tzinfo=timezone.utc),
    ))

    assert [r.description for r in data.transactions] == ["t2"]


def test_summary_totals_and_first_ten_transactions(generator):
    customers = [customer(1, 500), customer(2, -200), customer(3, 0)]
    transactions = [
        txn(i, 1, datetime(2024, 1, 2, tzinfo=timezone.utc) + timedelta(hours=i)) for i in range(1, 16)
    ]

    data = generator.build(request("summary", customers, transactions))

    assert data.summary.total_to_receive == Decimal("500")
    assert data.summary.total_to_pay == Decimal("200")
    assert data.summary.net_balance == Decimal("300")
    assert data.summary.outstanding_count == 2
    assert data.summary.customer_count == 3
    assert data.summary.net_status == "Positive"
    assert [r.description for r in data.transactions] == [f"t{i}" for i in range(1, 11)]


def test_unknown_kind_and_inverted_range(generator):
    with pytest.raises(ValidationError):
        generator.build(request("ageing"))
    with pytest.raises(ValidationError):
        generator.build(request("summary", start_date=date(2024, 2, 1), end_date=date(2024, 1, 1)))


def test_file_name_is_derived_from_kind_and_date():
    assert report_file_name(ReportKind.OUTSTANDING, date(2024, 3, 5)) == "ledgerflow-outstanding-report-2024-03-05.pdf"


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", ["outstanding", "summary", "transactions"])
async def test_generate_writes_pdf(generator, report_dir, kind):
    customers = [customer(1, 500, "Asha"), customer(2, -800, "Bala")]
    transactions = [txn(1, 1, datetime(2024, 1, 5, tzinfo=timezone.utc), amount=500, running=500)]

    result = await generator.generate(request(kind, customers, transactions))

    assert result.file_name == f"ledgerflow-{kind}-report-2024-02-15.pdf"
    assert result.path == report_dir / result.file_name
    assert result.path.read_bytes().startswith(b"%PDF")
    assert generator.list_reports() == [result.path]


@pytest.mark.asyncio
async def test_generate_empty_reports(generator):
    for kind in ("outstanding", "transactions", "summary"):
        result = await generator.generate(request(kind))
        assert result.path.exists()
        assert result.data.row_count == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("fmt", ["csv", "xlsx", ""])
async def test_unsupported_format(generator, report_dir, fmt):
    with pytest.raises(UnsupportedFormat):
        await generator.generate(request("summary", format=fmt))
    assert not report_dir.exists() or list(report_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_format_is_case_insensitive(generator):
    result = await generator.generate(request("summary", format="PDF"))
    assert result.file_name.endswith(".pdf")


@pytest.mark.asyncio
async def test_cancelled_generation_leaves_no_file(report_dir):
    generator = ReportGenerator(SlowRenderer(), output_dir=report_dir, today=lambda: TODAY)

    task = asyncio.create_task(generator.generate(request("summary")))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    # let the abandoned render thread finish; its result must still be discarded
    await asyncio.sleep(0.6)
    assert not report_dir.exists() or list(report_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_report_title_follows_profile_updates(ledger):
    ledger.business.update_business_data({"name": "Ravi Stores"})

    customers, transactions = await ledger.snapshot()
    data = ledger.reports.build(request("summary", customers, transactions))

    assert data.business_name == "Ravi Stores"


def test_default_business_name(generator):
    assert generator.build(request("summary")).business_name == "LedgerFlow"
