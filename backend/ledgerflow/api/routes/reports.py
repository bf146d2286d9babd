"""Reports: generate a printable report over the current ledger and download it."""
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel

from ledgerflow.api.deps import get_ledger
from ledgerflow.schemas.report import ReportRequest
from ledgerflow.services.ledger import Ledger

router = APIRouter()


class ReportParams(BaseModel):
    kind: str
    start_date: date | datetime
    end_date: date | datetime
    format: str = "pdf"


@router.post("")
async def generate_report(params: ReportParams, ledger: Ledger = Depends(get_ledger)):
    """Snapshot the ledger, build the report and return the file."""
    customers, transactions = await ledger.snapshot()
    result = await ledger.reports.generate(ReportRequest(
        kind=params.kind,
        start_date=params.start_date,
        end_date=params.end_date,
        format=params.format,
        customers=customers,
        transactions=transactions,
    ))
    return FileResponse(result.path, media_type="application/pdf", filename=result.file_name)


@router.get("", response_model=list)
async def list_reports(ledger: Ledger = Depends(get_ledger)):
    return [p.name for p in ledger.reports.list_reports()]


@router.get("/{file_name}")
async def download_report(file_name: str, ledger: Ledger = Depends(get_ledger)):
    path = ledger.reports.find_report(file_name)
    if path is None:
        raise HTTPException(status_code=404, detail="Report not found")
    return FileResponse(path, media_type="application/pdf", filename=path.name)
