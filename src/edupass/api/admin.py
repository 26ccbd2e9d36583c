"""Operational endpoints: liveness and readiness."""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .. import __version__
from ..ledger import CreditLedger
from ..store import SqliteStore, integrity_report
from ..utils.invariants import run_all_checks
from .deps import get_ledger

router = APIRouter(tags=["admin"])


@router.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def ready(ledger: CreditLedger = Depends(get_ledger)):
    if isinstance(ledger.store, SqliteStore):
        results = await run_in_threadpool(integrity_report, ledger.store.path)
    else:
        results = await run_in_threadpool(run_all_checks, ledger.store)

    failed = [{"check": r.name, "detail": r.detail} for r in results if not r.passed]
    if failed:
        return JSONResponse(status_code=503, content={"status": "not_ready", "failed": failed})
    return {"status": "ready", "checks": len(results)}
