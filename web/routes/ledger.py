"""
Ledger API 라우트

입금 / 차감 / 거래 이력 / 잔액 대사
"""

from fastapi import APIRouter, Depends, Query

from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from core.ledger.models import ChargeResult, DepositResult
from core.ledger.types import TransactionType
from web.dependencies import get_engine, get_read_engine
from web.errors import failure_to_http, ledger_error_to_http
from web.models.requests import ChargeRequest, DepositByEmployeeNumberRequest, DepositRequest
from web.models.responses import (
    ChargeResponse,
    DepositHistoryResponse,
    DepositResponse,
    HistoryResponse,
    ReconciliationResponse,
    TransactionRecordResponse,
)
from web.services.ledger_service import LedgerService

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])


def _deposit_response(result: DepositResult) -> DepositResponse:
    return DepositResponse(
        account_id=result.account_id,
        new_balance=str(result.new_balance),
        monthly_total=str(result.monthly_total),
        applied_bonus=str(result.applied_bonus),
        records=[TransactionRecordResponse(**r.to_dict()) for r in result.records],
    )


def _charge_response(result: ChargeResult) -> ChargeResponse:
    return ChargeResponse(
        account_id=result.account_id,
        new_balance=str(result.new_balance),
        record=TransactionRecordResponse(**result.record.to_dict()),
    )


@router.post("/deposit", response_model=DepositResponse)
async def deposit_by_employee_number(
    request: DepositByEmployeeNumberRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> DepositResponse:
    """사번 기준 입금

    월 누적 입금액이 250 단위를 넘을 때마다 500 보너스 지급.
    """
    result = await engine.deposit_by_employee_number(
        request.employee_number,
        request.amount,
        occurred_at=request.occurred_at,
    )
    if not result.ok:
        raise failure_to_http(result.error)
    return _deposit_response(result.value)


@router.post("/{account_id}/deposit", response_model=DepositResponse)
async def deposit(
    account_id: int,
    request: DepositRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> DepositResponse:
    """입금"""
    result = await engine.deposit(account_id, request.amount, occurred_at=request.occurred_at)
    if not result.ok:
        raise failure_to_http(result.error)
    return _deposit_response(result.value)


@router.post("/{account_id}/charge", response_model=ChargeResponse)
async def charge(
    account_id: int,
    request: ChargeRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> ChargeResponse:
    """차감

    잔액 부족 시 409 (detail.details에 available, required)
    """
    result = await engine.charge(account_id, request.amount, reason=request.reason)
    if not result.ok:
        raise failure_to_http(result.error)
    return _charge_response(result.value)


@router.get("/{account_id}/history", response_model=HistoryResponse)
async def get_history(
    account_id: int,
    order: str = Query(default="asc", pattern="^(asc|desc)$", description="정렬 순서"),
    limit: int | None = Query(default=None, ge=1, le=1000, description="조회 제한"),
    offset: int = Query(default=0, ge=0, description="건너뛸 개수"),
    transaction_type: TransactionType | None = Query(
        default=None,
        alias="type",
        description="거래 유형 필터 (Deposit/Bonus/Charge)",
    ),
    engine: LedgerEngine = Depends(get_read_engine),
) -> HistoryResponse:
    """거래 이력 조회"""
    result = await engine.get_history(
        account_id,
        newest_first=order == "desc",
        limit=limit,
        offset=offset,
        transaction_types=(transaction_type,) if transaction_type else None,
    )
    if not result.ok:
        raise failure_to_http(result.error)

    return HistoryResponse(
        account_id=account_id,
        records=[TransactionRecordResponse(**r.to_dict()) for r in result.value],
        order=order,
        limit=limit,
        offset=offset,
    )


@router.get("/{account_id}/deposits", response_model=DepositHistoryResponse)
async def get_deposit_history(
    account_id: int,
    engine: LedgerEngine = Depends(get_read_engine),
) -> DepositHistoryResponse:
    """입금 이력 (Deposit/Bonus 최신순 + 이번 달 누적액)"""
    try:
        data = await LedgerService(engine).get_deposit_history(account_id)
    except LedgerError as e:
        raise ledger_error_to_http(e)
    return DepositHistoryResponse(**data)


@router.get("/{account_id}/reconcile", response_model=ReconciliationResponse)
async def reconcile(
    account_id: int,
    engine: LedgerEngine = Depends(get_read_engine),
) -> ReconciliationResponse:
    """잔액 대사 (balance == 이력 합계)"""
    result = await engine.reconcile(account_id)
    if not result.ok:
        raise failure_to_http(result.error)

    report = result.value
    return ReconciliationResponse(
        account_id=report.account_id,
        balance=str(report.balance),
        history_total=str(report.history_total),
        record_count=report.record_count,
        is_balanced=report.is_balanced,
    )
