"""
Employees 라우트

직원 계정 관리 API (잔액은 Ledger API로만 변경)
"""

from fastapi import APIRouter, Depends, Query

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.errors import AccountNotFoundError, LedgerError
from core.ledger.store import LedgerStore
from core.storage.errors import StoreError
from web.dependencies import get_db, get_db_write
from web.errors import bad_request, ledger_error_to_http, store_error_to_http
from web.models.requests import EmployeeCreateRequest, EmployeeUpdateRequest
from web.models.responses import EmployeeListResponse, EmployeeResponse

router = APIRouter(prefix="/api", tags=["Employees"])


@router.post("/employees", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    request: EmployeeCreateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> EmployeeResponse:
    """직원 등록 (잔액 0으로 시작)"""
    store = LedgerStore(db)
    try:
        account = await store.create_account(
            employee_number=request.employee_number,
            name=request.name,
            user_id=request.user_id,
        )
    except StoreError as e:
        raise store_error_to_http(e)
    except ValueError as e:
        raise bad_request(e)

    return EmployeeResponse(**account.to_dict())


@router.get("/employees", response_model=EmployeeListResponse)
async def list_employees(
    limit: int = Query(default=100, ge=1, le=500, description="조회 제한"),
    offset: int = Query(default=0, ge=0, description="건너뛸 개수"),
    db: SQLiteAdapter = Depends(get_db),
) -> EmployeeListResponse:
    """직원 목록 (사번 순)"""
    accounts = await LedgerStore(db).list_accounts(limit=limit, offset=offset)
    return EmployeeListResponse(
        employees=[EmployeeResponse(**a.to_dict()) for a in accounts],
        limit=limit,
        offset=offset,
    )


@router.get("/employees/{account_id}", response_model=EmployeeResponse)
async def get_employee(
    account_id: int,
    db: SQLiteAdapter = Depends(get_db),
) -> EmployeeResponse:
    """직원 상세"""
    account = await LedgerStore(db).get_account(account_id)
    if account is None:
        raise ledger_error_to_http(AccountNotFoundError(account_id))
    return EmployeeResponse(**account.to_dict())


@router.put("/employees/{account_id}", response_model=EmployeeResponse)
async def update_employee(
    account_id: int,
    request: EmployeeUpdateRequest,
    db: SQLiteAdapter = Depends(get_db_write),
) -> EmployeeResponse:
    """이름/사번 수정"""
    if request.employee_number is not None and not request.employee_number.strip():
        raise bad_request(ValueError("employee_number는 비어 있을 수 없습니다"))

    try:
        account = await LedgerStore(db).update_profile(
            account_id,
            name=request.name,
            employee_number=request.employee_number,
        )
    except LedgerError as e:
        raise ledger_error_to_http(e)
    except StoreError as e:
        raise store_error_to_http(e)

    return EmployeeResponse(**account.to_dict())


@router.delete("/employees/{account_id}", status_code=204)
async def delete_employee(
    account_id: int,
    db: SQLiteAdapter = Depends(get_db_write),
) -> None:
    """직원 삭제 (거래 이력/주문이 없는 경우만)"""
    try:
        await LedgerStore(db).delete_account(account_id)
    except LedgerError as e:
        raise ledger_error_to_http(e)
    except StoreError as e:
        raise store_error_to_http(e)
