from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database import get_db
from src.i18n import get_locale, translate
from src.shared.querystring import parse_nested_query
from src.shared.schemas import MessageResponse, OperationStatus, StatusResponse
from src.clients.exceptions import ClientNotFoundError, ClientWriteError, UnsupportedSortFieldError
from src.clients.schemas import (
    ClientCreatedResponse,
    ClientPayload,
    ClientResponse,
    CompanyScope,
    FilteredListRequest,
    FilteredListResponse,
)
from src.clients.service import ClientService


router = APIRouter(prefix="/clients", tags=["clients"])


def _failed(status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=StatusResponse(status=OperationStatus.FAILED).model_dump(mode="json"),
    )


def clamp_page_length(length: int) -> int:
    """Never serve more rows than configured; a negative length asks for "all" and gets the maximum."""
    limit = settings.DATATABLES_MAX_ROWS_PER_PAGE
    if length < 0:
        return limit
    return min(length, limit)


@router.post(
    "",
    response_model=ClientCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageResponse}},
)
async def create_client(
    payload: ClientPayload,
    locale: str = Depends(get_locale),
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    try:
        client_id = await service.create_client(payload)
    except ClientWriteError:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": translate("response_failed", locale)},
        )
    return ClientCreatedResponse(id=client_id)


@router.get("", response_model=FilteredListResponse)
async def list_clients(
    request: Request,
    locale: str = Depends(get_locale),
    db: AsyncSession = Depends(get_db),
):
    """Data-grid listing; the grid state arrives as a bracketed query string."""
    try:
        grid = FilteredListRequest.model_validate(parse_nested_query(request.query_params.multi_items()))
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))
    return await _filtered_list(grid, locale, db)


@router.post("/filtered", response_model=FilteredListResponse)
async def list_clients_from_body(
    grid: FilteredListRequest,
    locale: str = Depends(get_locale),
    db: AsyncSession = Depends(get_db),
):
    return await _filtered_list(grid, locale, db)


async def _filtered_list(grid: FilteredListRequest, locale: str, db: AsyncSession) -> FilteredListResponse:
    grid = grid.model_copy(update={"length": clamp_page_length(grid.length)})
    service = ClientService(db)
    try:
        return await service.filtered_list(grid)
    except UnsupportedSortFieldError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate("unsupported_sort_field", locale, field=e.field),
        )


@router.get("/{client_id}", response_model=Optional[ClientResponse])
async def get_client(
    client_id: int,
    company_id: int = Query(..., alias="companyId"),
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    return await service.get_client(client_id, company_id=company_id)


@router.put(
    "/{client_id}",
    response_model=StatusResponse,
    responses={404: {"model": StatusResponse}, 500: {"model": StatusResponse}},
)
async def update_client(
    client_id: int,
    payload: ClientPayload,
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    try:
        await service.update_client(client_id, company_id=payload.company_id, payload=payload)
    except ClientNotFoundError:
        return _failed(status.HTTP_404_NOT_FOUND)
    except ClientWriteError:
        return _failed(status.HTTP_500_INTERNAL_SERVER_ERROR)
    return StatusResponse(status=OperationStatus.SUCCESS)


@router.delete(
    "/{client_id}",
    response_model=StatusResponse,
    responses={404: {"model": StatusResponse}, 500: {"model": StatusResponse}},
)
async def delete_client(
    client_id: int,
    scope: CompanyScope,
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    try:
        await service.delete_client(client_id, company_id=scope.company_id)
    except ClientNotFoundError:
        return _failed(status.HTTP_404_NOT_FOUND)
    except ClientWriteError:
        return _failed(status.HTTP_500_INTERNAL_SERVER_ERROR)
    return StatusResponse(status=OperationStatus.SUCCESS)
