import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.database import run_in_transaction
from src.clients.exceptions import ClientNotFoundError, ClientWriteError
from src.clients.filters import order_clause, search_filter
from src.clients.models import Client, ClientDetails
from src.clients.schemas import (
    ClientListRow,
    ClientPayload,
    FilteredListRequest,
    FilteredListResponse,
)

logger = logging.getLogger(__name__)

LIST_COLUMNS = (
    Client.id,
    Client.legal_type,
    Client.contact_name,
    Client.firstname,
    Client.lastname,
    Client.patronymic,
    Client.created_at,
    ClientDetails.mobilephone_code,
    ClientDetails.mobilephone,
)


class ClientService:
    """Reads and writes clients and their details, always within one company."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_client(self, payload: ClientPayload) -> int:
        async def work(session: AsyncSession) -> int:
            client = Client(**payload.client_fields())
            client.client_details = ClientDetails(**payload.details_fields())
            session.add(client)
            await session.flush()
            return client.id

        try:
            client_id = await run_in_transaction(self.db, work)
        except SQLAlchemyError as e:
            logger.error("Failed to create client for company %s: %s", payload.company_id, e)
            raise ClientWriteError(str(e)) from e
        logger.info("Created client %s for company %s", client_id, payload.company_id)
        return client_id

    async def update_client(self, client_id: int, *, company_id: int, payload: ClientPayload) -> None:
        """Overwrite a client and its details. Rows of other companies are never touched."""
        client_fields = payload.client_fields()
        client_fields["company_id"] = company_id
        details_fields = payload.details_fields()

        async def work(session: AsyncSession) -> None:
            now = datetime.utcnow()
            result = await session.execute(
                update(Client)
                .where(Client.id == client_id, Client.company_id == company_id)
                .values(**client_fields, updated_at=now)
            )
            if result.rowcount == 0:
                raise ClientNotFoundError(client_id, company_id)

            result = await session.execute(
                update(ClientDetails)
                .where(ClientDetails.client_id == client_id)
                .values(**details_fields, updated_at=now)
            )
            if result.rowcount == 0:
                await session.execute(insert(ClientDetails).values(client_id=client_id, **details_fields))

        try:
            await run_in_transaction(self.db, work)
        except SQLAlchemyError as e:
            logger.error("Failed to update client %s: %s", client_id, e)
            raise ClientWriteError(str(e)) from e
        logger.info("Updated client %s for company %s", client_id, company_id)

    async def delete_client(self, client_id: int, *, company_id: int) -> None:
        """Delete a client together with its details row."""
        async def work(session: AsyncSession) -> None:
            exists = await session.execute(
                select(Client.id).where(Client.id == client_id, Client.company_id == company_id)
            )
            if exists.scalar_one_or_none() is None:
                raise ClientNotFoundError(client_id, company_id)
            await session.execute(delete(ClientDetails).where(ClientDetails.client_id == client_id))
            await session.execute(
                delete(Client).where(Client.id == client_id, Client.company_id == company_id)
            )

        try:
            await run_in_transaction(self.db, work)
        except SQLAlchemyError as e:
            logger.error("Failed to delete client %s: %s", client_id, e)
            raise ClientWriteError(str(e)) from e
        logger.info("Deleted client %s for company %s", client_id, company_id)

    async def get_client(self, client_id: int, *, company_id: int) -> Optional[Client]:
        query = (
            select(Client)
            .options(selectinload(Client.client_details))
            .execution_options(populate_existing=True)
            .where(Client.id == client_id, Client.company_id == company_id)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def filtered_list(self, request: FilteredListRequest) -> FilteredListResponse:
        """One page of the company's clients for the data grid.

        ``request.length`` is expected to be clamped by the caller already.
        """
        company_id = request.company_id
        joined = (
            select(*LIST_COLUMNS)
            .select_from(Client)
            .join(ClientDetails, ClientDetails.client_id == Client.id)
            .where(Client.company_id == company_id)
        )
        filtered_count = (
            select(func.count(Client.id))
            .select_from(Client)
            .join(ClientDetails, ClientDetails.client_id == Client.id)
            .where(Client.company_id == company_id)
        )
        total_count = select(func.count(Client.id)).where(Client.company_id == company_id)

        ordering = order_clause(request.columns, request.order)
        if ordering is not None:
            joined = joined.order_by(ordering)
        joined = joined.order_by(Client.id)

        search_value = request.search_value
        if search_value is not None:
            condition = search_filter(search_value)
            joined = joined.where(condition)
            filtered_count = filtered_count.where(condition)

        joined = joined.offset(request.start).limit(request.length)

        records_total = (await self.db.execute(total_count)).scalar_one()
        records_filtered = (await self.db.execute(filtered_count)).scalar_one()
        rows = (await self.db.execute(joined)).mappings().all()

        return FilteredListResponse(
            draw=request.draw,
            records_total=records_total,
            records_filtered=records_filtered,
            data=[ClientListRow.model_validate(dict(row)) for row in rows],
        )
