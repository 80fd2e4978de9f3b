from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient

from src.config import settings
from src.clients.models import LegalType

COLUMNS = ["name", "created_at", "mobilephone"]


def grid_params(company_id=5, order=None, search=None, start=0, length=10, draw=1, columns=COLUMNS):
    """Query string the way a data-grid widget serializes its state."""
    params = {
        "userId": 1,
        "companyId": company_id,
        "start": start,
        "length": length,
        "draw": draw,
    }
    for i, field in enumerate(columns):
        params[f"columns[{i}][data]"] = field
        params[f"columns[{i}][orderable]"] = "true"
    for i, (column, direction) in enumerate(order or []):
        params[f"order[{i}][column]"] = column
        params[f"order[{i}][dir]"] = direction
    if search is not None:
        params["search[value]"] = search
        params["search[regex]"] = "false"
    return params


@pytest_asyncio.fixture
async def seeded(make_client):
    """Three clients for company 5, one for company 6."""
    petrov = await make_client(
        5, firstname="Ivan", lastname="Petrov", patronymic="Sergeevich",
        mobilephone_code="+7", mobilephone="9161234567",
        created_at=datetime(2024, 3, 15, 9, 30),
    )
    romashka = await make_client(
        5, legal_type=LegalType.LEGAL, contact_name="Romashka LLC",
        mobilephone_code="+7", mobilephone="4951112233",
        created_at=datetime(2024, 1, 2, 12, 0),
    )
    smirnova = await make_client(
        5, firstname="Anna", lastname="Smirnova",
        mobilephone_code="+44", mobilephone="7700900123",
        created_at=datetime(2024, 6, 30, 18, 45),
    )
    await make_client(
        6, firstname="Ivan", lastname="Ivanov",
        mobilephone_code="+7", mobilephone="9160000000",
        created_at=datetime(2024, 3, 15, 10, 0),
    )
    return {"petrov": petrov.id, "romashka": romashka.id, "smirnova": smirnova.id}


def ids(response) -> list:
    return [row["id"] for row in response.json()["data"]]


@pytest.mark.asyncio
async def test_list_without_order_or_search(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(draw=3))
    assert response.status_code == 200
    body = response.json()
    assert body["draw"] == 3
    assert body["recordsTotal"] == 3
    assert body["recordsFiltered"] == 3
    assert ids(response) == [seeded["petrov"], seeded["romashka"], seeded["smirnova"]]


@pytest.mark.asyncio
async def test_list_projects_grid_columns(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params())
    row = response.json()["data"][0]
    assert set(row) == {
        "id", "legal_type", "contact_name", "firstname", "lastname",
        "patronymic", "created_at", "mobilephone_code", "mobilephone",
    }
    assert row["lastname"] == "Petrov"
    assert row["mobilephone_code"] == "+7"
    assert row["contact_name"] is None


@pytest.mark.asyncio
async def test_list_sorted_by_created_at_desc(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(order=[(1, "desc")]))
    assert ids(response) == [seeded["smirnova"], seeded["petrov"], seeded["romashka"]]


@pytest.mark.asyncio
async def test_list_sorted_by_name(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(order=[(0, "asc")]))
    assert ids(response) == [seeded["petrov"], seeded["romashka"], seeded["smirnova"]]

    response = await async_client.get("/v1/clients", params=grid_params(order=[(0, "desc")]))
    assert ids(response) == [seeded["smirnova"], seeded["romashka"], seeded["petrov"]]


@pytest.mark.asyncio
async def test_list_sorted_by_mobilephone(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(order=[(2, "asc")]))
    # "+44..." < "+74..." < "+79..."
    assert ids(response) == [seeded["smirnova"], seeded["romashka"], seeded["petrov"]]


@pytest.mark.asyncio
async def test_list_only_first_order_entry_counts(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(order=[(1, "asc"), (0, "desc")]))
    assert ids(response) == [seeded["romashka"], seeded["petrov"], seeded["smirnova"]]


@pytest.mark.asyncio
async def test_list_order_index_outside_columns_is_ignored(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(order=[(7, "desc")]))
    assert response.status_code == 200
    assert ids(response) == [seeded["petrov"], seeded["romashka"], seeded["smirnova"]]


@pytest.mark.asyncio
async def test_list_rejects_unsupported_sort_field(async_client: AsyncClient, seeded):
    params = grid_params(columns=["name", "telegram"], order=[(1, "asc")])
    response = await async_client.get("/v1/clients", params=params)
    assert response.status_code == 400
    assert response.json()["detail"] == "Sorting by 'telegram' is not supported"


@pytest.mark.asyncio
async def test_list_rejects_unknown_direction(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(order=[(0, "sideways")]))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_search_by_name_is_case_insensitive(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(search="ivan", draw=3))
    body = response.json()
    assert body["draw"] == 3
    assert body["recordsTotal"] == 3
    assert body["recordsFiltered"] == 1
    assert ids(response) == [seeded["petrov"]]


@pytest.mark.asyncio
async def test_search_by_legal_entity_name(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(search="ROMASHKA"))
    assert ids(response) == [seeded["romashka"]]


@pytest.mark.asyncio
async def test_search_by_phone(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(search="+7916"))
    assert ids(response) == [seeded["petrov"]]


@pytest.mark.asyncio
async def test_search_by_creation_date(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(search="15.03.2024"))
    assert ids(response) == [seeded["petrov"]]

    response = await async_client.get("/v1/clients", params=grid_params(search=".2024"))
    assert response.json()["recordsFiltered"] == 3


@pytest.mark.asyncio
async def test_empty_search_value_matches_everything(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(search=""))
    assert response.json()["recordsFiltered"] == 3


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(search="%"))
    body = response.json()
    assert body["recordsFiltered"] == 0
    assert body["data"] == []


@pytest.mark.asyncio
async def test_pagination(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(order=[(1, "asc")], start=1, length=1))
    body = response.json()
    assert body["recordsTotal"] == 3
    assert body["recordsFiltered"] == 3
    assert ids(response) == [seeded["petrov"]]


@pytest.mark.asyncio
async def test_length_is_clamped_to_configured_maximum(async_client: AsyncClient, seeded, monkeypatch):
    monkeypatch.setattr(settings, "DATATABLES_MAX_ROWS_PER_PAGE", 2)

    response = await async_client.get("/v1/clients", params=grid_params(length=500))
    assert len(response.json()["data"]) == 2

    response = await async_client.get("/v1/clients", params=grid_params(length=-1))
    assert len(response.json()["data"]) == 2


@pytest.mark.asyncio
async def test_list_is_scoped_to_company(async_client: AsyncClient, seeded):
    response = await async_client.get("/v1/clients", params=grid_params(company_id=6, search="ivan"))
    body = response.json()
    assert body["recordsTotal"] == 1
    assert body["recordsFiltered"] == 1
    assert [row["lastname"] for row in body["data"]] == ["Ivanov"]

    response = await async_client.get("/v1/clients", params=grid_params(company_id=99))
    assert response.json() == {"draw": 1, "recordsTotal": 0, "recordsFiltered": 0, "data": []}


@pytest.mark.asyncio
async def test_list_requires_company(async_client: AsyncClient):
    params = grid_params()
    del params["companyId"]
    response = await async_client.get("/v1/clients", params=params)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_from_json_body(async_client: AsyncClient, seeded):
    response = await async_client.post("/v1/clients/filtered", json={
        "userId": 1,
        "companyId": 5,
        "columns": [{"data": "name"}, {"data": "created_at"}],
        "order": [{"column": 1, "dir": "desc"}],
        "search": {"value": "a"},
        "start": 0,
        "length": 10,
        "draw": 8,
    })
    assert response.status_code == 200
    body = response.json()
    assert body["draw"] == 8
    assert body["recordsFiltered"] <= body["recordsTotal"]
    assert ids(response) == [seeded["smirnova"], seeded["petrov"], seeded["romashka"]]


@pytest.mark.asyncio
async def test_search_object_without_value_does_not_filter(async_client: AsyncClient, seeded):
    response = await async_client.post("/v1/clients/filtered", json={
        "companyId": 5,
        "search": {"regex": False},
    })
    assert response.json()["recordsFiltered"] == 3


@pytest.mark.asyncio
async def test_order_without_column_index_is_ignored(async_client: AsyncClient, seeded):
    params = grid_params()
    params["order[0][dir]"] = "desc"
    response = await async_client.get("/v1/clients", params=params)
    assert response.status_code == 200
    assert ids(response) == [seeded["petrov"], seeded["romashka"], seeded["smirnova"]]
