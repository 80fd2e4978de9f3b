"""SQL expressions behind the client data grid: sortable fields and the search filter."""
from enum import Enum
from typing import List, Optional

from sqlalchemy import String, func, or_
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import ColumnElement, FunctionElement

from src.clients.exceptions import UnsupportedSortFieldError
from src.clients.models import Client, ClientDetails
from src.clients.schemas import GridColumn, GridOrder


class day_month_year(FunctionElement):
    """A timestamp rendered as ``dd.mm.yyyy`` text."""
    type = String()
    name = "day_month_year"
    inherit_cache = True


@compiles(day_month_year)
def _day_month_year(element, compiler, **kw):
    return "TO_CHAR(%s, 'DD.MM.YYYY')" % compiler.process(element.clauses, **kw)


@compiles(day_month_year, "sqlite")
def _day_month_year_sqlite(element, compiler, **kw):
    return "strftime('%%d.%%m.%%Y', %s)" % compiler.process(element.clauses, **kw)


def _text(column) -> ColumnElement:
    return func.coalesce(column, "")


# contact_name is only set for legal entities, the person fields only for
# physical persons, so one of the halves is always empty.
client_name = (
    _text(Client.contact_name)
    + _text(Client.lastname) + " "
    + _text(Client.firstname) + " "
    + _text(Client.patronymic)
)

client_phone = _text(ClientDetails.mobilephone_code) + _text(ClientDetails.mobilephone)


class SortField(str, Enum):
    CREATED_AT = "created_at"
    NAME = "name"
    MOBILEPHONE = "mobilephone"


SORT_EXPRESSIONS = {
    SortField.CREATED_AT: Client.created_at,
    SortField.NAME: client_name,
    SortField.MOBILEPHONE: client_phone,
}


def resolve_sort_field(field: Optional[str]) -> SortField:
    try:
        return SortField(field)
    except ValueError:
        raise UnsupportedSortFieldError(str(field)) from None


def order_clause(columns: List[GridColumn], order: List[GridOrder]) -> Optional[ColumnElement]:
    """ORDER BY expression for the first requested ordering, or None.

    Only ``order[0]`` is honoured. An index pointing outside ``columns`` means
    no ordering; a column whose field has no sort expression is an error.
    """
    if not order:
        return None
    first = order[0]
    if not 0 <= first.column < len(columns):
        return None
    expression = SORT_EXPRESSIONS[resolve_sort_field(columns[first.column].data)]
    return expression.desc() if first.dir == "desc" else expression.asc()


def search_filter(value: str) -> ColumnElement:
    """Substring match on creation date, full name (case-insensitive) or phone."""
    return or_(
        day_month_year(Client.created_at).contains(value, autoescape=True),
        client_name.icontains(value, autoescape=True),
        client_phone.contains(value, autoescape=True),
    )
