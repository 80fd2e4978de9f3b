from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.clients.models import LegalType


class ClientPayload(BaseModel):
    """Body of create and update requests, in the camelCase the UI sends."""
    user_id: int = Field(0, alias="userId")
    company_id: int = Field(..., alias="companyId")
    legal_type: LegalType = Field(..., alias="legalType")
    contact_name: Optional[str] = Field(None, alias="contactName")
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    patronymic: Optional[str] = None
    mobilephone_code: Optional[str] = Field(None, alias="mobilephoneCode")
    mobilephone: Optional[str] = None
    local_phone: Optional[str] = Field(None, alias="localPhone")
    telegram: Optional[str] = None
    whatsapp: Optional[str] = None
    skype: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    def client_fields(self) -> Dict[str, Any]:
        """Identity columns, with the name fields that don't apply to the legal type nulled out."""
        physical = self.legal_type == LegalType.PHYSICAL
        return {
            "user_id": self.user_id,
            "company_id": self.company_id,
            "legal_type": int(self.legal_type),
            "contact_name": None if physical else self.contact_name,
            "firstname": self.firstname if physical else None,
            "lastname": self.lastname if physical else None,
            "patronymic": self.patronymic if physical else None,
        }

    def details_fields(self) -> Dict[str, Any]:
        return {
            "mobilephone_code": self.mobilephone_code,
            "mobilephone": self.mobilephone,
            "local_phone": self.local_phone,
            "telegram": self.telegram,
            "whatsapp": self.whatsapp,
            "skype": self.skype,
            "description": self.description,
        }


class CompanyScope(BaseModel):
    company_id: int = Field(..., alias="companyId")

    model_config = ConfigDict(populate_by_name=True)


class ClientCreatedResponse(BaseModel):
    id: int


class ClientDetailsResponse(BaseModel):
    client_id: int
    mobilephone_code: Optional[str] = None
    mobilephone: Optional[str] = None
    local_phone: Optional[str] = None
    telegram: Optional[str] = None
    whatsapp: Optional[str] = None
    skype: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClientResponse(BaseModel):
    id: int
    company_id: int
    user_id: int
    legal_type: int
    contact_name: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    patronymic: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    client_details: Optional[ClientDetailsResponse] = None

    model_config = ConfigDict(from_attributes=True)


# Data grid

class GridColumn(BaseModel):
    data: Optional[str] = None
    name: Optional[str] = None
    searchable: Optional[bool] = None
    orderable: Optional[bool] = None


class GridOrder(BaseModel):
    column: int = -1  # a missing index means "do not sort"
    dir: Literal["asc", "desc"] = "asc"


class GridSearch(BaseModel):
    value: Optional[str] = None
    regex: Optional[bool] = None


class FilteredListRequest(BaseModel):
    user_id: int = Field(0, alias="userId")
    company_id: int = Field(..., alias="companyId")
    columns: List[GridColumn] = []
    order: List[GridOrder] = []
    search: Optional[GridSearch] = None
    start: int = Field(0, ge=0)
    length: int = 10
    draw: int = 0

    model_config = ConfigDict(populate_by_name=True)

    @property
    def search_value(self) -> Optional[str]:
        """The search term, or None when the request carried no ``search[value]`` key at all."""
        if self.search is None or "value" not in self.search.model_fields_set:
            return None
        return self.search.value or ""


class ClientListRow(BaseModel):
    id: int
    legal_type: int
    contact_name: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    patronymic: Optional[str] = None
    created_at: datetime
    mobilephone_code: Optional[str] = None
    mobilephone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FilteredListResponse(BaseModel):
    draw: int
    records_total: int = Field(..., alias="recordsTotal")
    records_filtered: int = Field(..., alias="recordsFiltered")
    data: List[ClientListRow]

    model_config = ConfigDict(populate_by_name=True)
