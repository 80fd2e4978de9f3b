from enum import Enum
from pydantic import BaseModel


class OperationStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class StatusResponse(BaseModel):
    status: OperationStatus


class MessageResponse(BaseModel):
    message: str
