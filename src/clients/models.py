from enum import IntEnum
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from src.database import Base
from src.shared.models import AuditMixin


class LegalType(IntEnum):
    PHYSICAL = 1
    LEGAL = 2


class Client(Base, AuditMixin):
    """A company's customer: either a physical person or a legal entity."""
    __tablename__ = "clients"

    company_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    legal_type = Column(Integer, nullable=False)

    # legal entities
    contact_name = Column(String, nullable=True)
    # physical persons
    firstname = Column(String, nullable=True)
    lastname = Column(String, nullable=True)
    patronymic = Column(String, nullable=True)

    client_details = relationship(
        "ClientDetails",
        back_populates="client",
        uselist=False,
        cascade="all, delete-orphan",
    )


class ClientDetails(Base, AuditMixin):
    """Contact channels of a client, one row per client."""
    __tablename__ = "clients_details"

    client_id = Column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, unique=True)

    mobilephone_code = Column(String, nullable=True)
    mobilephone = Column(String, nullable=True)
    local_phone = Column(String, nullable=True)
    telegram = Column(String, nullable=True)
    whatsapp = Column(String, nullable=True)
    skype = Column(String, nullable=True)
    description = Column(Text, nullable=True)

    client = relationship("Client", back_populates="client_details")
