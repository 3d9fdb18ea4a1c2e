import enum

from sqlalchemy import Column, Integer, BigInteger, String, Text, ForeignKey, TIMESTAMP, Enum
from sqlalchemy.sql import func
from registration_service.core.db import Base


class RegistrationStatus(str, enum.Enum):
    PENDING = "PENDING"
    WAITING = "WAITING"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), nullable=False)
    email = Column(String(254), nullable=False)
    phone = Column(String(11), nullable=False)
    event_id = Column(BigInteger, nullable=False, index=True)
    author_id = Column(BigInteger, nullable=True)
    password = Column(String(255), nullable=False)
    status = Column(
        Enum(RegistrationStatus, name="registration_status"),
        nullable=False,
        default=RegistrationStatus.PENDING,
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


class DeclinedRegistration(Base):
    __tablename__ = "declined_registrations"

    id = Column(Integer, primary_key=True, index=True)
    reason = Column(Text, nullable=False)
    registration_id = Column(
        Integer,
        ForeignKey("registrations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
