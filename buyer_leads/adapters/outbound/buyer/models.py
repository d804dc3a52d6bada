"""SQLAlchemy ORM models for buyers and their history."""

from datetime import datetime, timezone

from sqlalchemy import JSON, BigInteger, Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import declarative_base, relationship

from buyer_leads.domain.enums import BHK, City, PropertyType, Purpose, Source, Status, Timeline

Base = declarative_base()


def _enum_column(enum_cls: type, nullable: bool = False) -> Column:
    # Store enum values ("WalkIn"), not member names ("WALK_IN")
    return Column(
        Enum(enum_cls, values_callable=lambda members: [member.value for member in members]),
        nullable=nullable,
    )


class BuyerModel(Base):
    """SQLAlchemy model for buyers table."""

    __tablename__ = "buyers"

    id = Column(String, primary_key=True, index=True)
    owner_id = Column(String, nullable=False, index=True)
    full_name = Column(String(80), nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String(15), nullable=False)
    city = _enum_column(City)
    property_type = _enum_column(PropertyType)
    bhk = _enum_column(BHK, nullable=True)
    purpose = _enum_column(Purpose)
    budget_min = Column(BigInteger, nullable=True)
    budget_max = Column(BigInteger, nullable=True)
    timeline = _enum_column(Timeline)
    source = _enum_column(Source)
    notes = Column(Text, nullable=True)
    tags = Column(JSON, nullable=True)
    status = _enum_column(Status)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    history = relationship(
        "BuyerHistoryModel",
        back_populates="buyer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class BuyerHistoryModel(Base):
    """SQLAlchemy model for buyer_history table."""

    __tablename__ = "buyer_history"

    id = Column(String, primary_key=True)
    buyer_id = Column(
        String, ForeignKey("buyers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    changed_by = Column(String, nullable=False)
    changed_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    diff = Column(JSON, nullable=False)

    buyer = relationship("BuyerModel", back_populates="history")
