from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, Text, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from app.crm.models import Base


class Address(Base):
    """
    Postal address owned by exactly one Customer.
    Has no identity of its own outside its owner; created and removed together with it.
    """
    __tablename__ = "addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    number: Mapped[str | None] = mapped_column(Text, nullable=True)
    street: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    province: Mapped[str | None] = mapped_column(Text, nullable=True)
    zip: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(Text, nullable=True)

    customer: Mapped[Customer | None] = relationship("Customer", back_populates="address", uselist=False)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    firstname: Mapped[str | None] = mapped_column(Text, nullable=True)
    lastname: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)

    address_id: Mapped[int | None] = mapped_column(
        ForeignKey("addresses.id", ondelete="CASCADE"), nullable=True, unique=True
    )
    address: Mapped[Address | None] = relationship(
        "Address",
        back_populates="customer",
        cascade="all, delete-orphan",
        single_parent=True,
        lazy="selectin",
    )


def find_all_customers(s: Session) -> list[Customer]:
    """Named "find all" query."""
    return list(s.scalars(select(Customer).order_by(Customer.id)).all())
