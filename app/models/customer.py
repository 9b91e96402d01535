# app/models/customer.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Customer(SQLModel, table=True):
    """
    Commercial identity behind an order (contact + address).

    Identity:
      - user_id: account id from the auth service; NULL for guests.
        At most one customer per account.
      - email: lookup key for guest checkout. Stored lower-cased and
        unique, so repeated guest orders land on the same row.
    """

    __tablename__ = "customers"

    customer_id: int | None = Field(default=None, primary_key=True)

    user_id: int | None = Field(
        default=None,
        unique=True,
        index=True,
        description="Account id from the auth service (NULL for guests)",
    )

    name: str = Field(max_length=255)

    email: str = Field(
        max_length=255,
        unique=True,
        index=True,
    )

    phone: str | None = Field(default=None, max_length=30)

    address: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
