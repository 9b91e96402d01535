# app/schemas/customer.py
from datetime import datetime

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field


class CustomerRead(SQLModel):
    """Customer profile returned to admins."""

    customer_id: int
    user_id: int | None
    name: str
    email: str
    phone: str | None
    address: str | None
    created_at: datetime


class CustomerUpdate(SQLModel):
    """
    Admin partial update of a customer profile.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30)
    address: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
