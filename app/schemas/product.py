# app/schemas/product.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductCreate(SQLModel):
    """
    Payload for creating a product (admin).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    price: int = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    category_id: int | None = None
    supplier_id: int | None = None
    description: str | None = None
    image_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update of a product (admin).
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    price: int | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    category_id: int | None = None
    supplier_id: int | None = None
    description: str | None = None
    image_url: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    product_id: int
    name: str
    price: int
    stock: int
    category_id: int | None
    supplier_id: int | None
    description: str | None
    image_url: str | None
    created_at: datetime


class CategoryCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryRead(SQLModel):
    category_id: int
    name: str
    description: str | None


class CategoryUpdate(SQLModel):
    """
    Rename / re-describe a category (admin).

    `name` is checked by the service so that a blank name answers 400.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
