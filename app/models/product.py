# app/models/product.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Product category (fresh flowers, fruit baskets, gift boxes, ...).
    """

    __tablename__ = "categories"

    category_id: int | None = Field(default=None, primary_key=True)

    name: str = Field(
        max_length=100,
        unique=True,
        index=True,
    )

    description: str | None = None


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Prices are whole VND, so every amount is an int.
    `stock` never goes below zero (see OrderRepository.decrement_stock).
    """

    __tablename__ = "products"

    product_id: int | None = Field(default=None, primary_key=True)

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    price: int = Field(
        ge=0,
        description="Unit price in VND",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    category_id: int | None = Field(
        default=None,
        foreign_key="categories.category_id",
        index=True,
    )

    # Suppliers are managed outside this service
    supplier_id: int | None = Field(default=None, index=True)

    description: str | None = None

    image_url: str | None = Field(
        default=None,
        description="Public URL of the main image",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
