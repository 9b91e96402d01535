# app/schemas/stats.py
from pydantic import ConfigDict
from sqlmodel import SQLModel


class PeriodStats(SQLModel):
    """
    Revenue and order count over a period (non-cancelled orders).
    """
    model_config = ConfigDict(extra="forbid")

    revenue: int
    count: int


class OrderStats(SQLModel):
    """
    Payload for GET /orders/stats.
    """
    model_config = ConfigDict(extra="forbid")

    total_orders: int
    today: PeriodStats
    month: PeriodStats


class ProductStats(SQLModel):
    """
    Payload for GET /products/stats.

    in_stock counts every product with stock left; low_stock is the
    part of those at or below LOW_STOCK_THRESHOLD.
    """
    model_config = ConfigDict(extra="forbid")

    total: int
    in_stock: int
    low_stock: int
    out_of_stock: int
    categories: int


class CustomerStats(SQLModel):
    """
    Payload for GET /customers/stats.
    """
    model_config = ConfigDict(extra="forbid")

    total_customers: int
    registered: int
    guests: int
    with_orders: int
