# app/models/order.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order header.

    `total` is computed once at placement from the line items and is not
    re-derived afterwards.
    """

    __tablename__ = "orders"

    order_id: int | None = Field(default=None, primary_key=True)

    customer_id: int = Field(
        foreign_key="customers.customer_id",
        index=True,
    )

    # Sum of price * quantity over the line items, in VND
    total: int = Field(ge=0)

    # pending | processing | shipped | completed | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    receiver_name: str | None = Field(
        default=None,
        description="Name of the person receiving the order",
    )
    receiver_phone: str | None = Field(
        default=None,
        description="Contact phone number for delivery",
    )
    delivery_time: str | None = Field(
        default=None,
        description="Requested delivery time as entered at checkout",
    )
    shipping_address: str | None = Field(
        default=None,
        description="Full delivery address",
    )
    note: str | None = Field(
        default=None,
        description="Optional note / card message",
    )
    payment_method: str | None = None

    order_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Placement timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    `price` is the unit price at the time of the order, not a reference
    to the current product price.
    """

    __tablename__ = "order_items"

    order_item_id: int | None = Field(default=None, primary_key=True)

    order_id: int = Field(
        foreign_key="orders.order_id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.product_id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: int = Field(
        ge=0,
        description="Unit price at time of order (VND)",
    )
