# app/schemas/order.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import Field, SQLModel

OrderStatus = Literal["pending", "processing", "shipped", "completed", "cancelled"]


def _strip_or_none(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


class OrderItemCreate(SQLModel):
    """
    One cart line as sent by the checkout page.

    Quantity/price bounds are checked by OrderService so that a bad line
    answers 400 with a readable message instead of a 422.
    """

    product_id: int
    quantity: int
    price: int


class CustomerInfo(SQLModel):
    """
    Guest contact details collected at checkout.
    """

    full_name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)
    address: str | None = None
    notes: str | None = None

    @field_validator("full_name", "email", "phone", "address", "notes")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return _strip_or_none(v)


class OrderCreate(SQLModel):
    """
    Payload for POST /orders.

    User provides:
      - items (product_id, quantity, unit price)
      - shipping_address (optional, defaults to the customer address)
      - customer_info (required for guests, ignored for logged-in users)
      - receiver / delivery details (optional)

    Backend derives:
      - customer from token or customer_info.email
      - status = 'pending'
      - total from items
    """

    # Checkout clients also send their own cart total / UI fields
    model_config = ConfigDict(extra="ignore")

    items: list[OrderItemCreate]
    shipping_address: str | None = None
    customer_info: CustomerInfo | None = None
    receiver_name: str | None = None
    receiver_phone: str | None = None
    delivery_time: str | None = None
    note: str | None = None
    payment_method: str | None = None

    @field_validator(
        "shipping_address",
        "receiver_name",
        "receiver_phone",
        "delivery_time",
        "note",
        "payment_method",
    )
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return _strip_or_none(v)


class OrderPlaced(SQLModel):
    """
    Response of POST /orders.
    """

    message: str
    order_id: int
    total: int


class MessageResponse(SQLModel):
    message: str


class OrderRead(SQLModel):
    """
    Order header as stored.
    """

    order_id: int
    customer_id: int
    total: int
    status: OrderStatus
    receiver_name: str | None
    receiver_phone: str | None
    delivery_time: str | None
    shipping_address: str | None
    note: str | None
    payment_method: str | None
    order_date: datetime


class OrderSummaryRead(OrderRead):
    """
    Listing row: header + customer + "Rose box (x2), Tulips (x1)".
    """

    customer_name: str | None = None
    customer_email: str | None = None
    items: str | None = None


class OrderItemRead(SQLModel):
    """
    Line item with the product name joined in.
    """

    product_id: int
    product_name: str | None
    quantity: int
    price: int
    line_total: int


class OrderDetailRead(OrderRead):
    """
    Full order view including customer contact and items.
    """

    customer_name: str
    customer_email: str
    customer_phone: str | None
    items: list[OrderItemRead]


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class NotificationItem(SQLModel):
    name: str
    quantity: int
    price: int


class OrderNotification(SQLModel):
    """
    Data handed to the fulfillment channels (email, Zalo).
    """

    order_id: int
    total_amount: int
    created_at: datetime
    customer_name: str
    phone: str | None = None
    email: str
    address: str | None = None
    receiver_name: str | None = None
    receiver_phone: str | None = None
    delivery_time: str | None = None
    note: str | None = None
    items: list[NotificationItem]
