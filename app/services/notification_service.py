# app/services/notification_service.py
"""
Fulfillment notifications sent after an order is committed.

Channels:
  - email: admin alert + customer confirmation (SMTP)
  - chat:  Zalo OA push to the shop admin

Every send is attempted exactly once inside its own error boundary.
Failures are logged and swallowed; they never reach the HTTP response
or the stored order.
"""

import html
import logging
from functools import lru_cache
from typing import Callable, Literal

from app.core import email_client
from app.core.config import Settings, get_settings
from app.core.zalo_client import ZaloClient
from app.schemas.order import OrderNotification

logger = logging.getLogger(__name__)

DeliveryResult = Literal["sent", "failed", "skipped"]

EmailSender = Callable[[str, str, str, str | None], None]


def format_vnd(amount: int) -> str:
    """130000 -> '130.000đ'"""
    return f"{amount:,}".replace(",", ".") + "đ"


# -------- Message templates --------


def _items_text(order: OrderNotification) -> str:
    return "\n".join(
        f"  - {it.name} x{it.quantity}: {format_vnd(it.price * it.quantity)}"
        for it in order.items
    )


def _items_html(order: OrderNotification) -> str:
    rows = "".join(
        "<tr>"
        f"<td>{html.escape(it.name)}</td>"
        f"<td>{it.quantity}</td>"
        f"<td>{format_vnd(it.price)}</td>"
        f"<td>{format_vnd(it.price * it.quantity)}</td>"
        "</tr>"
        for it in order.items
    )
    return (
        "<table border='1' cellpadding='6' cellspacing='0'>"
        "<tr><th>Product</th><th>Qty</th><th>Unit price</th><th>Amount</th></tr>"
        f"{rows}</table>"
    )


def build_admin_email(order: OrderNotification) -> tuple[str, str, str]:
    """(subject, text, html) for the shop's new-order alert."""
    subject = f"[New order] #{order.order_id} - {format_vnd(order.total_amount)}"
    text = (
        f"New order #{order.order_id} placed at {order.created_at:%Y-%m-%d %H:%M}\n\n"
        f"Customer: {order.customer_name}\n"
        f"Email: {order.email}\n"
        f"Phone: {order.phone or '-'}\n"
        f"Address: {order.address or '-'}\n"
        f"Receiver: {order.receiver_name or order.customer_name}\n"
        f"Receiver phone: {order.receiver_phone or order.phone or '-'}\n"
        f"Delivery time: {order.delivery_time or '-'}\n"
        f"Note: {order.note or '-'}\n\n"
        f"Items:\n{_items_text(order)}\n\n"
        f"Total: {format_vnd(order.total_amount)}\n"
    )
    body = (
        f"<h2>New order #{order.order_id}</h2>"
        f"<p><b>Customer:</b> {html.escape(order.customer_name)} "
        f"({html.escape(order.email)}, {html.escape(order.phone or '-')})</p>"
        f"<p><b>Address:</b> {html.escape(order.address or '-')}</p>"
        f"<p><b>Receiver:</b> {html.escape(order.receiver_name or order.customer_name)} "
        f"- {html.escape(order.receiver_phone or order.phone or '-')}</p>"
        f"<p><b>Delivery time:</b> {html.escape(order.delivery_time or '-')}</p>"
        f"{_items_html(order)}"
        f"<p><b>Total:</b> {format_vnd(order.total_amount)}</p>"
    )
    return subject, text, body


def build_customer_email(order: OrderNotification) -> tuple[str, str, str]:
    """(subject, text, html) for the customer's order confirmation."""
    subject = f"Order #{order.order_id} confirmed"
    text = (
        f"Hi {order.customer_name},\n\n"
        f"Thank you for your order! We have received order #{order.order_id} "
        "and will contact you to confirm delivery.\n\n"
        f"Items:\n{_items_text(order)}\n\n"
        f"Total: {format_vnd(order.total_amount)}\n"
        f"Delivery address: {order.address or '-'}\n"
        f"Delivery time: {order.delivery_time or '-'}\n"
    )
    body = (
        f"<p>Hi {html.escape(order.customer_name)},</p>"
        f"<p>Thank you for your order! We have received order "
        f"<b>#{order.order_id}</b> and will contact you to confirm delivery.</p>"
        f"{_items_html(order)}"
        f"<p><b>Total:</b> {format_vnd(order.total_amount)}</p>"
        f"<p><b>Delivery address:</b> {html.escape(order.address or '-')}</p>"
    )
    return subject, text, body


def build_chat_message(order: OrderNotification) -> str:
    return (
        f"🛒 New order #{order.order_id}\n"
        f"Customer: {order.customer_name}\n"
        f"Phone: {order.phone or '-'}\n"
        f"Address: {order.address or '-'}\n"
        f"Receiver: {order.receiver_name or order.customer_name}\n"
        f"Receiver phone: {order.receiver_phone or order.phone or '-'}\n"
        f"Deliver at: {order.delivery_time or '-'}\n"
        f"Total: {format_vnd(order.total_amount)}"
    )


# -------- Notifier --------


class FulfillmentNotifier:
    """
    Fire-and-forget delivery of "order placed" messages.

    Scheduled by the orders router through BackgroundTasks, i.e. after the
    response is sent and after the order transaction has committed.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        send_email: EmailSender | None = None,
        zalo: ZaloClient | None = None,
    ):
        self.settings = settings or get_settings()
        self.send_email = send_email or email_client.send_email
        self.zalo = zalo or ZaloClient(self.settings)

    def notify_order_placed(self, order: OrderNotification) -> dict[str, DeliveryResult]:
        """
        Attempt every channel once. Returns per-channel outcome for logging.
        """
        results: dict[str, DeliveryResult] = {
            "admin_email": self._attempt("admin_email", self._send_admin_email, order),
            "customer_email": self._attempt(
                "customer_email", self._send_customer_email, order
            ),
            "zalo": self._attempt("zalo", self._send_chat, order),
        }
        logger.info(f"Order #{order.order_id} notifications: {results}")
        return results

    def _attempt(
        self,
        channel: str,
        send: Callable[[OrderNotification], bool],
        order: OrderNotification,
    ) -> DeliveryResult:
        try:
            sent = send(order)
        except Exception:
            logger.exception(f"Order #{order.order_id}: {channel} notification failed")
            return "failed"
        return "sent" if sent else "skipped"

    # Each sender returns False when its channel is not configured.

    def _email_enabled(self) -> bool:
        # A custom sender (tests, alternative transport) is always enabled
        if self.send_email is not email_client.send_email:
            return True
        return email_client.is_configured(self.settings)

    def _send_admin_email(self, order: OrderNotification) -> bool:
        if not (self.settings.ADMIN_EMAIL and self._email_enabled()):
            return False
        subject, text, body = build_admin_email(order)
        self.send_email(self.settings.ADMIN_EMAIL, subject, text, body)
        return True

    def _send_customer_email(self, order: OrderNotification) -> bool:
        if not self._email_enabled():
            return False
        subject, text, body = build_customer_email(order)
        self.send_email(order.email, subject, text, body)
        return True

    def _send_chat(self, order: OrderNotification) -> bool:
        if not self.zalo.is_configured:
            return False
        self.zalo.push_text(build_chat_message(order))
        return True


@lru_cache
def get_notifier() -> FulfillmentNotifier:
    """FastAPI dependency; overridden in tests."""
    return FulfillmentNotifier()
