# app/services/order_service.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.config import Settings, get_settings
from app.core.errors import InsufficientStock, InvalidOrderItems, PersistenceFailure
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.stats_repo import StatsRepository
from app.schemas.order import (
    NotificationItem,
    OrderCreate,
    OrderDetailRead,
    OrderItemCreate,
    OrderItemRead,
    OrderNotification,
    OrderRead,
    OrderStatusUpdate,
    OrderSummaryRead,
)
from app.schemas.stats import OrderStats, PeriodStats
from app.services.customer_service import (
    CustomerIdentity,
    CustomerService,
    ResolvedCustomer,
)

logger = logging.getLogger(__name__)


def _header(order: Order) -> dict:
    """Order columns as a plain dict (safe on expired ORM instances)."""
    return OrderRead.model_validate(order).model_dump()


@dataclass(frozen=True)
class PlacedOrder:
    order_id: int
    total: int
    notification: OrderNotification


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Place an order: validate lines, resolve customer, compute total,
        insert header + items, take stock, all in one transaction
      - Build the order view used by fulfillment notifications
      - Listing, status overwrite and statistics for admins
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        customer_service: CustomerService,
        stats_repo: StatsRepository,
        settings: Settings | None = None,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.customer_service = customer_service
        self.stats_repo = stats_repo
        self.settings = settings or get_settings()

    # -------- Order placement --------

    def place_order(
        self,
        session: Session,
        identity: CustomerIdentity,
        payload: OrderCreate,
    ) -> PlacedOrder:
        """
        Turn a checkout payload into a persisted order.

        Steps:
          1. Validate lines (non-empty, qty > 0, price >= 0, known products).
             Nothing is written when this fails.
          2. Resolve the customer (may insert a guest customer).
          3. Compute total = sum(price * quantity) in integer VND.
          4. Insert Order (status='pending') with receiver defaults.
          5. Insert OrderItems and take stock, one atomic UPDATE per line.
          6. Commit once; any failure rolls back steps 2-5 together.
          7. Re-read the order view for notifications.
        """
        # 1) Validate before touching anything
        products = self._validate_items(session, payload.items)

        try:
            # 2) Customer
            customer = self.customer_service.resolve(session, identity)

            # 3) Prices + total
            lines = [
                (item, self._unit_price(item, products[item.product_id]))
                for item in payload.items
            ]
            total = sum(price * item.quantity for item, price in lines)

            # 4) Header
            order = Order(
                customer_id=customer.customer_id,
                total=total,
                status="pending",
                receiver_name=payload.receiver_name or customer.name,
                receiver_phone=payload.receiver_phone or self._contact_phone(payload, customer),
                delivery_time=payload.delivery_time,
                shipping_address=payload.shipping_address or self._contact_address(payload, customer),
                note=payload.note or (payload.customer_info.notes if payload.customer_info else None),
                payment_method=payload.payment_method,
            )
            order = self.order_repo.create_order(session, order)
            order_id = order.order_id

            # 5) Lines + stock
            self.order_repo.create_items(
                session,
                [
                    OrderItem(
                        order_id=order_id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        price=price,
                    )
                    for item, price in lines
                ],
            )
            for item, _ in lines:
                taken = self.order_repo.decrement_stock(
                    session,
                    item.product_id,
                    item.quantity,
                    allow_oversell=self.settings.ALLOW_OVERSELL,
                )
                if not taken:
                    raise InsufficientStock(
                        f"Not enough stock for product {item.product_id}"
                    )

            # 6) Commit point
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Order placement failed while writing to the database")
            raise PersistenceFailure() from exc
        except Exception:
            session.rollback()
            raise

        logger.info(f"Order #{order_id} placed for customer {customer.customer_id}, total {total}")

        # 7) View for notifications
        notification = self.build_notification(session, order_id)
        return PlacedOrder(order_id=order_id, total=total, notification=notification)

    def _validate_items(
        self,
        session: Session,
        items: list[OrderItemCreate],
    ) -> dict[int, Product]:
        if not items:
            raise InvalidOrderItems("Order must contain at least one item")

        for item in items:
            if item.quantity <= 0:
                raise InvalidOrderItems(
                    f"Quantity for product {item.product_id} must be greater than 0"
                )
            if item.price < 0:
                raise InvalidOrderItems(
                    f"Price for product {item.product_id} cannot be negative"
                )

        products = self.product_repo.get_many(session, [it.product_id for it in items])
        missing = sorted({it.product_id for it in items} - products.keys())
        if missing:
            raise InvalidOrderItems(
                "Unknown product(s): " + ", ".join(str(pid) for pid in missing)
            )
        return products

    def _unit_price(self, item: OrderItemCreate, product: Product) -> int:
        if self.settings.PRICE_SOURCE == "catalog":
            return product.price
        return item.price

    @staticmethod
    def _contact_phone(payload: OrderCreate, customer: ResolvedCustomer) -> str | None:
        if payload.customer_info and payload.customer_info.phone:
            return payload.customer_info.phone
        return customer.phone

    @staticmethod
    def _contact_address(payload: OrderCreate, customer: ResolvedCustomer) -> str | None:
        if payload.customer_info and payload.customer_info.address:
            return payload.customer_info.address
        return customer.address

    # -------- Views --------

    def get_order_detail(self, session: Session, order_id: int) -> OrderDetailRead:
        """
        Order + customer + line items with product names.

        - 404 if order not found.
        """
        order = self._get_order_or_404(session, order_id)
        customer = self.customer_service.repo.get_by_id(session, order.customer_id)
        rows = self.order_repo.list_items_with_names(session, order_id)

        items = [
            OrderItemRead(
                product_id=it.product_id,
                product_name=name,
                quantity=it.quantity,
                price=it.price,
                line_total=it.price * it.quantity,
            )
            for it, name in rows
        ]

        return OrderDetailRead(
            **_header(order),
            customer_name=customer.name if customer else "",
            customer_email=customer.email if customer else "",
            customer_phone=customer.phone if customer else None,
            items=items,
        )

    def build_notification(self, session: Session, order_id: int) -> OrderNotification:
        detail = self.get_order_detail(session, order_id)
        return OrderNotification(
            order_id=detail.order_id,
            total_amount=detail.total,
            created_at=detail.order_date,
            customer_name=detail.customer_name,
            phone=detail.customer_phone,
            email=detail.customer_email,
            address=detail.shipping_address,
            receiver_name=detail.receiver_name,
            receiver_phone=detail.receiver_phone,
            delivery_time=detail.delivery_time,
            note=detail.note,
            items=[
                NotificationItem(
                    name=it.product_name or f"Product {it.product_id}",
                    quantity=it.quantity,
                    price=it.price,
                )
                for it in detail.items
            ],
        )

    def list_customer_orders(
        self,
        session: Session,
        customer_id: int,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderSummaryRead]:
        """
        Orders of one customer, newest first, with an items summary.
        """
        orders = self.order_repo.list_for_customer(session, customer_id, skip, limit)
        summaries = self.order_repo.items_summary(session, [o.order_id for o in orders])
        return [
            OrderSummaryRead(**_header(o), items=summaries.get(o.order_id))
            for o in orders
        ]

    def list_user_orders(
        self,
        session: Session,
        user_id: int,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderSummaryRead]:
        """
        Orders of the logged-in account; empty when it has no profile yet.
        """
        customer = self.customer_service.repo.get_by_user_id(session, user_id)
        if customer is None:
            return []
        return self.list_customer_orders(session, customer.customer_id, skip, limit)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderSummaryRead]:
        """
        List all orders (admin only).
        """
        rows = self.order_repo.list_all(session, skip, limit)
        summaries = self.order_repo.items_summary(session, [o.order_id for o, _, _ in rows])
        return [
            OrderSummaryRead(
                **_header(o),
                customer_name=name,
                customer_email=email,
                items=summaries.get(o.order_id),
            )
            for o, name, email in rows
        ]

    def update_status(
        self,
        session: Session,
        order_id: int,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status overwrite.

        Any value of OrderStatus is accepted from any current status;
        there is no transition table.
        """
        order = self._get_order_or_404(session, order_id)
        previous = order.status

        order.status = payload.status
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)

        logger.info(f"Order #{order_id} status {previous} -> {order.status}")
        return order  # type: ignore[return-value]

    def get_stats(self, session: Session, now: datetime | None = None) -> OrderStats:
        """
        Order count plus revenue today / this month (UTC calendar).
        """
        now = now or datetime.now(timezone.utc)
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        month_start = day_start.replace(day=1)
        if month_start.month == 12:
            next_month = month_start.replace(year=month_start.year + 1, month=1)
        else:
            next_month = month_start.replace(month=month_start.month + 1)

        today_revenue, today_count = self.stats_repo.revenue_between(
            session, day_start, day_start + timedelta(days=1)
        )
        month_revenue, month_count = self.stats_repo.revenue_between(
            session, month_start, next_month
        )

        return OrderStats(
            total_orders=self.stats_repo.count_orders(session),
            today=PeriodStats(revenue=today_revenue, count=today_count),
            month=PeriodStats(revenue=month_revenue, count=month_count),
        )

    def _get_order_or_404(self, session: Session, order_id: int) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order
