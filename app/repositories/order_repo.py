# app/repositories/order_repo.py
from sqlalchemy import case, update
from sqlmodel import Session, select

from app.models.customer import Customer
from app.models.order import Order, OrderItem
from app.models.product import Product


class OrderRepository:
    """
    Data access layer for orders, order_items and the stock side effect
    of placing an order.

    NOTE:
      - No commits here; order creation is a multi-step transaction.
        The service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def get_by_id(self, session: Session, order_id: int) -> Order | None:
        return session.get(Order, order_id)

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[tuple[Order, str | None, str | None]]:
        """
        All orders, newest first, with the customer name/email joined in.
        """
        stmt = (
            select(Order, Customer.name, Customer.email)
            .join(Customer, Customer.customer_id == Order.customer_id, isouter=True)
            .order_by(Order.order_date.desc(), Order.order_id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_for_customer(
        self,
        session: Session,
        customer_id: int,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.order_date.desc(), Order.order_id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    # ---- Order items ----

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        return items

    def list_items_with_names(
        self,
        session: Session,
        order_id: int,
    ) -> list[tuple[OrderItem, str | None]]:
        stmt = (
            select(OrderItem, Product.name)
            .join(Product, Product.product_id == OrderItem.product_id, isouter=True)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.order_item_id)
        )
        return list(session.exec(stmt).all())

    def items_summary(
        self,
        session: Session,
        order_ids: list[int],
    ) -> dict[int, str]:
        """
        Map order_id -> "Rose box (x2), Tulips (x1)" for listing pages.
        """
        if not order_ids:
            return {}

        stmt = (
            select(OrderItem.order_id, Product.name, OrderItem.quantity)
            .join(Product, Product.product_id == OrderItem.product_id, isouter=True)
            .where(OrderItem.order_id.in_(order_ids))
            .order_by(OrderItem.order_id, OrderItem.order_item_id)
        )

        parts: dict[int, list[str]] = {}
        for order_id, name, quantity in session.exec(stmt).all():
            parts.setdefault(order_id, []).append(f"{name or 'Unknown product'} (x{quantity})")
        return {order_id: ", ".join(lines) for order_id, lines in parts.items()}

    # ---- Stock ----

    def decrement_stock(
        self,
        session: Session,
        product_id: int,
        quantity: int,
        allow_oversell: bool = True,
    ) -> bool:
        """
        Take `quantity` units out of stock in a single UPDATE statement,
        so concurrent orders never read-modify-write the same row.

        allow_oversell=True  -> stock = max(stock - quantity, 0), always applied
        allow_oversell=False -> only applied when stock >= quantity

        Returns:
            False when no row was updated (unknown product, or not enough
            stock with allow_oversell=False).
        """
        stmt = update(Product).where(Product.product_id == product_id)

        if allow_oversell:
            stmt = stmt.values(
                stock=case(
                    (Product.stock > quantity, Product.stock - quantity),
                    else_=0,
                )
            )
        else:
            stmt = stmt.where(Product.stock >= quantity).values(
                stock=Product.stock - quantity
            )

        result = session.exec(stmt.execution_options(synchronize_session=False))
        return result.rowcount > 0
