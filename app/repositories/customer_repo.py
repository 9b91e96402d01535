# app/repositories/customer_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.customer import Customer
from app.models.order import Order


class CustomerRepository:
    """
    Data access layer for Customer.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, customer_id: int) -> Customer | None:
        """Return a Customer by primary key, or None if not found."""
        return session.get(Customer, customer_id)

    def get_by_user_id(self, session: Session, user_id: int) -> Customer | None:
        """Return the customer profile paired with an account."""
        stmt = select(Customer).where(Customer.user_id == user_id)
        return session.exec(stmt).first()

    def get_by_email(self, session: Session, email: str) -> Customer | None:
        """Return a Customer by (lower-cased) email, or None if not found."""
        stmt = select(Customer).where(Customer.email == email.lower())
        return session.exec(stmt).first()

    def list_customers(self, session: Session, skip: int = 0, limit: int = 50) -> list[Customer]:
        stmt = select(Customer).order_by(Customer.name).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def add(self, session: Session, customer: Customer) -> Customer:
        """
        Insert without committing (joins the caller's transaction).
        """
        session.add(customer)
        session.flush()
        session.refresh(customer)
        return customer

    def update(self, session: Session, customer: Customer) -> Customer:
        """Persist changes to an existing Customer."""
        session.add(customer)
        session.commit()
        session.refresh(customer)
        return customer

    def counts(self, session: Session) -> tuple[int, int, int]:
        """(total, registered, with_orders)."""
        total, registered = session.exec(
            select(func.count(Customer.customer_id), func.count(Customer.user_id))
        ).one()
        with_orders = session.exec(
            select(func.count(func.distinct(Order.customer_id)))
        ).one()
        return int(total or 0), int(registered or 0), int(with_orders or 0)
