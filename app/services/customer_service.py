# app/services/customer_service.py
import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.errors import CustomerNotFound, InvalidGuestContact
from app.models.customer import Customer
from app.repositories.customer_repo import CustomerRepository
from app.schemas.customer import CustomerUpdate
from app.schemas.order import CustomerInfo
from app.schemas.stats import CustomerStats

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


# -------- Identity variants --------


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Caller sent a valid token; the customer is looked up by account id."""

    user_id: int


@dataclass(frozen=True)
class GuestIdentity:
    """No token; the customer is looked up (or created) by email."""

    contact: CustomerInfo | None


CustomerIdentity = AuthenticatedIdentity | GuestIdentity


@dataclass(frozen=True)
class ResolvedCustomer:
    """Customer handle plus the contact fields notifications need."""

    customer_id: int
    name: str
    email: str
    phone: str | None
    address: str | None

    @classmethod
    def from_model(cls, customer: Customer) -> "ResolvedCustomer":
        return cls(
            customer_id=customer.customer_id,
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
            address=customer.address,
        )


class CustomerService:
    """
    Business logic for Customer.

    Responsibilities:
      - resolve the customer behind an order (account or guest email)
      - admin listing / editing of customer profiles
    """

    def __init__(self, repo: CustomerRepository):
        self.repo = repo

    # ----- Order placement -----

    def resolve(self, session: Session, identity: CustomerIdentity) -> ResolvedCustomer:
        """
        Find (or, for guests, create) the customer behind an order.

        Authenticated:
          - lookup by user_id; missing profile -> CustomerNotFound.
            Profiles are created at registration, never here.

        Guest:
          - email must be present and valid -> else InvalidGuestContact
          - existing email -> reuse the row as-is (no update on reorder)
          - otherwise insert a new row from the contact fields

        The guest insert is flushed, not committed: it becomes part of the
        caller's order transaction. It must be the first write of that
        transaction (a lost unique-email race rolls the session back).
        """
        if isinstance(identity, AuthenticatedIdentity):
            customer = self.repo.get_by_user_id(session, identity.user_id)
            if customer is None:
                raise CustomerNotFound(
                    "No customer profile found for this account"
                )
            return ResolvedCustomer.from_model(customer)

        contact = identity.contact
        if contact is None:
            raise InvalidGuestContact("Customer information is required for guest orders")

        email = self._normalize_email(contact.email)

        existing = self.repo.get_by_email(session, email)
        if existing is not None:
            return ResolvedCustomer.from_model(existing)

        if not contact.full_name:
            raise InvalidGuestContact("Full name is required for guest orders")

        customer = Customer(
            name=contact.full_name,
            email=email,
            phone=contact.phone,
            address=contact.address,
        )
        try:
            customer = self.repo.add(session, customer)
        except IntegrityError:
            # Another checkout created the same email in the meantime
            session.rollback()
            existing = self.repo.get_by_email(session, email)
            if existing is None:
                raise
            return ResolvedCustomer.from_model(existing)

        logger.info(f"Created guest customer {customer.customer_id} for {email}")
        return ResolvedCustomer.from_model(customer)

    @staticmethod
    def _normalize_email(raw: str | None) -> str:
        if not raw:
            raise InvalidGuestContact("Email is required for guest orders")
        try:
            email = _email_adapter.validate_python(raw)
        except ValidationError:
            raise InvalidGuestContact("Email address is not valid")
        return str(email).lower()

    # ----- Admin operations -----

    def list_customers(self, session: Session, skip: int, limit: int) -> list[Customer]:
        """List customers with pagination (admin only)."""
        return self.repo.list_customers(session, skip=skip, limit=limit)

    def get_customer(self, session: Session, customer_id: int) -> Customer:
        """
        Get a customer by id (admin only).

        Raises:
            HTTPException(404): if not found.
        """
        customer = self.repo.get_by_id(session, customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Customer not found",
            )
        return customer

    def update_customer(
        self,
        session: Session,
        customer_id: int,
        payload: CustomerUpdate,
    ) -> Customer:
        """
        Partial update of a customer profile (admin only).

        Raises:
            HTTPException(404): customer missing.
            HTTPException(400): email already used by another customer.
        """
        customer = self.get_customer(session, customer_id)

        if payload.email is not None:
            email = str(payload.email).lower()
            other = self.repo.get_by_email(session, email)
            if other is not None and other.customer_id != customer.customer_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email is already used by another customer",
                )
            customer.email = email

        if payload.name is not None:
            customer.name = payload.name

        if payload.phone is not None:
            customer.phone = payload.phone

        if payload.address is not None:
            customer.address = payload.address

        return self.repo.update(session, customer)

    def get_stats(self, session: Session) -> CustomerStats:
        """Registered vs. guest customers, and how many ever ordered."""
        total, registered, with_orders = self.repo.counts(session)
        return CustomerStats(
            total_customers=total,
            registered=registered,
            guests=total - registered,
            with_orders=with_orders,
        )
