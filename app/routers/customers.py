# app/routers/customers.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.schemas.customer import CustomerRead, CustomerUpdate
from app.repositories.customer_repo import CustomerRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.stats_repo import StatsRepository
from app.schemas.order import OrderSummaryRead
from app.schemas.stats import CustomerStats
from app.services.customer_service import CustomerService
from app.services.order_service import OrderService

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
    dependencies=[Depends(require_admin)],
)

customer_service = CustomerService(CustomerRepository())
order_service = OrderService(
    OrderRepository(),
    ProductRepository(),
    customer_service,
    StatsRepository(),
)


@router.get("", response_model=list[CustomerRead])
def list_customers(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List customers ordered by name (admin only).
    """
    return customer_service.list_customers(session, skip, limit)


@router.get("/stats", response_model=CustomerStats)
def customer_stats(session: Session = Depends(get_session)):
    return customer_service.get_stats(session)


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: int,
    session: Session = Depends(get_session),
):
    return customer_service.get_customer(session, customer_id)


@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    session: Session = Depends(get_session),
):
    """
    Partial update of a customer profile (admin only).
    """
    return customer_service.update_customer(session, customer_id, payload)


@router.get("/{customer_id}/orders", response_model=list[OrderSummaryRead])
def list_customer_orders(
    customer_id: int,
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    Orders of one customer, newest first (admin only).
    """
    customer_service.get_customer(session, customer_id)
    return order_service.list_customer_orders(session, customer_id, skip, limit)
