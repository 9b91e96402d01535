# app/routers/orders.py
from fastapi import APIRouter, BackgroundTasks, Depends
from sqlmodel import Session

from app.core.auth import TokenUser, get_current_user, require_admin, require_auth
from app.database import get_session
from app.repositories.customer_repo import CustomerRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.stats_repo import StatsRepository
from app.schemas.order import (
    MessageResponse,
    OrderCreate,
    OrderDetailRead,
    OrderPlaced,
    OrderStatusUpdate,
    OrderSummaryRead,
)
from app.schemas.stats import OrderStats
from app.services.customer_service import (
    AuthenticatedIdentity,
    CustomerService,
    GuestIdentity,
)
from app.services.notification_service import FulfillmentNotifier, get_notifier
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
customer_service = CustomerService(CustomerRepository())
service = OrderService(order_repo, product_repo, customer_service, StatsRepository())


# -------- Checkout --------


@router.post("", response_model=OrderPlaced)
def place_order(
    payload: OrderCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_user: TokenUser | None = Depends(get_current_user),
    notifier: FulfillmentNotifier = Depends(get_notifier),
):
    """
    Place an order.

    Auth:
      - Logged-in: customer taken from the account's profile.
      - Guest: customer found or created from `customer_info.email`.

    Admin email, customer email and Zalo push are sent after the
    response; their outcome never changes it.
    """
    if current_user is not None:
        identity = AuthenticatedIdentity(user_id=current_user.user_id)
    else:
        identity = GuestIdentity(contact=payload.customer_info)

    placed = service.place_order(session, identity, payload)
    background_tasks.add_task(notifier.notify_order_placed, placed.notification)

    return OrderPlaced(
        message="Order placed successfully",
        order_id=placed.order_id,
        total=placed.total,
    )


@router.get("/my", response_model=list[OrderSummaryRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: TokenUser = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(session, current_user.user_id, skip, limit)


# -------- Admin endpoints --------


@router.get(
    "/stats",
    response_model=OrderStats,
    dependencies=[Depends(require_admin)],
)
def get_order_stats(session: Session = Depends(get_session)):
    """
    Total orders, plus revenue/count for today and this month (admin only).
    """
    return service.get_stats(session)


@router.get(
    "",
    response_model=list[OrderSummaryRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    List all orders (admin only).
    """
    return service.list_all_orders(session, skip, limit)


@router.get(
    "/{order_id}",
    response_model=OrderDetailRead,
    dependencies=[Depends(require_admin)],
)
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
):
    """
    Get any order with items (admin only).
    """
    return service.get_order_detail(session, order_id)


@router.put(
    "/{order_id}/status",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Overwrite order status (admin only).

    Any of pending | processing | shipped | completed | cancelled is
    accepted regardless of the current status.
    """
    service.update_status(session, order_id, payload)
    return MessageResponse(message="Order status updated")
