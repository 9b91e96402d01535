# app/repositories/stats_repo.py
from datetime import datetime

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order


class StatsRepository:
    """
    Read-only aggregated queries for the admin dashboard.
    """

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        value = session.exec(stmt).one()
        return int(value or 0)

    def revenue_between(
        self,
        session: Session,
        start: datetime,
        end: datetime,
    ) -> tuple[int, int]:
        """
        (revenue, order_count) for orders placed in [start, end).
        Excludes cancelled orders.
        """
        stmt = select(
            func.coalesce(func.sum(Order.total), 0),
            func.count(Order.order_id),
        ).where(
            Order.status != "cancelled",
            Order.order_date >= start,
            Order.order_date < end,
        )
        revenue, count = session.exec(stmt).one()
        return int(revenue or 0), int(count or 0)
