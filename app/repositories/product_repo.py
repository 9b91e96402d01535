# app/repositories/product_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order, OrderItem
from app.models.product import Category, Product


class ProductRepository:
    """
    Data access layer for Product & Category.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def get_many(self, session: Session, product_ids: list[int]) -> dict[int, Product]:
        if not product_ids:
            return {}
        stmt = select(Product).where(Product.product_id.in_(product_ids))
        return {p.product_id: p for p in session.exec(stmt).all()}

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        category_id: int | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_featured(self, session: Session, limit: int = 8) -> list[Product]:
        """
        Best sellers first (units sold on non-cancelled orders), then newest.
        Products that never sold still fill the list.
        """
        sold = (
            select(
                OrderItem.product_id,
                func.sum(OrderItem.quantity).label("units"),
            )
            .join(Order, Order.order_id == OrderItem.order_id)
            .where(Order.status != "cancelled")
            .group_by(OrderItem.product_id)
            .subquery()
        )
        stmt = (
            select(Product)
            .outerjoin(sold, sold.c.product_id == Product.product_id)
            .order_by(
                func.coalesce(sold.c.units, 0).desc(),
                Product.created_at.desc(),
                Product.product_id.desc(),
            )
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def stock_counts(self, session: Session, low_threshold: int) -> tuple[int, int, int, int]:
        """(total, in_stock, low_stock, out_of_stock) over all products."""
        stmt = select(
            func.count(Product.product_id),
            func.count(Product.product_id).filter(Product.stock > 0),
            func.count(Product.product_id).filter(
                Product.stock > 0, Product.stock <= low_threshold
            ),
            func.count(Product.product_id).filter(Product.stock <= 0),
        )
        total, in_stock, low_stock, out_of_stock = session.exec(stmt).one()
        return int(total or 0), int(in_stock or 0), int(low_stock or 0), int(out_of_stock or 0)

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

    # ----- Categories -----

    def get_category(self, session: Session, category_id: int) -> Category | None:
        return session.get(Category, category_id)

    def get_category_by_name(self, session: Session, name: str) -> Category | None:
        stmt = select(Category).where(Category.name == name)
        return session.exec(stmt).first()

    def list_categories(self, session: Session) -> list[Category]:
        stmt = select(Category).order_by(Category.name)
        return list(session.exec(stmt).all())

    def count_categories(self, session: Session) -> int:
        value = session.exec(select(func.count()).select_from(Category)).one()
        return int(value or 0)

    def count_products_in_category(self, session: Session, category_id: int) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.category_id == category_id)
        return int(session.exec(stmt).one() or 0)

    def create_category(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def update_category(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def delete_category(self, session: Session, category: Category) -> None:
        session.delete(category)
        session.commit()
