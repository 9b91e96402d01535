# app/services/product_service.py
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.core.config import Settings, get_settings
from app.models.product import Category, Product
from app.repositories.product_repo import ProductRepository
from app.schemas.product import CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate
from app.schemas.stats import ProductStats


class ProductService:
    """
    Business logic for Product & Category.

    Responsibilities:
      - validation beyond pydantic (category must exist)
      - catalog views (featured products, stock overview)
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository, settings: Settings | None = None):
        self.repo = repo
        self.settings = settings or get_settings()

    def _ensure_category(self, session: Session, category_id: int | None) -> None:
        if category_id is not None and self.repo.get_category(session, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category not found",
            )

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        category_id: int | None = None,
    ) -> list[Product]:
        return self.repo.list_products(session, skip=skip, limit=limit, category_id=category_id)

    def get_product(self, session: Session, product_id: int) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        self._ensure_category(session, payload.category_id)
        product = Product(**payload.model_dump())
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: int,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product. Only fields present in the body change.
        """
        product = self.get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True)

        if "category_id" in changes:
            self._ensure_category(session, changes["category_id"])

        for field, value in changes.items():
            if value is None and field in {"name", "price", "stock"}:
                continue
            setattr(product, field, value)

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: int) -> None:
        """
        Delete a product.

        Products already referenced by order lines are kept for order
        history; deleting them answers 409.
        """
        product = self.get_product(session, product_id)
        try:
            self.repo.delete(session, product)
        except IntegrityError:
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product is referenced by existing orders",
            )

    # ----- Catalog views -----

    def list_featured(self, session: Session, limit: int = 8) -> list[Product]:
        return self.repo.list_featured(session, limit=limit)

    def get_stats(self, session: Session) -> ProductStats:
        """
        Stock overview for the catalog dashboard.
        """
        total, in_stock, low_stock, out_of_stock = self.repo.stock_counts(
            session, self.settings.LOW_STOCK_THRESHOLD
        )
        return ProductStats(
            total=total,
            in_stock=in_stock,
            low_stock=low_stock,
            out_of_stock=out_of_stock,
            categories=self.repo.count_categories(session),
        )

    # ----- Categories -----

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def get_category(self, session: Session, category_id: int) -> Category:
        category = self.repo.get_category(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        if self.repo.get_category_by_name(session, payload.name) is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category already exists",
            )
        return self.repo.create_category(session, Category(**payload.model_dump()))

    def update_category(
        self,
        session: Session,
        category_id: int,
        payload: CategoryUpdate,
    ) -> Category:
        """
        Rename a category; description is replaced when sent.

        Raises:
            HTTPException(404): category missing.
            HTTPException(400): blank name, or name taken by another category.
        """
        category = self.get_category(session, category_id)

        name = (payload.name or "").strip()
        if not name:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category name is required",
            )

        other = self.repo.get_category_by_name(session, name)
        if other is not None and other.category_id != category.category_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category already exists",
            )

        category.name = name
        if "description" in payload.model_fields_set:
            category.description = payload.description
        return self.repo.update_category(session, category)

    def delete_category(self, session: Session, category_id: int) -> None:
        """
        Delete a category. Refused (400) while products still use it.
        """
        category = self.get_category(session, category_id)
        in_use = self.repo.count_products_in_category(session, category_id)
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Category is still used by {in_use} product(s)",
            )
        self.repo.delete_category(session, category)
