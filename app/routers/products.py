# app/routers/products.py
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.order import MessageResponse
from app.schemas.product import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from app.schemas.stats import ProductStats
from app.services.product_service import ProductService

router = APIRouter(tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public catalog --------


@router.get("/products", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
    category_id: int | None = None,
):
    """
    List products, newest first. Optional `category_id` filter.
    """
    return service.list_products(session, skip=skip, limit=limit, category_id=category_id)


# Declared before /products/{product_id} so the literal paths win
@router.get("/products/featured", response_model=list[ProductRead])
def list_featured_products(
    session: Session = Depends(get_session),
    limit: int = Query(default=8, ge=1, le=50),
):
    """
    Home page selection: best sellers first, then the newest products.
    """
    return service.list_featured(session, limit=limit)


@router.get("/products/stats", response_model=ProductStats)
def product_stats(session: Session = Depends(get_session)):
    return service.get_stats(session)


@router.get("/products/{product_id}", response_model=ProductRead)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    return service.get_product(session, product_id)


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    return service.list_categories(session)


@router.get("/categories/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: int,
    session: Session = Depends(get_session),
):
    return service.get_category(session, category_id)


# -------- Admin endpoints --------


@router.post(
    "/products",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a product (admin only).
    """
    return service.create_product(session, payload)


@router.put(
    "/products/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Partial update of a product (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    """
    Delete a product (admin only).
    """
    service.delete_product(session, product_id)


@router.post(
    "/categories",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    """
    Create a category (admin only).
    """
    return service.create_category(session, payload)


@router.put(
    "/categories/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    """
    Rename a category (admin only). A blank name answers 400.
    """
    return service.update_category(session, category_id, payload)


@router.delete(
    "/categories/{category_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_category(
    category_id: int,
    session: Session = Depends(get_session),
):
    """
    Delete a category (admin only). Refused while products still use it.
    """
    service.delete_category(session, category_id)
    return MessageResponse(message="Category deleted")
