"""Service helpers for product API operations."""

from __future__ import annotations

from sqlalchemy.orm import Session

from shopapi.core.errors import NotFoundFailure
from shopapi.db.errors import PersistenceError
from shopapi.db.repository.products import create_product
from shopapi.db.repository.products import get_product
from shopapi.db.repository.products import list_products
from shopapi.schemas.product import ProductCreate


def create_product_service(session: Session, payload: ProductCreate, *, owner_id: int):
    """Create and persist a product for its owner."""
    try:
        product = create_product(
            session,
            owner_id=owner_id,
            name=payload.name,
            price=payload.price,
            content=payload.content,
        )
        session.commit()
        return product
    except PersistenceError:
        session.rollback()
        raise


def list_products_service(session: Session):
    """List all products."""
    return list_products(session)


def get_product_service(session: Session, product_id: int):
    """Fetch a product or raise not found."""
    product = get_product(session, product_id)
    if product is None:
        raise NotFoundFailure(message="Product not found")
    return product
