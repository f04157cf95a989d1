"""Repository primitives for product entities."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from shopapi.db.errors import flush
from shopapi.db.models.product import Product


def create_product(
    session: Session,
    *,
    owner_id: int,
    name: str,
    price: float,
    content: str | None = None,
) -> Product:
    """Create and return a product row. Raises ``RecordNotFoundError`` for an unknown owner."""
    product = Product(owner_id=owner_id, name=name, price=price, content=content)
    session.add(product)
    flush(session)
    session.refresh(product)
    return product


def get_product(session: Session, product_id: int) -> Product | None:
    """Fetch a product by id."""
    return session.get(Product, product_id)


def list_products(
    session: Session,
    *,
    owner_id: int | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Product]:
    """List products with optional owner filtering."""
    stmt = select(Product)
    if owner_id is not None:
        stmt = stmt.where(Product.owner_id == owner_id)
    stmt = stmt.order_by(Product.id).limit(limit).offset(offset)
    return list(session.scalars(stmt))
