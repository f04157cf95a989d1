"""Product API routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shopapi.api.deps import get_db_session
from shopapi.api.deps import require_user
from shopapi.core.tokens import TokenClaims
from shopapi.schemas.product import CREATE_PRODUCT
from shopapi.schemas.product import GET_PRODUCT
from shopapi.schemas.product import LIST_PRODUCTS
from shopapi.schemas.product import ProductCreate
from shopapi.services.products import create_product_service
from shopapi.services.products import get_product_service
from shopapi.services.products import list_products_service

router = APIRouter(prefix="/product", tags=["product"])


@router.post("", **CREATE_PRODUCT.route_options())
def create_product_endpoint(
    claims: TokenClaims = Depends(require_user),
    payload: ProductCreate = Depends(CREATE_PRODUCT.body()),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Create a product owned by the authenticated user."""
    product = create_product_service(session, payload, owner_id=claims.id)
    return CREATE_PRODUCT.render(201, product)


@router.get("", **LIST_PRODUCTS.route_options())
def list_products_endpoint(session: Session = Depends(get_db_session)) -> JSONResponse:
    """List all products."""
    return LIST_PRODUCTS.render(200, list_products_service(session))


@router.get("/{product_id}", **GET_PRODUCT.route_options())
def get_product_endpoint(
    product_id: int,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Get a single product by id."""
    return GET_PRODUCT.render(200, get_product_service(session, product_id))
