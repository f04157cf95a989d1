"""Model module imports for SQLAlchemy relationship registration."""

from shopapi.db.models.product import Product
from shopapi.db.models.user import Base
from shopapi.db.models.user import User

__all__ = [
    "Base",
    "Product",
    "User",
]
