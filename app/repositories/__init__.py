"""
app/repositories package marker.
"""

from app.repositories.user_source_repository import SQLAlchemyUserSource

__all__ = [
    "SQLAlchemyUserSource",
]
