"""
app/schemas package marker.
"""

from app.schemas.bulk_create import BulkCreateRequest, BulkCreateResponse

__all__ = [
    "BulkCreateRequest",
    "BulkCreateResponse",
]
