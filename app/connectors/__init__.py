"""
app/connectors package marker.
"""

from app.connectors.bulk_create_connector import BulkCreateConnector

__all__ = [
    "BulkCreateConnector",
]
