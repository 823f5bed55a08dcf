"""
app/mappers package marker.
"""

from app.mappers.wire_mapper import project_user

__all__ = [
    "project_user",
]
