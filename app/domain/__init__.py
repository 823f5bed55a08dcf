"""
app/domain package marker.
"""

from app.domain.user_import import (
    ExportableUser,
    ImportRunSummary,
    RecordSource,
    UserBatch,
    WireRecord,
)

__all__ = [
    "ExportableUser",
    "ImportRunSummary",
    "RecordSource",
    "UserBatch",
    "WireRecord",
]
