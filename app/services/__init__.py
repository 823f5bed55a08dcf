"""
app/services package marker.
"""

from app.services.user_batcher import iter_user_batches
from app.services.user_import_service import UserImportRun, build_user_import_run

__all__ = [
    "UserImportRun",
    "build_user_import_run",
    "iter_user_batches",
]
