"""
app/validators package marker.
"""

from app.validators.import_preconditions import ImportPreconditions, load_model_path

__all__ = [
    "ImportPreconditions",
    "load_model_path",
]
