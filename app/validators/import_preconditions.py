"""
app/validators/import_preconditions.py

Checks that must pass before a user import may start.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import inspect

from app.config import UserImportSettings
from app.errors import ImportConfigurationError
from db.base import Base
from db.models.user import User

logger = logging.getLogger(__name__)

ModelResolver = Callable[[], type | None]


def _is_supported_model(model: Any) -> bool:
    if not (isinstance(model, type) and issubclass(model, Base)):
        return False
    mapper = inspect(model, raiseerr=False)
    return mapper is not None and len(mapper.primary_key) == 1


def load_model_path(path: str) -> type[Any] | None:
    """
    Resolve a `"package.module:ClassName"` path, or None when it does not exist.
    """

    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        logger.warning("Invalid user model path=%s expected 'module:ClassName'", path)
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        logger.warning("User model module not importable path=%s error=%s", path, exc)
        return None
    return getattr(module, attribute, None)


class ImportPreconditions:
    """
    Ordered go/no-go checks for an import run.

    The first failing check raises ImportConfigurationError with a message
    telling the operator what to fix.
    """

    def __init__(
        self,
        settings: UserImportSettings,
        *,
        model_resolver: ModelResolver | None = None,
    ) -> None:
        self._settings = settings
        self._model_resolver = model_resolver

    def resolve_model(self) -> type[Any] | None:
        if self._model_resolver is not None:
            return self._model_resolver()
        if self._settings.user_model:
            return load_model_path(self._settings.user_model)
        return User

    def assert_runnable(self) -> type[Any]:
        """
        Run every check in order and return the resolved record model.
        """

        if not self._settings.is_production:
            raise ImportConfigurationError(
                "You can only import your users from your production environment "
                f"(ENVIRONMENT is '{self._settings.environment}')."
            )

        model = self.resolve_model()
        if model is None:
            raise ImportConfigurationError(
                "We couldn't find your user model, please set one with INTERCOM_USER_MODEL."
            )

        if not _is_supported_model(model):
            raise ImportConfigurationError(
                "Only SQLAlchemy declarative models with a single-column primary key are supported."
            )

        if not self._settings.has_credentials:
            raise ImportConfigurationError(
                "Please set INTERCOM_APP_ID and INTERCOM_API_KEY before importing users."
            )

        return model
