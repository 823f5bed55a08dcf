"""
app/connectors/bulk_create_connector.py

HTTP delivery of user batches to the bulk create endpoint.
"""

from __future__ import annotations

import logging
import time
from urllib.parse import urlsplit

import requests
from pydantic import ValidationError
from requests.certs import where as default_ca_bundle_path

from app.config import UserImportSettings
from app.domain.user_import import UserBatch
from app.errors import (
    ImportConfigurationError,
    InvalidDeliveryResponseError,
    TerminalDeliveryError,
    TransientDeliveryError,
)
from app.schemas.bulk_create import BulkCreateResponse

logger = logging.getLogger(__name__)

BULK_CREATE_PATH = "/api/v1/users/bulk_create"
MAX_REQUEST_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 0.5
SUCCESS_STATUS_CODES = frozenset({200, 201})
FORBIDDEN_STATUS_CODE = 403


class BulkCreateConnector:
    """
    Sends one batch per request with a bounded, fixed-delay retry.
    """

    def __init__(
        self,
        *,
        settings: UserImportSettings,
        session: requests.Session | None = None,
        max_attempts: int = MAX_REQUEST_ATTEMPTS,
        retry_delay_seconds: float = RETRY_DELAY_SECONDS,
    ) -> None:
        self.url = f"{settings.api_base_url.rstrip('/')}{BULK_CREATE_PATH}"
        self._session = session or requests.Session()
        self._session.auth = (settings.app_id or "", settings.api_key or "")
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        if urlsplit(self.url).scheme == "https":
            self._session.verify = settings.ca_bundle_path or default_ca_bundle_path()
        self._timeout_seconds = settings.timeout_seconds
        self._max_attempts = max(1, max_attempts)
        self._retry_delay_seconds = retry_delay_seconds

    def deliver(self, batch: UserBatch) -> BulkCreateResponse:
        """
        Deliver one batch and return the service's report of failed users.

        Raises:
            ImportConfigurationError: The service rejected the credentials.
            TerminalDeliveryError: Every attempt failed.
            InvalidDeliveryResponseError: A success response had an unreadable body.
        """

        body = batch.to_json()
        history: list[TransientDeliveryError] = []
        last_exception: Exception | None = None

        for attempt in range(1, self._max_attempts + 1):
            try:
                response = self._session.post(self.url, data=body, timeout=self._timeout_seconds)
            except requests.exceptions.SSLError as exc:
                logger.error("Bulk create TLS verification failed url=%s error=%s", self.url, exc)
                raise TerminalDeliveryError(
                    "The bulk create request failed certificate verification.",
                    status_code=None,
                    attempts=attempt,
                    history=history,
                ) from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_exception = exc
                history.append(TransientDeliveryError(attempt=attempt, cause=exc))
            else:
                last_exception = None
                if response.status_code == FORBIDDEN_STATUS_CODE:
                    logger.error("Bulk create rejected credentials url=%s status=403", self.url)
                    raise ImportConfigurationError(
                        "App ID or API key are incorrect, please check INTERCOM_APP_ID and INTERCOM_API_KEY."
                    )
                if response.status_code in SUCCESS_STATUS_CODES:
                    if attempt > 1:
                        logger.info("Bulk create succeeded on attempt=%s/%s", attempt, self._max_attempts)
                    return self._parse_response(response, attempt=attempt, history=history)
                history.append(TransientDeliveryError(attempt=attempt, status_code=response.status_code))

            if attempt >= self._max_attempts:
                break

            logger.warning(
                "Bulk create retry attempt=%s/%s wait_seconds=%.2f error=%s",
                attempt,
                self._max_attempts,
                self._retry_delay_seconds,
                history[-1],
            )
            time.sleep(self._retry_delay_seconds)

        last_status = history[-1].status_code
        logger.error(
            "Bulk create exhausted retries url=%s attempts=%s status=%s",
            self.url,
            self._max_attempts,
            last_status,
        )
        if last_status is not None:
            message = (
                f"The bulk create request failed with the code: {last_status}, "
                f"after {self._max_attempts} attempts."
            )
        else:
            message = f"The bulk create request could not reach the server after {self._max_attempts} attempts."
        raise TerminalDeliveryError(
            message,
            status_code=last_status,
            attempts=self._max_attempts,
            history=history,
        ) from last_exception

    def close(self) -> None:
        self._session.close()

    def _parse_response(
        self,
        response: requests.Response,
        *,
        attempt: int,
        history: list[TransientDeliveryError],
    ) -> BulkCreateResponse:
        try:
            return BulkCreateResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise InvalidDeliveryResponseError(
                "The bulk create response was not a valid JSON document.",
                status_code=response.status_code,
                attempts=attempt,
                history=history,
            ) from exc
