"""
app/schemas/bulk_create.py

Wire schemas for the bulk user create endpoint.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BulkCreateRequest(BaseModel):
    """
    Request body: `{"users": [...]}`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    users: list[dict[str, Any]] = Field(min_length=1)


class BulkCreateResponse(BaseModel):
    """
    Success body returned for a delivered batch.

    Entries in `failed` are passed through as returned by the service.
    """

    model_config = ConfigDict(extra="ignore")

    failed: list[Any] = Field(default_factory=list)
