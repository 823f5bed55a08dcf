"""
app/mappers/wire_mapper.py

Projection of user records to the bulk create wire format.
"""

from __future__ import annotations

from typing import Any

from app.domain.user_import import ExportableUser, WireRecord


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def project_user(record: ExportableUser) -> WireRecord | None:
    """
    Map one record to its wire representation.

    Returns None when the record has neither an id nor an email, since the
    remote service cannot identify such a user.
    """

    wired: WireRecord = {}
    if _is_present(record.id):
        user_id = record.id
        wired["user_id"] = user_id if isinstance(user_id, (int, str)) else str(user_id)
    if _is_present(record.email):
        wired["email"] = record.email
    if _is_present(record.name):
        wired["name"] = record.name

    if "user_id" not in wired and "email" not in wired:
        return None
    return wired
