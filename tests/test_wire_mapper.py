from __future__ import annotations

import unittest
import uuid
from dataclasses import dataclass
from typing import Any

from app.mappers.wire_mapper import project_user


@dataclass(frozen=True)
class _User:
    id: Any = None
    email: str | None = None
    name: str | None = None


class TestProjectUser(unittest.TestCase):
    def test_copies_every_present_field(self) -> None:
        wired = project_user(_User(id=7, email="ada@example.com", name="Ada"))
        self.assertEqual(wired, {"user_id": 7, "email": "ada@example.com", "name": "Ada"})

    def test_email_only_record_is_kept(self) -> None:
        wired = project_user(_User(email="ada@example.com"))
        self.assertEqual(wired, {"email": "ada@example.com"})

    def test_id_only_record_is_kept(self) -> None:
        wired = project_user(_User(id="usr_1", name=""))
        self.assertEqual(wired, {"user_id": "usr_1"})

    def test_returns_none_without_id_or_email(self) -> None:
        self.assertIsNone(project_user(_User(name="Nameless")))
        self.assertIsNone(project_user(_User()))

    def test_blank_strings_count_as_missing(self) -> None:
        self.assertIsNone(project_user(_User(id="  ", email="", name="Ada")))
        self.assertEqual(project_user(_User(id=3, email="   ", name=" ")), {"user_id": 3})

    def test_zero_id_is_present(self) -> None:
        self.assertEqual(project_user(_User(id=0)), {"user_id": 0})

    def test_non_scalar_id_is_stringified(self) -> None:
        user_id = uuid.UUID("12345678-1234-5678-1234-567812345678")
        wired = project_user(_User(id=user_id))
        self.assertEqual(wired, {"user_id": "12345678-1234-5678-1234-567812345678"})


if __name__ == "__main__":
    unittest.main()
