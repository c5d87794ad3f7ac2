"""Unit tests for the User domain model and field rules."""

import unittest
from dataclasses import asdict
from datetime import datetime, timezone

from domain.model.user import User, field_errors, is_valid_email, normalize_email


class TestEmailRules(unittest.TestCase):

    def test_accepts_plain_addresses(self):
        for email in ("a@b.com", "first.last@bank.co.uk", "A@B.COM"):
            self.assertTrue(is_valid_email(email), email)

    def test_rejects_malformed_addresses(self):
        for email in ("bad-email", "a@b", "@b.com", "a b@c.com", "a@b.com ", "a@@b.com", "a@b.com\n"):
            self.assertFalse(is_valid_email(email), repr(email))

    def test_normalize_lowercases(self):
        self.assertEqual(normalize_email("A@B.Com"), "a@b.com")


class TestFieldErrors(unittest.TestCase):

    def test_valid_record_has_no_errors(self):
        self.assertEqual(field_errors("Ann", "a@b.com"), [])

    def test_blank_name(self):
        self.assertEqual(field_errors("   ", "a@b.com"), ["Please provide a name"])

    def test_long_name(self):
        self.assertEqual(field_errors("x" * 51, "a@b.com"), ["Name cannot be more than 50 characters"])

    def test_errors_are_reported_in_field_order(self):
        self.assertEqual(field_errors("", "nope"), ["Please provide a name", "Please provide a valid email"])


class TestPublicView(unittest.TestCase):

    def test_public_view_never_contains_password_hash(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        user = User(id="u1", name="Ann", email="a@b.com", created_at=now, updated_at=now,
                    password_hash="$2b$04$secret")

        view = user.public_view()

        self.assertEqual(view, {"id": "u1", "name": "Ann", "email": "a@b.com", "createdAt": now})
        self.assertNotIn("$2b$04$secret", view.values())
        self.assertIn("password_hash", asdict(user))
