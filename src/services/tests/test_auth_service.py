"""Unit tests for auth_service (signup and signin flows)."""

import unittest
from unittest.mock import MagicMock

from adapter.fake.user_repository import FakeUserRepository
from adapter.security.bcrypt_hasher import BcryptPasswordHasher
from domain.model.errors import (
    AuthenticationError,
    DuplicateError,
    InvalidIdentifierError,
    StoreDuplicateKeyError,
    StoreUnavailableError,
    StoreValidationError,
    ValidationError,
)
from services.auth_service import authenticate, register, validate_signin, validate_signup


class AuthServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.hasher = BcryptPasswordHasher(rounds=4)


class TestValidation(unittest.TestCase):

    def test_missing_fields(self):
        for email, password, name in [
            (None, 'secret1', 'Ann'),
            ('a@b.com', None, 'Ann'),
            ('a@b.com', 'secret1', None),
            ('', 'secret1', 'Ann'),
        ]:
            with self.assertRaises(ValidationError) as ctx:
                validate_signup(email, password, name)
            self.assertEqual(ctx.exception.error, 'All fields are required')

    def test_short_password_is_rejected_before_the_email_check(self):
        for password in ('1', '12345'):
            with self.assertRaises(ValidationError) as ctx:
                validate_signup('bad-email', password, 'Ann')
            self.assertEqual(ctx.exception.error, 'Password too short')
            self.assertEqual(ctx.exception.message, 'Password must be at least 6 characters long')

    def test_six_character_password_is_enough(self):
        validate_signup('a@b.com', '123456', 'Ann')

    def test_bad_email(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_signup('bad-email', 'secret1', 'Ann')
        self.assertEqual(ctx.exception.error, 'Invalid email format')

    def test_signin_missing_credentials(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_signin('a@b.com', '')
        self.assertEqual(ctx.exception.error, 'Missing credentials')
        self.assertEqual(ctx.exception.message, 'Email and password are required')


class TestRegister(AuthServiceTestCase):

    def test_register_normalizes_email_and_trims_name(self):
        user = register(self.repo, self.hasher, 'Ann@B.com', 'secret1', '  Ann  ')

        self.assertEqual(user.email, 'ann@b.com')
        self.assertEqual(user.name, 'Ann')
        self.assertNotEqual(user.password_hash, 'secret1')
        self.assertTrue(self.hasher.verify('secret1', user.password_hash))

    def test_register_same_email_different_case_conflicts(self):
        register(self.repo, self.hasher, 'a@b.com', 'secret1', 'Ann')

        with self.assertRaises(DuplicateError) as ctx:
            register(self.repo, self.hasher, 'A@b.com', 'secret2', 'Ann Again')

        self.assertEqual(ctx.exception.error, 'User already exists')
        self.assertEqual(ctx.exception.message, 'An account with this email already exists')

    def test_invalid_input_never_reaches_the_store(self):
        repo = MagicMock()

        with self.assertRaises(ValidationError):
            register(repo, self.hasher, 'bad-email', 'secret1', 'Ann')

        repo.get_by_email.assert_not_called()
        repo.create.assert_not_called()

    def test_duplicate_detected_at_write_time_is_a_conflict(self):
        repo = MagicMock()
        repo.get_by_email.return_value = None
        repo.create.side_effect = StoreDuplicateKeyError('E11000')

        with self.assertRaises(DuplicateError) as ctx:
            register(repo, self.hasher, 'a@b.com', 'secret1', 'Ann')

        self.assertEqual(ctx.exception.error, 'Duplicate entry')

    def test_store_validation_uses_first_message(self):
        with self.assertRaises(ValidationError) as ctx:
            register(self.repo, self.hasher, 'a@b.com', 'secret1', '   ')

        self.assertEqual(ctx.exception.error, 'Validation failed')
        self.assertEqual(ctx.exception.message, 'Please provide a name')

    def test_store_validation_without_messages_uses_fallback(self):
        repo = MagicMock()
        repo.get_by_email.return_value = None
        repo.create.side_effect = StoreValidationError([])

        with self.assertRaises(ValidationError) as ctx:
            register(repo, self.hasher, 'a@b.com', 'secret1', 'Ann')

        self.assertEqual(ctx.exception.message, 'Please check your input and try again')

    def test_other_store_errors_propagate(self):
        repo = MagicMock()
        repo.get_by_email.side_effect = StoreUnavailableError('down')

        with self.assertRaises(StoreUnavailableError):
            register(repo, self.hasher, 'a@b.com', 'secret1', 'Ann')


class TestAuthenticate(AuthServiceTestCase):

    def setUp(self):
        super().setUp()
        self.user = register(self.repo, self.hasher, 'a@b.com', 'secret1', 'Ann')

    def test_success_records_last_login(self):
        user = authenticate(self.repo, self.hasher, 'A@B.com', 'secret1')

        self.assertEqual(user.id, self.user.id)
        self.assertIsNotNone(self.repo.get_by_id(self.user.id).last_login)

    def test_unknown_email(self):
        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(self.repo, self.hasher, 'unknown@x.com', 'anything')

        self.assertEqual(ctx.exception.message, 'No account found with this email address')

    def test_wrong_password_is_distinct_from_unknown_email(self):
        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(self.repo, self.hasher, 'a@b.com', 'wrong')

        self.assertEqual(ctx.exception.error, 'Invalid credentials')
        self.assertEqual(ctx.exception.message, 'Incorrect password. Please try again.')

    def test_repeated_wrong_password_does_not_touch_last_login(self):
        writes_before = self.repo.writes
        for _ in range(2):
            with self.assertRaises(AuthenticationError):
                authenticate(self.repo, self.hasher, 'a@b.com', 'wrong')

        self.assertIsNone(self.repo.get_by_id(self.user.id).last_login)
        self.assertEqual(self.repo.writes, writes_before)

    def test_inactive_account_is_not_found(self):
        self.user.is_active = False

        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(self.repo, self.hasher, 'a@b.com', 'secret1')

        self.assertEqual(ctx.exception.message, 'No account found with this email address')

    def test_malformed_stored_id_is_a_validation_error(self):
        repo = MagicMock()
        repo.get_by_email.return_value = self.user
        repo.update_last_login.side_effect = InvalidIdentifierError('bad id')

        with self.assertRaises(ValidationError) as ctx:
            authenticate(repo, self.hasher, 'a@b.com', 'secret1')

        self.assertEqual(ctx.exception.error, 'Invalid request')

    def test_lookup_uses_active_only(self):
        repo = MagicMock()
        repo.get_by_email.return_value = None

        with self.assertRaises(AuthenticationError):
            authenticate(repo, self.hasher, 'A@b.com', 'secret1')

        repo.get_by_email.assert_called_once_with('a@b.com', active_only=True)
