"""Tests for page guards, redirects and the CLI."""

import io
import unittest
from contextlib import redirect_stdout
from unittest.mock import AsyncMock, MagicMock

from okobo.api_client import AuthResult
from okobo.main import build_parser, run
from okobo.pages import (
    HOME_PATH,
    LANDING_PATH,
    SIGNIN_PATH,
    Page,
    Redirect,
    home_page,
    landing_page,
    resolve,
    signin_page,
)
from okobo.session import LOADING, SIGNED_OUT, SessionState, SessionStatus

ANN = {"id": "ab" * 16, "name": "Ann", "email": "a@b.com", "createdAt": "2026-01-01T00:00:00Z"}
SIGNED_IN = SessionState(SessionStatus.AUTHENTICATED, ANN, "tok-1")


class TestGuards(unittest.TestCase):

    def test_loading_renders_loading_page_everywhere(self):
        for page in (landing_page, home_page, signin_page):
            outcome = page(LOADING)
            self.assertIsInstance(outcome, Page)
            self.assertIn("Loading...", outcome.render())

    def test_landing_redirects_by_state(self):
        self.assertEqual(landing_page(SIGNED_IN), Redirect(HOME_PATH))
        self.assertEqual(landing_page(SIGNED_OUT), Redirect(SIGNIN_PATH))

    def test_home_requires_authentication(self):
        self.assertEqual(home_page(SIGNED_OUT), Redirect(SIGNIN_PATH))

    def test_signin_sends_authenticated_viewers_home(self):
        self.assertEqual(signin_page(SIGNED_IN), Redirect(HOME_PATH))

    def test_dashboard_shows_static_balances(self):
        text = home_page(SIGNED_IN).render()

        self.assertIn("Welcome, Ann", text)
        self.assertIn("$10,000.00", text)
        self.assertIn("$5,000.00", text)
        self.assertIn("$2,500.00", text)
        self.assertIn("No recent transactions to display", text)


class TestResolve(unittest.TestCase):

    def test_landing_resolves_to_dashboard_when_signed_in(self):
        self.assertEqual(resolve(LANDING_PATH, SIGNED_IN).path, HOME_PATH)

    def test_landing_resolves_to_signin_when_signed_out(self):
        self.assertEqual(resolve(LANDING_PATH, SIGNED_OUT).path, SIGNIN_PATH)

    def test_home_resolves_to_signin_when_signed_out(self):
        self.assertEqual(resolve(HOME_PATH, SIGNED_OUT).path, SIGNIN_PATH)

    def test_unknown_path(self):
        with self.assertRaises(KeyError):
            resolve("/nowhere", SIGNED_IN)


class TestCli(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.session = MagicMock()
        self.session.restore = AsyncMock(return_value=SIGNED_IN)
        self.session.signin = AsyncMock()
        self.session.state = SIGNED_IN

    async def _run(self, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = await run(build_parser().parse_args(argv), self.session)
        return code, out.getvalue()

    async def test_open_follows_redirect(self):
        code, out = await self._run(["open"])

        self.assertEqual(code, 0)
        self.assertIn("Account Dashboard", out)

    async def test_signin_success_prints_dashboard(self):
        self.session.signin.return_value = AuthResult(ok=True, status_code=200, message="Welcome back, Ann!")

        code, out = await self._run(["signin", "--email", "a@b.com", "--password", "secret1"])

        self.assertEqual(code, 0)
        self.session.signin.assert_awaited_once_with("a@b.com", "secret1")
        self.assertIn("Welcome back, Ann!", out)
        self.assertIn("$10,000.00", out)

    async def test_signin_failure_returns_nonzero(self):
        self.session.signin.return_value = AuthResult(
            ok=False, status_code=401, message="Incorrect password. Please try again.", error="Invalid credentials"
        )

        code, _ = await self._run(["signin", "--email", "a@b.com", "--password", "wrong"])

        self.assertEqual(code, 1)

    async def test_logout(self):
        code, out = await self._run(["logout"])

        self.assertEqual(code, 0)
        self.session.logout.assert_called_once()
        self.assertIn("Signed out.", out)


if __name__ == '__main__':
    unittest.main()
