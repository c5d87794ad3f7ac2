"""Terminal front end for Okobo Bank.

Usage:
    okobo open                 # landing page, redirects by session state
    okobo home                 # dashboard (requires a session)
    okobo signup --email a@b.com --name Ann
    okobo signin --email a@b.com
    okobo logout

Passwords are prompted for unless --password is given.
"""

import argparse
import asyncio
import getpass
import logging
import os
import sys

from dotenv import load_dotenv

from okobo.api_client import AuthClient, DEFAULT_TIMEOUT_SECONDS
from okobo.pages import HOME_PATH, LANDING_PATH, resolve
from okobo.session import SessionContext
from okobo.storage import DEFAULT_SESSION_FILE, SessionStore

logger = logging.getLogger(__name__)


def build_session() -> SessionContext:
    client = AuthClient(
        os.getenv("OKOBO_API_URL", "http://localhost:8000"),
        timeout=float(os.getenv("OKOBO_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
    )
    store = SessionStore(os.getenv("OKOBO_SESSION_FILE", DEFAULT_SESSION_FILE))
    return SessionContext(client, store)


async def _show(session: SessionContext, path: str) -> int:
    state = await session.restore()
    print(resolve(path, state).render())
    return 0


async def _authenticate(session: SessionContext, args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    if args.command == "signup":
        result = await session.signup(args.email, password, args.name)
    else:
        result = await session.signin(args.email, password)

    if not result.ok:
        print(f"{result.error or 'Error'}: {result.message}", file=sys.stderr)
        return 1

    print(result.message)
    print(resolve(HOME_PATH, session.state).render())
    return 0


async def run(args: argparse.Namespace, session: SessionContext) -> int:
    if args.command == "open":
        return await _show(session, LANDING_PATH)
    if args.command == "home":
        return await _show(session, HOME_PATH)
    if args.command in ("signin", "signup"):
        return await _authenticate(session, args)
    if args.command == "logout":
        session.logout()
        print("Signed out.")
        return 0
    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="okobo", description="Okobo Bank terminal client")
    parser.add_argument("--verbose", "-v", action="store_true", help="log API calls")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("open", help="open the landing page")
    sub.add_parser("home", help="open the account dashboard")

    signin = sub.add_parser("signin", help="sign in to an existing account")
    signin.add_argument("--email", required=True)
    signin.add_argument("--password")

    signup = sub.add_parser("signup", help="create an account")
    signup.add_argument("--email", required=True)
    signup.add_argument("--name", required=True)
    signup.add_argument("--password")

    sub.add_parser("logout", help="discard the stored session")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(args, build_session()))


if __name__ == "__main__":
    sys.exit(main())
