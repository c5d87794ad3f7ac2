"""Pages and their auth guards.

Each page maps the current session state to either a ``Redirect`` or a
rendered ``Page``; ``resolve`` follows redirects until a page is reached.
"""

from dataclasses import dataclass, field

from okobo.session import SessionState

BANK_NAME = "Okobo Bank"

LANDING_PATH = "/"
HOME_PATH = "/home"
SIGNIN_PATH = "/signin"

MAX_REDIRECTS = 5

# Dashboard figures are fixed demo values
BALANCES = (
    ("Account Balance", "$10,000.00"),
    ("Available Credit", "$5,000.00"),
    ("Savings", "$2,500.00"),
)


@dataclass(frozen=True)
class Redirect:
    location: str


@dataclass(frozen=True)
class Page:
    path: str
    title: str
    lines: tuple[str, ...] = field(default_factory=tuple)

    def render(self) -> str:
        return "\n".join((self.title, "=" * len(self.title), *self.lines))


def _loading(path: str) -> Page:
    return Page(path, BANK_NAME, ("Loading...",))


def landing_page(state: SessionState) -> Page | Redirect:
    if state.loading:
        return _loading(LANDING_PATH)
    return Redirect(HOME_PATH if state.is_authenticated else SIGNIN_PATH)


def signin_page(state: SessionState) -> Page | Redirect:
    if state.loading:
        return _loading(SIGNIN_PATH)
    if state.is_authenticated:
        return Redirect(HOME_PATH)
    return Page(SIGNIN_PATH, f"{BANK_NAME}: Sign in", (
        "You are not signed in.",
        "Run `okobo signin` to sign in or `okobo signup` to create an account.",
    ))


def home_page(state: SessionState) -> Page | Redirect:
    if state.loading:
        return _loading(HOME_PATH)
    if not state.is_authenticated:
        return Redirect(SIGNIN_PATH)

    name = (state.user or {}).get("name", "")
    lines = [f"Welcome, {name}", "", "Account Dashboard", ""]
    lines += [f"  {label:<18}{amount:>12}" for label, amount in BALANCES]
    lines += ["", "Recent Transactions", "  No recent transactions to display"]
    return Page(HOME_PATH, BANK_NAME, tuple(lines))


ROUTES = {
    LANDING_PATH: landing_page,
    SIGNIN_PATH: signin_page,
    HOME_PATH: home_page,
}


def resolve(path: str, state: SessionState) -> Page:
    """Render path for state, following redirects.

    Raises:
        KeyError: unknown path
        RuntimeError: redirect loop
    """
    for _ in range(MAX_REDIRECTS + 1):
        outcome = ROUTES[path](state)
        if isinstance(outcome, Page):
            return outcome
        path = outcome.location
    raise RuntimeError(f"Too many redirects while resolving {path}")
