# sanam/session.py
import logging
import threading
from enum import Enum
from typing import Any, Callable, NamedTuple, Optional, Protocol

log = logging.getLogger("uvicorn.error")

LOGIN_PATH = "/admin"

AuthCallback = Callable[[str, Optional[Any]], None]
Unsubscribe = Callable[[], None]


class SessionSource(Protocol):
    """What the gate needs from an auth backend (``supabase.Client.auth`` fits)."""

    def get_session(self) -> Optional[Any]: ...

    def sign_out(self) -> None: ...

    def on_auth_state_change(self, callback: AuthCallback) -> Any: ...


class GateState(str, Enum):
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class RouteDecision(NamedTuple):
    action: str  # "loading" | "allow" | "redirect"
    redirect: Optional[str] = None


def subscribe(source: SessionSource, callback: AuthCallback) -> Unsubscribe:
    """Register for session changes and hand back a plain unsubscribe function."""
    handle = source.on_auth_state_change(callback)
    if callable(handle):
        return handle
    # gotrue returns a Subscription object
    return handle.unsubscribe


class SessionGate:
    """
    Guards the admin console.

    Starts in ``checking``; ``open()`` subscribes to session changes, then looks
    the session up once. From then on every sign-in, sign-out or token refresh
    notification moves the gate between ``authenticated`` and
    ``unauthenticated``. ``close()`` drops the subscription, and anything that
    arrives afterwards is ignored.

        with SessionGate(source) as gate:
            if not gate.is_authenticated():
                ...
    """

    def __init__(self, source: SessionSource, login_path: str = LOGIN_PATH):
        self.source = source
        self.login_path = login_path
        self.state = GateState.CHECKING
        self.session: Optional[Any] = None
        self._closed = threading.Event()
        self._unsubscribe: Optional[Unsubscribe] = None

    def open(self) -> "SessionGate":
        self._unsubscribe = subscribe(self.source, self._on_auth_change)
        self.refresh()
        return self

    def refresh(self) -> GateState:
        try:
            session = self.source.get_session()
        except Exception as e:
            # a lookup that fails is a lookup that found nobody
            log.warning(f"Session lookup failed: {e}")
            session = None
        self._apply(session)
        return self.state

    def _on_auth_change(self, event: str, session: Optional[Any]) -> None:
        log.info(f"Auth state change: {event}")
        self._apply(session)

    def _apply(self, session: Optional[Any]) -> None:
        if self._closed.is_set():
            return
        self.session = session
        self.state = GateState.AUTHENTICATED if session else GateState.UNAUTHENTICATED

    def close(self) -> None:
        self._closed.set()
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def __enter__(self) -> "SessionGate":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    def is_authenticated(self) -> bool:
        return self.state is GateState.AUTHENTICATED

    def route(self) -> RouteDecision:
        if self.state is GateState.CHECKING:
            return RouteDecision("loading")
        if self.state is GateState.AUTHENTICATED:
            return RouteDecision("allow")
        return RouteDecision("redirect", self.login_path)

    def logout(self) -> str:
        """Sign out and return where to send the caller. The auth notification may follow later."""
        try:
            self.source.sign_out()
        except Exception as e:
            # the caller goes back to the login page either way
            log.warning(f"Sign-out failed: {e}")
        return self.login_path
