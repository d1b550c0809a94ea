"""Admin session gate state machine."""
import pytest

from sanam.session import LOGIN_PATH, GateState, SessionGate, subscribe


class FakeSource:
    def __init__(self, session=None, error=None):
        self.session = session
        self.error = error
        self.listeners = []
        self.sign_outs = 0

    def get_session(self):
        if self.error:
            raise self.error
        return self.session

    def sign_out(self):
        self.sign_outs += 1

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def emit(self, event, session):
        for callback in list(self.listeners):
            callback(event, session)


def test_gate_starts_in_checking_and_shows_loading():
    gate = SessionGate(FakeSource())

    assert gate.state is GateState.CHECKING
    assert gate.route().action == "loading"
    assert not gate.is_authenticated()


def test_initial_lookup_with_session_authenticates():
    with SessionGate(FakeSource(session={"user_id": "u1"})) as gate:
        assert gate.state is GateState.AUTHENTICATED
        assert gate.route().action == "allow"


def test_initial_lookup_without_session_redirects_to_login():
    with SessionGate(FakeSource()) as gate:
        assert gate.state is GateState.UNAUTHENTICATED
        assert gate.route() == ("redirect", LOGIN_PATH)


def test_failed_lookup_resolves_to_unauthenticated():
    with SessionGate(FakeSource(error=RuntimeError("network down"))) as gate:
        assert gate.state is GateState.UNAUTHENTICATED


def test_notifications_move_the_gate_both_ways():
    source = FakeSource()
    with SessionGate(source) as gate:
        source.emit("SIGNED_IN", {"user_id": "u1"})
        assert gate.is_authenticated()

        source.emit("TOKEN_REFRESHED", {"user_id": "u1"})
        assert gate.is_authenticated()

        source.emit("SIGNED_OUT", None)
        assert gate.state is GateState.UNAUTHENTICATED


def test_close_unsubscribes_and_ignores_late_events():
    source = FakeSource(session={"user_id": "u1"})
    gate = SessionGate(source).open()
    assert len(source.listeners) == 1

    gate.close()
    assert source.listeners == []

    # a notification or refresh arriving after teardown changes nothing
    gate._on_auth_change("SIGNED_OUT", None)
    source.session = None
    gate.refresh()
    assert gate.state is GateState.AUTHENTICATED


def test_context_manager_releases_listener_when_body_raises():
    source = FakeSource()
    with pytest.raises(ValueError):
        with SessionGate(source):
            raise ValueError("boom")
    assert source.listeners == []


def test_close_twice_is_harmless():
    source = FakeSource()
    gate = SessionGate(source).open()
    gate.close()
    gate.close()
    assert source.listeners == []


def test_logout_signs_out_and_returns_login_path_without_waiting():
    source = FakeSource(session={"user_id": "u1"})
    with SessionGate(source, login_path="/admin/login") as gate:
        assert gate.logout() == "/admin/login"
        assert source.sign_outs == 1
        # no SIGNED_OUT notification has arrived yet
        assert gate.is_authenticated()


def test_logout_redirects_even_when_sign_out_fails():
    class Failing(FakeSource):
        def sign_out(self):
            raise RuntimeError("session_not_found")

    with SessionGate(Failing(session={"user_id": "u1"})) as gate:
        assert gate.logout() == LOGIN_PATH


def test_subscribe_accepts_subscription_objects():
    class Subscription:
        def __init__(self):
            self.cancelled = False

        def unsubscribe(self):
            self.cancelled = True

    sub = Subscription()

    class Source(FakeSource):
        def on_auth_state_change(self, callback):
            return sub

    unsubscribe = subscribe(Source(), lambda event, session: None)
    unsubscribe()
    assert sub.cancelled
