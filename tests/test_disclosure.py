"""Tests for the secret disclosure state machine."""

import pytest
from dnicheck.client import (
    ClipboardError,
    ClipboardUnavailable,
    DisclosureController,
    DisclosureState,
    SystemClipboard,
    mask_secret,
)
from dnicheck.client.disclosure import COPY_FAILURE_SECONDS, COPY_SUCCESS_SECONDS
from dnicheck.identity import MatchVerdict

CONFIRMED = MatchVerdict.IDENTITY_CONFIRMED_WITH_CONTACT


class FakeClipboard:
    def __init__(self, error=None):
        self.error = error
        self.copied = []

    def copy(self, text):
        if self.error is not None:
            raise self.error
        self.copied.append(text)


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def controller(clipboard, clock):
    return DisclosureController(clipboard=clipboard, fallback=FakeClipboard(), clock=clock)


class TestMaskSecret:
    def test_examples(self):
        assert mask_secret("") == "—"
        assert mask_secret(None) == "—"
        assert mask_secret("a") == "••"
        assert mask_secret("ab") == "••"
        assert mask_secret("abc") == "a•••"
        assert mask_secret("abcd") == "a•••"
        assert mask_secret("abcdef") == "ab••ef"
        assert mask_secret("abcdefgh") == "ab••••gh"


class TestTransitions:
    def test_initial_state(self, controller):
        assert controller.state is DisclosureState.LOCKED
        assert controller.display == "—"

    def test_unlock_requires_contact_verdict_and_secret(self, controller):
        assert controller.unlock(MatchVerdict.IDENTITY_CONFIRMED_NO_CONTACT, "XYZ123") is False
        assert controller.unlock(MatchVerdict.IDENTITY_MISMATCH, "XYZ123") is False
        assert controller.unlock(CONFIRMED, None) is False
        assert controller.unlock(CONFIRMED, "") is False
        assert controller.state is DisclosureState.LOCKED

        assert controller.unlock(CONFIRMED, "XYZ123") is True
        assert controller.state is DisclosureState.UNLOCKED

    def test_request_disclosure_while_locked_is_noop(self, controller):
        controller.request_disclosure()
        assert controller.state is DisclosureState.LOCKED
        assert controller.surface_open is False

    def test_request_does_not_reveal(self, controller):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()
        assert controller.surface_open is True
        assert controller.revealed is False
        assert controller.display == "XY••23"

    def test_toggle_requires_open_surface(self, controller):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.toggle_reveal()
        assert controller.state is DisclosureState.UNLOCKED

    def test_toggle_flips(self, controller):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()

        controller.toggle_reveal()
        assert controller.state is DisclosureState.REVEALED
        assert controller.display == "XYZ123"

        controller.toggle_reveal()
        assert controller.state is DisclosureState.UNLOCKED
        assert controller.display == "XY••23"

    def test_close_masks_again(self, controller):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()
        controller.toggle_reveal()
        controller.close()
        assert controller.surface_open is False
        assert controller.state is DisclosureState.UNLOCKED

    def test_new_session_resets(self, controller):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()
        controller.toggle_reveal()

        controller.unlock(MatchVerdict.IDENTITY_MISMATCH, None)

        assert controller.state is DisclosureState.LOCKED
        assert controller.secret is None
        assert controller.surface_open is False

    def test_reset(self, controller):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.reset()
        assert controller.state is DisclosureState.LOCKED
        assert controller.unlocked is False


class TestCopy:
    def test_copy_while_masked(self, controller, clipboard):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()

        notice = controller.copy_to_clipboard()

        assert notice is not None and notice.success
        assert clipboard.copied == ["XYZ123"]

    def test_copy_while_revealed(self, controller, clipboard):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()
        controller.toggle_reveal()

        notice = controller.copy_to_clipboard()

        assert notice is not None and notice.success
        assert clipboard.copied == ["XYZ123"]

    def test_copy_while_locked_is_noop(self, controller, clipboard):
        assert controller.copy_to_clipboard() is None
        assert clipboard.copied == []

    def test_copy_with_surface_closed_is_noop(self, controller, clipboard):
        controller.unlock(CONFIRMED, "XYZ123")

        assert controller.copy_to_clipboard() is None
        assert controller.notice is None
        assert clipboard.copied == []

    def test_copy_after_close_is_noop(self, controller, clipboard):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()
        controller.close()

        assert controller.copy_to_clipboard() is None
        assert clipboard.copied == []

    def test_success_notice_expires(self, controller, clock):
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()
        controller.copy_to_clipboard()

        clock.now += COPY_SUCCESS_SECONDS - 0.1
        assert controller.notice is not None
        clock.now += 0.2
        assert controller.notice is None

    def test_fallback_when_clipboard_unavailable(self, clock):
        fallback = FakeClipboard()
        controller = DisclosureController(
            clipboard=FakeClipboard(error=ClipboardUnavailable("no tool")),
            fallback=fallback,
            clock=clock,
        )
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()

        notice = controller.copy_to_clipboard()

        assert notice.success
        assert fallback.copied == ["XYZ123"]

    def test_failure_notice(self, clock):
        controller = DisclosureController(
            clipboard=FakeClipboard(error=ClipboardUnavailable("no tool")),
            fallback=FakeClipboard(error=ClipboardError("broken")),
            clock=clock,
        )
        controller.unlock(CONFIRMED, "XYZ123")
        controller.request_disclosure()

        notice = controller.copy_to_clipboard()

        assert notice is not None and notice.success is False
        assert notice.expires_at == pytest.approx(clock.now + COPY_FAILURE_SECONDS)
        clock.now += COPY_FAILURE_SECONDS
        assert controller.notice is None


class TestSystemClipboard:
    def test_no_tool_on_path(self, monkeypatch):
        monkeypatch.setattr("dnicheck.client.clipboard.shutil.which", lambda name: None)
        with pytest.raises(ClipboardUnavailable):
            SystemClipboard().copy("XYZ123")

    def test_pipes_to_first_available_tool(self, monkeypatch):
        calls = []

        monkeypatch.setattr(
            "dnicheck.client.clipboard.shutil.which",
            lambda name: "/usr/bin/xclip" if name == "xclip" else None,
        )

        def fake_run(command, **kwargs):
            calls.append((command, kwargs["input"]))

        monkeypatch.setattr("dnicheck.client.clipboard.subprocess.run", fake_run)

        SystemClipboard().copy("XYZ123")

        assert calls == [(["xclip", "-selection", "clipboard"], "XYZ123")]
