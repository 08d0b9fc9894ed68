"""Tests for the filter panel session state machine."""

from tablekit.components.filter_session import FilterSession, SessionState


class TestFilterSession:
    """Tests for open/close/apply/reset transitions."""

    def test_starts_closed(self):
        session = FilterSession()

        assert session.state is SessionState.CLOSED
        assert session.can_apply is False
        assert session.can_reset is False

    def test_toggle(self):
        session = FilterSession()

        session.toggle()
        assert session.is_open is True

        session.toggle()
        assert session.is_open is False

    def test_apply_runs_callback_then_closes(self):
        seen = []
        session = FilterSession(on_apply=lambda: seen.append(session.is_open))
        session.open()

        session.apply()

        assert seen == [True]
        assert session.state is SessionState.CLOSED

    def test_apply_without_callback_still_closes(self):
        session = FilterSession()
        session.open()

        session.apply()

        assert session.is_open is False

    def test_reset_keeps_panel_open_by_default(self):
        resets = []
        session = FilterSession(on_reset=lambda: resets.append(1))
        session.open()

        session.reset()

        assert resets == [1]
        assert session.is_open is True

    def test_reset_can_close_panel(self):
        session = FilterSession(on_reset=lambda: None, close_on_reset=True)
        session.open()

        session.reset()

        assert session.is_open is False
