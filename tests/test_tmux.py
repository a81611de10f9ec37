"""Tests for the tmux gateway and listing parser."""

import datetime
import subprocess
from unittest.mock import patch

import pytest

import tmx


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseTimestamp:

    def test_seconds(self):
        """10-digit values are Unix seconds."""
        assert tmx.parse_timestamp("1700000000") == datetime.datetime.fromtimestamp(1700000000)

    def test_microseconds_reduce_to_same_instant(self):
        """16-digit values are reduced by 1_000_000."""
        assert tmx.parse_timestamp("1700000000000000") == tmx.parse_timestamp("1700000000")

    def test_garbage_becomes_now(self):
        now = datetime.datetime(2024, 1, 1, 9, 30)
        assert tmx.parse_timestamp("not-a-number", now) == now
        assert tmx.parse_timestamp("", now) == now


class TestParseInt:

    def test_valid(self):
        assert tmx.parse_int("3") == 3
        assert tmx.parse_int(" 12 ") == 12

    def test_invalid_is_zero(self):
        assert tmx.parse_int("x") == 0
        assert tmx.parse_int("") == 0


class TestParseSessions:

    def test_well_formed_lines_in_order(self):
        output = (
            "work:1700000000:3:1\n"
            "scratch:1700000100:1:0\n"
            "logs:1700000200:2:0\n"
        )
        sessions = tmx.parse_sessions(output)
        assert [s.name for s in sessions] == ["work", "scratch", "logs"]
        assert sessions[0].windows == 3
        assert sessions[0].attached is True
        assert sessions[1].attached is False

    def test_malformed_lines_are_dropped(self):
        output = (
            "work:1700000000:3:1\n"
            "broken:1700000000\n"
            "\n"
            "logs:1700000200:2:0\n"
        )
        sessions = tmx.parse_sessions(output)
        assert [s.name for s in sessions] == ["work", "logs"]

    def test_bad_fields_use_defaults(self):
        now = datetime.datetime(2024, 5, 5)
        sessions = tmx.parse_sessions("odd:soon:many:yes\n", now)
        assert len(sessions) == 1
        s = sessions[0]
        assert s.created == now
        assert s.windows == 0
        assert s.attached is False

    def test_names_with_unicode_line_separators(self):
        output = "a\u2028b:1700000000:1:0\nc\x85d:1700000000:1:0\n"
        sessions = tmx.parse_sessions(output)
        assert [s.name for s in sessions] == ["a\u2028b", "c\x85d"]

    def test_attached_count_above_one(self):
        sessions = tmx.parse_sessions("pair:1700000000:1:2\n")
        assert sessions[0].attached is True


class TestTmuxManager:

    def test_list_sessions_invokes_format(self):
        mgr = tmx.TmuxManager()
        with patch("tmx.subprocess.run", return_value=completed(stdout="a:1700000000:1:0\n")) as run:
            sessions = mgr.list_sessions()
        assert [s.name for s in sessions] == ["a"]
        argv = run.call_args[0][0]
        assert argv[:2] == ["tmux", "list-sessions"]
        assert argv[-1] == tmx.LIST_FORMAT

    def test_list_sessions_no_server_is_empty(self):
        mgr = tmx.TmuxManager()
        with patch("tmx.subprocess.run", return_value=completed(1, stderr="no server running")):
            assert mgr.list_sessions() == []

    def test_list_sessions_other_failure_raises(self):
        mgr = tmx.TmuxManager()
        with patch("tmx.subprocess.run", return_value=completed(2, stderr="boom")):
            with pytest.raises(tmx.TmuxError, match="boom"):
                mgr.list_sessions()

    def test_missing_binary_raises(self):
        mgr = tmx.TmuxManager(tmux_bin="no-such-tmux")
        with patch("tmx.subprocess.run", side_effect=FileNotFoundError("no-such-tmux")):
            with pytest.raises(tmx.TmuxError):
                mgr.list_sessions()

    def test_is_running(self):
        mgr = tmx.TmuxManager()
        with patch("tmx.subprocess.run", return_value=completed(stdout="a:1700000000:1:0\n")):
            assert mgr.is_running() is True
        with patch("tmx.subprocess.run", return_value=completed(1)):
            assert mgr.is_running() is False
        with patch("tmx.subprocess.run", return_value=completed(3)):
            assert mgr.is_running() is False

    def test_attach_inside_tmux_switches_client(self):
        mgr = tmx.TmuxManager(env={"TMUX": "/tmp/tmux-0/default,1,0"})
        with patch("tmx.subprocess.run", return_value=completed()) as run:
            mgr.attach("work")
        assert run.call_args[0][0] == ["tmux", "switch-client", "-t", "=work"]

    def test_attach_outside_tmux_attaches(self):
        mgr = tmx.TmuxManager(env={})
        with patch("tmx.subprocess.run", return_value=completed()) as run:
            mgr.attach("work")
        assert run.call_args[0][0] == ["tmux", "attach-session", "-t", "=work"]
        assert "capture_output" not in run.call_args[1]

    @pytest.mark.parametrize("method, argv", [
        ("detach", ["tmux", "detach-client", "-s", "=work"]),
        ("create", ["tmux", "new-session", "-d", "-s", "work"]),
        ("kill", ["tmux", "kill-session", "-t", "=work"]),
    ])
    def test_session_commands(self, method, argv):
        mgr = tmx.TmuxManager()
        with patch("tmx.subprocess.run", return_value=completed()) as run:
            getattr(mgr, method)("work")
        assert run.call_args[0][0] == argv

    def test_create_duplicate_raises_backend_error(self):
        mgr = tmx.TmuxManager()
        with patch("tmx.subprocess.run", return_value=completed(1, stderr="duplicate session: work")):
            with pytest.raises(tmx.TmuxError) as exc:
                mgr.create("work")
        assert "duplicate session" in str(exc.value)
        assert exc.value.returncode == 1

    def test_in_tmux(self):
        assert tmx.TmuxManager(env={"TMUX": "x"}).in_tmux() is True
        assert tmx.TmuxManager(env={}).in_tmux() is False

    def test_has_session(self):
        mgr = tmx.TmuxManager()
        with patch("tmx.subprocess.run", return_value=completed()):
            assert mgr.has_session("work") is True
        with patch("tmx.subprocess.run", return_value=completed(1)):
            assert mgr.has_session("work") is False

    def test_targets_do_not_match_by_prefix(self):
        """'foo' must never resolve to 'foobar'."""
        mgr = tmx.TmuxManager(env={"TMUX": "x"})
        with patch("tmx.subprocess.run", return_value=completed()) as run:
            mgr.has_session("foo")
            mgr.attach("foo")
            mgr.attach_session("foo")
            mgr.detach("foo")
            mgr.kill("foo")
        targets = [c[0][0][-1] for c in run.call_args_list]
        assert targets == ["=foo"] * 5


class TestExecute:

    def test_refresh(self, fake_manager):
        mgr = fake_manager(["a", "b"])
        result = tmx.execute(mgr, tmx.RefreshSessions())
        assert isinstance(result, tmx.SessionsRefreshed)
        assert [s.name for s in result.sessions] == ["a", "b"]
        assert result.error is None

    def test_refresh_failure_is_empty_with_error(self, fake_manager):
        mgr = fake_manager(["a"], fail={"list"})
        result = tmx.execute(mgr, tmx.RefreshSessions())
        assert result.sessions == ()
        assert result.error

    def test_attach_returns_name_without_attaching(self, fake_manager):
        mgr = fake_manager(["a"])
        result = tmx.execute(mgr, tmx.AttachTo("a"))
        assert result == tmx.AttachResult("a")
        assert ("has", "a") in mgr.calls

    def test_attach_vanished_session(self, fake_manager):
        mgr = fake_manager([])
        result = tmx.execute(mgr, tmx.AttachTo("gone"))
        assert result.name == "gone"
        assert result.error

    def test_create_and_kill(self, fake_manager):
        mgr = fake_manager(["a"])
        assert tmx.execute(mgr, tmx.Create("b")) == tmx.CreateResult("b")
        assert tmx.execute(mgr, tmx.KillSession("a")) == tmx.KillResult("a")
        assert [s.name for s in mgr.sessions] == ["b"]

    def test_failures_carry_error(self, fake_manager):
        mgr = fake_manager(["a"], fail={"detach", "kill"})
        assert tmx.execute(mgr, tmx.DetachFrom("a")).error == "detach failed"
        assert tmx.execute(mgr, tmx.KillSession("a")).error == "kill failed"
        assert tmx.execute(mgr, tmx.Create("a")).error == "duplicate session: a"

    def test_unknown_command(self, fake_manager):
        with pytest.raises(TypeError):
            tmx.execute(fake_manager(), object())
