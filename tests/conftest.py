"""Shared fixtures."""

import datetime
from typing import List

import pytest

import tmx


NOW = datetime.datetime(2024, 1, 10, 12, 0, 0)


def make_session(name, minutes_old=5, windows=1, attached=False):
    return tmx.Session(
        name=name,
        created=NOW - datetime.timedelta(minutes=minutes_old),
        windows=windows,
        attached=attached,
    )


class FakeManager:
    """In-memory stand-in for TmuxManager that records calls."""

    def __init__(self, names=(), fail=()):
        self.sessions: List[tmx.Session] = [make_session(n) for n in names]
        self.fail = set(fail)
        self.calls = []

    def _maybe_fail(self, op):
        if op in self.fail:
            raise tmx.TmuxError(f"{op} failed")

    def list_sessions(self):
        self.calls.append(("list",))
        self._maybe_fail("list")
        return list(self.sessions)

    def has_session(self, name):
        self.calls.append(("has", name))
        return any(s.name == name for s in self.sessions)

    def create(self, name):
        self.calls.append(("create", name))
        self._maybe_fail("create")
        if any(s.name == name for s in self.sessions):
            raise tmx.TmuxError(f"duplicate session: {name}")
        self.sessions.append(make_session(name, minutes_old=0))

    def detach(self, name):
        self.calls.append(("detach", name))
        self._maybe_fail("detach")

    def kill(self, name):
        self.calls.append(("kill", name))
        self._maybe_fail("kill")
        self.sessions = [s for s in self.sessions if s.name != name]


@pytest.fixture
def fake_manager():
    return FakeManager
