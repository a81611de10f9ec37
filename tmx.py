#!/usr/bin/env python3
"""
tmx — Tmux Session Manager
A keyboard-driven terminal UI for listing, creating, attaching, detaching and
killing tmux sessions.

Usage:
    tmx                 Interactive TUI (run inside tmux)
    tmx --install       Install tmux key binding and shell `quit` command
    tmx --uninstall     Remove them again
    tmx -h | --help     Show help
    tmx -v | --version  Show version
"""

import datetime
import enum
import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.theme import Theme
from textual.widgets import Static
from rich.style import Style
from rich.text import Text

__version__ = "1.0.0"

logger = logging.getLogger("tmx")
logger.addHandler(logging.NullHandler())

# ── Config ────────────────────────────────────────────────────────────

TMUX_BIN = os.environ.get("TMX_TMUX", "tmux")
DEFAULT_SESSION = "default"
FIELD_SEP = ":"
LIST_FORMAT = FIELD_SEP.join([
    "#{session_name}",
    "#{session_created}",
    "#{session_windows}",
    "#{session_attached}",
])
LIST_FIELDS = 4
NO_SERVER_EXIT = 1          # tmux exit status for "no server running"
NAME_COLUMN_WIDTH = 40
STATUS_TTL = 5              # seconds a status message stays visible
AGE_REFRESH_INTERVAL = 30   # seconds between repaints that update ages
LOG_FILE = os.environ.get("TMX_LOG_FILE", "")
LOG_LEVEL = os.environ.get("TMX_LOG_LEVEL", "INFO")

QUIT_KEYS = ("q", "escape", "ctrl+c")
BACKSPACE_KEYS = ("backspace", "ctrl+h")


def configure_logging(path: str = LOG_FILE, level: str = LOG_LEVEL):
    """Send the ``tmx`` logger to *path*. Never logs to the terminal."""
    if not path:
        return
    logging.basicConfig(
        filename=path,
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ── Data ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Session:
    name: str
    created: datetime.datetime
    windows: int = 0
    attached: bool = False


class TmuxError(Exception):
    """A tmux invocation failed."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


def parse_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0


def parse_timestamp(text: str, now: Optional[datetime.datetime] = None) -> datetime.datetime:
    """Parse a tmux creation timestamp.

    Values longer than 10 digits are microseconds and get reduced to
    seconds. Anything unparseable becomes *now*.
    """
    text = text.strip()
    try:
        value = int(text)
        if len(text) > 10:
            value //= 1_000_000
        return datetime.datetime.fromtimestamp(value)
    except (ValueError, OverflowError, OSError):
        return now or datetime.datetime.now()


def parse_sessions(output: str, now: Optional[datetime.datetime] = None) -> List[Session]:
    """Parse ``list-sessions -F LIST_FORMAT`` output, skipping short lines."""
    sessions: List[Session] = []
    # Records end with \n only; names may hold other line separators
    for line in output.split("\n"):
        if not line.strip():
            continue
        parts = line.split(FIELD_SEP)
        if len(parts) < LIST_FIELDS:
            logger.debug("skipping malformed session line %r", line)
            continue
        sessions.append(Session(
            name=parts[0],
            created=parse_timestamp(parts[1], now),
            windows=parse_int(parts[2]),
            attached=parse_int(parts[3]) > 0,
        ))
    return sessions


# ── Tmux Manager ──────────────────────────────────────────────────────


def exact(name: str) -> str:
    """Target *name* exactly; a bare name also matches by prefix or pattern."""
    return f"={name}"


class TmuxManager:
    """Thin synchronous wrapper around the tmux CLI.

    Every call blocks until tmux exits, so nothing here may run on the
    thread that draws the UI.
    """

    def __init__(self, tmux_bin: str = TMUX_BIN, env: Optional[Dict[str, str]] = None):
        self.tmux_bin = tmux_bin
        self.env = env

    def _run(self, *args: str, capture: bool = True) -> subprocess.CompletedProcess:
        argv = [self.tmux_bin, *args]
        logger.debug("run: %s", shlex.join(argv))
        try:
            if capture:
                proc = subprocess.run(argv, capture_output=True, text=True, env=self.env)
            else:
                # Inherit the terminal for attach-session
                proc = subprocess.run(argv, env=self.env)
        except OSError as e:
            raise TmuxError(f"cannot run {self.tmux_bin}: {e}") from e
        logger.debug("%s exited with %d", args[0], proc.returncode)
        return proc

    def _check(self, *args: str, capture: bool = True) -> subprocess.CompletedProcess:
        proc = self._run(*args, capture=capture)
        if proc.returncode != 0:
            detail = (proc.stderr or "").strip() if capture else ""
            msg = detail or f"tmux {args[0]} exited with status {proc.returncode}"
            logger.warning("%s failed: %s", args[0], msg)
            raise TmuxError(msg, proc.returncode)
        return proc

    def in_tmux(self) -> bool:
        env = os.environ if self.env is None else self.env
        return bool(env.get("TMUX"))

    def list_sessions(self) -> List[Session]:
        proc = self._run("list-sessions", "-F", LIST_FORMAT)
        if proc.returncode == NO_SERVER_EXIT:
            return []
        if proc.returncode != 0:
            msg = (proc.stderr or "").strip() or f"list-sessions exited with status {proc.returncode}"
            logger.warning("list-sessions failed: %s", msg)
            raise TmuxError(msg, proc.returncode)
        return parse_sessions(proc.stdout)

    def is_running(self) -> bool:
        try:
            return len(self.list_sessions()) > 0
        except TmuxError:
            return False

    def has_session(self, name: str) -> bool:
        try:
            return self._run("has-session", "-t", exact(name)).returncode == 0
        except TmuxError:
            return False

    def attach(self, name: str):
        """Switch this client to *name*, or attach if not inside tmux."""
        if self.in_tmux():
            self._check("switch-client", "-t", exact(name))
        else:
            self.attach_session(name)

    def attach_session(self, name: str):
        self._check("attach-session", "-t", exact(name), capture=False)

    def detach(self, name: str):
        self._check("detach-client", "-s", exact(name))

    def create(self, name: str):
        self._check("new-session", "-d", "-s", name)

    def kill(self, name: str):
        self._check("kill-session", "-t", exact(name))

    def send_keys(self, name: str, *keys: str):
        self._check("send-keys", "-t", name, *keys)


# ── State machine ─────────────────────────────────────────────────────


class Mode(enum.Enum):
    NORMAL = "normal"
    TEXT_ENTRY = "text_entry"


@dataclass(frozen=True)
class ExitRequest:
    """How the interactive loop ended. *attach_to* is set for quit-and-attach."""
    attach_to: Optional[str] = None


@dataclass(frozen=True)
class State:
    sessions: Tuple[Session, ...] = ()
    selected: int = 0
    mode: Mode = Mode.NORMAL
    entry_buffer: str = ""
    pending_new_session: Optional[str] = None
    in_flight: FrozenSet[str] = frozenset()
    status: Optional[str] = None
    width: int = 0
    height: int = 0
    exit_request: Optional[ExitRequest] = None

    @property
    def current(self) -> Optional[Session]:
        if 0 <= self.selected < len(self.sessions):
            return self.sessions[self.selected]
        return None


# Events


@dataclass(frozen=True)
class KeyPress:
    key: str
    character: Optional[str] = None


@dataclass(frozen=True)
class WindowResize:
    width: int
    height: int


@dataclass(frozen=True)
class SessionsRefreshed:
    sessions: Tuple[Session, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class AttachResult:
    name: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class DetachResult:
    name: str
    error: Optional[str] = None


@dataclass(frozen=True)
class CreateResult:
    name: str
    error: Optional[str] = None


@dataclass(frozen=True)
class KillResult:
    name: str
    error: Optional[str] = None


@dataclass(frozen=True)
class StatusCleared:
    pass


# Commands


@dataclass(frozen=True)
class RefreshSessions:
    pass


@dataclass(frozen=True)
class AttachTo:
    name: str


@dataclass(frozen=True)
class DetachFrom:
    name: str


@dataclass(frozen=True)
class Create:
    name: str


@dataclass(frozen=True)
class KillSession:
    name: str


def clamp_index(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def _busy(state: State, name: str) -> State:
    return replace(state, status=f"'{name}' is busy, wait for the previous action")


def _mutate(state: State, command_type) -> Tuple[State, list]:
    # At most one mutating command per session name in flight
    s = state.current
    if s is None:
        return state, []
    if s.name in state.in_flight:
        return _busy(state, s.name), []
    return replace(state, in_flight=state.in_flight | {s.name}), [command_type(s.name)]


def _reduce_normal_key(state: State, event: KeyPress) -> Tuple[State, list]:
    key = event.key
    if key in QUIT_KEYS:
        return replace(state, exit_request=ExitRequest()), []

    state = replace(state, status=None)
    if key in ("up", "k"):
        return replace(state, selected=max(0, state.selected - 1)), []
    if key in ("down", "j"):
        return replace(state, selected=clamp_index(state.selected + 1, len(state.sessions))), []
    if key == "enter":
        if state.current is None:
            return state, []
        return state, [AttachTo(state.current.name)]
    if key == "n":
        return replace(state, mode=Mode.TEXT_ENTRY, entry_buffer=""), []
    if key == "d":
        return _mutate(state, DetachFrom)
    if key == "x":
        return _mutate(state, KillSession)
    if key == "r":
        return state, [RefreshSessions()]
    return state, []


def _reduce_entry_key(state: State, event: KeyPress) -> Tuple[State, list]:
    key = event.key
    if key == "ctrl+c":
        return replace(state, exit_request=ExitRequest()), []
    if key == "escape":
        return replace(state, mode=Mode.NORMAL, entry_buffer=""), []
    if key == "enter":
        name = state.entry_buffer
        state = replace(state, mode=Mode.NORMAL, entry_buffer="")
        if not name:
            return state, []
        if name in state.in_flight:
            return _busy(state, name), []
        return replace(state, in_flight=state.in_flight | {name}), [Create(name)]
    if key in BACKSPACE_KEYS:
        return replace(state, entry_buffer=state.entry_buffer[:-1]), []
    ch = event.character
    if ch is not None and len(ch) == 1 and ch.isprintable():
        return replace(state, entry_buffer=state.entry_buffer + ch), []
    return state, []


def _reconcile(state: State, event: SessionsRefreshed) -> State:
    sessions = tuple(event.sessions)
    selected = state.selected
    if state.pending_new_session is not None:
        for i, s in enumerate(sessions):
            if s.name == state.pending_new_session:
                selected = i
                break
    status = state.status
    if event.error:
        status = f"Could not list sessions: {event.error}"
    return replace(
        state,
        sessions=sessions,
        selected=clamp_index(selected, len(sessions)),
        pending_new_session=None,
        status=status,
    )


def reduce(state: State, event) -> Tuple[State, list]:
    """Apply one event. Returns the new state and the commands to run.

    Backend failures never end the loop; they land in ``status`` and the
    user stays in normal mode. Only an explicit quit or a successful attach
    sets ``exit_request``.
    """
    if isinstance(event, KeyPress):
        if state.mode is Mode.TEXT_ENTRY:
            return _reduce_entry_key(state, event)
        return _reduce_normal_key(state, event)

    if isinstance(event, WindowResize):
        return replace(state, width=event.width, height=event.height), []

    if isinstance(event, SessionsRefreshed):
        return _reconcile(state, event), []

    if isinstance(event, AttachResult):
        if event.error or not event.name:
            return replace(state, status=f"Attach failed: {event.error or 'no session selected'}"), []
        return replace(state, exit_request=ExitRequest(attach_to=event.name)), []

    if isinstance(event, (DetachResult, KillResult)):
        state = replace(state, in_flight=state.in_flight - {event.name})
        if event.error:
            verb = "Detach" if isinstance(event, DetachResult) else "Kill"
            state = replace(state, status=f"{verb} '{event.name}' failed: {event.error}")
        return state, [RefreshSessions()]

    if isinstance(event, CreateResult):
        state = replace(state, in_flight=state.in_flight - {event.name})
        if event.error:
            return replace(state, status=f"Create '{event.name}' failed: {event.error}"), []
        return replace(state, pending_new_session=event.name), [RefreshSessions()]

    if isinstance(event, StatusCleared):
        return replace(state, status=None), []

    return state, []


# ── Command executor ──────────────────────────────────────────────────


def execute(manager: TmuxManager, command):
    """Run *command* against tmux and return the result event."""
    if isinstance(command, RefreshSessions):
        try:
            return SessionsRefreshed(tuple(manager.list_sessions()))
        except TmuxError as e:
            return SessionsRefreshed((), error=str(e))

    if isinstance(command, AttachTo):
        # The real attach happens after the UI exits; only check the target
        if not manager.has_session(command.name):
            return AttachResult(command.name, error=f"session '{command.name}' no longer exists")
        return AttachResult(command.name)

    if isinstance(command, DetachFrom):
        try:
            manager.detach(command.name)
        except TmuxError as e:
            return DetachResult(command.name, error=str(e))
        return DetachResult(command.name)

    if isinstance(command, Create):
        try:
            manager.create(command.name)
        except TmuxError as e:
            return CreateResult(command.name, error=str(e))
        return CreateResult(command.name)

    if isinstance(command, KillSession):
        try:
            manager.kill(command.name)
        except TmuxError as e:
            return KillResult(command.name, error=str(e))
        return KillResult(command.name)

    raise TypeError(f"unknown command: {command!r}")


# ── Theme ─────────────────────────────────────────────────────────────

TMX_THEME = Theme(
    name="tmx",
    primary="#86AAEC",
    secondary="#7D56F4",
    warning="#ff4444",
    success="#00cc00",
    accent="#7D56F4",
    dark=True,
    variables={
        "title-color": "#86AAEC",
        "item-color": "#dddddd",
        "selected-fg": "#EEEDFF",
        "selected-bg": "#7D56F4",
        "attached-color": "#00cc00",
        "dim-color": "#626262",
        "status-color": "#ffff00",
    },
)

DEFAULT_PALETTE: Dict[str, str] = dict(TMX_THEME.variables)

DEFAULT_CSS = """
Screen {
    background: $surface;
}

#frame {
    height: 1fr;
    padding: 1 1;
}
"""


# ── Renderer ──────────────────────────────────────────────────────────


def _tc(palette: Dict[str, str], role: str, fallback: str = "") -> str:
    return palette.get(role, fallback)


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n != 1 else ''}"


def format_age(created: datetime.datetime, now: datetime.datetime) -> str:
    secs = (now - created).total_seconds()
    if secs < 60:
        return "just now"
    if secs < 3600:
        return f"{_plural(int(secs // 60), 'minute')} ago"
    if secs < 86400:
        return f"{_plural(int(secs // 3600), 'hour')} ago"
    if secs < 30 * 86400:
        return f"{_plural(int(secs // 86400), 'day')} ago"
    return created.strftime("%Y-%m-%d")


def visible_window(total: int, selected: int, rows: int) -> Tuple[int, int]:
    """Slice ``[start, end)`` of the list that keeps *selected* on screen."""
    if rows <= 0 or total <= rows:
        return 0, total
    start = max(0, selected - rows // 2)
    start = min(start, total - rows)
    return start, start + rows


def build_session_row(s: Session, now: datetime.datetime) -> str:
    indicator = "▶ " if s.attached else "  "
    name = s.name
    if len(name) > NAME_COLUMN_WIDTH:
        name = name[: NAME_COLUMN_WIDTH - 1] + "…"
    windows = _plural(s.windows, "window")
    return f"{indicator}{name:<{NAME_COLUMN_WIDTH}s} {windows:>10s}  ({format_age(s.created, now)})"


LEGEND = "[Enter] attach  [d] detach  [n] new  [x] kill  [r] refresh  [q] quit"
TIP = "\U0001f4a1 Tip: inside a session press Ctrl+b d to detach and keep it running"
ENTRY_LEGEND = "[Enter] confirm  [Esc] cancel"

# frame padding, title, blank, blank before legend, legend, tip, scroll markers
_LIST_CHROME = 9


def _render_list(state: State, palette: Dict[str, str], now: datetime.datetime) -> Text:
    tc = lambda role, fb="": _tc(palette, role, fb)
    title_style = Style(color=tc("title-color", "#86AAEC"), bold=True)
    item_style = Style(color=tc("item-color", "#dddddd"))
    selected_style = Style(
        color=tc("selected-fg", "#EEEDFF"),
        bgcolor=tc("selected-bg", "#7D56F4"),
        bold=True,
    )
    dim_style = Style(color=tc("dim-color", "#626262"))

    text = Text()
    text.append(" Tmux Sessions ", style=title_style)
    text.append("\n\n")

    if not state.sessions:
        text.append(" No sessions. Press n to create one. ", style=item_style)
        text.append("\n")
    else:
        rows = 0
        if state.height:
            rows = max(1, state.height - _LIST_CHROME - (1 if state.status else 0))
        start, end = visible_window(len(state.sessions), state.selected, rows)
        if start > 0:
            text.append(f"   ↑ {start} more\n", style=dim_style)
        for i in range(start, end):
            s = state.sessions[i]
            line = build_session_row(s, now)
            if i == state.selected:
                text.append(f" {line} ", style=selected_style)
            elif s.attached:
                text.append(f" {line} ", style=Style(color=tc("attached-color", "#00cc00")))
            else:
                text.append(f" {line} ", style=item_style)
            text.append("\n")
        if end < len(state.sessions):
            text.append(f"   ↓ {len(state.sessions) - end} more\n", style=dim_style)

    text.append("\n")
    text.append(f" {LEGEND} ", style=dim_style)
    text.append("\n")
    text.append(f" {TIP} ", style=dim_style)
    if state.status:
        text.append("\n")
        text.append(f" {state.status} ", style=Style(color=tc("status-color", "#ffff00"), bold=True))
    return text


def _render_entry(state: State, palette: Dict[str, str]) -> Text:
    tc = lambda role, fb="": _tc(palette, role, fb)
    text = Text()
    text.append(" New Session ", style=Style(color=tc("title-color", "#86AAEC"), bold=True))
    text.append("\n\n")
    text.append(" Session name: ", style=Style(color=tc("item-color", "#dddddd")))
    text.append("\n\n")
    text.append(
        f" > {state.entry_buffer}_ ",
        style=Style(
            color=tc("selected-fg", "#EEEDFF"),
            bgcolor=tc("selected-bg", "#7D56F4"),
            bold=True,
        ),
    )
    text.append("\n\n")
    text.append(f" {ENTRY_LEGEND} ", style=Style(color=tc("dim-color", "#626262")))
    return text


def render(
    state: State,
    palette: Optional[Dict[str, str]] = None,
    now: Optional[datetime.datetime] = None,
) -> Text:
    """Draw one frame for *state*. Pure: same inputs, same frame."""
    if palette is None:
        palette = DEFAULT_PALETTE
    if state.mode is Mode.TEXT_ENTRY:
        return _render_entry(state, palette)
    return _render_list(state, palette, now or datetime.datetime.now())


# ── App ───────────────────────────────────────────────────────────────


class TmxApp(App):
    """Textual runtime for the session list.

    Feeds key, resize and command-result events through ``reduce`` one at
    a time and runs the resulting commands on thread workers.
    """

    CSS = DEFAULT_CSS

    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", show=False, priority=True),
    ]

    exit_request = None  # Set before exit; read by main() after run()

    def __init__(self, manager: TmuxManager, palette: Optional[Dict[str, str]] = None):
        super().__init__()
        self.register_theme(TMX_THEME)
        self.theme = TMX_THEME.name
        self.tmux = manager
        self.palette = DEFAULT_PALETTE if palette is None else palette
        self.tmx_state = State()
        self.exit_request = None
        self._status_timer = None

    def compose(self) -> ComposeResult:
        yield Static(id="frame")

    def on_mount(self):
        self.apply_event(WindowResize(self.size.width, self.size.height))
        self.run_command(RefreshSessions())
        self.set_interval(AGE_REFRESH_INTERVAL, self._paint)

    def on_resize(self, event):
        self.apply_event(WindowResize(event.size.width, event.size.height))

    def on_key(self, event) -> None:
        event.stop()
        event.prevent_default()
        self.apply_event(KeyPress(event.key, event.character))

    def action_interrupt(self):
        self.apply_event(KeyPress("ctrl+c"))

    def apply_event(self, event):
        if self.exit_request is not None:
            return
        previous = self.tmx_state
        self.tmx_state, commands = reduce(previous, event)
        if self.tmx_state.exit_request is not None:
            self.exit_request = self.tmx_state.exit_request
            self.exit()
            return
        if self.tmx_state.status and self.tmx_state.status != previous.status:
            self._arm_status_timer()
        self._paint()
        for command in commands:
            self.run_command(command)

    @work(thread=True, group="tmux")
    def run_command(self, command):
        result = execute(self.tmux, command)
        if self.is_running:
            self.call_from_thread(self.apply_event, result)

    def _arm_status_timer(self):
        if self._status_timer:
            self._status_timer.stop()
        self._status_timer = self.set_timer(STATUS_TTL, self._clear_status)

    def _clear_status(self):
        self.apply_event(StatusCleared())

    def _paint(self):
        try:
            frame = self.query_one("#frame", Static)
        except NoMatches:
            return
        frame.update(render(self.tmx_state, self.palette, datetime.datetime.now()))


# ── Config installer ─────────────────────────────────────────────────

TMUX_BEGIN = "# ========== tmx config =========="
TMUX_END = "# ========== tmx config end =========="
TMUX_BLOCK = f"""
{TMUX_BEGIN}
# Ctrl+b t opens the session manager
bind-key t display-popup -E -w 80% -h 60% "tmx"

# Key hint in the status bar
set -g status-right '#[fg=green][Ctrl+B T] tmx#[default] | %H:%M %Y-%m-%d'
{TMUX_END}
"""

SHELL_BEGIN = "# ========== tmx quit command =========="
SHELL_END = "# ========== tmx quit command end =========="
SHELL_BLOCK = f"""
{SHELL_BEGIN}
# Leave the current tmux session but keep it running (same as Ctrl+b d)
quit() {{
    if [ -n "$TMUX" ]; then
        tmux detach-client
    else
        echo "not inside a tmux session"
    fi
}}
{SHELL_END}
"""


class ConfigError(Exception):
    """Reading or writing a configuration file failed."""


def tmux_conf_path(home: Path) -> Path:
    return home / ".tmux.conf"


def shell_rc_path(home: Path) -> Path:
    """Prefer an existing ~/.zshrc, then ~/.bashrc; fall back to ~/.bashrc."""
    zshrc = home / ".zshrc"
    if zshrc.exists():
        return zshrc
    return home / ".bashrc"


def has_block(text: str, begin: str) -> bool:
    return any(line.strip() == begin for line in text.splitlines())


def remove_block(text: str, begin: str, end: str) -> str:
    """Drop every line from *begin* through *end*, inclusive.

    Trailing whitespace is normalized to a single newline.
    """
    kept: List[str] = []
    inside = False
    for line in text.split("\n"):
        marker = line.strip()
        if marker == begin:
            inside = True
            continue
        if inside and marker == end:
            inside = False
            continue
        if not inside:
            kept.append(line)
    body = "\n".join(kept).rstrip()
    return body + "\n" if body else ""


def _read(path: Path) -> str:
    try:
        return path.read_text() if path.exists() else ""
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e


def _append_block(path: Path, block: str, begin: str) -> bool:
    """Append *block* to *path* unless it is already there. True if written."""
    current = _read(path)
    if has_block(current, begin):
        return False
    if current and not current.endswith("\n"):
        block = "\n" + block
    try:
        with open(path, "a") as f:
            f.write(block)
    except OSError as e:
        raise ConfigError(f"cannot write {path}: {e}") from e
    return True


def _strip_block(path: Path, begin: str, end: str) -> bool:
    """Remove the marked block from *path*. True if something was removed.

    A file left empty is deleted, so a file created by install goes away.
    """
    if not path.exists():
        return False
    current = _read(path)
    if not has_block(current, begin):
        return False
    remaining = remove_block(current, begin, end)
    try:
        if remaining:
            path.write_text(remaining)
        else:
            path.unlink()
    except OSError as e:
        raise ConfigError(f"cannot write {path}: {e}") from e
    return True


def install_config(home: Optional[Path] = None):
    home = home or Path.home()
    conf = tmux_conf_path(home)
    if _append_block(conf, TMUX_BLOCK, TMUX_BEGIN):
        print(f"\033[32m✓\033[0m Added tmx config to {conf}")
    else:
        print(f"\033[33m⚠\033[0m tmx config already present in {conf}")

    rc = shell_rc_path(home)
    try:
        if _append_block(rc, SHELL_BLOCK, SHELL_BEGIN):
            print(f"\033[32m✓\033[0m Added quit command to {rc}")
        else:
            print(f"\033[32m✓\033[0m quit command already installed in {rc}")
    except ConfigError as e:
        logger.warning("shell config install failed: %s", e)
        print(f"\033[33m⚠ Could not install quit command:\033[0m {e}")

    print("\nReload the tmux config with:")
    print("  tmux source-file ~/.tmux.conf")
    print("\nor restart tmux.")


def uninstall_config(home: Optional[Path] = None):
    home = home or Path.home()
    conf = tmux_conf_path(home)
    if not conf.exists():
        print(f"\033[33m⚠\033[0m {conf} does not exist, nothing to remove")
    elif _strip_block(conf, TMUX_BEGIN, TMUX_END):
        print(f"\033[32m✓\033[0m Removed tmx config from {conf}")
    else:
        print(f"\033[33m⚠\033[0m No tmx config found in {conf}")

    removed = False
    for rc in (home / ".zshrc", home / ".bashrc"):
        try:
            if _strip_block(rc, SHELL_BEGIN, SHELL_END):
                print(f"\033[32m✓\033[0m Removed quit command from {rc}")
                removed = True
        except ConfigError as e:
            logger.warning("shell config uninstall failed: %s", e)
            print(f"\033[33m⚠ Could not remove quit command:\033[0m {e}")
    if not removed:
        print("\033[33m⚠\033[0m No quit command found")

    print("\nReload the tmux config with:")
    print("  tmux source-file ~/.tmux.conf")
    print("\nand your shell config with:")
    print("  source ~/.bashrc  # or ~/.zshrc")


# ── CLI commands ─────────────────────────────────────────────────────


def cmd_help():
    print("""\033[1;36m◆ tmx — Tmux Session Manager\033[0m

\033[1mUsage:\033[0m
  tmx                Open the session manager (inside tmux)
  tmx --install      Install tmux key binding (Ctrl+b t) and shell `quit` command
  tmx --uninstall    Remove the tmux config and `quit` command
  tmx -h, --help     Show this help
  tmx -v, --version  Show version

\033[1mKeys:\033[0m
  Enter              Attach to the selected session
  n                  New session
  d                  Detach clients from the selected session
  x                  Kill the selected session
  r                  Refresh
  ↑/↓ or j/k         Move
  q/Esc              Quit

\033[1mLeaving a tmux session:\033[0m
  Ctrl+b d           Detach (session keeps running)
  quit               Same, after running `tmx --install`""")


def cmd_version():
    print(f"tmx version {__version__}")


def cmd_install(home: Optional[Path] = None):
    try:
        install_config(home)
    except ConfigError as e:
        print(f"\033[31mError: {e}\033[0m")
        sys.exit(1)


def cmd_uninstall(home: Optional[Path] = None):
    try:
        uninstall_config(home)
    except ConfigError as e:
        print(f"\033[31mError: {e}\033[0m")
        sys.exit(1)


def cmd_not_in_tmux():
    print("\033[1;33m◆\033[0m tmx needs to run inside a tmux session")
    print("\nUsage:")
    print("   tmux                             # start tmux")
    print("   tmx                              # then run the manager inside it")
    print("\nor:")
    print(f"   tmux attach-session -t {DEFAULT_SESSION}   # attach to an existing session")
    print("\nRun `tmx --install` to bind Ctrl+b t to tmx.")
    sys.exit(1)


def cmd_bootstrap(mgr: TmuxManager):
    """Offer to start a ``default`` session when tmux has none."""
    print("\033[1;33m◆\033[0m tmux is not running")
    print("\ntmx can start tmux and create a default session.")
    try:
        answer = input("Start tmux now? [Y/n]: ").strip()
    except EOFError:
        answer = ""
    if answer not in ("", "y", "Y", "yes"):
        print("\nStart tmux first:")
        print("  tmux")
        print("\nor create a new session:")
        print("  tmux new")
        sys.exit(1)

    print("\n\033[1;36m◆\033[0m Starting tmux...")
    try:
        existing = {s.name for s in mgr.list_sessions()}
    except TmuxError:
        existing = set()

    try:
        if DEFAULT_SESSION in existing:
            print(f"Found session '{DEFAULT_SESSION}', attaching...")
        else:
            mgr.create(DEFAULT_SESSION)
            try:
                mgr.send_keys(DEFAULT_SESSION, "tmx", "C-m")
            except TmuxError as e:
                print(f"\033[33m⚠ Could not start tmx in the new session:\033[0m {e}")
        mgr.attach_session(DEFAULT_SESSION)
    except TmuxError as e:
        print(f"\033[31mFailed to start tmux: {e}\033[0m")
        print("\nStart it by hand:")
        print("  tmux")
        sys.exit(1)


def cmd_tui(mgr: TmuxManager, palette: Optional[Dict[str, str]] = None):
    app = TmxApp(mgr, palette)
    app.run()
    request = app.exit_request
    if request is None or request.attach_to is None:
        return
    try:
        mgr.attach(request.attach_to)
    except TmuxError as e:
        print(f"\033[31mError: cannot attach to '{request.attach_to}': {e}\033[0m")
        sys.exit(1)


# ── Main ─────────────────────────────────────────────────────────────


def main(argv: Optional[Sequence[str]] = None):
    args = sys.argv[1:] if argv is None else list(argv)
    configure_logging()

    if args:
        verb = args[0]
        if verb in ("-h", "--help"):
            cmd_help()
        elif verb in ("-v", "--version"):
            cmd_version()
        elif verb == "--install":
            cmd_install()
        elif verb == "--uninstall":
            cmd_uninstall()
        else:
            print(f"\033[31mUnknown argument: {verb}\033[0m")
            print("Run 'tmx -h' for usage information.")
            sys.exit(1)
        return

    mgr = TmuxManager()
    if not mgr.in_tmux():
        cmd_not_in_tmux()
    if not mgr.is_running():
        cmd_bootstrap(mgr)
        return
    cmd_tui(mgr)


if __name__ == "__main__":
    main()
