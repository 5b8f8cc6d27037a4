"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Chat line rendering and scrolling
- Log rendering and level filtering
- Connection status display
"""

from datetime import datetime

from rich.markup import escape
from rich.text import Text
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.events import Click
from textual.widgets import Input, RichLog, Static

from .config import (
    INPUT_CHAR_LIMIT,
    INPUT_HISTORY_MAX_SIZE,
    INPUT_PLACEHOLDER,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    SENDER_STYLE,
    WELCOME_TEXT,
    LogLevel,
)
from .models import HistoryEntry


class ChatInput(Input):
    """Single-line message input with command history.

    Use Up/Down arrow keys to navigate through previously sent messages.
    """

    BINDINGS = [
        Binding("up", "history_prev", "Previous", show=False),
        Binding("down", "history_next", "Next", show=False),
    ]

    def __init__(self, *args, **kwargs) -> None:
        kwargs.setdefault("placeholder", INPUT_PLACEHOLDER)
        kwargs.setdefault("max_length", INPUT_CHAR_LIMIT)
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._current_input: str = ""

    def action_history_prev(self) -> None:
        if not self._history:
            return
        if self._history_index == -1:
            self._current_input = self.value
            self._history_index = len(self._history) - 1
        elif self._history_index > 0:
            self._history_index -= 1
        self.value = self._history[self._history_index]
        self.cursor_position = len(self.value)

    def action_history_next(self) -> None:
        if self._history_index == -1:
            return
        if self._history_index < len(self._history) - 1:
            self._history_index += 1
            self.value = self._history[self._history_index]
        else:
            self._history_index = -1
            self.value = self._current_input
        self.cursor_position = len(self.value)

    def add_to_history(self, message: str) -> None:
        """Add a sent message to history."""
        if message and (not self._history or self._history[-1] != message):
            self._history.append(message)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        self._current_input = ""


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history, one line per message."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Waiting for messages"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._entries: list[HistoryEntry] = []

    def compose(self):
        yield Static(WELCOME_TEXT, id="chat-welcome")

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def add_entry(self, entry: HistoryEntry, follow: bool = True) -> None:
        """Append one line; scroll to it if following the newest line."""
        if not self._entries:
            for welcome in self.query("#chat-welcome"):
                welcome.remove()

        self._entries.append(entry)
        sender_style = "bold green" if entry.local else f"bold {SENDER_STYLE}"
        line = Text.assemble((f"{entry.sender}: ", sender_style), entry.body)
        self.mount(Static(line, classes="chat-line local" if entry.local else "chat-line"))
        self.border_subtitle = f"{len(self._entries)} messages"

        if follow:
            self.scroll_end(animate=False)


class StatusLine(Static):
    """One-line feed status with the last retained error."""

    _status_styles = {
        "connecting": "yellow",
        "live": "green",
        "disconnected": "dim",
        "failed": "bold red",
    }

    def show_status(self, room: str, status: str, last_error: str | None = None) -> None:
        style = self._status_styles.get(status, "white")
        text = f"[bold]#{escape(room)}[/] [{style}]{status}[/]"
        if last_error:
            text += f"  [red]Error: {escape(last_error)}[/]"
        self.update(text)


class LogPanel(RichLog):
    """Log panel for real-time feed tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def record(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Feed, Bridge)
            message: Log message; markup in it is escaped
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        level_color = level_colors.get(level, "white")
        level_name = LogLevel.name(level)

        component_colors = {
            "TUI": "cyan",
            "Feed": "magenta",
            "Bridge": "green",
        }
        comp_color = component_colors.get(component, "white")

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{level_name:<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def info(self, component: str, message: str) -> None:
        self.record(component, message, LogLevel.INFO)

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        self.app.copy_to_clipboard(text)
        self.app.notify("Log copied", timeout=2)
