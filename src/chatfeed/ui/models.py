"""Data models for the TUI.

Hides the internal representation of chat state and of the local inputs
the update function accepts.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class HistoryEntry:
    """One rendered line of chat history."""

    sender: str
    body: str
    local: bool = False  # authored in this terminal
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def text(self) -> str:
        return f"{self.sender}: {self.body}"


@dataclass
class ChatState:
    """Everything the UI loop owns. Nothing outside the loop touches it."""

    history: list[HistoryEntry] = field(default_factory=list)
    draft: str = ""
    follow: bool = True  # viewport pinned to the newest line
    last_error: str | None = None
    status: str = "connecting"
    quitting: bool = False

    @property
    def lines(self) -> list[str]:
        return [entry.text for entry in self.history]


@dataclass(frozen=True)
class SubmitInput:
    """The user pressed Enter with this text in the input box."""

    text: str


@dataclass(frozen=True)
class DraftEdited:
    """The input box content changed."""

    value: str


@dataclass(frozen=True)
class QuitInput:
    """The user asked to leave."""


@dataclass(frozen=True)
class OtherInput:
    """Any other key; handled by the widgets themselves."""

    key: str


@dataclass(frozen=True)
class UIError:
    """A local error to retain for display."""

    error: Exception | str
