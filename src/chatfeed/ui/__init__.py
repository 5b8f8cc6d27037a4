"""Terminal UI module for chatfeed.

Provides a Textual-based TUI for watching a live chat feed.

Module structure (Parnas principle - each module hides a design decision):
- models.py: Data structures (chat state, local input messages)
- dispatch.py: The update function (how events change state, re-arming)
- widgets.py: Custom widgets (input history, chat lines, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- app.py: Application orchestration (running commands, routing input)
"""

from .app import ChatFeedApp, run_chat_tui
from .config import LogLevel
from .dispatch import ChatModel
from .models import (
    ChatState,
    DraftEdited,
    HistoryEntry,
    OtherInput,
    QuitInput,
    SubmitInput,
    UIError,
)
from .widgets import ChatHistoryWidget, ChatInput, LogPanel, StatusLine

__all__ = [
    "ChatFeedApp",
    "ChatHistoryWidget",
    "ChatInput",
    "ChatModel",
    "ChatState",
    "DraftEdited",
    "HistoryEntry",
    "LogLevel",
    "LogPanel",
    "OtherInput",
    "QuitInput",
    "StatusLine",
    "SubmitInput",
    "UIError",
    "run_chat_tui",
]
