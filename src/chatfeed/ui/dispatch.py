"""The UI update function.

``ChatModel.update`` is synchronous and handles one input at a time. It
returns the next command for the runtime to run. For a domain event, that
command is always a fresh wait on the channel. Consuming an event and
re-arming happen in the same transition, so exactly one wait is ever
outstanding.
"""

from typing import Any

from ..bridge.commands import (
    Batch,
    Command,
    EventBridge,
    FeedClosed,
    FeedFailed,
    QuitProgram,
    batch,
)
from ..feed.models import DomainEvent
from .config import INPUT_PROMPT, LOCAL_SENDER, VIEWPORT_HEIGHT, WELCOME_TEXT
from .models import (
    ChatState,
    DraftEdited,
    HistoryEntry,
    OtherInput,
    QuitInput,
    SubmitInput,
    UIError,
)

# Keys that move the viewport away from / back to the newest line
SCROLL_BACK_KEYS = frozenset({"pageup"})
SCROLL_LIVE_KEYS = frozenset({"pagedown"})

Effect = Command | Batch | QuitProgram | None


class ChatModel:
    """Chat state plus the transition function over it."""

    def __init__(self, bridge: EventBridge, viewport_height: int = VIEWPORT_HEIGHT) -> None:
        self._bridge = bridge
        self._viewport_height = viewport_height
        self.state = ChatState()

    def init(self) -> Effect:
        """Start the listener and arm the first wait."""
        return batch(self._bridge.start_listening(), self._bridge.await_next())

    def update(self, msg: Any) -> Effect:
        state = self.state
        if state.quitting:
            return None

        if isinstance(msg, DomainEvent):
            state.history.append(HistoryEntry(sender=msg.sender, body=msg.body))
            if state.status == "connecting":
                state.status = "live"
            return self._bridge.await_next()

        if isinstance(msg, SubmitInput):
            text = msg.text.strip()
            if not text:
                return None
            state.history.append(HistoryEntry(sender=LOCAL_SENDER, body=text, local=True))
            state.draft = ""
            state.follow = True
            return None

        if isinstance(msg, DraftEdited):
            state.draft = msg.value
            return None

        if isinstance(msg, QuitInput):
            state.quitting = True
            return QuitProgram(0)

        if isinstance(msg, OtherInput):
            if msg.key in SCROLL_BACK_KEYS:
                state.follow = False
            elif msg.key in SCROLL_LIVE_KEYS:
                state.follow = True
            return None

        if isinstance(msg, UIError):
            state.last_error = str(msg.error)
            return None

        if isinstance(msg, FeedFailed):
            state.last_error = str(msg.error)
            state.status = "failed"
            state.quitting = True
            return QuitProgram(1, f"Feed connection failed: {msg.error}")

        if isinstance(msg, FeedClosed):
            state.status = "disconnected"
            if msg.reason:
                state.last_error = msg.reason
            return None

        return None

    def view(self) -> str:
        """Plain-text frame: history viewport, then the input box.

        The Textual app renders through its widgets instead; this frame is
        the widget-free rendering the model is tested against.
        """
        state = self.state
        if state.history:
            body = "\n".join(state.lines[-self._viewport_height:])
        else:
            body = WELCOME_TEXT

        parts = [body, ""]
        if state.last_error:
            parts.append(f"Error: {state.last_error}")
        parts.append(f"{INPUT_PROMPT}{state.draft}")
        return "\n".join(parts)
