"""Main Textual TUI application.

Runs the chat model on Textual's message loop. Every command the model
returns runs as a worker; a command's result is posted back as a message
and fed to ``ChatModel.update``, one message at a time.
"""

from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.message import Message
from textual.widgets import Footer, Header, Input

from ..bridge.channel import EventChannel
from ..bridge.commands import Batch, EventBridge, QuitProgram
from ..feed.listener import FeedListener
from .config import LogLevel
from .dispatch import ChatModel, Effect
from .models import DraftEdited, OtherInput, QuitInput, SubmitInput, UIError
from .styles import APP_CSS
from .themes import TWITCH_NIGHT
from .widgets import ChatHistoryWidget, ChatInput, LogPanel, StatusLine


class CommandResult(Message):
    """Posted by a finished command worker with the command's result."""

    def __init__(self, payload: Any) -> None:
        super().__init__()
        self.payload = payload


class ChatFeedApp(App):
    """Textual TUI for a live chat feed."""

    CSS = APP_CSS
    TITLE = "chatfeed"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("escape", "quit", "Quit", show=False, priority=True),
        Binding("ctrl+l", "clear_log", "Clear Log"),
        Binding("ctrl+d", "toggle_log", "Log"),
        Binding("pageup", "scroll_back", "Scroll Up", show=False),
        Binding("pagedown", "scroll_live", "Scroll Down", show=False),
    ]

    def __init__(
        self,
        listener: FeedListener,
        channel: EventChannel | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._bridge = EventBridge(listener, channel or EventChannel())
        self._model = ChatModel(self._bridge)
        self._log_level = log_level
        self._rendered = 0
        self.exit_message: str | None = None

    @property
    def model(self) -> ChatModel:
        return self._model

    @property
    def bridge(self) -> EventBridge:
        return self._bridge

    @property
    def unsent_draft(self) -> str:
        """Whatever was left in the input box when the app quit."""
        return self._model.state.draft

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="main-panel"):
            yield ChatHistoryWidget(id="chat-history")
            yield LogPanel(id="log-panel")

        yield StatusLine(id="status-line")
        yield ChatInput(id="chat-input")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(TWITCH_NIGHT)
        self.theme = "twitch-night"

        listener = self._bridge.listener
        if self._log_level is not None:
            log_panel = self.query_one("#log-panel", LogPanel)
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        listener.set_debug_callback(self._debug_callback)
        self.sub_title = f"{listener.transport.name} | #{listener.room}"

        self._sync_view()
        self.query_one("#chat-input", ChatInput).focus()
        self._run(self._model.init())

    def on_unmount(self) -> None:
        """Stop the listener when the app exits."""
        self._bridge.stop()

    def _debug_callback(self, level: str, component: str, message: str) -> None:
        """Route log records to the log panel."""
        try:
            log_panel = self.query_one("#log-panel", LogPanel)
        except NoMatches:
            return  # panel already torn down during shutdown
        log_panel.record(component, message, LogLevel.from_string(level))

    def _dispatch(self, msg: Any) -> None:
        # Widgets may already be unmounting once a quit was accepted
        was_quitting = self._model.state.quitting
        effect = self._model.update(msg)
        if not was_quitting:
            self._sync_view()
        self._run(effect)

    def _run(self, effect: Effect) -> None:
        if effect is None:
            return

        if isinstance(effect, Batch):
            for command in effect.commands:
                self._run(command)
            return

        if isinstance(effect, QuitProgram):
            self._bridge.stop()
            if effect.return_code:
                self._debug_callback("error", "TUI", effect.message or "Exiting with an error")
            self.exit_message = effect.message
            self.exit(return_code=effect.return_code)
            return

        self.run_worker(
            self._execute(effect),
            name=getattr(effect, "__name__", "command"),
            group="commands",
        )

    async def _execute(self, command: Any) -> None:
        try:
            result = await command()
        except Exception as e:
            self._debug_callback("error", "Bridge", f"Command failed: {e}")
            self.post_message(CommandResult(UIError(e)))
            return
        if result is not None:
            self.post_message(CommandResult(result))

    def on_command_result(self, message: CommandResult) -> None:
        self._dispatch(message.payload)

    def _sync_view(self) -> None:
        state = self._model.state
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        for entry in state.history[self._rendered:]:
            chat.add_entry(entry, follow=state.follow)
        self._rendered = len(state.history)

        status = self.query_one("#status-line", StatusLine)
        status.show_status(self._bridge.listener.room, state.status, state.last_error)

    def on_input_changed(self, event: Input.Changed) -> None:
        self._dispatch(DraftEdited(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle user input submission."""
        text = event.value
        self._dispatch(SubmitInput(text))
        if text.strip() and not self._model.state.draft:
            chat_input = self.query_one("#chat-input", ChatInput)
            chat_input.add_to_history(text.strip())
            chat_input.clear()

    async def action_quit(self) -> None:
        """Quit through the model so no further events are consumed."""
        self._dispatch(QuitInput())

    def action_scroll_back(self) -> None:
        self._dispatch(OtherInput("pageup"))
        self.query_one("#chat-history", ChatHistoryWidget).scroll_page_up(animate=False)

    def action_scroll_live(self) -> None:
        self._dispatch(OtherInput("pagedown"))
        self.query_one("#chat-history", ChatHistoryWidget).scroll_end(animate=False)

    def action_clear_log(self) -> None:
        """Clear the log panel."""
        self.query_one("#log-panel", LogPanel).clear()
        self.notify("Log cleared", timeout=2)

    def action_toggle_log(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#log-panel", LogPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_chat_tui(
    listener: FeedListener,
    log_level: str | None = None,
) -> ChatFeedApp:
    """Run the Textual TUI until the user quits or the feed fails.

    Args:
        listener: Feed listener for the room to display
        log_level: Log level for panel (debug/info/warning/error), None to hide

    Returns:
        The finished app, for its return code and unsent draft
    """
    app = ChatFeedApp(listener=listener, log_level=log_level)
    try:
        await app.run_async()
    finally:
        listener.stop()
    return app
