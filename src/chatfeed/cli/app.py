"""Main CLI application using Typer."""
import asyncio
import contextlib

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from ..bridge import EventBridge, EventChannel, FeedFailed
from ..feed import DomainEvent, TransportConnectError
from ..ui.config import LogLevel
from .providers import get_listener

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="chatfeed",
    help="Watch a live chat feed in the terminal",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

_ROOM_HELP = "Room to join (default: $TWITCH_CHANNEL)"
_TRANSPORT_HELP = "Feed transport: twitch or simulated (default: $FEED_TRANSPORT)"


def _check_log_level(log_level: str | None) -> None:
    if log_level is not None and log_level.lower() not in LogLevel.choices():
        console.print(
            f"[red]Error: unknown log level '{escape(log_level)}'. "
            f"Choose from: {', '.join(LogLevel.choices())}[/red]"
        )
        raise typer.Exit(code=1)


def _console_logger(log_level: str):
    """Debug callback printing records at or above the given level."""
    threshold = LogLevel.from_string(log_level)
    colors = {"debug": "dim", "info": "cyan", "warning": "yellow", "error": "red"}

    def _log(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) < threshold:
            return
        color = colors.get(level, "white")
        console.print(f"[{color}]\\[{component}] {escape(message)}[/{color}]")

    return _log


def _print_event(event: DomainEvent) -> None:
    console.print(f"[bold magenta]{escape(event.sender)}:[/bold magenta] {escape(event.body)}")


@app.command(name="tui")
def tui_command(
    room: str | None = typer.Argument(None, help=_ROOM_HELP),
    transport: str | None = typer.Option(
        None,
        "--transport",
        "-t",
        help=_TRANSPORT_HELP
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel at level: debug, info, warning, error"
    ),
):
    """Launch the interactive chat TUI."""
    _check_log_level(log_level)
    listener = get_listener(room, transport, console)

    from ..ui import run_chat_tui

    try:
        tui_app = asyncio.run(run_chat_tui(listener, log_level=log_level))
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")
        return

    return_code = tui_app.return_code or 0
    if return_code:
        message = tui_app.exit_message or tui_app.model.state.last_error or "unknown error"
        console.print(f"[red]Error: {escape(message)}[/red]")
        raise typer.Exit(code=return_code)

    # Echo an unsent message so it isn't lost
    if tui_app.unsent_draft:
        console.print(escape(tui_app.unsent_draft))


@app.command()
def tail(
    room: str | None = typer.Argument(None, help=_ROOM_HELP),
    transport: str | None = typer.Option(
        None,
        "--transport",
        "-t",
        help=_TRANSPORT_HELP
    ),
    count: int | None = typer.Option(
        None,
        "--count",
        "-n",
        min=1,
        help="Stop after this many messages"
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Print log records at or above: debug, info, warning, error"
    ),
):
    """Print chat messages to the terminal without the TUI."""
    _check_log_level(log_level)
    listener = get_listener(room, transport, console)
    listener.set_debug_callback(_console_logger(log_level))

    async def _tail() -> int:
        bridge = EventBridge(listener, EventChannel())
        listen = asyncio.create_task(bridge.start_listening()())
        received = 0

        try:
            while count is None or received < count:
                wait = asyncio.create_task(bridge.await_next()())
                done, _ = await asyncio.wait({listen, wait}, return_when=asyncio.FIRST_COMPLETED)
                if wait in done:
                    _print_event(wait.result())
                    received += 1
                    continue

                # Listener finished first: release the pending wait, then drain
                wait.cancel()
                try:
                    _print_event(await wait)
                    received += 1
                except asyncio.CancelledError:
                    pass

                outcome = listen.result()
                if isinstance(outcome, FeedFailed):
                    console.print(f"[red]Error: {escape(str(outcome.error))}[/red]")
                    return 1

                while bridge.channel.qsize() and (count is None or received < count):
                    _print_event(await bridge.await_next()())
                    received += 1
                if outcome.reason:
                    console.print(f"[red]Error: feed lost: {escape(outcome.reason)}[/red]")
                    return 1
                console.print("[dim]Feed closed.[/dim]")
                return 0
            return 0
        finally:
            bridge.stop()
            with contextlib.suppress(asyncio.CancelledError):
                await listen

    try:
        code = asyncio.run(_tail())
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")
        return
    if code:
        raise typer.Exit(code=code)


@app.command()
def check(
    room: str | None = typer.Argument(None, help=_ROOM_HELP),
    transport: str | None = typer.Option(
        None,
        "--transport",
        "-t",
        help=_TRANSPORT_HELP
    ),
):
    """Check that the feed can be reached and the room joined."""
    listener = get_listener(room, transport, console)
    feed = listener.transport

    async def _check() -> None:
        try:
            await feed.connect()
            await feed.join(listener.room)
        finally:
            await feed.close()

    try:
        asyncio.run(_check())
    except TransportConnectError as e:
        console.print(f"[red]x[/red] {feed.name} #{escape(listener.room)}: FAILED ({escape(str(e))})")
        raise typer.Exit(code=1)
    console.print(f"[green]+[/green] {feed.name} #{escape(listener.room)}: OK")


if __name__ == "__main__":
    app()
