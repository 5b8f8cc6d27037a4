"""Provider factory functions for CLI.

Centralizes creation of transports and listeners from environment variables.
Hides configuration details from command implementations.
"""

import os
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console

from ..feed import FeedListener, RetryPolicy, create_feed_transport
from ..feed.twitch import ANONYMOUS_NICK, TWITCH_IRC_URL

# Default console for output
_console = Console()

DEFAULT_ROOM = "nourylul"


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def get_retry_policy(console: Console | None = None) -> RetryPolicy:
    """Create the connect retry policy from environment variables.

    Raises:
        SystemExit: If a value is malformed or out of range

    Environment variables:
        FEED_RETRY_ATTEMPTS: Connect attempts before giving up (default: 5)
        FEED_RETRY_INITIAL_DELAY: First backoff delay in seconds (default: 0.5)
        FEED_RETRY_MAX_DELAY: Largest backoff delay in seconds (default: 5.0)
    """
    con = console or _console
    try:
        return RetryPolicy(
            max_attempts=int(os.getenv("FEED_RETRY_ATTEMPTS", "5")),
            initial_delay=_env_float("FEED_RETRY_INITIAL_DELAY", 0.5),
            max_delay=_env_float("FEED_RETRY_MAX_DELAY", 5.0),
        )
    except (ValidationError, ValueError) as e:
        con.print(f"[red]Error: invalid retry configuration: {e}[/red]")
        raise typer.Exit(code=1)


def get_transport(kind: str | None = None, console: Console | None = None) -> Any:
    """Create a feed transport from environment variables.

    Args:
        kind: Transport type, overriding FEED_TRANSPORT
        console: Optional Rich console for output

    Returns:
        Feed transport instance

    Raises:
        SystemExit: If the transport type or its settings are invalid

    Environment variables:
        FEED_TRANSPORT: Transport type (twitch, simulated; default: twitch)
        TWITCH_NICK: Login nick (default: justinfan123, anonymous)
        TWITCH_OAUTH_TOKEN: Token passed through as PASS (optional)
        TWITCH_IRC_URL: IRC websocket endpoint
        FEED_SIM_MIN_INTERVAL: Simulated minimum gap in seconds (default: 0.1)
        FEED_SIM_MAX_INTERVAL: Simulated maximum gap in seconds (default: 1.0)
        FEED_SIM_SEED: Simulated RNG seed (optional)
        FEED_SIM_COUNT: Simulated messages before hanging up (optional)
        FEED_SIM_FAIL_CONNECTS: Simulated connect failures before success (default: 0)
    """
    con = console or _console
    kind = (kind or os.getenv("FEED_TRANSPORT", "twitch")).lower()

    try:
        if kind == "twitch":
            return create_feed_transport(
                "twitch",
                nick=os.getenv("TWITCH_NICK", ANONYMOUS_NICK),
                token=os.getenv("TWITCH_OAUTH_TOKEN") or None,
                url=os.getenv("TWITCH_IRC_URL", TWITCH_IRC_URL),
            )

        if kind == "simulated":
            seed = os.getenv("FEED_SIM_SEED")
            count = os.getenv("FEED_SIM_COUNT")
            return create_feed_transport(
                "simulated",
                min_interval=_env_float("FEED_SIM_MIN_INTERVAL", 0.1),
                max_interval=_env_float("FEED_SIM_MAX_INTERVAL", 1.0),
                seed=int(seed) if seed else None,
                count=int(count) if count else None,
                fail_connects=int(os.getenv("FEED_SIM_FAIL_CONNECTS", "0")),
            )

        return create_feed_transport(kind)
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_listener(
    room: str | None = None,
    kind: str | None = None,
    console: Console | None = None,
) -> FeedListener:
    """Create a listener for one room.

    Environment variables:
        TWITCH_CHANNEL: Room to join when none is given (default: nourylul)
    """
    con = console or _console
    room = room or os.getenv("TWITCH_CHANNEL", DEFAULT_ROOM)
    return FeedListener(
        get_transport(kind, con),
        room,
        retry_policy=get_retry_policy(con),
    )
