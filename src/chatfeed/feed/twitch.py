"""Twitch chat transport over IRC-on-websocket.

Hides the IRC details from the rest of the feed module:
- Capability negotiation and anonymous login
- IRCv3 tag parsing (display names)
- PING/PONG keepalive
- Frames carrying several CRLF-separated lines
"""

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field

import aiohttp

from .base import FeedTransport
from .errors import TransportClosedError, TransportConnectError
from .models import InboundMessage

TWITCH_IRC_URL = "wss://irc-ws.chat.twitch.tv:443"
ANONYMOUS_NICK = "justinfan123"

# NOTICE texts and msg-ids that mean the session or join will never succeed
_FAILURE_NOTICES = (
    "login authentication failed",
    "improperly formatted auth",
    "login unsuccessful",
)
_FAILURE_MSG_IDS = frozenset({
    "msg_banned",
    "msg_channel_suspended",
    "tos_ban",
})

_TAG_ESCAPES = {
    "s": " ",
    ":": ";",
    "\\": "\\",
    "r": "\r",
    "n": "\n",
}


@dataclass
class IrcLine:
    """One parsed IRC line."""

    command: str
    params: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)
    prefix: str | None = None

    @property
    def nick(self) -> str | None:
        """Nick from a ``nick!user@host`` prefix."""
        if not self.prefix:
            return None
        return self.prefix.split("!", 1)[0]

    @property
    def trailing(self) -> str:
        return self.params[-1] if self.params else ""


def _unescape_tag(value: str) -> str:
    out: list[str] = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        escaped = next(chars, None)
        if escaped is None:
            break  # dangling backslash is dropped
        out.append(_TAG_ESCAPES.get(escaped, escaped))
    return "".join(out)


def parse_irc_line(line: str) -> IrcLine:
    """Parse a raw IRC line with optional IRCv3 tags.

    Raises:
        ValueError: If the line has no command
    """
    rest = line.rstrip("\r\n")

    tags: dict[str, str] = {}
    if rest.startswith("@"):
        raw_tags, _, rest = rest[1:].partition(" ")
        for item in raw_tags.split(";"):
            if not item:
                continue
            key, _, value = item.partition("=")
            tags[key] = _unescape_tag(value)

    prefix = None
    if rest.startswith(":"):
        prefix, _, rest = rest[1:].partition(" ")

    trailing = None
    if " :" in rest:
        rest, _, trailing = rest.partition(" :")
    elif rest.startswith(":"):
        rest, trailing = "", rest[1:]

    parts = rest.split()
    if not parts:
        raise ValueError(f"IRC line has no command: {line!r}")

    params = parts[1:]
    if trailing is not None:
        params.append(trailing)
    return IrcLine(command=parts[0].upper(), params=params, tags=tags, prefix=prefix)


def _strip_action(text: str) -> str:
    """Unwrap CTCP ACTION (/me) messages."""
    if text.startswith("\x01ACTION ") and text.endswith("\x01"):
        return text[len("\x01ACTION "):-1]
    return text


def _is_failure_notice(line: IrcLine) -> bool:
    if line.tags.get("msg-id") in _FAILURE_MSG_IDS:
        return True
    text = line.trailing.lower()
    return any(notice in text for notice in _FAILURE_NOTICES)


def to_inbound(line: IrcLine) -> InboundMessage | None:
    """Translate a PRIVMSG into an inbound message; other lines map to None."""
    if line.command != "PRIVMSG" or len(line.params) < 2:
        return None
    sender = line.tags.get("display-name") or line.nick or "unknown"
    return InboundMessage(sender_display_name=sender, message_text=_strip_action(line.trailing))


class TwitchIRCTransport(FeedTransport):
    """Twitch chat over the IRC websocket endpoint.

    Anonymous (read-only) by default: ``justinfan`` nicks need no token.

    Example:
        transport = TwitchIRCTransport()
        await transport.connect()
        await transport.join("nourylul")
        async for message in transport.messages():
            ...
    """

    def __init__(
        self,
        nick: str = ANONYMOUS_NICK,
        token: str | None = None,
        url: str = TWITCH_IRC_URL,
        handshake_timeout: float = 10.0,
    ):
        self._nick = nick.lower()
        self._token = token
        self._url = url
        self._handshake_timeout = handshake_timeout
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._backlog: deque[IrcLine] = deque()
        self._room: str | None = None

    async def connect(self) -> None:
        await self.close()
        self._session = aiohttp.ClientSession()
        try:
            self._ws = await asyncio.wait_for(
                self._session.ws_connect(self._url), self._handshake_timeout
            )
            await self._send("CAP REQ :twitch.tv/tags twitch.tv/commands")
            if self._token:
                token = self._token if self._token.startswith("oauth:") else f"oauth:{self._token}"
                await self._send(f"PASS {token}")
            await self._send(f"NICK {self._nick}")
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            await self.close()
            raise TransportConnectError(str(e) or type(e).__name__) from e

        try:
            await self._await_reply(lambda line: line.command == "001", "login")
        except TransportConnectError:
            await self.close()
            raise

    async def join(self, room: str) -> None:
        channel = room.lstrip("#").lower()
        if self._ws is None:
            raise TransportConnectError("join before connect", room=channel)

        target = f"#{channel}"

        def _joined(line: IrcLine) -> bool:
            if line.command == "366":
                return target in line.params
            return line.command == "JOIN" and line.nick == self._nick and target in line.params

        try:
            await self._send(f"JOIN {target}")
        except (aiohttp.ClientError, OSError) as e:
            raise TransportConnectError(str(e) or type(e).__name__, room=channel) from e
        await self._await_reply(_joined, "join", room=channel)
        self._room = channel

    async def messages(self) -> AsyncIterator[InboundMessage]:
        if self._ws is None:
            raise TransportClosedError()

        while True:
            try:
                line = await self._next_line()
            except aiohttp.ClientError as e:
                raise TransportClosedError(f"connection lost: {str(e) or type(e).__name__}") from e
            if line is None or line.command == "RECONNECT":
                return
            inbound = to_inbound(line)
            if inbound is not None:
                yield inbound

    async def close(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None and not ws.closed:
            await ws.close()
        session, self._session = self._session, None
        if session is not None and not session.closed:
            await session.close()
        self._backlog.clear()

    @property
    def name(self) -> str:
        return "twitch"

    @property
    def room(self) -> str | None:
        return self._room

    async def _send(self, line: str) -> None:
        if self._ws is None:
            raise TransportClosedError()
        await self._ws.send_str(f"{line}\r\n")

    async def _await_reply(
        self,
        predicate: Callable[[IrcLine], bool],
        stage: str,
        room: str | None = None,
    ) -> IrcLine:
        async def _read() -> IrcLine:
            while True:
                line = await self._next_line()
                if line is None:
                    raise TransportConnectError(f"connection closed during {stage}", room=room)
                if line.command == "NOTICE" and _is_failure_notice(line):
                    raise TransportConnectError(line.trailing, room=room)
                if predicate(line):
                    return line

        try:
            return await asyncio.wait_for(_read(), self._handshake_timeout)
        except asyncio.TimeoutError as e:
            raise TransportConnectError(f"timed out waiting for {stage}", room=room) from e
        except (aiohttp.ClientError, OSError) as e:
            raise TransportConnectError(str(e) or type(e).__name__, room=room) from e

    async def _next_line(self) -> IrcLine | None:
        """Next non-PING line, or None once the socket is closed."""
        while True:
            while not self._backlog:
                ws = self._ws
                if ws is None:
                    return None
                msg = await ws.receive()
                if msg.type == aiohttp.WSMsgType.TEXT:
                    for raw in msg.data.split("\r\n"):
                        if not raw:
                            continue
                        try:
                            self._backlog.append(parse_irc_line(raw))
                        except ValueError:
                            continue
                elif msg.type in (
                    aiohttp.WSMsgType.CLOSE,
                    aiohttp.WSMsgType.CLOSING,
                    aiohttp.WSMsgType.CLOSED,
                    aiohttp.WSMsgType.ERROR,
                ):
                    return None

            line = self._backlog.popleft()
            if line.command == "PING":
                await self._send(f"PONG :{line.trailing}")
                continue
            return line
