"""Data models for the chat feed.

These models define what a transport delivers and what the UI consumes,
independent of the wire protocol used to fetch them.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InboundMessage(BaseModel):
    """A raw notification from a feed transport."""

    sender_display_name: str = Field(description="Display name of the author")
    message_text: str = Field(description="Message body as received")


class DomainEvent(BaseModel):
    """A normalized chat message, ready for display.

    Immutable once constructed; created once per inbound message and
    consumed exactly once by the UI loop.
    """

    model_config = ConfigDict(frozen=True)

    sender: str = Field(description="Who wrote the message")
    body: str = Field(description="What they wrote")

    @classmethod
    def from_inbound(cls, message: InboundMessage) -> "DomainEvent":
        """Translate a transport notification into a domain event."""
        return cls(sender=message.sender_display_name, body=message.message_text)

    def render(self) -> str:
        return f"{self.sender}: {self.body}"


class RetryPolicy(BaseModel):
    """Bounded exponential backoff for connect/join failures."""

    max_attempts: int = Field(default=5, ge=1, le=20, description="Connect attempts before giving up")
    initial_delay: float = Field(default=0.5, ge=0.0, description="Delay after the first failure (seconds)")
    max_delay: float = Field(default=5.0, ge=0.0, description="Upper bound on any single delay (seconds)")
    multiplier: float = Field(default=2.0, ge=1.0, description="Growth factor between delays")

    @model_validator(mode="after")
    def _check_bounds(self) -> "RetryPolicy":
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")
        return self

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given failed attempt (1-based)."""
        if attempt < 1:
            raise ValueError("attempt must be >= 1")
        return min(self.initial_delay * self.multiplier ** (attempt - 1), self.max_delay)
