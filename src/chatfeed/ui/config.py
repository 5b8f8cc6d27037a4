"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)

    @classmethod
    def choices(cls) -> list[str]:
        """Level names accepted on the command line."""
        return list(cls._from_string)


# Chat display configuration
WELCOME_TEXT = "Welcome to the chat room!\nType a message and press Enter to send."
LOCAL_SENDER = "You"
SENDER_STYLE = "magenta"
VIEWPORT_HEIGHT = 5  # Lines of history in the plain-text view

# Input configuration
INPUT_PLACEHOLDER = "Send a message..."
INPUT_PROMPT = "┃ "
INPUT_CHAR_LIMIT = 280
INPUT_HISTORY_MAX_SIZE = 100  # Maximum entries in input history

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages
