"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Chat on the left, the optional log on the right, then the status line and
the input box pinned to the bottom.
"""

APP_CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#main-panel {
    height: 1fr;
}

/* Chat history: fills whatever the log panel leaves */
#chat-history {
    width: 1fr;
    background: $surface;
    border: heavy $primary 50%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    #chat-welcome {
        color: $text-muted;
        text-style: italic;
    }

    .chat-line {
        height: auto;
    }

    .chat-line.local {
        background: $primary 10%;
    }
}

/* Log panel: hidden until --log-level or ctrl+d */
#log-panel {
    width: 1fr;
    max-width: 80;
    background: $panel;
    border: heavy $secondary 50%;
    border-title-color: $secondary;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    overflow-x: auto;
}

#status-line {
    height: 1;
    padding: 0 2;
    color: $text-muted;
}

#chat-input {
    height: 3;
    border: heavy $primary 30%;

    &:focus {
        border: heavy $accent;
    }
}
"""
