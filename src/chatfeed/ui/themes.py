"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Dark purple palette in the style of the Twitch web chat
TWITCH_NIGHT = Theme(
    name="twitch-night",
    primary="#a970ff",      # Twitch purple - chat border
    secondary="#5c9dff",    # Blue - log panel
    accent="#ff75e6",       # Pink - focused input
    foreground="#efeff1",
    background="#0e0e10",
    success="#00f593",
    warning="#ffca5f",
    error="#eb0400",
    surface="#18181b",
    panel="#1f1f23",
    dark=True,
    variables={
        "border": "#3a3a3d",
        "border-blurred": "#26262c",
        "scrollbar": "#26262c",
        "scrollbar-hover": "#3a3a3d",
        "scrollbar-active": "#a970ff",
        "scrollbar-background": "#18181b",
        "footer-key-foreground": "#a970ff",
        "text-muted": "#adadb8",
        "input-cursor-background": "#efeff1",
        "input-cursor-foreground": "#0e0e10",
        "input-selection-background": "#a970ff 30%",
    },
)
