"""Theme preference persisted in a cookie."""
from typing import Optional

THEME_COOKIE = "theme"
DEFAULT_THEME = "light"
FALLBACK_ICON = "🌙"

THEME_ICONS = {
    "light": "💻",
    "dark": "🌙",
    "system": "☀️",
}

# One year
THEME_COOKIE_MAX_AGE = 365 * 24 * 3600


def resolve_theme(value: Optional[str]) -> str:
    """Saved theme, or the default when missing or unknown."""
    if value in THEME_ICONS:
        return value
    return DEFAULT_THEME


def theme_icon(theme: str) -> str:
    return THEME_ICONS.get(theme, FALLBACK_ICON)
