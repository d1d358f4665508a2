"""FreeMind built-in icon vocabulary.

Node ``icon`` values are FreeMind builtin names (``"idea"``, ``"full-1"``).
Editors that store the emoji instead are mapped back through this table
when writing FreeMind files.
"""

from __future__ import annotations

from typing import Optional

# (builtin name, emoji)
FREEMIND_ICONS: tuple[tuple[str, str], ...] = (
    # status
    ("yes", "✅"),
    ("no", "❌"),
    ("help", "❓"),
    ("idea", "💡"),
    ("important", "⭐"),
    ("wizard", "🧙"),
    ("warning", "⚠️"),
    ("flag", "🚩"),
    ("button_ok", "🆗"),
    ("button_cancel", "🚫"),
    ("checked", "☑️"),
    ("unchecked", "☐"),
    # priority
    ("full-1", "🔴"),
    ("full-2", "🟠"),
    ("full-3", "🟡"),
    ("full-4", "🟢"),
    ("full-5", "🔵"),
    ("full-6", "🟣"),
    ("full-7", "⚫"),
    ("full-8", "⚪"),
    # emotion
    ("smiley-neutral", "😐"),
    ("smiley-good", "🙂"),
    ("smiley-bad", "🙁"),
    ("smiley-oh", "😮"),
    ("heart", "❤️"),
    ("broken-heart", "💔"),
    ("thumbs_up", "👍"),
    ("thumbs_down", "👎"),
    ("clanbomber", "💣"),
    # time
    ("clock", "⏰"),
    ("calendar", "📅"),
    ("hourglass", "⏳"),
    # other
    ("forward", "▶️"),
    ("back", "◀️"),
    ("up", "🔼"),
    ("down", "🔽"),
    ("folder", "📁"),
    ("desktopnew", "🖥️"),
    ("linux", "🐧"),
    ("gnome", "🐭"),
    ("mail", "✉️"),
    ("info", "ℹ️"),
    ("list", "📋"),
    ("music", "🎵"),
    ("password", "🔑"),
    ("pencil", "✏️"),
    ("xmag", "🔍"),
)

_BY_NAME = dict(FREEMIND_ICONS)
_BY_EMOJI = {emoji: name for name, emoji in FREEMIND_ICONS}


def emoji_for(icon: str) -> Optional[str]:
    """Emoji for a builtin name, or None if the name is not in the table."""
    return _BY_NAME.get(icon)


def to_freemind_icon(icon: str) -> str:
    """Builtin name to write for ``icon``; unknown values pass through."""
    if icon in _BY_NAME:
        return icon
    return _BY_EMOJI.get(icon, icon)


def display_icon(icon: str) -> str:
    """Text to draw for ``icon``: the emoji when known, else the raw value."""
    if icon in _BY_EMOJI:
        return icon
    return _BY_NAME.get(icon, icon)
