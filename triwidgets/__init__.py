"""
Interactive reaction widgets for chat bots, built on trio.

A Widget is an embed message whose reactions act as buttons.
It runs on top of a Session, such as the discord.py-backed
triwidgets.backends.discord.DiscordSession.
"""

from .errors import (
    WidgetAlreadyRunningError,
    WidgetError,
    WidgetIndexOutOfBoundsError,
    WidgetNoEmbedError,
    WidgetNoMessageError,
    WidgetNotRunningError,
    WidgetQueryTimeoutError,
)
from .events import Message, ReactionEvent
from .session import Session
from .util import embeds_from_string, split_text
from .widget import StopReason, Widget
