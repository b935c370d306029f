"""
The Session class.

A Session is whatever a widget talks to: it emits platform events
to registered handlers and performs the few REST operations a
widget needs. Platform adapters (see triwidgets.backends) are
supposed to subclass it.
"""

import itertools
import logging
import typing
from typing import Callable, Optional

if typing.TYPE_CHECKING:
    import discord

    from .events import Message

EventHandler = Callable[[typing.Any], None]


class Session:
    """
    Session implementation superclass.

    Keeps track of event handlers and dispatches events to them;
    every REST operation must be implemented by subclasses.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.handlers: dict[str, dict[int, EventHandler]] = {}
        self.logger = logger or logging.getLogger(__name__)

        self._handler_ids = itertools.count()

    @property
    def user_id(self) -> Optional[str]:
        """The identifier of the bot user itself, or None if not logged in."""
        return None

    def add_handler(self, kind: str, callback: EventHandler) -> Callable[[], None]:
        """Adds a persistent handler for events of the given kind.

        Arguments:
            kind {str} -- The kind of event, one of the constants in triwidgets.events.
            callback {EventHandler} -- Called synchronously with every such event.

        Returns:
            Callable[[], None] -- Removes the handler. Calling it again does nothing.
        """

        handler_id = next(self._handler_ids)
        self.handlers.setdefault(kind, {})[handler_id] = callback

        def _cancel():
            self.handlers.get(kind, {}).pop(handler_id, None)

        return _cancel

    def add_handler_once(
        self, kind: str, callback: EventHandler
    ) -> Callable[[], None]:
        """Like add_handler, but the handler removes itself after the first event."""

        cancel = None

        def _once(event):
            cancel()
            callback(event)

        cancel = self.add_handler(kind, _once)
        return cancel

    def listen(self, kind: str):
        """Adds a persistent handler for events of the given kind.
        Use as a decorator generating method.

        Arguments:
            kind {str} -- The kind of event to listen for.

        Returns:
            function -- The decorator method.
        """

        def _decorator(func):
            self.add_handler(kind, func)
            return func

        return _decorator

    def receive_event(self, kind: str, event: typing.Any):
        """Call this function whenever an event is received in this session.
        Used either by subclasses or to 'simulate' events.

            >>> session = Session()
            >>> @session.listen('reaction_add')
            ... def on_reaction(event):
            ...     print("Got", event)
            ...
            >>> session.receive_event('reaction_add', 'a thumbs up')
            Got a thumbs up
            >>> session.receive_event('message_create', 'nobody hears this')

        Arguments:
            kind {str} -- The kind of event (aka kind argument in listen).
            event {any} -- The event's data.
        """

        # handlers may remove themselves while being called
        for handler in list(self.handlers.get(kind, {}).values()):
            handler(event)

    async def send_embed(self, channel_id: str, embed: "discord.Embed") -> "Message":
        """Sends a new message carrying a single embed."""

        raise NotImplementedError("Please subclass and implement!")

    async def send_text(self, channel_id: str, content: str) -> "Message":
        """Sends a new plaintext message."""

        raise NotImplementedError("Please subclass and implement!")

    async def edit_embed(
        self, channel_id: str, message_id: str, embed: "discord.Embed"
    ) -> "Message":
        """Replaces the embed of an existing message."""

        raise NotImplementedError("Please subclass and implement!")

    async def delete_message(self, channel_id: str, message_id: str):
        raise NotImplementedError("Please subclass and implement!")

    async def add_reaction(self, channel_id: str, message_id: str, emoji: str):
        raise NotImplementedError("Please subclass and implement!")

    async def remove_reaction(
        self, channel_id: str, message_id: str, emoji: str, user_id: str
    ):
        raise NotImplementedError("Please subclass and implement!")

    async def fetch_message(self, channel_id: str, message_id: str) -> "Message":
        raise NotImplementedError("Please subclass and implement!")
