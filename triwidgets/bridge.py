"""
Event bridges.

Turns a Session's callback-based handlers into trio memory
channels. Each bridge returns a Subscription, which owns the
handlers it registered; cancelling it removes all of them and
closes the channel.
"""

import math
import typing
from typing import Callable

import attr
import trio

from . import events

if typing.TYPE_CHECKING:
    from .events import Message
    from .session import Session


@attr.s(auto_attribs=True, eq=False)
class Subscription:
    """
    A channel of bridged events.

    Iterate it (async for) or call receive() to get events. Use it
    as a context manager, or call cancel() yourself, so that the
    session's handlers don't pile up.
    """

    send_channel: trio.MemorySendChannel
    receive_channel: trio.MemoryReceiveChannel
    cancels: list[Callable[[], None]] = attr.Factory(list)
    cancelled: bool = False

    @classmethod
    def open(cls) -> "Subscription":
        send_channel, receive_channel = trio.open_memory_channel(math.inf)
        return cls(send_channel, receive_channel)

    def push(self, event: typing.Any):
        """Queues an event for the receiving side, unless cancelled."""

        if not self.cancelled:
            self.send_channel.send_nowait(event)

    def deregister(self):
        """Removes every underlying session handler, leaving the channel open."""

        cancels, self.cancels = self.cancels, []

        for cancel in cancels:
            cancel()

    def cancel(self):
        """Removes every underlying session handler and closes the channel.
        Calling it again does nothing.
        """

        if self.cancelled:
            return

        self.cancelled = True
        self.deregister()
        self.send_channel.close()

    async def receive(self) -> typing.Any:
        return await self.receive_channel.receive()

    def __aiter__(self):
        return self.receive_channel.__aiter__()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info):
        self.cancel()


def next_message_created(session: "Session") -> Subscription:
    """Subscribes to the very next message created, anywhere.

    The subscription yields a single Message and is then
    cancelled on its own.
    """

    sub = Subscription.open()

    def _on_message(message: "Message"):
        sub.push(message)
        sub.cancel()

    sub.cancels.append(session.add_handler_once(events.MESSAGE_CREATE, _on_message))
    return sub


def reaction_added_for_message(session: "Session", message: "Message") -> Subscription:
    """Subscribes to every reaction added to a message by anyone but its author.

    Must be cancelled explicitly.
    """

    sub = Subscription.open()

    def _on_reaction(event: events.ReactionEvent):
        if event.message_id == message.id and event.user_id != message.author_id:
            sub.push(event)

    sub.cancels.append(session.add_handler(events.REACTION_ADD, _on_reaction))
    return sub


def message_removed(session: "Session", message: "Message") -> Subscription:
    """Subscribes to the removal of a message.

    A message is gone once it is deleted, either alone or in bulk,
    or once its channel or guild is. The subscription then yields
    the removal event and closes.
    """

    sub = Subscription.open()

    def _removed(event):
        # drop all four handlers before signalling
        sub.deregister()
        sub.push(event)
        sub.cancel()

    def _on_delete(event: events.MessageDeleteEvent):
        if event.message_id == message.id:
            _removed(event)

    def _on_delete_bulk(event: events.BulkMessageDeleteEvent):
        if message.id in event.message_ids:
            _removed(event)

    def _on_channel_delete(event: events.ChannelDeleteEvent):
        if event.channel_id == message.channel_id:
            _removed(event)

    def _on_guild_delete(event: events.GuildDeleteEvent):
        if message.guild_id is not None and event.guild_id == message.guild_id:
            _removed(event)

    sub.cancels.extend(
        [
            session.add_handler(events.MESSAGE_DELETE, _on_delete),
            session.add_handler(events.MESSAGE_DELETE_BULK, _on_delete_bulk),
            session.add_handler(events.CHANNEL_DELETE, _on_channel_delete),
            session.add_handler(events.GUILD_DELETE, _on_guild_delete),
        ]
    )
    return sub
