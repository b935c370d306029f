"""
Platform-neutral event and message values.

Session implementations convert whatever their platform library
hands them into these, so that widgets and bridges only ever
compare plain string identifiers.
"""

import typing

import attr

if typing.TYPE_CHECKING:
    import discord


MESSAGE_CREATE = "message_create"
REACTION_ADD = "reaction_add"
MESSAGE_DELETE = "message_delete"
MESSAGE_DELETE_BULK = "message_delete_bulk"
CHANNEL_DELETE = "channel_delete"
GUILD_DELETE = "guild_delete"


@attr.s(auto_attribs=True)
class Message:
    """A message, either sent by the bot or received from a user."""

    id: str
    channel_id: str
    author_id: str
    guild_id: typing.Optional[str] = None
    content: str = ""
    embeds: list["discord.Embed"] = attr.Factory(list)


@attr.s(auto_attribs=True, frozen=True)
class ReactionEvent:
    """
    A reaction added to a message.

    emoji is the emoji's name, which is what widget handlers
    are keyed by. api_emoji is the form expected back by the
    platform when removing the reaction; for unicode emoji
    both are the same.
    """

    message_id: str
    channel_id: str
    user_id: str
    emoji: str
    guild_id: typing.Optional[str] = None
    api_emoji: typing.Optional[str] = None

    def reaction_ref(self) -> str:
        return self.api_emoji if self.api_emoji is not None else self.emoji


@attr.s(auto_attribs=True, frozen=True)
class MessageDeleteEvent:
    message_id: str
    channel_id: str
    guild_id: typing.Optional[str] = None


@attr.s(auto_attribs=True, frozen=True)
class BulkMessageDeleteEvent:
    message_ids: frozenset[str] = attr.ib(converter=frozenset)
    channel_id: str
    guild_id: typing.Optional[str] = None


@attr.s(auto_attribs=True, frozen=True)
class ChannelDeleteEvent:
    channel_id: str
    guild_id: typing.Optional[str] = None


@attr.s(auto_attribs=True, frozen=True)
class GuildDeleteEvent:
    guild_id: str
