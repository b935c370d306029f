"""
The Discord session.

Uses the high-level discord.py library for actually
communicating to Discord.

Also requires trio_asyncio, since triwidgets uses trio,
whereas discord.py uses asyncio, requiring bridging in
order to maintain proper, seamless asynchronous functionality.
"""

import logging
import warnings
from typing import Optional, Union

import discord
import trio_asyncio

from .. import events
from ..events import Message
from ..session import Session


class UnknownChannelWarning(UserWarning):
    pass


def make_client(read_all_messages: bool = True) -> discord.Client:
    """Creates a discord.py client with the intents widgets rely on.

    Keyword Arguments:
        read_all_messages {bool} -- Whether the bot should be able to read the content
                                    of all messages in the rooms it is in, which
                                    Widget.query_input needs. (default: True)
    """

    intents = discord.Intents.default()
    intents.typing = False
    intents.presences = False
    intents.reactions = True
    intents.message_content = read_all_messages

    return discord.Client(intents=intents)


def message_from_discord(message: discord.Message) -> Message:
    """Converts a discord.py message into a triwidgets Message."""

    return Message(
        id=str(message.id),
        channel_id=str(message.channel.id),
        author_id=str(message.author.id),
        guild_id=str(message.guild.id) if message.guild is not None else None,
        content=message.content,
        embeds=list(message.embeds),
    )


def _optional_id(snowflake: Optional[int]) -> Optional[str]:
    return str(snowflake) if snowflake is not None else None


class DiscordSession(Session):
    """
    A Discord session. Used in order to run widgets
    on Discord, through a discord.py client.
    """

    def __init__(
        self,
        client: Optional[discord.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Wraps a discord.py client, so widgets can use it.

        On a plain discord.Client, this takes over the client's on_message,
        on_raw_reaction_add, on_raw_message_delete, on_raw_bulk_message_delete,
        on_guild_channel_delete and on_guild_remove events; registering any of
        them later with @client.event cuts widgets off. Listen through
        session.listen(...) instead, or pass a commands.Bot, whose listeners
        add up.

        Keyword Arguments:
            client {discord.Client} -- The client to wrap. If None, one is made
                                       with make_client(). (default: None)
            logger {logging.Logger} -- The logger to use. (default: module logger)
        """

        super().__init__(logger=logger)

        self.client = client if client is not None else make_client()
        self._setup_client(self.client)

    @property
    def user_id(self) -> Optional[str]:
        user = self.client.user
        return str(user.id) if user is not None else None

    def _register(self, coro):
        # commands.Bot allows many listeners per event, plain clients only one
        add_listener = getattr(self.client, "add_listener", None)

        if add_listener is not None:
            add_listener(coro)

        else:
            self.client.event(coro)

    def _setup_client(self, client: discord.Client):
        async def on_message(message: discord.Message):
            self.receive_event(events.MESSAGE_CREATE, message_from_discord(message))

        async def on_raw_reaction_add(payload: discord.RawReactionActionEvent):
            self.receive_event(
                events.REACTION_ADD,
                events.ReactionEvent(
                    message_id=str(payload.message_id),
                    channel_id=str(payload.channel_id),
                    user_id=str(payload.user_id),
                    emoji=payload.emoji.name,
                    guild_id=_optional_id(payload.guild_id),
                    api_emoji=str(payload.emoji),
                ),
            )

        async def on_raw_message_delete(payload: discord.RawMessageDeleteEvent):
            self.receive_event(
                events.MESSAGE_DELETE,
                events.MessageDeleteEvent(
                    message_id=str(payload.message_id),
                    channel_id=str(payload.channel_id),
                    guild_id=_optional_id(payload.guild_id),
                ),
            )

        async def on_raw_bulk_message_delete(
            payload: discord.RawBulkMessageDeleteEvent,
        ):
            self.receive_event(
                events.MESSAGE_DELETE_BULK,
                events.BulkMessageDeleteEvent(
                    message_ids=[str(m) for m in payload.message_ids],
                    channel_id=str(payload.channel_id),
                    guild_id=_optional_id(payload.guild_id),
                ),
            )

        async def on_guild_channel_delete(channel: discord.abc.GuildChannel):
            self.receive_event(
                events.CHANNEL_DELETE,
                events.ChannelDeleteEvent(
                    channel_id=str(channel.id), guild_id=str(channel.guild.id)
                ),
            )

        async def on_guild_remove(guild: discord.Guild):
            self.receive_event(
                events.GUILD_DELETE, events.GuildDeleteEvent(guild_id=str(guild.id))
            )

        for coro in (
            on_message,
            on_raw_reaction_add,
            on_raw_message_delete,
            on_raw_bulk_message_delete,
            on_guild_channel_delete,
            on_guild_remove,
        ):
            self._register(coro)

    async def _resolve_channel(
        self, channel_id: Union[str, "discord.abc.Messageable"]
    ) -> "discord.abc.Messageable":
        """Resolves a channel argument and ensures that a messageable channel is returned."""

        if hasattr(channel_id, "send"):
            return channel_id

        orig = channel_id  # for error message purposes

        try:
            snowflake = int(channel_id)

        except ValueError:
            raise ValueError(
                "Invalid Discord channel ID passed: must be a numeric string, got {}".format(
                    repr(orig)
                )
            )

        channel = self.client.get_channel(snowflake)

        if channel is None:
            try:
                channel = await trio_asyncio.aio_as_trio(self.client.fetch_channel)(
                    snowflake
                )

            except discord.NotFound:
                warnings.warn(
                    UnknownChannelWarning(
                        "Discord channel ID {} does not exist or was not found".format(
                            snowflake
                        )
                    )
                )
                raise

        return channel

    async def _partial_message(
        self, channel_id: str, message_id: str
    ) -> discord.PartialMessage:
        channel = await self._resolve_channel(channel_id)
        return channel.get_partial_message(int(message_id))

    async def send_embed(self, channel_id: str, embed: discord.Embed) -> Message:
        channel = await self._resolve_channel(channel_id)
        message = await trio_asyncio.aio_as_trio(channel.send)(embed=embed)

        return message_from_discord(message)

    async def send_text(self, channel_id: str, content: str) -> Message:
        channel = await self._resolve_channel(channel_id)
        message = await trio_asyncio.aio_as_trio(channel.send)(content)

        return message_from_discord(message)

    async def edit_embed(
        self, channel_id: str, message_id: str, embed: discord.Embed
    ) -> Message:
        partial = await self._partial_message(channel_id, message_id)
        message = await trio_asyncio.aio_as_trio(partial.edit)(embed=embed)

        return message_from_discord(message)

    async def delete_message(self, channel_id: str, message_id: str):
        partial = await self._partial_message(channel_id, message_id)
        await trio_asyncio.aio_as_trio(partial.delete)()

    async def add_reaction(self, channel_id: str, message_id: str, emoji: str):
        partial = await self._partial_message(channel_id, message_id)
        await trio_asyncio.aio_as_trio(partial.add_reaction)(emoji)

    async def remove_reaction(
        self, channel_id: str, message_id: str, emoji: str, user_id: str
    ):
        partial = await self._partial_message(channel_id, message_id)
        await trio_asyncio.aio_as_trio(partial.remove_reaction)(
            emoji, discord.Object(id=int(user_id))
        )

    async def fetch_message(self, channel_id: str, message_id: str) -> Message:
        channel = await self._resolve_channel(channel_id)
        message = await trio_asyncio.aio_as_trio(channel.fetch_message)(
            int(message_id)
        )

        return message_from_discord(message)

    async def start(self, token: str):
        """Logs in and runs the Discord client, until stopped.

        Must run inside trio_asyncio, e.g. under trio_asyncio.run.
        """

        await trio_asyncio.aio_as_trio(self.client.login)(token)
        self.logger.info("Logged into Discord, connecting")

        await trio_asyncio.aio_as_trio(self.client.connect)()

    async def stop(self):
        if self.client.is_closed():
            return False

        await trio_asyncio.aio_as_trio(self.client.close)()

        return True
