import itertools

import discord
import pytest
import trio

from triwidgets.events import Message
from triwidgets.session import Session

BOT_ID = "100"
CHANNEL_ID = "200"
GUILD_ID = "300"


class FakeSession(Session):
    """An in-memory session recording every REST call made through it."""

    def __init__(self, user_id=BOT_ID):
        super().__init__()

        self._user_id = user_id
        self._message_ids = itertools.count(1000)

        self.calls = []
        self.messages = {}
        self.failing = set()

    @property
    def user_id(self):
        return self._user_id

    def calls_to(self, name):
        return [call[1:] for call in self.calls if call[0] == name]

    def add_message(self, channel_id=CHANNEL_ID, author_id=BOT_ID, embeds=(), content=""):
        message = Message(
            id=str(next(self._message_ids)),
            channel_id=channel_id,
            author_id=author_id,
            guild_id=GUILD_ID,
            content=content,
            embeds=list(embeds),
        )
        self.messages[message.id] = message

        return message

    async def _call(self, name, *args):
        await trio.lowlevel.checkpoint()

        self.calls.append((name,) + args)

        if name in self.failing:
            raise discord.DiscordException("{} failed".format(name))

    async def send_embed(self, channel_id, embed):
        await self._call("send_embed", channel_id, embed)
        return self.add_message(channel_id, embeds=[embed])

    async def send_text(self, channel_id, content):
        await self._call("send_text", channel_id, content)
        return self.add_message(channel_id, content=content)

    async def edit_embed(self, channel_id, message_id, embed):
        await self._call("edit_embed", channel_id, message_id, embed)

        message = self.messages[message_id]
        message.embeds = [embed]

        return message

    async def delete_message(self, channel_id, message_id):
        await self._call("delete_message", channel_id, message_id)
        self.messages.pop(message_id, None)

    async def add_reaction(self, channel_id, message_id, emoji):
        await self._call("add_reaction", channel_id, message_id, emoji)

    async def remove_reaction(self, channel_id, message_id, emoji, user_id):
        await self._call("remove_reaction", channel_id, message_id, emoji, user_id)

    async def fetch_message(self, channel_id, message_id):
        await self._call("fetch_message", channel_id, message_id)

        try:
            return self.messages[message_id]

        except KeyError:
            raise discord.DiscordException("Unknown message {}".format(message_id))


@pytest.fixture
def session():
    return FakeSession()
