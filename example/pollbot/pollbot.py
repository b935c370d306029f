"""
Runs a very simple Discord bot that posts a poll widget
whenever someone says 'poll, and counts the votes.
"""

import logging

import discord
import trio
import trio_asyncio

from triwidgets import Widget
from triwidgets.backends.discord import DiscordSession
from triwidgets.events import MESSAGE_CREATE, Message


class PollBot:
    """
    A very simple Discord bot that spawns a reaction poll.
    """

    def __init__(self, token: str):
        self.token = token
        self.session = DiscordSession()
        self.nursery = None

        self.session.listen(MESSAGE_CREATE)(self.on_message)

    def on_message(self, message: Message):
        """Checks all received messages for the poll command.

        Arguments:
            message {Message} -- The message to check.
        """

        if message.content.rstrip() == "'poll":
            self.nursery.start_soon(self.run_poll, message.channel_id)

    async def run_poll(self, channel_id: str):
        votes = {"👍": set(), "👎": set()}

        widget = Widget(
            self.session,
            channel_id,
            embed=discord.Embed(title="Poll", description="Vote with the reactions below!"),
            timeout=60,
        )

        async def vote(widget, reaction):
            for emoji, voters in votes.items():
                voters.discard(reaction.user_id)

            votes[reaction.emoji].add(reaction.user_id)

            await widget.update_embed(
                discord.Embed(
                    title="Poll",
                    description="\n".join(
                        "{} {}".format(emoji, len(voters)) for emoji, voters in votes.items()
                    ),
                )
            )

        for emoji in votes:
            widget.handle(emoji, vote)

        await widget.spawn()

    async def start(self):
        async with trio.open_nursery() as nursery:
            self.nursery = nursery
            nursery.start_soon(self.session.start, self.token)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    BOT = PollBot(open("dis_token.txt").read().strip())
    trio_asyncio.run(BOT.start)
