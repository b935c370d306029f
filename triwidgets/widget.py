"""
The Widget class.

A widget is an embed message with reactions for buttons. Clicking
a reaction calls the handler bound to its emoji, for as long as the
widget's listen loop runs (until closed, timed out, or its message
is removed).
"""

import enum
import logging
from typing import Awaitable, Callable, Optional

import attr
import discord
import trio

from .bridge import message_removed, next_message_created, reaction_added_for_message
from .errors import (
    WidgetAlreadyRunningError,
    WidgetNoEmbedError,
    WidgetNoMessageError,
    WidgetNotRunningError,
    WidgetQueryTimeoutError,
)
from .events import Message, ReactionEvent
from .session import Session

WidgetHandler = Callable[["Widget", ReactionEvent], Awaitable[None]]


class StopReason(enum.Enum):
    """Why a widget's listen loop returned."""

    CLOSED = "closed"
    TIMED_OUT = "timed out"
    REMOVED = "removed"


@attr.s(auto_attribs=True, eq=False)
class _ListenRun:
    """The state of a single run of a widget, from spawn or hook until it stops."""

    cancel_scope: trio.CancelScope = attr.Factory(trio.CancelScope)
    nursery: Optional[trio.Nursery] = None
    closed: bool = False
    removed: bool = False

    def stop_reason(self) -> StopReason:
        if self.removed:
            return StopReason.REMOVED

        if self.closed:
            return StopReason.CLOSED

        return StopReason.TIMED_OUT


@attr.s(auto_attribs=True, eq=False)
class Widget:
    """
    A message embed with reactions for buttons.

    Accepts custom handlers for reactions, bound by emoji name.
    Configure it through the keyword arguments below, then spawn
    it on a new message or hook it onto an existing one.

    Arguments:
        session {Session} -- The session to send messages and receive events through.
        channel_id {str} -- The channel to spawn the widget on.

    Keyword Arguments:
        embed {discord.Embed} -- The embed to spawn. (default: None)
        timeout {float} --  How long the widget listens, in seconds. None listens
                            until closed, 0 expires right away. (default: None)
        delete_reactions {bool} -- Remove users' reactions shortly after they are
                                   added, so buttons can be clicked again. (default: True)
        delete_on_timeout {bool} -- Delete the message when the widget times out.
                                    Closing it does not. (default: False)
        user_whitelist {list[str]} -- Only these users may use the buttons. Empty
                                      means everyone. (default: empty)
        wait_for_handlers {bool} -- Whether stopping waits for running handlers to
                                    finish, rather than cancelling them. (default: True)
        reaction_reset_delay {float} -- Seconds to wait before removing a
                                        clicked reaction. (default: 0.25)
        logger {logging.Logger} -- Where to log best-effort failures.
    """

    session: Session
    channel_id: str
    embed: Optional[discord.Embed] = None
    timeout: Optional[float] = None
    delete_reactions: bool = True
    delete_on_timeout: bool = False
    user_whitelist: list[str] = attr.Factory(list)
    wait_for_handlers: bool = True
    reaction_reset_delay: float = 0.25
    logger: logging.Logger = attr.Factory(lambda: logging.getLogger(__name__))

    message: Optional[Message] = attr.ib(default=None, init=False)

    # handlers binds emoji names to functions;
    # keys stores them in the order they were added
    handlers: dict[str, WidgetHandler] = attr.ib(factory=dict, init=False)
    keys: list[str] = attr.ib(factory=list, init=False)

    # set while running; replaced on every spawn or hook
    _run: Optional[_ListenRun] = attr.ib(default=None, init=False)

    def running(self) -> bool:
        """Returns whether the widget's listen loop is running."""

        return self._run is not None

    def is_user_allowed(self, user_id: str) -> bool:
        """Returns True if the user is allowed to use this widget."""

        return not self.user_whitelist or user_id in self.user_whitelist

    def handle(self, emoji: str, handler: WidgetHandler):
        """Adds a handler for the given emoji name.

        Only the first handler registered for an emoji is kept. If the
        widget is already running, the emoji's button is added to the
        message right away.

        Arguments:
            emoji {str} -- The unicode value (or name) of the emoji.
            handler {WidgetHandler} -- async function to call when the emoji is clicked,
                                       as handler(widget, reaction).
        """

        if emoji in self.handlers:
            return

        self.keys.append(emoji)
        self.handlers[emoji] = handler

        run = self._run

        if run is not None and run.nursery is not None and self.message is not None:
            run.nursery.start_soon(self._add_button, emoji)

    def on(self, emoji: str):
        """Adds a handler for the given emoji name.
        Use as a decorator generating method.

        Arguments:
            emoji {str} -- The unicode value (or name) of the emoji.

        Returns:
            function -- The decorator method.
        """

        def _decorator(func):
            self.handle(emoji, func)
            return func

        return _decorator

    def _start(self) -> "_ListenRun":
        run = _ListenRun()
        self._run = run

        return run

    def _stop(self, run: "_ListenRun"):
        # a closed run may outlive its widget's next spawn
        if self._run is run:
            self._run = None

    async def spawn(self) -> StopReason:
        """Spawns the widget in channel channel_id.

        Sends the embed as a new message, adds a reaction button per
        handler, in the order they were added, then listens until the
        widget stops.

        Returns:
            StopReason -- Why the widget stopped.
        """

        if self.running():
            raise WidgetAlreadyRunningError("Widget is already running")

        if self.embed is None:
            raise WidgetNoEmbedError("Widget has no embed to spawn")

        run = self._start()

        try:
            self.message = await self.session.send_embed(self.channel_id, self.embed)

            for emoji in self.keys:
                await self._add_button(emoji)

            return await self._listen(run)

        finally:
            self._stop(run)

    async def hook(
        self, session: Session, channel_id: str, message_id: str
    ) -> StopReason:
        """Hooks the widget onto an existing message, then listens until it stops.

        The message's first embed becomes the widget's embed. Reaction
        buttons are assumed to be on the message already.

        Arguments:
            session {Session} -- The session to use from now on.
            channel_id {str} -- The channel of the message.
            message_id {str} -- The message to hook onto.

        Returns:
            StopReason -- Why the widget stopped.
        """

        if self.running():
            raise WidgetAlreadyRunningError("Widget is already running")

        run = self._start()

        try:
            self.session = session
            self.channel_id = channel_id

            message = await session.fetch_message(channel_id, message_id)

            if not message.embeds:
                raise WidgetNoEmbedError(
                    "Message {} has no embed to hook onto".format(message_id)
                )

            self.message = message
            self.embed = message.embeds[0]

            return await self._listen(run)

        finally:
            self._stop(run)

    def close(self):
        """Stops the widget's listen loop.

        The widget stops counting as running right away, and may be
        spawned again, although the stopped run may still be draining
        its handlers (see wait_for_handlers). Those handlers still see
        this widget, and thus whichever message it is on by then.

        Raises:
            WidgetNotRunningError: The widget isn't running.
        """

        run = self._run

        if run is None:
            raise WidgetNotRunningError("Widget is not running")

        run.closed = True
        run.cancel_scope.cancel()
        self._run = None

    async def _listen(self, run: "_ListenRun") -> StopReason:
        if self.timeout is not None:
            run.cancel_scope.deadline = trio.current_time() + self.timeout

        async with trio.open_nursery() as nursery:
            run.nursery = nursery
            removal_scope = trio.CancelScope()

            with reaction_added_for_message(self.session, self.message) as reactions:
                with message_removed(self.session, self.message) as removed:
                    nursery.start_soon(self._watch_removal, run, removed, removal_scope)

                    with run.cancel_scope:
                        async for reaction in reactions:
                            self._on_reaction(nursery, reaction)

                    removal_scope.cancel()

            reason = run.stop_reason()
            self.logger.debug(
                "Widget on message %s stopped: %s", self.message.id, reason.value
            )

            if reason is StopReason.TIMED_OUT and self.delete_on_timeout:
                await self._try_delete(self.message)

            if not self.wait_for_handlers:
                nursery.cancel_scope.cancel()

        return reason

    async def _watch_removal(
        self, run: "_ListenRun", removed, removal_scope: trio.CancelScope
    ):
        with removal_scope:
            await removed.receive()

            run.removed = True
            run.cancel_scope.cancel()

    def _on_reaction(self, nursery: trio.Nursery, reaction: ReactionEvent):
        # ignore reactions sent by the bot itself
        if reaction.message_id != self.message.id or reaction.user_id == self.session.user_id:
            return

        handler = self.handlers.get(reaction.emoji)

        if handler is not None and self.is_user_allowed(reaction.user_id):
            nursery.start_soon(self._run_handler, handler, reaction)

        if self.delete_reactions:
            nursery.start_soon(self._reset_reaction, reaction)

    async def _run_handler(self, handler: WidgetHandler, reaction: ReactionEvent):
        # handler errors stay inside their own task
        try:
            await handler(self, reaction)

        except Exception:
            self.logger.exception(
                "Handler for reaction %s on message %s failed",
                reaction.emoji,
                reaction.message_id,
            )

    async def _reset_reaction(self, reaction: ReactionEvent):
        await trio.sleep(self.reaction_reset_delay)

        try:
            await self.session.remove_reaction(
                reaction.channel_id,
                reaction.message_id,
                reaction.reaction_ref(),
                reaction.user_id,
            )

        except discord.DiscordException:
            self.logger.debug(
                "Could not remove reaction %s from message %s",
                reaction.emoji,
                reaction.message_id,
                exc_info=True,
            )

    async def _add_button(self, emoji: str):
        try:
            await self.session.add_reaction(
                self.message.channel_id, self.message.id, emoji
            )

        except discord.DiscordException:
            self.logger.debug(
                "Could not add reaction %s to message %s",
                emoji,
                self.message.id,
                exc_info=True,
            )

    async def _try_delete(self, message: Message):
        try:
            await self.session.delete_message(message.channel_id, message.id)

        except discord.DiscordException:
            self.logger.debug("Could not delete message %s", message.id, exc_info=True)

    async def query_input(
        self, prompt: str, user_id: str, timeout: float
    ) -> Message:
        """Queries the user with ID user_id for input.

        Both the prompt and the user's reply are deleted afterwards.

        Arguments:
            prompt {str} -- Question prompt.
            user_id {str} -- The user to get a message from.
            timeout {float} -- How long to wait for the user's response, in seconds.

        Raises:
            WidgetQueryTimeoutError: The user did not reply in time.

        Returns:
            Message -- The user's reply.
        """

        prompt_message = await self.session.send_text(
            self.channel_id, "<@{}>,  {}".format(user_id, prompt)
        )

        try:
            reply = None

            with trio.move_on_after(timeout):
                while reply is None:
                    with next_message_created(self.session) as messages:
                        message = await messages.receive()

                    if message.author_id == user_id:
                        reply = message

            if reply is None:
                raise WidgetQueryTimeoutError(
                    "User {} did not reply within {} seconds".format(user_id, timeout)
                )

            await self._try_delete(reply)
            return reply

        finally:
            with trio.CancelScope(shield=True):
                await self._try_delete(prompt_message)

    async def update_embed(self, embed: discord.Embed) -> Message:
        """Updates the embed object and edits the original message.

        Arguments:
            embed {discord.Embed} -- New embed object to replace the widget's embed.

        Raises:
            WidgetNoMessageError: The widget was never spawned nor hooked.

        Returns:
            Message -- The edited message.
        """

        if self.message is None:
            raise WidgetNoMessageError("Widget has no message to update")

        message = await self.session.edit_embed(
            self.message.channel_id, self.message.id, embed
        )
        self.embed = embed

        return message
