import pytest
import trio

from triwidgets import events
from triwidgets.bridge import (
    message_removed,
    next_message_created,
    reaction_added_for_message,
)
from triwidgets.events import Message, ReactionEvent

from .conftest import BOT_ID, CHANNEL_ID, GUILD_ID


@pytest.fixture
def message():
    return Message(id="1", channel_id=CHANNEL_ID, author_id=BOT_ID, guild_id=GUILD_ID)


def reaction(user_id="7", message_id="1", emoji="👍"):
    return ReactionEvent(
        message_id=message_id, channel_id=CHANNEL_ID, user_id=user_id, emoji=emoji
    )


@pytest.mark.trio
async def test_next_message_created_is_single_shot(session):
    sub = next_message_created(session)

    first = Message(id="5", channel_id=CHANNEL_ID, author_id="7")
    second = Message(id="6", channel_id=CHANNEL_ID, author_id="7")
    session.receive_event(events.MESSAGE_CREATE, first)
    session.receive_event(events.MESSAGE_CREATE, second)

    assert await sub.receive() is first
    assert session.handlers[events.MESSAGE_CREATE] == {}

    with pytest.raises(trio.EndOfChannel):
        await sub.receive()


@pytest.mark.trio
async def test_reaction_bridge_filters_message_and_author(session, message):
    with reaction_added_for_message(session, message) as sub:
        session.receive_event(events.REACTION_ADD, reaction(message_id="2"))
        session.receive_event(events.REACTION_ADD, reaction(user_id=BOT_ID))
        wanted = reaction()
        session.receive_event(events.REACTION_ADD, wanted)
        session.receive_event(events.REACTION_ADD, reaction(user_id="8"))

        assert await sub.receive() == wanted
        assert (await sub.receive()).user_id == "8"

    assert session.handlers[events.REACTION_ADD] == {}


@pytest.mark.trio
async def test_reaction_bridge_cancel_is_idempotent(session, message):
    sub = reaction_added_for_message(session, message)

    sub.cancel()
    sub.cancel()
    session.receive_event(events.REACTION_ADD, reaction())

    received = [event async for event in sub]
    assert received == []


@pytest.mark.trio
@pytest.mark.parametrize(
    "kind,event",
    [
        (events.MESSAGE_DELETE, events.MessageDeleteEvent("1", CHANNEL_ID)),
        (
            events.MESSAGE_DELETE_BULK,
            events.BulkMessageDeleteEvent(["0", "1", "2"], CHANNEL_ID),
        ),
        (events.CHANNEL_DELETE, events.ChannelDeleteEvent(CHANNEL_ID, GUILD_ID)),
        (events.GUILD_DELETE, events.GuildDeleteEvent(GUILD_ID)),
    ],
)
async def test_message_removed_fires_once_and_deregisters_all(
    session, message, kind, event
):
    sub = message_removed(session, message)

    session.receive_event(kind, event)
    session.receive_event(kind, event)

    assert [received async for received in sub] == [event]

    for source in (
        events.MESSAGE_DELETE,
        events.MESSAGE_DELETE_BULK,
        events.CHANNEL_DELETE,
        events.GUILD_DELETE,
    ):
        assert session.handlers[source] == {}


@pytest.mark.trio
async def test_message_removed_ignores_other_messages(session, message, autojump_clock):
    with message_removed(session, message) as sub:
        session.receive_event(
            events.MESSAGE_DELETE, events.MessageDeleteEvent("9", CHANNEL_ID)
        )
        session.receive_event(
            events.MESSAGE_DELETE_BULK, events.BulkMessageDeleteEvent(["8", "9"], CHANNEL_ID)
        )
        session.receive_event(events.CHANNEL_DELETE, events.ChannelDeleteEvent("999"))
        session.receive_event(events.GUILD_DELETE, events.GuildDeleteEvent("999"))

        with trio.move_on_after(0.1) as scope:
            await sub.receive()

        assert scope.cancelled_caught
