import asyncio
from datetime import datetime, timezone

import pytest

from groupchat.application.commands.conversations import (
    InitiateConversationCommand,
    LeaveConversationCommand,
)
from groupchat.application.commands.messages import PostMessageCommand
from groupchat.application.queries.messages import (
    GetConversationHistoryQuery,
    GetConversationQuery,
)
from groupchat.domain.entities import Message
from groupchat.domain.exceptions import (
    InvalidSenderError,
    MessageTimestampConflictError,
    NotAMemberError,
)
from groupchat.domain.ports import SEND_PUSH_NOTIFICATIONS
from groupchat.domain.services import MessageClock
from groupchat.domain.value_objects import ConversationId, MessageTimestamp, UserId
from helpers import RecordingTaskDispatcher, build_services

NOON = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _frozen_clock():
    return MessageClock(now=lambda: NOON)


def _initiate(services, initiator, *others):
    return asyncio.run(
        services.initiate.execute(
            InitiateConversationCommand(UserId(initiator), tuple(UserId(o) for o in others))
        )
    )


def _post(services, sender, cid, text, notify=False):
    return asyncio.run(
        services.post.execute(PostMessageCommand(UserId(sender), cid, text, notify))
    )


def _read(services, cid, requester, since=None):
    return asyncio.run(
        services.get_conversation.execute(
            GetConversationQuery(cid, UserId(requester), since)
        )
    )


@pytest.fixture()
def trio(make_user):
    for name in ("a", "b", "c"):
        make_user(name, display_name=name.upper())


def test_three_party_exchange(services, trio):
    cid = _initiate(services, "a", "b", "c")

    _post(services, "a", cid, "hi all")
    _post(services, "b", cid, "hello")
    _post(services, "c", cid, "hey")

    snapshot = _read(services, cid, "b")
    assert sorted(u.id.value for u in snapshot.users) == ["a", "b", "c"]
    assert [m.text for m in snapshot.messages] == ["hi all", "hello", "hey"]
    assert [m.sender.display_name for m in snapshot.messages] == ["A", "B", "C"]
    timestamps = [m.timestamp.value for m in snapshot.messages]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == 3


def test_same_instant_posts_get_distinct_timestamps(store, trio):
    services = build_services(store, clock=_frozen_clock())
    cid = _initiate(services, "a", "b")

    first = _post(services, "a", cid, "one")
    second = _post(services, "b", cid, "two")

    assert first.timestamp.value == "2024-05-01T12:00:00.000000Z"
    assert second.timestamp.value == "2024-05-01T12:00:00.000001Z"


def test_taken_timestamp_is_retried(store, make_user):
    services = build_services(store, clock=_frozen_clock())
    sender = make_user("a")
    make_user("b")
    cid = _initiate(services, "a", "b")
    # written by another process at the same instant
    asyncio.run(
        services.messages.add(
            Message.create(cid, "elsewhere", sender, MessageTimestamp.from_datetime(NOON))
        )
    )

    message = _post(services, "a", cid, "here")

    assert message.timestamp.value == "2024-05-01T12:00:00.000001Z"
    assert [m.text for m in _read(services, cid, "a").messages] == ["elsewhere", "here"]


def test_timestamp_conflict_after_last_attempt(store, make_user):
    services = build_services(store, clock=_frozen_clock(), write_attempts=1)
    sender = make_user("a")
    make_user("b")
    cid = _initiate(services, "a", "b")
    asyncio.run(
        services.messages.add(
            Message.create(cid, "elsewhere", sender, MessageTimestamp.from_datetime(NOON))
        )
    )

    with pytest.raises(MessageTimestampConflictError):
        _post(services, "a", cid, "here")


def test_post_requires_registered_sender(services, trio):
    cid = _initiate(services, "a", "b")

    with pytest.raises(InvalidSenderError):
        _post(services, "ghost", cid, "boo")


def test_post_requires_membership(services, trio):
    cid = _initiate(services, "a", "b")

    with pytest.raises(NotAMemberError, match="Sender is not part of the conversation"):
        _post(services, "c", cid, "let me in")
    with pytest.raises(NotAMemberError):
        _post(services, "a", ConversationId("no-such-conversation"), "anyone?")


def test_former_member_cannot_post_or_read(services, trio):
    cid = _initiate(services, "a", "b", "c")
    _post(services, "c", cid, "bye")
    asyncio.run(services.leave.execute(LeaveConversationCommand(UserId("c"), cid)))

    with pytest.raises(NotAMemberError):
        _post(services, "c", cid, "one more thing")
    with pytest.raises(NotAMemberError):
        _read(services, cid, "c")


def test_read_since_returns_strictly_later_messages(services, trio):
    cid = _initiate(services, "a", "b")
    first = _post(services, "a", cid, "one")
    _post(services, "b", cid, "two")
    _post(services, "a", cid, "three")

    snapshot = _read(services, cid, "a", since=first.timestamp)

    assert [m.text for m in snapshot.messages] == ["two", "three"]


def test_history_covers_every_conversation(services, trio):
    pair = _initiate(services, "a", "b")
    group = _initiate(services, "a", "b", "c")
    other = _initiate(services, "b", "c")
    _post(services, "a", pair, "pair")
    _post(services, "c", group, "group")
    _post(services, "b", other, "not for a")

    history = asyncio.run(services.history.execute(GetConversationHistoryQuery(UserId("a"))))

    by_id = {snapshot.conversation_id: snapshot for snapshot in history}
    assert set(by_id) == {pair, group}
    assert [m.text for m in by_id[pair].messages] == ["pair"]
    assert [m.text for m in by_id[group].messages] == ["group"]


def test_history_of_user_without_conversations(services, make_user):
    make_user("loner")

    assert asyncio.run(services.history.execute(GetConversationHistoryQuery(UserId("loner")))) == []


def test_notify_schedules_push_fan_out(services, dispatcher, trio):
    cid = _initiate(services, "a", "b")

    _post(services, "a", cid, "quiet")
    _post(services, "a", cid, "loud", notify=True)

    assert dispatcher.dispatched == [
        (
            SEND_PUSH_NOTIFICATIONS,
            {
                "conversationId": cid.value,
                "senderId": "a",
                "message": "loud",
                "dryRun": False,
            },
        )
    ]


def test_post_succeeds_when_push_cannot_be_scheduled(store, trio):
    services = build_services(store, dispatcher=RecordingTaskDispatcher(fail=True))
    cid = _initiate(services, "a", "b")

    message = _post(services, "a", cid, "still delivered", notify=True)

    assert [m.text for m in _read(services, cid, "b").messages] == [message.text]


def test_sender_snapshot_is_frozen_at_post_time(services, trio):
    cid = _initiate(services, "a", "b")
    _post(services, "a", cid, "hi")

    asyncio.run(services.users.update_profile(UserId("a"), display_name="Renamed"))

    stored = _read(services, cid, "b").messages[0]
    assert stored.sender.display_name == "A"
    assert stored.is_from(UserId("a"))
