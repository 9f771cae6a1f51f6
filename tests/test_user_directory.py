import asyncio

import pytest

from groupchat.application.commands.users import (
    DeleteUserCommand,
    NewUser,
    RegisterUserWithEmailCommand,
    RegisterUserWithPhoneCommand,
    RegisterUsersCommand,
    UpdateUserCommand,
)
from groupchat.application.commands.users.registration import register_user
from groupchat.application.queries.users import (
    GetUserQuery,
    LookupUserByEmailQuery,
    LookupUserByPhoneQuery,
)
from groupchat.domain.entities.user import User, email_identity
from groupchat.domain.exceptions import (
    AlreadyExistsError,
    DomainValidationError,
    EntityNotFoundError,
)
from groupchat.domain.ports import REPAIR_SENDER_SNAPSHOTS
from groupchat.domain.value_objects import UserEmail, UserId
from groupchat.infrastructure.persistence import DocumentUserRepository
from groupchat.infrastructure.storage import IDENTITY_CLAIMS, USERS, StorageError
from helpers import PHONE_A, PHONE_B, RecordingTaskDispatcher, build_services, redis_store


def _register_phone(services, user_id, phone, name="Someone", token=None):
    return services.register_phone.execute(
        RegisterUserWithPhoneCommand(UserId(user_id), phone, name, token)
    )


def _register_email(services, user_id, email, name="Someone"):
    return services.register_email.execute(
        RegisterUserWithEmailCommand(UserId(user_id), UserEmail(email), name)
    )


def test_register_with_phone_normalizes_number(services):
    user = asyncio.run(_register_phone(services, "alice", "(650) 253-0000", "Alice", "tok-a"))

    assert user.phone_number.value == PHONE_A
    stored = asyncio.run(services.get_user.execute(GetUserQuery(UserId("alice"))))
    assert stored == user
    assert stored.fcm_token == "tok-a"


def test_register_invalid_phone_writes_nothing(services, store):
    with pytest.raises(DomainValidationError):
        asyncio.run(_register_phone(services, "alice", "12345"))

    assert asyncio.run(store.get(USERS.name, {"userId": "alice"})) is None


def test_register_invalid_email_writes_nothing(services, store):
    with pytest.raises(DomainValidationError):
        asyncio.run(
            services.register_email.execute(
                RegisterUserWithEmailCommand(UserId("alice"), UserEmail("not-an-email"), "A")
            )
        )

    assert asyncio.run(store.get(USERS.name, {"userId": "alice"})) is None


def test_duplicate_phone_is_rejected(services):
    asyncio.run(_register_phone(services, "alice", PHONE_A))

    with pytest.raises(AlreadyExistsError):
        asyncio.run(_register_phone(services, "bob", "650-253-0000"))

    assert asyncio.run(services.get_user.execute(GetUserQuery(UserId("bob")))) is None


def test_duplicate_email_is_rejected(services):
    asyncio.run(_register_email(services, "alice", "shared@example.com"))

    with pytest.raises(AlreadyExistsError):
        asyncio.run(_register_email(services, "bob", "shared@example.com"))


def test_email_identity_ignores_case(services, store):
    alice = asyncio.run(_register_email(services, "alice", "Alice@Example.com"))

    with pytest.raises(AlreadyExistsError):
        asyncio.run(_register_email(services, "bob", "alice@example.COM"))

    assert alice.email.value == "alice@example.com"
    assert asyncio.run(store.get(IDENTITY_CLAIMS.name, {"identity": "email:alice@example.com"})) is not None
    found = asyncio.run(services.lookup_email.execute(LookupUserByEmailQuery(UserEmail("ALICE@example.com"))))
    assert found.id.value == "alice"


def test_concurrent_registrations_of_one_number_admit_one_user(services, store):
    async def scenario():
        return await asyncio.gather(
            _register_phone(services, "alice", PHONE_A),
            _register_phone(services, "bob", PHONE_A),
            return_exceptions=True,
        )

    outcomes = asyncio.run(scenario())

    winners = [o for o in outcomes if not isinstance(o, Exception)]
    losers = [o for o in outcomes if isinstance(o, Exception)]
    assert len(winners) == 1
    assert len(losers) == 1 and isinstance(losers[0], AlreadyExistsError)
    found = asyncio.run(services.lookup_phone.execute(LookupUserByPhoneQuery(PHONE_A)))
    assert found.id == winners[0].id
    loser_id = "bob" if winners[0].id.value == "alice" else "alice"
    assert asyncio.run(store.get(USERS.name, {"userId": loser_id})) is None


def test_concurrent_registrations_on_redis_admit_one_user():
    services = build_services(redis_store())

    async def scenario():
        outcomes = await asyncio.gather(
            *(_register_phone(services, user_id, PHONE_A) for user_id in ["a", "b", "c", "d"]),
            return_exceptions=True,
        )
        found = await services.lookup_phone.execute(LookupUserByPhoneQuery(PHONE_A))
        return outcomes, found

    outcomes, found = asyncio.run(scenario())

    winners = [o for o in outcomes if not isinstance(o, Exception)]
    assert len(winners) == 1
    losers = [o for o in outcomes if isinstance(o, Exception)]
    assert len(losers) == 3 and all(isinstance(o, AlreadyExistsError) for o in losers)
    assert found.id == winners[0].id


def test_reregistering_a_user_id_releases_the_new_identity(services, store):
    asyncio.run(_register_email(services, "alice", "alice@example.com"))

    with pytest.raises(AlreadyExistsError):
        asyncio.run(_register_email(services, "alice", "other@example.com"))

    assert asyncio.run(store.get(IDENTITY_CLAIMS.name, {"identity": "email:other@example.com"})) is None
    assert asyncio.run(store.get(IDENTITY_CLAIMS.name, {"identity": "email:alice@example.com"})) == {
        "identity": "email:alice@example.com",
        "userId": "alice",
    }
    # the freed address is usable by someone else
    bob = asyncio.run(_register_email(services, "bob", "other@example.com"))
    assert bob.email.value == "other@example.com"


def test_lookup_by_phone_and_email(services):
    asyncio.run(_register_phone(services, "alice", PHONE_A, "Alice"))
    asyncio.run(_register_email(services, "bob", "bob@example.com", "Bob"))

    by_phone = asyncio.run(services.lookup_phone.execute(LookupUserByPhoneQuery("+1 (650) 253-0000")))
    by_email = asyncio.run(services.lookup_email.execute(LookupUserByEmailQuery(UserEmail("bob@example.com"))))
    absent = asyncio.run(services.lookup_phone.execute(LookupUserByPhoneQuery(PHONE_B)))

    assert by_phone.display_name == "Alice"
    assert by_email.display_name == "Bob"
    assert absent is None


def test_lookup_rejects_invalid_number(services):
    with pytest.raises(DomainValidationError):
        asyncio.run(services.lookup_phone.execute(LookupUserByPhoneQuery("abc")))


def test_get_absent_user_returns_none(services):
    assert asyncio.run(services.get_user.execute(GetUserQuery(UserId("ghost")))) is None


def test_update_requires_a_field(services, make_user):
    make_user("alice")

    with pytest.raises(DomainValidationError):
        asyncio.run(services.update_user.execute(UpdateUserCommand(UserId("alice"))))


def test_update_absent_user(services):
    with pytest.raises(EntityNotFoundError):
        asyncio.run(
            services.update_user.execute(UpdateUserCommand(UserId("ghost"), display_name="X"))
        )


def test_update_writes_only_given_fields_and_schedules_repair(services, dispatcher, make_user):
    make_user("alice", display_name="Alice", fcm_token="tok-a")

    updated = asyncio.run(
        services.update_user.execute(UpdateUserCommand(UserId("alice"), display_name="Alicia"))
    )

    assert updated.display_name == "Alicia"
    assert updated.fcm_token == "tok-a"
    assert updated.email.value == "alice@example.com"
    assert dispatcher.dispatched == [(REPAIR_SENDER_SNAPSHOTS, {"userId": "alice"})]


def test_update_succeeds_when_repair_cannot_be_scheduled(store, make_user):
    services = build_services(store, dispatcher=RecordingTaskDispatcher(fail=True))
    make_user("alice")

    updated = asyncio.run(
        services.update_user.execute(UpdateUserCommand(UserId("alice"), fcm_token="new"))
    )

    assert updated.fcm_token == "new"


def test_delete_frees_identities(services, make_user):
    make_user("alice")

    asyncio.run(services.delete_user.execute(DeleteUserCommand(UserId("alice"))))
    asyncio.run(services.delete_user.execute(DeleteUserCommand(UserId("alice"))))

    assert asyncio.run(services.get_user.execute(GetUserQuery(UserId("alice")))) is None
    again = asyncio.run(_register_email(services, "alice2", "alice@example.com"))
    assert again.id == UserId("alice2")


def test_bulk_registration(services):
    users = asyncio.run(
        services.register_users.execute(
            RegisterUsersCommand(
                users=(
                    NewUser(UserId("a"), "A", phone_number=PHONE_A),
                    NewUser(UserId("b"), "B", email="b@example.com"),
                )
            )
        )
    )

    assert [u.id.value for u in users] == ["a", "b"]
    assert users[0].phone_number.value == PHONE_A
    assert users[1].email.value == "b@example.com"


def test_bulk_registration_validates_everything_first(services, store):
    command = RegisterUsersCommand(
        users=(
            NewUser(UserId("a"), "A", phone_number=PHONE_A),
            NewUser(UserId("b"), "B"),
        )
    )

    with pytest.raises(DomainValidationError):
        asyncio.run(services.register_users.execute(command))

    assert asyncio.run(store.get(USERS.name, {"userId": "a"})) is None


class _FailingAddRepository(DocumentUserRepository):
    def __init__(self, store, add_error, release_error=None):
        super().__init__(store)
        self._add_error = add_error
        self._release_error = release_error

    async def add(self, user):
        raise self._add_error

    async def release_identity(self, identity, user_id):
        if self._release_error is not None:
            raise self._release_error
        await super().release_identity(identity, user_id)


def _carol():
    return User(id=UserId("carol"), display_name="Carol", email=UserEmail("carol@example.com"))


def test_cancelled_registration_releases_its_claim(store):
    repository = _FailingAddRepository(store, asyncio.CancelledError())
    carol = _carol()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(register_user(repository, carol, email_identity(carol.email)))

    assert asyncio.run(store.get(IDENTITY_CLAIMS.name, {"identity": "email:carol@example.com"})) is None


def test_failed_release_keeps_the_original_error(store):
    repository = _FailingAddRepository(
        store, AlreadyExistsError("carol exists"), release_error=StorageError("store down")
    )
    carol = _carol()

    with pytest.raises(AlreadyExistsError, match="carol exists"):
        asyncio.run(register_user(repository, carol, email_identity(carol.email)))
