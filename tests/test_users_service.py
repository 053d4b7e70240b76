"""
UsersService tests - in-memory backend behaviour in permissive and strict modes
"""

import uuid

from services.users_service import UsersService, get_users_service


class TestUsersServiceCreate:

    async def test_create_keeps_supplied_id(self, users_service, user_factory):
        data, user_id = user_factory.generate_user()
        data["userId"] = uuid.UUID(user_id)

        result = await users_service.create_user(data)

        assert result.success, f"Create failed: {result.error}"
        assert result.count == 1
        assert result.data[0]["userId"] == uuid.UUID(user_id)
        assert result.data[0]["username"] == data["username"]

    async def test_create_assigns_id_when_absent(self, users_service, user_factory):
        data, _ = user_factory.generate_user(with_id=False)

        result = await users_service.create_user(data)

        assert result.success
        assert isinstance(result.data[0]["userId"], uuid.UUID)

    async def test_create_duplicate_id_conflicts(self, users_service, user_factory):
        data, user_id = user_factory.generate_user()
        data["userId"] = uuid.UUID(user_id)
        await users_service.create_user(data)

        result = await users_service.create_user(dict(data, username="someone_else"))

        assert not result.success
        assert result.error_type == "CONFLICT_ERROR"


class TestUsersServiceRead:

    async def test_get_unknown_user_not_found(self, users_service):
        result = await users_service.get_user(uuid.uuid4())

        assert not result.success
        assert result.error_type == "RESOURCE_NOT_FOUND"

    async def test_list_pages_in_insertion_order(self, users_service, user_factory):
        users = user_factory.generate_users(5)
        for data in users:
            await users_service.create_user(data)

        first = await users_service.list_users(page=0, size=2)
        last = await users_service.list_users(page=2, size=2)
        beyond = await users_service.list_users(page=3, size=2)

        assert [u["username"] for u in first.data] == [users[0]["username"], users[1]["username"]]
        assert [u["username"] for u in last.data] == [users[4]["username"]]
        assert beyond.success and beyond.data == []
        assert first.page_info == {"page": 0, "size": 2, "total": 5}

    async def test_returned_records_are_copies(self, users_service, user_factory):
        data, _ = user_factory.generate_user(with_id=False)
        created = await users_service.create_user(data)
        user_id = created.data[0]["userId"]

        created.data[0]["username"] = "mutated"
        fetched = await users_service.get_user(user_id)

        assert fetched.data[0]["username"] == data["username"]


class TestUsersServiceUpdate:

    async def test_update_existing_user(self, users_service, user_factory):
        data, _ = user_factory.generate_user(with_id=False)
        created = await users_service.create_user(data)
        user_id = created.data[0]["userId"]

        result = await users_service.update_user(user_id, dict(data, firstName="Changed"))

        assert result.success
        assert result.data[0]["firstName"] == "Changed"
        assert result.data[0]["userId"] == user_id

    async def test_update_uses_path_id_over_body_id(self, users_service, user_factory):
        data, _ = user_factory.generate_user(with_id=False)
        created = await users_service.create_user(data)
        user_id = created.data[0]["userId"]

        result = await users_service.update_user(user_id, dict(data, userId=uuid.uuid4()))

        assert result.data[0]["userId"] == user_id

    async def test_permissive_update_of_unknown_id_stores_user(self, users_service, user_factory):
        data, _ = user_factory.generate_user(with_id=False)
        unknown_id = uuid.uuid4()

        result = await users_service.update_user(unknown_id, data)
        fetched = await users_service.get_user(unknown_id)

        assert result.success
        assert fetched.success
        assert fetched.data[0]["username"] == data["username"]

    async def test_strict_update_of_unknown_id_not_found(self, strict_users_service, user_factory):
        data, _ = user_factory.generate_user(with_id=False)

        result = await strict_users_service.update_user(uuid.uuid4(), data)

        assert not result.success
        assert result.error_type == "RESOURCE_NOT_FOUND"


class TestUsersServiceDelete:

    async def test_delete_returns_removed_user(self, users_service, user_factory):
        data, _ = user_factory.generate_user(with_id=False)
        created = await users_service.create_user(data)
        user_id = created.data[0]["userId"]

        result = await users_service.delete_user(user_id)
        after = await users_service.get_user(user_id)

        assert result.success
        assert result.data[0]["username"] == data["username"]
        assert after.error_type == "RESOURCE_NOT_FOUND"

    async def test_permissive_delete_of_unknown_id_returns_placeholder(self, users_service):
        unknown_id = uuid.uuid4()

        result = await users_service.delete_user(unknown_id)

        assert result.success
        assert result.data[0] == {
            "userId": unknown_id,
            "username": None,
            "firstName": None,
            "lastName": None
        }

    async def test_strict_delete_of_unknown_id_not_found(self, strict_users_service):
        result = await strict_users_service.delete_user(uuid.uuid4())

        assert not result.success
        assert result.error_type == "RESOURCE_NOT_FOUND"

    async def test_clear_empties_store(self, users_service, user_factory):
        for data in user_factory.generate_users(3):
            await users_service.create_user(data)

        await users_service.clear()
        result = await users_service.list_users()

        assert result.data == []


def test_global_service_is_singleton():
    assert get_users_service() is get_users_service()
    assert isinstance(get_users_service(), UsersService)
