"""
Pytest configuration and fixtures for the User resource API and its
documentation harness. Everything runs in-process against a fresh app.
"""

import pytest
from typing import Generator

from fastapi.testclient import TestClient

from app import create_app
from restdocs.documentation import RestDocumentation
from restdocs.recorder import FileSnippetRecorder, InMemorySnippetRecorder
from services.users_service import UsersService

from data_factory import UserFactory


@pytest.fixture
def users_service() -> UsersService:
    """Permissive backend: unknown ids on PUT/DELETE still succeed"""
    return UsersService(permissive_update=True, permissive_delete=True)


@pytest.fixture
def strict_users_service() -> UsersService:
    """Strict backend: unknown ids on PUT/DELETE answer 404"""
    return UsersService(permissive_update=False, permissive_delete=False)


@pytest.fixture
def client(users_service) -> Generator[TestClient, None, None]:
    with TestClient(create_app(users_service)) as test_client:
        yield test_client


@pytest.fixture
def strict_client(strict_users_service) -> Generator[TestClient, None, None]:
    with TestClient(create_app(strict_users_service)) as test_client:
        yield test_client


@pytest.fixture
def recorder() -> InMemorySnippetRecorder:
    return InMemorySnippetRecorder()


@pytest.fixture
def snippets_dir(tmp_path):
    return tmp_path / "generated-snippets"


@pytest.fixture
def file_recorder(snippets_dir) -> FileSnippetRecorder:
    return FileSnippetRecorder(snippets_dir)


@pytest.fixture
def documentation(recorder) -> RestDocumentation:
    return RestDocumentation(recorder)


@pytest.fixture
def user_factory() -> UserFactory:
    return UserFactory(seed=1234)


def pytest_collection_modifyitems(config, items):
    """Add markers based on test names and locations"""
    for item in items:
        name = item.name.lower()
        if any(key in name for key in ["health", "golden", "full_tour"]):
            item.add_marker(pytest.mark.smoke)

        if "restdocs" in str(item.fspath) or "documentation" in str(item.fspath):
            item.add_marker(pytest.mark.docs)
        elif any(key in name for key in ["create", "insert", "get", "list", "update", "delete"]):
            item.add_marker(pytest.mark.crud)
