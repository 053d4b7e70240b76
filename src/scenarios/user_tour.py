"""
Documented tour of the User resource lifecycle

Runs a fixed sequence of calls against the users API. Each call is
asserted and then documented under its operation name, so a successful
run leaves one set of snippets per step behind.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import httpx

from config.settings import API_PREFIX
from models.user import User
from restdocs.descriptors import FieldDescriptor, ParameterDescriptor, field_with_path, parameter_with_name
from restdocs.documentation import DocumentationHandler, RestDocumentation
from restdocs.exchange import capture
from restdocs.payload import extract
from restdocs.preprocessors import pretty_print, remove_headers
from restdocs.recorder import OperationRecord
from restdocs.snippets import Snippet, path_parameters, query_parameters, request_fields, response_fields

logger = logging.getLogger(__name__)

USERS_URL = API_PREFIX
USER_URL = API_PREFIX + "/{userId}"
USERS_PAGE_URL = API_PREFIX + "?page={page}&size={size}"

USERS_USERNAME_DESCRIPTION = "User's username"
USERS_LAST_NAME_DESCRIPTION = "User's last name"
USERS_FIRST_NAME_DESCRIPTION = "User's first name"
USERS_ID_DESCRIPTION = "User's identifier"
USERS_LIST_DESCRIPTION = "Users list"
PAGE_DESCRIPTION = "Page of results"
SIZE_DESCRIPTION = "Size of results"

USER_FIELD_NAMES = ("userId", "firstName", "lastName", "username")

# Headers that change from run to run or only describe the test transport
VOLATILE_REQUEST_HEADERS = ("user-agent", "accept-encoding", "connection")
VOLATILE_RESPONSE_HEADERS = ("x-trace-id",)


def user_fields(is_json_array: bool = False) -> List[FieldDescriptor]:
    """User fields used in requests and responses, or in every element of a list"""
    if is_json_array:
        return [
            field_with_path("[]", USERS_LIST_DESCRIPTION),
            field_with_path("[].userId", USERS_ID_DESCRIPTION),
            field_with_path("[].firstName", USERS_FIRST_NAME_DESCRIPTION),
            field_with_path("[].lastName", USERS_LAST_NAME_DESCRIPTION),
            field_with_path("[].username", USERS_USERNAME_DESCRIPTION),
        ]
    return [
        field_with_path("userId", USERS_ID_DESCRIPTION),
        field_with_path("firstName", USERS_FIRST_NAME_DESCRIPTION),
        field_with_path("lastName", USERS_LAST_NAME_DESCRIPTION),
        field_with_path("username", USERS_USERNAME_DESCRIPTION),
    ]


def user_path_params() -> List[ParameterDescriptor]:
    return [parameter_with_name("userId", USERS_ID_DESCRIPTION)]


def page_query_params() -> List[ParameterDescriptor]:
    return [
        parameter_with_name("page", PAGE_DESCRIPTION),
        parameter_with_name("size", SIZE_DESCRIPTION),
    ]


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list, dict)) and len(value) == 0)


class ScenarioStepError(AssertionError):
    """A tour step got an unexpected response; the tour stops here"""

    def __init__(self, step: str, message: str, response: Optional[httpx.Response] = None):
        self.step = step
        self.response = response
        detail = f"{step}: {message}"
        if response is not None:
            detail += f" (HTTP {response.status_code}: {response.text[:500]})"
        super().__init__(detail)


@dataclass
class TourResult:
    records: List[OperationRecord] = field(default_factory=list)
    created_user_id: Optional[UUID] = None

    @property
    def operation_names(self) -> List[str]:
        return [record.name for record in self.records]

    @property
    def status_codes(self) -> List[int]:
        return [record.response.status_code for record in self.records]


class UserResourceTour:
    """Drives the users API and documents every call it makes.

    ``client`` is any httpx client pointed at the API, typically FastAPI's
    ``TestClient`` wrapping the app in-process.
    """

    def __init__(self, client: httpx.Client, documentation: RestDocumentation, expected_status: int = 200):
        self.client = client
        self.documentation = documentation
        self.expected_status = expected_status
        self.records: List[OperationRecord] = []

    def run(self) -> TourResult:
        """Execute the full tour; the first failing step aborts it"""
        self.records = []

        user = User(user_id=uuid.uuid4(), username="foobar", first_name="Foo", last_name="Bar")
        self.insert_user(user)

        user1 = User(user_id=None, username="foobar1", first_name="Foo1", last_name="Bar1")
        self.insert_user(user1)

        self.get_user(user.user_id)

        self.get_users(page=0, size=10)

        user = User(user_id=user.user_id, username="foobar_changed", first_name="Foo_changed", last_name="Bar_changed")
        self.update_user(user)

        user1 = User(user_id=uuid.uuid4(), username="foobar1_changed", first_name="Foo1_changed", last_name="Bar1_changed")
        self.update_user(user1)

        self.delete_user(user.user_id)

        self.delete_user(uuid.uuid4())

        logger.info(f"User tour finished: {len(self.records)} operations documented")
        return TourResult(records=list(self.records), created_user_id=user.user_id)

    def insert_user(self, user: User) -> Dict[str, Any]:
        document = self._document_pretty_print_req_resp(
            "insertUser",
            request_fields(*user_fields()),
            response_fields(*user_fields())
        )
        response = self._perform(
            "insertUser", "POST", USERS_URL,
            body=user.to_json(),
            headers={"Accept": "application/json"}
        )
        self._expect_status("insertUser", response)
        self._record(document, response, USERS_URL)
        return response.json()

    def get_user(self, user_id: UUID) -> Dict[str, Any]:
        document = self._document_pretty_print_req_resp(
            "getUser",
            path_parameters(*user_path_params()),
            response_fields(*user_fields())
        )
        variables = {"userId": user_id}
        response = self._perform(
            "getUser", "GET", USER_URL,
            variables=variables,
            headers={"Content-Type": "application/json"}
        )
        self._expect_status("getUser", response)
        body = self._expect_json("getUser", response)
        self._expect_not_empty("getUser", response, body, USER_FIELD_NAMES)
        self._record(document, response, USER_URL, variables)
        return body

    def get_users(self, page: int = 0, size: int = 10) -> List[Dict[str, Any]]:
        document = self._document_pretty_print_req_resp(
            "getUsers",
            query_parameters(*page_query_params()),
            response_fields(*user_fields(is_json_array=True))
        )
        variables = {"page": page, "size": size}
        response = self._perform(
            "getUsers", "GET", USERS_PAGE_URL,
            variables=variables,
            headers={"Content-Type": "application/json"}
        )
        self._expect_status("getUsers", response)
        body = self._expect_json("getUsers", response)
        if not isinstance(body, list):
            raise ScenarioStepError("getUsers", "expected a JSON array", response)
        self._expect_not_empty("getUsers", response, body, [f"[].{name}" for name in USER_FIELD_NAMES])
        self._record(document, response, USERS_PAGE_URL)
        return body

    def update_user(self, user: User) -> Dict[str, Any]:
        document = self._document_pretty_print_req_resp(
            "updateUser",
            path_parameters(*user_path_params()),
            request_fields(*user_fields()),
            response_fields(*user_fields())
        )
        variables = {"userId": user.user_id}
        response = self._perform(
            "updateUser", "PUT", USER_URL,
            variables=variables,
            body=user.to_json(),
            headers={"Accept": "application/json"}
        )
        self._expect_status("updateUser", response)
        self._record(document, response, USER_URL, variables)
        return response.json()

    def delete_user(self, user_id: UUID) -> Dict[str, Any]:
        document = self._document_pretty_print_req_resp(
            "deleteUser",
            path_parameters(*user_path_params()),
            response_fields(*user_fields())
        )
        variables = {"userId": user_id}
        response = self._perform(
            "deleteUser", "DELETE", USER_URL,
            variables=variables,
            headers={"Content-Type": "application/json"}
        )
        self._expect_status("deleteUser", response)
        self._record(document, response, USER_URL, variables)
        return response.json()

    def _document_pretty_print_req_resp(self, use_case: str, *snippets: Snippet) -> DocumentationHandler:
        return self.documentation.document(
            use_case,
            *snippets,
            request_preprocessors=[pretty_print(), remove_headers(*VOLATILE_REQUEST_HEADERS)],
            response_preprocessors=[pretty_print(), remove_headers(*VOLATILE_RESPONSE_HEADERS)]
        )

    def _perform(
        self,
        step: str,
        method: str,
        url_template: str,
        variables: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        url = url_template.format(**(variables or {}))
        logger.info(f"{step}: {method} {url}")
        return self.client.request(method, url, json=body, headers=headers)

    def _record(
        self,
        document: DocumentationHandler,
        response: httpx.Response,
        url_template: str,
        path_variables: Optional[Dict[str, Any]] = None
    ):
        record = document(capture(response, url_template, path_variables))
        self.records.append(record)

    def _expect_status(self, step: str, response: httpx.Response):
        if response.status_code != self.expected_status:
            raise ScenarioStepError(step, f"expected status {self.expected_status}", response)

    def _expect_json(self, step: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ScenarioStepError(step, f"response is not JSON: {e}", response) from e

    def _expect_not_empty(self, step: str, response: httpx.Response, body: Any, paths: Sequence[str]):
        for path in paths:
            values, complete = extract(body, path)
            if not complete or not values or any(_is_empty(value) for value in values):
                raise ScenarioStepError(step, f"'{path}' is missing or empty", response)
