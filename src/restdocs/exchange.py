"""
Captured HTTP exchanges handed to the documentation layer
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

import httpx

from restdocs.payload import parse_json


def _resize(headers: List[Tuple[str, str]], body: str) -> List[Tuple[str, str]]:
    """Keep Content-Length in step with a rewritten body"""
    length = str(len(body.encode("utf-8")))
    return [
        (name, length if name.lower() == "content-length" else value)
        for name, value in headers
    ]


@dataclass(frozen=True)
class CapturedRequest:
    method: str
    uri: str
    path: str
    url_template: str
    path_variables: Dict[str, str] = field(default_factory=dict)
    query_params: List[Tuple[str, str]] = field(default_factory=list)
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: str = ""

    @property
    def host(self) -> str:
        return httpx.URL(self.uri).netloc.decode("ascii")

    @property
    def path_with_query(self) -> str:
        url = httpx.URL(self.uri)
        return url.raw_path.decode("ascii")

    def json(self) -> Any:
        return parse_json(self.body)

    def with_body(self, body: str) -> "CapturedRequest":
        return replace(self, body=body, headers=_resize(self.headers, body))

    def with_headers(self, headers: List[Tuple[str, str]]) -> "CapturedRequest":
        return replace(self, headers=headers)


@dataclass(frozen=True)
class CapturedResponse:
    status_code: int
    reason: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: str = ""

    def json(self) -> Any:
        return parse_json(self.body)

    def with_body(self, body: str) -> "CapturedResponse":
        return replace(self, body=body, headers=_resize(self.headers, body))

    def with_headers(self, headers: List[Tuple[str, str]]) -> "CapturedResponse":
        return replace(self, headers=headers)


@dataclass(frozen=True)
class Exchange:
    request: CapturedRequest
    response: CapturedResponse


def capture(
    response: httpx.Response,
    url_template: str,
    path_variables: Optional[Dict[str, Any]] = None
) -> Exchange:
    """Freeze an httpx request/response pair for documentation"""
    request = response.request
    request_body = request.read().decode("utf-8")

    captured_request = CapturedRequest(
        method=request.method,
        uri=str(request.url),
        path=request.url.path,
        url_template=url_template,
        path_variables={name: str(value) for name, value in (path_variables or {}).items()},
        query_params=list(request.url.params.multi_items()),
        headers=list(request.headers.items()),
        body=request_body
    )
    captured_response = CapturedResponse(
        status_code=response.status_code,
        reason=response.reason_phrase,
        headers=list(response.headers.items()),
        body=response.text
    )
    return Exchange(request=captured_request, response=captured_response)
