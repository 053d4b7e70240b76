"""
Documentation snippets and their Jinja2 rendering

Each snippet checks the captured exchange against what it documents and
then builds the template model the renderer fills in.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from restdocs.descriptors import FieldDescriptor, ParameterDescriptor
from restdocs.errors import SnippetError
from restdocs.exchange import Exchange
from restdocs.payload import field_type, validate_fields

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

FILE_EXTENSIONS = {
    "asciidoctor": "adoc",
    "markdown": "md",
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class Snippet(ABC):
    """Base snippet: valid unless a subclass checks otherwise"""

    name = ""

    def validate(self, exchange: Exchange):
        pass

    @abstractmethod
    def model(self, exchange: Exchange) -> Dict[str, Any]:
        """Template variables for this snippet"""


class HttpRequestSnippet(Snippet):
    name = "http-request"

    def model(self, exchange: Exchange) -> Dict[str, Any]:
        request = exchange.request
        return {
            "method": request.method,
            "path": request.path_with_query,
            "host": request.host,
            "headers": [(n, v) for n, v in request.headers if n.lower() != "host"],
            "body": request.body,
        }


class HttpResponseSnippet(Snippet):
    name = "http-response"

    def model(self, exchange: Exchange) -> Dict[str, Any]:
        response = exchange.response
        return {
            "status_code": response.status_code,
            "reason": response.reason,
            "headers": response.headers,
            "body": response.body,
        }


class CurlRequestSnippet(Snippet):
    name = "curl-request"

    def model(self, exchange: Exchange) -> Dict[str, Any]:
        request = exchange.request
        return {
            "uri": request.uri,
            "method": request.method,
            "headers": [
                (n, v) for n, v in request.headers
                if n.lower() not in ("host", "content-length")
            ],
            "body": request.body,
        }


class PathParametersSnippet(Snippet):
    name = "path-parameters"

    def __init__(self, descriptors: Sequence[ParameterDescriptor]):
        self.descriptors = list(descriptors)

    def validate(self, exchange: Exchange):
        template = exchange.request.url_template.split("?", 1)[0]
        actual = _PLACEHOLDER.findall(template)
        documented = [d.name for d in self.descriptors]

        problems = []
        missing = [d.name for d in self.descriptors if not d.optional and d.name not in actual]
        if missing:
            problems.append(f"Path parameters not found in '{template}': {', '.join(missing)}")
        undocumented = [name for name in actual if name not in documented]
        if undocumented:
            problems.append(f"Undocumented path parameters: {', '.join(undocumented)}")
        if problems:
            raise SnippetError(self.name, problems)

    def model(self, exchange: Exchange) -> Dict[str, Any]:
        return {
            "path": exchange.request.url_template.split("?", 1)[0],
            "parameters": self.descriptors,
        }


class QueryParametersSnippet(Snippet):
    name = "query-parameters"

    def __init__(self, descriptors: Sequence[ParameterDescriptor]):
        self.descriptors = list(descriptors)

    def validate(self, exchange: Exchange):
        actual = [name for name, _ in exchange.request.query_params]
        documented = [d.name for d in self.descriptors]

        problems = []
        missing = [d.name for d in self.descriptors if not d.optional and d.name not in actual]
        if missing:
            problems.append(f"Query parameters not found in the request: {', '.join(missing)}")
        undocumented = sorted({name for name in actual if name not in documented})
        if undocumented:
            problems.append(f"Undocumented query parameters: {', '.join(undocumented)}")
        if problems:
            raise SnippetError(self.name, problems)

    def model(self, exchange: Exchange) -> Dict[str, Any]:
        return {"parameters": self.descriptors}


class _FieldsSnippet(Snippet):
    template = "fields"

    def __init__(self, descriptors: Sequence[FieldDescriptor]):
        self.descriptors = list(descriptors)

    @abstractmethod
    def payload(self, exchange: Exchange) -> Any:
        """The JSON body these fields describe"""

    def validate(self, exchange: Exchange):
        validate_fields(self.name, self.payload(exchange), self.descriptors)

    def model(self, exchange: Exchange) -> Dict[str, Any]:
        payload = self.payload(exchange)
        fields: List[Dict[str, Any]] = [
            {
                "path": d.path,
                "type": field_type(payload, d.path),
                "description": d.description,
                "optional": d.optional,
            }
            for d in self.descriptors
        ]
        return {"fields": fields}


class RequestFieldsSnippet(_FieldsSnippet):
    name = "request-fields"

    def payload(self, exchange: Exchange) -> Any:
        return exchange.request.json()


class ResponseFieldsSnippet(_FieldsSnippet):
    name = "response-fields"

    def payload(self, exchange: Exchange) -> Any:
        return exchange.response.json()


def http_request() -> HttpRequestSnippet:
    return HttpRequestSnippet()


def http_response() -> HttpResponseSnippet:
    return HttpResponseSnippet()


def curl_request() -> CurlRequestSnippet:
    return CurlRequestSnippet()


def path_parameters(*descriptors: ParameterDescriptor) -> PathParametersSnippet:
    return PathParametersSnippet(descriptors)


def query_parameters(*descriptors: ParameterDescriptor) -> QueryParametersSnippet:
    return QueryParametersSnippet(descriptors)


def request_fields(*descriptors: FieldDescriptor) -> RequestFieldsSnippet:
    return RequestFieldsSnippet(descriptors)


def response_fields(*descriptors: FieldDescriptor) -> ResponseFieldsSnippet:
    return ResponseFieldsSnippet(descriptors)


def _header_name(name: str) -> str:
    return "-".join(part.capitalize() for part in name.split("-"))


def _table_cell(text: str) -> str:
    return str(text).replace("|", "\\|")


def _shell_quote(text: str) -> str:
    return str(text).replace("'", "'\\''")


class SnippetRenderer:
    """Renders snippets with the templates of one output format"""

    def __init__(self, snippet_format: str = "asciidoctor"):
        if snippet_format not in FILE_EXTENSIONS:
            raise ValueError(f"Unsupported snippet format: {snippet_format}")
        self.snippet_format = snippet_format
        self.extension = FILE_EXTENSIONS[snippet_format]
        self.env = Environment(
            loader=FileSystemLoader(str(_TEMPLATES_DIR / snippet_format)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["header_name"] = _header_name
        self.env.filters["cell"] = _table_cell
        self.env.filters["shell_quote"] = _shell_quote

    def render(self, snippet: Snippet, exchange: Exchange) -> str:
        template_name = getattr(snippet, "template", snippet.name)
        template = self.env.get_template(f"{template_name}.j2")
        return template.render(**snippet.model(exchange))
