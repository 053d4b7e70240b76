"""
Entry point for documenting HTTP exchanges
"""

import logging
from typing import Callable, List, Optional, Sequence

from restdocs.exchange import Exchange
from restdocs.preprocessors import Preprocessor, apply
from restdocs.recorder import DocumentedOperation, OperationRecord, SnippetRecorder
from restdocs.snippets import Snippet, curl_request, http_request, http_response

logger = logging.getLogger(__name__)

DEFAULT_SNIPPETS: Sequence[Callable[[], Snippet]] = (curl_request, http_request, http_response)


class DocumentationHandler:
    """Documents one captured exchange under an operation name"""

    def __init__(
        self,
        name: str,
        snippets: List[Snippet],
        recorder: SnippetRecorder,
        request_preprocessors: Sequence[Preprocessor] = (),
        response_preprocessors: Sequence[Preprocessor] = ()
    ):
        self.name = name
        self.snippets = snippets
        self.recorder = recorder
        self.request_preprocessors = list(request_preprocessors)
        self.response_preprocessors = list(response_preprocessors)

    def __call__(self, exchange: Exchange) -> OperationRecord:
        processed = Exchange(
            request=apply(exchange.request, self.request_preprocessors),
            response=apply(exchange.response, self.response_preprocessors)
        )

        for snippet in self.snippets:
            snippet.validate(processed)

        logger.debug(f"Documenting {self.name} with {len(self.snippets)} snippets")
        return self.recorder.record(DocumentedOperation(self.name, processed, self.snippets))


class RestDocumentation:
    """Binds a recorder to the snippets every operation gets by default"""

    def __init__(
        self,
        recorder: SnippetRecorder,
        default_snippets: Optional[Sequence[Callable[[], Snippet]]] = None
    ):
        self.recorder = recorder
        self.default_snippets = list(DEFAULT_SNIPPETS if default_snippets is None else default_snippets)

    def document(
        self,
        name: str,
        *snippets: Snippet,
        request_preprocessors: Sequence[Preprocessor] = (),
        response_preprocessors: Sequence[Preprocessor] = ()
    ) -> DocumentationHandler:
        if not name or "/" in name or name in (".", ".."):
            raise ValueError(f"Invalid operation name: '{name}'")

        all_snippets = [factory() for factory in self.default_snippets] + list(snippets)
        return DocumentationHandler(
            name,
            all_snippets,
            self.recorder,
            request_preprocessors=request_preprocessors,
            response_preprocessors=response_preprocessors
        )
