"""
Snippet recorders

A recorder receives each documented operation once its assertions have
passed, renders the operation's snippets and keeps or writes the result.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from restdocs.exchange import CapturedRequest, CapturedResponse, Exchange
from restdocs.snippets import Snippet, SnippetRenderer

logger = logging.getLogger(__name__)


@dataclass
class DocumentedOperation:
    """An exchange that passed validation, with the snippets documenting it"""
    name: str
    exchange: Exchange
    snippets: List[Snippet]


@dataclass
class OperationRecord:
    name: str
    request: CapturedRequest
    response: CapturedResponse
    rendered: Dict[str, str] = field(default_factory=dict)
    location: Optional[Path] = None


class SnippetRecorder(ABC):
    """Renders documented operations and hands them to ``write``"""

    def __init__(self, snippet_format: str = "asciidoctor"):
        self.renderer = SnippetRenderer(snippet_format)
        self.records: List[OperationRecord] = []

    @property
    def operation_names(self) -> List[str]:
        return [record.name for record in self.records]

    def record(self, operation: DocumentedOperation) -> OperationRecord:
        rendered = {
            snippet.name: self.renderer.render(snippet, operation.exchange)
            for snippet in operation.snippets
        }
        location = self.write(operation.name, rendered)

        record = OperationRecord(
            name=operation.name,
            request=operation.exchange.request,
            response=operation.exchange.response,
            rendered=rendered,
            location=location
        )
        self.records.append(record)
        return record

    @abstractmethod
    def write(self, name: str, rendered: Dict[str, str]) -> Optional[Path]:
        """Persist rendered snippets; returns where they went, if anywhere"""


class InMemorySnippetRecorder(SnippetRecorder):
    """Keeps rendered snippets on the records only"""

    def write(self, name: str, rendered: Dict[str, str]) -> Optional[Path]:
        logger.debug(f"Recorded {len(rendered)} snippets for {name} in memory")
        return None


class FileSnippetRecorder(SnippetRecorder):
    """
    Writes ``<output_dir>/<operation>/<snippet>.<ext>``.

    Recording the same operation name again replaces its files,
    dropping snippets the new recording does not render. The in-memory
    ``records`` list still holds every recording.
    """

    def __init__(self, output_dir: Union[str, Path], snippet_format: str = "asciidoctor"):
        super().__init__(snippet_format)
        self.output_dir = Path(output_dir)

    def write(self, name: str, rendered: Dict[str, str]) -> Optional[Path]:
        operation_dir = self.output_dir / name
        operation_dir.mkdir(parents=True, exist_ok=True)
        for stale in operation_dir.glob(f"*.{self.renderer.extension}"):
            stale.unlink()

        for snippet_name, text in rendered.items():
            (operation_dir / f"{snippet_name}.{self.renderer.extension}").write_text(text, encoding="utf-8")

        logger.info(f"Wrote {len(rendered)} snippets for {name} to {operation_dir}")
        return operation_dir
