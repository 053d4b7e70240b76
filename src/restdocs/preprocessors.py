"""
Preprocessors applied to captured requests and responses before rendering
"""

import json
from typing import Callable, TypeVar, Union

from restdocs.exchange import CapturedRequest, CapturedResponse

Message = TypeVar("Message", CapturedRequest, CapturedResponse)
Preprocessor = Callable[[Union[CapturedRequest, CapturedResponse]], Union[CapturedRequest, CapturedResponse]]


def pretty_print(indent: int = 2) -> Preprocessor:
    """Re-indent JSON bodies; anything else passes through untouched"""

    def _pretty_print(message: Message) -> Message:
        if not message.body:
            return message
        try:
            parsed = json.loads(message.body)
        except json.JSONDecodeError:
            return message
        return message.with_body(json.dumps(parsed, indent=indent, ensure_ascii=False))

    return _pretty_print


def remove_headers(*names: str) -> Preprocessor:
    """Drop headers by case-insensitive name"""
    excluded = {name.lower() for name in names}

    def _remove_headers(message: Message) -> Message:
        kept = [(name, value) for name, value in message.headers if name.lower() not in excluded]
        return message.with_headers(kept)

    return _remove_headers


def apply(message: Message, preprocessors) -> Message:
    for preprocessor in preprocessors:
        message = preprocessor(message)
    return message
