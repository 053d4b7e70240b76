"""
JSON payload field resolution

Paths are dotted keys where ``[]`` fans out over every element of an array:
``userId`` addresses a top-level key, ``[]`` the top-level array itself and
``[].userId`` the ``userId`` of each of its elements.
"""

import json
from typing import Any, List, Optional, Sequence, Tuple

from restdocs.descriptors import FieldDescriptor
from restdocs.errors import SnippetError

ARRAY = "[]"


def parse_json(body: Optional[str]) -> Any:
    """Decode a captured body, returning None when it is empty"""
    if not body:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise SnippetError("payload", [f"Body is not valid JSON: {e}"]) from e


def parse_path(path: str) -> List[str]:
    segments: List[str] = []
    for part in path.split("."):
        key = part
        suffixes = 0
        while key.endswith(ARRAY):
            key = key[:-len(ARRAY)]
            suffixes += 1
        if key:
            segments.append(key)
        segments.extend([ARRAY] * suffixes)
    return segments


def extract(payload: Any, path: str) -> Tuple[List[Any], bool]:
    """
    Collect every value found at ``path``.

    Returns the values and whether every branch of the payload contained
    the path. A trailing ``[]`` selects the array itself, not its elements.
    """
    segments = parse_path(path)
    nodes = [payload]
    complete = True

    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        found = []
        for node in nodes:
            if segment == ARRAY:
                if not isinstance(node, list):
                    complete = False
                elif last:
                    found.append(node)
                else:
                    found.extend(node)
            elif isinstance(node, dict) and segment in node:
                found.append(node[segment])
            else:
                complete = False
        nodes = found

    return nodes, complete


def is_present(payload: Any, path: str) -> bool:
    values, complete = extract(payload, path)
    return complete and len(values) > 0


def json_type(value: Any) -> str:
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, (int, float)):
        return "Number"
    if isinstance(value, str):
        return "String"
    if isinstance(value, list):
        return "Array"
    return "Object"


def field_type(payload: Any, path: str) -> str:
    """Type of the values at ``path``; ``Varies`` when they disagree"""
    values, _ = extract(payload, path)
    types = {json_type(value) for value in values}
    if len(types) == 1:
        return types.pop()
    return "Varies"


def field_paths(payload: Any) -> List[str]:
    """Every field path present in the payload, in document order"""
    paths: List[str] = []
    if isinstance(payload, list):
        paths.append(ARRAY)
    _walk(payload, "", paths)
    return paths


def _walk(node: Any, prefix: str, paths: List[str]):
    if isinstance(node, dict):
        for key, value in node.items():
            path = f"{prefix}.{key}" if prefix else key
            if path not in paths:
                paths.append(path)
            _walk(value, path, paths)
    elif isinstance(node, list):
        for item in node:
            _walk(item, f"{prefix}{ARRAY}", paths)


def validate_fields(snippet: str, payload: Any, descriptors: Sequence[FieldDescriptor]):
    """
    Check the payload against its field descriptors.

    Raises SnippetError listing documented fields that are absent (unless
    optional) and payload fields no descriptor covers.
    """
    problems = []

    missing = [
        d.path for d in descriptors
        if not d.optional and not is_present(payload, d.path)
    ]
    if missing:
        problems.append(f"Fields not found in the payload: {', '.join(missing)}")

    undocumented = [
        path for path in field_paths(payload)
        if not any(d.covers(path) for d in descriptors)
    ]
    if undocumented:
        problems.append(f"Undocumented fields in the payload: {', '.join(undocumented)}")

    if problems:
        raise SnippetError(snippet, problems)
