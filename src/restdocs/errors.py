"""
Errors raised while documenting an HTTP exchange
"""

from typing import List


class SnippetError(Exception):
    """The captured exchange does not match what a snippet documents"""

    def __init__(self, snippet: str, problems: List[str]):
        self.snippet = snippet
        self.problems = problems
        super().__init__(f"{snippet}: " + "; ".join(problems))
