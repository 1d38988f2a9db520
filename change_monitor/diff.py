"""Line-level "added lines" diff used to summarize content changes.

The comparison is a single forward scan with one cursor into the previous
lines. It reports appended content exactly, but it is not a longest common
subsequence diff: once a line is deleted, reordered or edited in place the
cursor stops matching and every following line is reported as added.
"""

import re

from pydantic import BaseModel, Field

_LINE_BREAK = re.compile(r'[\r\n]')


class DiffResult(BaseModel):
    """Lines judged newly present in the current text."""

    added_lines: list[str] = Field(default_factory=list)

    @property
    def unchanged(self) -> bool:
        return not self.added_lines


def split_lines(text: str) -> list[str]:
    """Split text on carriage returns and line feeds, dropping empty entries.

    Args:
        text: Full file content

    Returns:
        Non-empty lines in order
    """
    return [line for line in _LINE_BREAK.split(text) if line]


def compute_added_lines(previous_text: str, current_text: str) -> DiffResult:
    """Find the lines of current_text that were not in previous_text.

    Args:
        previous_text: Last captured content of the file
        current_text: Content read at flush time

    Returns:
        DiffResult holding the added lines in order of appearance
    """
    previous_lines = split_lines(previous_text)
    current_lines = split_lines(current_text)

    added: list[str] = []
    cursor = 0
    for line in current_lines:
        if cursor < len(previous_lines) and line == previous_lines[cursor]:
            cursor += 1
        else:
            added.append(line)

    return DiffResult(added_lines=added)
