from typing import Dict, Iterator, Optional

from tinybasic.ast import Line
from tinybasic.errors import IllegalLineNumber

# Line numbers address 0 <= n < MAX_LINES.
MAX_LINES = 8 * 1024


class Program:
    """Sparse store of numbered lines, addressed by line number."""

    def __init__(self, max_lines: int = MAX_LINES):
        self.max_lines = max_lines
        self.lines: Dict[int, Line] = {}

    def set(self, line: Line):
        number = line.number
        if number is None or not 0 <= number < self.max_lines:
            raise IllegalLineNumber(number)
        self.lines[number] = line

    def get(self, number: int) -> Optional[Line]:
        return self.lines.get(number)

    def clear(self):
        self.lines.clear()

    def count(self) -> int:
        return len(self.lines)

    def __len__(self):
        return self.max_lines

    def __iter__(self) -> Iterator[Line]:
        for number in sorted(self.lines):
            yield self.lines[number]

    def print(self) -> str:
        return "\n".join(line.source.strip() for line in self)
