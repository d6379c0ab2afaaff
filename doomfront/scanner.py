import re
from contextlib import contextmanager
from typing import Callable, List, Optional, Set, Tuple, TypeVar

from .exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput

T = TypeVar('T')


def line_and_column(text: str, pos: int) -> Tuple[int, int]:
    "1-based line and column of offset ``pos``"
    line = text.count('\n', 0, pos) + 1
    line_start_pos = text.rfind('\n', 0, pos) + 1
    return line, pos - line_start_pos + 1


class Scanner:
    """Backtracking cursor over the source text.

    Grammar rules advance ``pos`` when they match and return ``None`` when
    they don't. A failed rule may leave ``pos`` anywhere. Anything that
    carries on after a failure goes through ``choice()``, ``optional()`` or
    ``separated()``, which rewind to where the rule started.

    Every failure is reported to ``expected()``. The scanner remembers the
    furthest position that saw a failure, along with everything that was
    expected there, and turns that into an ``UnexpectedInput`` via
    ``error()``. Failures inside a ``quiet()`` block aren't recorded, which
    lets a rule replace the details of its alternatives with one
    description.

    Parameters:
        text: The source text
        re_module: Module used to compile patterns (``re`` or ``regex``)
    """

    def __init__(self, text: str, re_module=re) -> None:
        self.text = text
        self.pos = 0
        self.re_module = re_module
        self._patterns = {}
        self._furthest = 0
        self._expected: Set[str] = set()
        self._quiet = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, size: int = 1) -> str:
        return self.text[self.pos:self.pos + size]

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.pos)

    # Failure tracking

    def expected(self, description: str, pos: Optional[int] = None) -> None:
        if self._quiet:
            return
        if pos is None:
            pos = self.pos
        if pos > self._furthest:
            self._furthest = pos
            self._expected = {description}
        elif pos == self._furthest:
            self._expected.add(description)

    @contextmanager
    def quiet(self):
        self._quiet += 1
        try:
            yield
        finally:
            self._quiet -= 1

    def error(self) -> UnexpectedInput:
        pos = self._furthest
        line, column = line_and_column(self.text, pos)
        if pos >= len(self.text):
            return UnexpectedEOF(self._expected, pos, line, column)
        return UnexpectedCharacters(self.text, pos, line, column, self._expected)

    # Terminals

    def compile(self, pattern: str):
        try:
            return self._patterns[pattern]
        except KeyError:
            compiled = self._patterns[pattern] = self.re_module.compile(pattern)
            return compiled

    def literal(self, string: str) -> Optional[str]:
        if self.text.startswith(string, self.pos):
            self.pos += len(string)
            return string
        self.expected('"%s"' % string)
        return None

    def nocase(self, word: str) -> Optional[str]:
        """Matches the next ``len(word)`` characters against ``word``, ignoring ASCII case.

        ``word`` must be lowercase. No word boundary is required after it.
        """
        end = self.pos + len(word)
        candidate = self.text[self.pos:end]
        if len(candidate) == len(word) and candidate.isascii() and candidate.lower() == word:
            self.pos = end
            return candidate
        self.expected('"%s"' % word)
        return None

    def match(self, pattern: str, description: str):
        "Matches a regular expression at the current position, returning the match object"
        m = self.compile(pattern).match(self.text, self.pos)
        if m is None:
            self.expected(description)
            return None
        self.pos = m.end()
        return m

    def end_of_input(self) -> bool:
        if self.at_end:
            return True
        self.expected("end of input")
        return False

    # Combinators

    def choice(self, *alternatives: Callable[[], Optional[T]]) -> Optional[T]:
        "Ordered choice: the first alternative that matches wins"
        start = self.pos
        for alternative in alternatives:
            res = alternative()
            if res is not None:
                return res
            self.pos = start
        return None

    def optional(self, rule: Callable[[], Optional[T]]) -> Optional[T]:
        start = self.pos
        res = rule()
        if res is None:
            self.pos = start
        return res

    def separated(self, rule: Callable[[], Optional[T]], sep: Callable[[], object]) -> List[T]:
        """Zero or more ``rule`` matches, with ``sep`` between each.

        ``sep`` can't fail. A separator that isn't followed by another match
        is given back.
        """
        items = []
        first = self.optional(rule)
        if first is None:
            return items
        items.append(first)
        while True:
            start = self.pos
            sep()
            item = rule()
            if item is None:
                self.pos = start
                return items
            items.append(item)
