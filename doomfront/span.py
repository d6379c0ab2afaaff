from dataclasses import dataclass

from .utils import Serialize


@dataclass(frozen=True)
class Span(Serialize):
    """Half-open range ``[start, end)`` of offsets into the source text.

    Offsets index the ``str`` that was parsed. Construction doesn't check
    them; use ``validate()`` for that.
    """
    __serialize_fields__ = 'start', 'end'

    start: int
    end: int

    def validate(self, source: str) -> bool:
        """Verify that the span is ordered and lies within ``source``.

        Principally for use in debug checks and tests.
        """
        return 0 <= self.start <= self.end <= len(source)

    def combine(self, other: 'Span') -> 'Span':
        """Componentwise maximum of both spans.

        Note:
            This is not the union of the two ranges. When ``other`` starts
            before ``self``, the result starts at ``self.start``.
        """
        return Span(max(self.start, other.start), max(self.end, other.end))

    def slice(self, source: str) -> str:
        return source[self.start:self.end]

    def __len__(self):
        return self.end - self.start

    def __repr__(self):
        return 'Span(%d, %d)' % (self.start, self.end)
