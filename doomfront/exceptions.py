from typing import Callable, Collection, Dict, Iterable, Optional, Tuple, TypeVar, Union

from .utils import logger


T = TypeVar('T')


class DoomFrontError(Exception):
    pass


class ConfigurationError(DoomFrontError, ValueError):
    pass


def assert_config(value, options, msg='Got %r, expected one of %s'):
    if value not in options:
        raise ConfigurationError(msg % (value, options))


class ParseError(DoomFrontError):
    pass


class UnexpectedInput(ParseError):
    """UnexpectedInput Error.

    Raised when no grammar alternative matches at the furthest position the
    parser reached. Used as a base class for the following exceptions:

    - ``UnexpectedCharacters``: The parser stopped in front of some input
    - ``UnexpectedEOF``: The parser ran out of input

    Attributes:
        pos_in_stream: Offset of the failure in the source text
        line, column: 1-based location of ``pos_in_stream``
        expected: Set of descriptions of what would have been accepted there

    After catching one of these exceptions, you may call the following helper methods to create a nicer error message.
    """
    pos_in_stream: int
    line: int
    column: int
    expected: 'frozenset[str]'

    def get_context(self, text: str, span: int = 40) -> str:
        """Returns a pretty string pinpointing the error in the text,
        with span amount of context characters around it.

        Note:
            The exception doesn't hold a copy of the text it was raised for,
            so you have to provide it again
        """
        pos = self.pos_in_stream
        start = max(pos - span, 0)
        end = pos + span
        before = text[start:pos].rsplit('\n', 1)[-1]
        after = text[pos:end].split('\n', 1)[0]
        return before + after + '\n' + ' ' * len(before.expandtabs()) + '^\n'

    def match_examples(
            self,
            parse_fn: Callable[[str], object],
            examples: Union[Dict[T, Iterable[str]], Iterable[Tuple[T, Iterable[str]]]],
    ) -> Optional[T]:
        """Allows you to detect what's wrong in the input text by matching
        against example errors.

        Given a parse function and a dictionary mapping some label with
        some malformed syntax examples, it'll return the label for the
        example that best matches the current error. Errors match when they
        are of the same kind and expect the same things. The character the
        parser stopped at is used to prefer an exact match over a mere
        expectation match.

        Parameters:
            parse_fn: parse function (usually ``CVarInfoParser(...).parse``)
            examples: dictionary of ``{label: ['malformed', ...]}``.
        """
        if isinstance(examples, dict):
            examples = examples.items()

        candidate = None
        for i, (label, example) in enumerate(examples):
            assert not isinstance(example, str), "Examples must be given as a collection of strings"

            for j, malformed in enumerate(example):
                try:
                    parse_fn(malformed)
                except UnexpectedInput as ut:
                    if type(ut) is not type(self) or ut.expected != self.expected:
                        continue
                    if getattr(ut, 'char', None) == getattr(self, 'char', None):
                        logger.debug("Exact match at example [%s][%s]", i, j)
                        return label
                    if candidate is None:
                        logger.debug("Expectation match at example [%s][%s]", i, j)
                        candidate = label

        return candidate

    def _format_expected(self, expected: Collection[str]) -> str:
        return "Expected one of: \n\t* %s\n" % '\n\t* '.join(sorted(expected))


class UnexpectedEOF(UnexpectedInput):
    def __init__(self, expected, pos_in_stream, line, column):
        self.expected = frozenset(expected)
        self.pos_in_stream = pos_in_stream
        self.line = line
        self.column = column

        super(UnexpectedEOF, self).__init__()

    def __str__(self):
        message = "Unexpected end-of-input at line %d col %d. " % (self.line, self.column)
        message += self._format_expected(self.expected)
        return message


class UnexpectedCharacters(UnexpectedInput):
    def __init__(self, seq, pos_in_stream, line, column, expected):
        self.line = line
        self.column = column
        self.pos_in_stream = pos_in_stream
        self.expected = frozenset(expected)

        self.char = seq[pos_in_stream]
        self._context = self.get_context(seq)

        super(UnexpectedCharacters, self).__init__()

    def __str__(self):
        message = "No rule matches '%s' at line %d col %d" % (self.char, self.line, self.column)
        message += '\n\n' + self._context
        if self.expected:
            message += self._format_expected(self.expected)
        return message
