import re

from .cvarinfo import CVarInfo
from .exceptions import ConfigurationError, UnexpectedInput, assert_config
from .interner import Interner
from .utils import Serialize, logger

try:
    import regex
except ImportError:
    regex = None


class FrontendOptions(Serialize):
    """Specifies the options for CVarInfoParser

    """
    OPTIONS_DOC = """
    debug
            Log what the parser is doing, and check every span of the
            resulting tree against the source text (default: False)
    regex
            When True, uses the ``regex`` module instead of the stdlib ``re``.
    interner
            The ``Interner`` to intern identifiers into. Pass the same one to
            several parsers to share it. (Default: a new interner per parser)
    """
    if __doc__:
        __doc__ += OPTIONS_DOC

    # Adding a new option needs to be done in two places:
    # - In the dictionary below. This is the primary truth of which options `CVarInfoParser.__init__` accepts
    # - In the docstring above
    _defaults = {
        'debug': False,
        'regex': False,
        'interner': None,
    }

    __serialize_fields__ = tuple(_defaults)

    def __init__(self, options_dict):
        o = dict(options_dict)

        options = {}
        for name, default in self._defaults.items():
            if name in o:
                value = o.pop(name)
                if isinstance(default, bool):
                    value = bool(value)
            else:
                value = default

            options[name] = value

        if options['interner'] is not None and not isinstance(options['interner'], Interner):
            raise ConfigurationError("interner must be an Interner instance, got %r" % (options['interner'],))

        self.__dict__['options'] = options

        if o:
            raise ConfigurationError("Unknown options: %s" % o.keys())

    def __getattr__(self, name):
        try:
            return self.options[name]
        except KeyError as e:
            raise AttributeError(e)

    def __setattr__(self, name, value):
        assert_config(name, self.options.keys(), "%r isn't a valid option. Expected one of: %s")
        self.options[name] = value

    def _serialize(self, res):
        # The interner is runtime state, not configuration
        res['interner'] = self.interner is not None


class CVarInfoParser:
    """Main interface for parsing CVARINFO lumps.

    Holds the options and the interner, so that many lumps can be parsed
    into the same string table.

    Parameters:
        options: see ``FrontendOptions``

    Example:
        >>> parser = CVarInfoParser()
        >>> len(parser.parse('server int delusive_bunker = 42;'))
        1
    """

    def __init__(self, **options) -> None:
        self.options = FrontendOptions(options)

        # Set regex or re module
        if self.options.regex:
            if regex:
                self.re_module = regex
            else:
                raise ImportError('`regex` module must be installed if calling `CVarInfoParser(regex=True)`.')
        else:
            self.re_module = re

        if self.options.interner is None:
            self.interner = Interner()
            if self.options.debug:
                logger.debug("Created a new interner for %r", self)
        else:
            self.interner = self.options.interner

    if __doc__:
        __doc__ += "\n\n" + FrontendOptions.OPTIONS_DOC

    def parse(self, text: str) -> CVarInfo:
        """Parse the given text, according to the options provided.

        Raises:
            UnexpectedInput: on the first (furthest) syntax error
        """
        debug = self.options.debug
        try:
            cvarinfo = CVarInfo.parse(text, self.interner, self.re_module)
        except UnexpectedInput as e:
            if debug:
                logger.debug("Failed to parse at line %d col %d, expected one of %s",
                             e.line, e.column, sorted(e.expected))
            raise

        if debug:
            logger.debug("Parsed %d CVar definitions", len(cvarinfo))
            bad = [node for node in iter_nodes(cvarinfo) if not node.span.validate(text)]
            if bad:
                logger.error("Spans outside the source text: %r", bad)
            assert not bad, bad

        return cvarinfo

    def __repr__(self):
        return '%s(debug=%r, regex=%r)' % (type(self).__name__, self.options.debug, self.options.regex)


def iter_nodes(cvarinfo: CVarInfo):
    "Iterates over every node of the tree that carries a span, depth first"
    for cvar in cvarinfo:
        yield cvar
        yield from cvar.flags
        yield cvar.type_spec
        yield cvar.name
        if cvar.init is not None:
            yield cvar.init
