"""The CVARINFO grammar.

Each rule is a method that either returns its AST node or ``None``.
Alternatives are tried strictly in the order they're written, and the
first one that matches wins; there is no memoization and no error
recovery. In outline::

    lump        : _ (definition (_ definition)*)? _ EOF
    definition  : (flag (_ flag)*)? _ type_spec _ name _ initializer? _ ";"
    flag        : "server" | "user" | "nosave" | "noarchive" | "cheat" | "latch"
    type_spec   : "int" | "float" | "color" | "bool" | "string"
    name        : /[a-zA-Z][a-zA-Z0-9_]*/
    initializer : "=" _ (bool | float | int | color | string)

Keywords and boolean literals ignore ASCII case. ``_`` is any amount of
whitespace, ``// line`` comments and ``/* block */`` comments.
"""

import math
import re
import struct
from functools import partial
from typing import List, Optional

from .cvarinfo import (CVar, CVarInfo, Color, Flag, FlagKind, Identifier, Initializer,
                       StorageType, TypeSpec, Value)
from .interner import Interner
from .scanner import Scanner
from .span import Span


WHITESPACE = r'[ \t\r\n]+'
# A comment opener directly followed by "/" or "!" only matches as a bare "//",
# unless it is the four-slash form.
LINE_COMMENT = r'//(?:[^/!\n]|//)[^\n]*|//'
BLOCK_COMMENT = r'(?s)/\*.*?\*/'
TRIVIA = WHITESPACE, LINE_COMMENT, BLOCK_COMMENT

NAME = r'[a-zA-Z][a-zA-Z0-9_]*'
DEC_FLOAT = r'[0-9]+\.[0-9]*'
DEC_INT = r'[0-9]+'
HEX_PAIR = r'[0-9a-fA-F]{2}'
# No escape sequences, so a string can't contain '"' or '\'
STRING = r'"((?!\r[^\n])[^"\\]+)"'

I32_MAX = 2 ** 31 - 1


def to_f32(value: float) -> float:
    "Rounds ``value`` to single precision, raising OverflowError if it is out of range"
    if math.isinf(value):
        raise OverflowError(value)
    return struct.unpack('<f', struct.pack('<f', value))[0]


class CVarInfoGrammar:
    """Parses one CVARINFO lump into a ``CVarInfo``.

    Instances are single-use: create one per text.

    Parameters:
        text: The complete lump
        interner: Where identifiers are interned
        re_module: ``re`` (default) or ``regex``
    """

    def __init__(self, text: str, interner: Interner, re_module=None) -> None:
        self.scanner = Scanner(text, re_module or re)
        self.interner = interner

        self._flag_alternatives = [partial(self._keyword, kind) for kind in FlagKind]
        self._type_alternatives = [partial(self._keyword, storage_type) for storage_type in StorageType]
        self._literal_alternatives = (self.lit_bool, self.lit_float, self.lit_int,
                                      self.lit_color, self.lit_string)

    def parse(self) -> CVarInfo:
        s = self.scanner
        self._skip()
        definitions: List[CVar] = s.separated(self.definition, self._skip)
        self._skip()
        if not s.end_of_input():
            raise s.error()
        return CVarInfo(tuple(definitions))

    def _skip(self) -> None:
        s = self.scanner
        with s.quiet():
            while any(s.match(pattern, 'whitespace') for pattern in TRIVIA):
                pass
        if s.startswith('/*'):
            # Unterminated block comment
            s.expected('whitespace')

    def _keyword(self, member):
        if self.scanner.nocase(member.value) is None:
            return None
        return member

    def definition(self) -> Optional[CVar]:
        s = self.scanner
        start = s.pos
        flags = s.separated(self.flag, self._skip)
        self._skip()
        type_spec = self.type_spec()
        if type_spec is None:
            return None
        self._skip()
        name = self.name()
        if name is None:
            return None
        self._skip()
        init = s.optional(self.initializer)
        self._skip()
        if s.literal(';') is None:
            return None
        return CVar(Span(start, s.pos), tuple(flags), type_spec, name, init)

    def flag(self) -> Optional[Flag]:
        s = self.scanner
        start = s.pos
        with s.quiet():
            kind = s.choice(*self._flag_alternatives)
        if kind is None:
            s.expected("a scope keyword or flag qualifier")
            return None
        return Flag(Span(start, s.pos), kind)

    def type_spec(self) -> Optional[TypeSpec]:
        s = self.scanner
        start = s.pos
        with s.quiet():
            storage_type = s.choice(*self._type_alternatives)
        if storage_type is None:
            s.expected("a type specifier")
            return None
        return TypeSpec(Span(start, s.pos), storage_type)

    def name(self) -> Optional[Identifier]:
        m = self.scanner.match(NAME, "an identifier")
        if m is None:
            return None
        return Identifier(Span(m.start(), m.end()), self.interner.intern(m.group()))

    def initializer(self) -> Optional[Initializer]:
        s = self.scanner
        start = s.pos
        if s.literal('=') is None:
            return None
        self._skip()
        value = s.choice(*self._literal_alternatives)
        if value is None:
            return None
        return Initializer(Span(start, s.pos), value)

    # Literals

    def lit_bool(self) -> Optional[Value]:
        s = self.scanner
        with s.quiet():
            text = s.choice(partial(s.nocase, 'true'), partial(s.nocase, 'false'))
        if text is None:
            s.expected("a boolean literal")
            return None
        return Value(StorageType.Bool, text.lower() == 'true')

    def lit_float(self) -> Optional[Value]:
        s = self.scanner
        start = s.pos
        m = s.match(DEC_FLOAT, "a floating-point literal")
        if m is None:
            return None
        try:
            data = to_f32(float(m.group()))
        except OverflowError:
            s.expected("a 32-bit floating-point number", start)
            return None
        return Value(StorageType.Float, data)

    def lit_int(self) -> Optional[Value]:
        s = self.scanner
        start = s.pos
        m = s.match(DEC_INT, "an integer literal")
        if m is None:
            return None
        digits = m.group().lstrip('0') or '0'
        if len(digits) > 10 or int(digits) > I32_MAX:
            s.expected("a 32-bit integer", start)
            return None
        return Value(StorageType.Int, int(digits))

    def lit_color(self) -> Optional[Value]:
        s = self.scanner
        start = s.pos
        with s.quiet():
            channels = self._color_channels()
        if channels is None:
            s.expected("a color literal", start)
            return None
        return Value(StorageType.Color, Color(*channels))

    def _color_channels(self):
        s = self.scanner
        if s.literal('"') is None:
            return None
        channels = []
        for i in range(3):
            if i:
                self._skip()
            m = s.match(HEX_PAIR, "2-digit hexadecimal string")
            if m is None:
                return None
            channels.append(int(m.group(), 16))
        if s.literal('"') is None:
            return None
        return channels

    def lit_string(self) -> Optional[Value]:
        m = self.scanner.match(STRING, "a string literal")
        if m is None:
            return None
        return Value(StorageType.String, m.group(1))
