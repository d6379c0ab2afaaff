"""Abstract syntax tree for the CVARINFO lump.

Console variables or "CVars" are how ZDoom-family source ports store user
preferences, and CVARINFO is where a mod declares its own::

    server int delusive_bunker = 42;
    user nosave string KatanaZERO = "LudoWic";

The entry point is ``CVarInfo.parse``.
"""

import enum
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional, Tuple, Union

from .interner import Interner, StringHandle
from .span import Span
from .utils import Serialize


class FlagKind(enum.Enum):
    "The semantic component of a ``Flag``. Values are the (lowercase) keywords."

    #: Shared between players in a network game and only mutable by the arbitrator.
    #: Persistent between saved games.
    Server = 'server'
    #: Each player has a copy that only they can mutate, and which only affects their client.
    User = 'user'
    #: Not written to save files or sent across the network.
    NoSave = 'nosave'
    #: Not written to the configuration .ini file.
    NoArchive = 'noarchive'
    #: Can only be modified if the running game allows cheating.
    Cheat = 'cheat'
    #: Changes only take effect when starting a new game,
    #: unless made without using the console.
    Latch = 'latch'


class StorageType(enum.Enum):
    "The value type stored in a CVar. Values are the (lowercase) keywords."

    # Declaration order is the order the grammar tries the keywords in.
    Int = 'int'
    Float = 'float'
    Color = 'color'
    Bool = 'bool'
    String = 'string'


class Color(NamedTuple):
    red: int
    green: int
    blue: int


@dataclass(frozen=True)
class Value(Serialize):
    """A default value, tagged with the storage type it belongs to.

    ``data`` is a ``bool``, an ``int`` (32-bit signed), a ``float`` (rounded
    to 32-bit precision), a ``str`` or a ``Color``.
    """
    storage_type: StorageType
    data: Union[bool, int, float, str, Color]

    @classmethod
    def fallback(cls, storage_type: StorageType) -> 'Value':
        """The value a CVar of ``storage_type`` gets when it has no initializer.

        The parser never fills this in; it is up to whoever applies the CVars.
        """
        return cls(storage_type, _FALLBACKS[storage_type])

    def serialize(self):
        data = self.data
        if isinstance(data, Color):
            data = data._asdict()
        return {self.storage_type.name: data}


_FALLBACKS = {
    StorageType.Bool: False,
    StorageType.Int: 0,
    StorageType.Float: 0.0,
    StorageType.String: '',
    StorageType.Color: Color(0, 0, 0),
}


@dataclass(frozen=True)
class Identifier(Serialize):
    __serialize_fields__ = 'span', 'string'

    span: Span
    string: StringHandle

    @property
    def text(self) -> str:
        return self.string.resolve()

    def __str__(self):
        return self.text


@dataclass(frozen=True)
class Flag(Serialize):
    "An optional qualifier in front of the type specifier"
    __serialize_fields__ = 'span', 'kind'

    span: Span
    kind: FlagKind


@dataclass(frozen=True)
class TypeSpec(Serialize):
    __serialize_fields__ = 'span', 'storage_type'

    span: Span
    storage_type: StorageType


@dataclass(frozen=True)
class Initializer(Serialize):
    "The ``= value`` part of a definition"
    __serialize_fields__ = 'span', 'value'

    span: Span
    value: Value


@dataclass(frozen=True)
class CVar(Serialize):
    """A single CVar definition.

    Flags are kept exactly as written, in order, including repeats.
    ``init`` is ``None`` when the definition has no initializer.
    """
    __serialize_fields__ = 'span', 'flags', 'type_spec', 'name', 'init'

    span: Span
    flags: Tuple[Flag, ...]
    type_spec: TypeSpec
    name: Identifier
    init: Optional[Initializer]

    def has_flag(self, kind: FlagKind) -> bool:
        return any(flag.kind is kind for flag in self.flags)


@dataclass(frozen=True)
class CVarInfo(Serialize):
    """The top of a CVARINFO abstract syntax tree.

    Behaves as an immutable sequence of ``CVar``, in source order.
    """
    __serialize_fields__ = 'definitions',

    definitions: Tuple[CVar, ...]

    @classmethod
    def parse(cls, text: str, interner: Interner, re_module=None) -> 'CVarInfo':
        """Parses a whole lump.

        Identifiers are interned into ``interner``, which may be shared with
        other parses, including ones running on other threads.

        Raises:
            UnexpectedInput: if any part of the text fails to parse. Nothing
                is returned for the definitions before the error.
        """
        from .grammar import CVarInfoGrammar
        return CVarInfoGrammar(text, interner, re_module).parse()

    def by_name(self, name: str) -> Optional[CVar]:
        "Returns the first definition called ``name``, if any"
        for cvar in self.definitions:
            if cvar.name.text == name:
                return cvar
        return None

    def __len__(self):
        return len(self.definitions)

    def __getitem__(self, index):
        return self.definitions[index]

    def __iter__(self) -> Iterator[CVar]:
        return iter(self.definitions)
