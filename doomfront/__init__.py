from .utils import logger
from .span import Span
from .interner import Interner, StringHandle
from .cvarinfo import (CVarInfo, CVar, Flag, FlagKind, TypeSpec, StorageType,
                       Initializer, Value, Color, Identifier)
from .exceptions import (DoomFrontError, ConfigurationError, ParseError,
                         UnexpectedInput, UnexpectedCharacters, UnexpectedEOF)
from .frontend import CVarInfoParser

__version__: str = "0.1.0"
