import logging
import unittest

from doomfront import logger

from .test_span import TestSpan
from .test_interner import TestInterner, TestReadWriteLock
from .test_scanner import TestScanner
from .test_grammar import TestGrammar, TestLiterals, TestComments, TestErrors
from .test_cvarinfo import TestCVarInfo
from .test_frontend import TestFrontend
from .test_exceptions import TestExceptions
from .test_logger import Testlogger

logger.setLevel(logging.INFO)

if __name__ == '__main__':
    unittest.main()
