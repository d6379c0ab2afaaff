"""String interning for identifiers.

An ``Interner`` is an explicitly created, shareable table of unique strings.
Every string gets a stable index for the lifetime of the interner.
``StringHandle`` ties such an index to the interner that issued it, so that
handles can be compared, hashed and printed without a global table.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .utils import Serialize, logger


class ReadWriteLock:
    """Any number of concurrent readers, or a single writer.

    Waiting writers hold back new readers, so a steady stream of lookups
    can't starve an insert.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class Interner:
    """Deduplicating, insertion-ordered string table.

    Indices are never reused while the interner lives. Handles keep their
    interner alive, so it is released once the last handle (and the last
    direct reference) is gone.

    The table may be shared between threads: lookups run concurrently,
    inserts are serialized.
    """

    def __init__(self) -> None:
        self._indices: Dict[str, int] = {}
        self._strings: List[str] = []
        self._lock = ReadWriteLock()

    def intern(self, string: str) -> 'StringHandle':
        """Returns a handle to ``string``, adding it to the table if needed.

        Interning equal strings always gives equal handles.
        """
        with self._lock.read():
            index = self._indices.get(string)

        if index is None:
            # Another thread may have inserted it since the read lock was released;
            # _add() checks again under the write lock.
            with self._lock.write():
                index = self._add(string)

        return StringHandle(self, index)

    def add(self, string: str) -> int:
        "Inserts ``string`` unless present, and returns its index"
        with self._lock.write():
            return self._add(string)

    def _add(self, string):
        index = self._indices.get(string)
        if index is None:
            index = len(self._strings)
            self._strings.append(string)
            self._indices[string] = index
            logger.debug("Interned %r as %d", string, index)
        return index

    def try_lookup(self, string: str) -> Optional[int]:
        with self._lock.read():
            return self._indices.get(string)

    def get(self, index: int) -> str:
        """Resolves an index issued by this interner.

        Indices from another interner are a caller error; they resolve to an
        unrelated string or raise ``IndexError``.
        """
        if index < 0:
            raise IndexError(index)
        with self._lock.read():
            return self._strings[index]

    def __len__(self):
        with self._lock.read():
            return len(self._strings)

    def __contains__(self, string):
        return self.try_lookup(string) is not None

    def __iter__(self) -> Iterator[str]:
        with self._lock.read():
            strings = list(self._strings)
        return iter(strings)

    def __repr__(self):
        return '<Interner of %d strings>' % len(self)

    def __str__(self):
        lines = ['{']
        for i, s in enumerate(self):
            lines.append('\t%d => %r,' % (i, s))
        lines.append('}')
        return '\n'.join(lines)


class StringHandle(Serialize):
    """Points to an entry in a specific ``Interner``.

    Two handles are equal only if they come from the same interner instance
    and carry the same index. Hashing, on the other hand, uses the resolved
    text: handles from different interners that spell the same string hash
    alike but never compare equal. Equal handles always resolve to the same
    text, so equal handles always hash alike.
    """

    def __init__(self, interner: Interner, index: int) -> None:
        self._interner = interner
        self._index = index

    @property
    def interner(self) -> Interner:
        return self._interner

    @property
    def index(self) -> int:
        return self._index

    def resolve(self) -> str:
        return self._interner.get(self._index)

    def __eq__(self, other):
        if not isinstance(other, StringHandle):
            return NotImplemented
        return self._interner is other._interner and self._index == other._index

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    def __hash__(self):
        return hash(self.resolve())

    def __str__(self):
        return self.resolve()

    # Don't write out the interner's contents
    def __repr__(self):
        return 'StringHandle(index=%d)' % self._index

    def serialize(self):
        return self.resolve()
