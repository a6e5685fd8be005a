"""
PrefixWriter -- a file-like object that labels every line written to it.

Handy for folding a library's or a subprocess's output into the debug
stream:

    logging.basicConfig(stream=PrefixWriter("app:log"))

    # drop health checks
    access = PrefixWriter("app:api", ignores=["/health", "/ping"])

Independent of the rule engine: whatever is written is shown (unless the
line contains an ignored phrase).
"""

import codecs
import sys
import threading
from typing import Iterable, Iterator, Optional, Sequence, TextIO, Union


class PrefixWriter:
    """Prefix each line with a label, dropping lines with ignored phrases.

    Text is buffered until a newline arrives (``print()`` writes the text
    and the newline separately); flush() writes out a trailing partial line.

    Args:
        prefix: Label written before each line (followed by one space)
        ignores: Phrases; a line containing any of them is dropped
        stream: Target stream (default: sys.stderr at write time)
    """

    def __init__(self, prefix: str, ignores: Sequence[str] = (),
                 stream: Optional[TextIO] = None):
        self.prefix = prefix
        self.ignores = tuple(ignores or ())
        self.stream = stream
        self._pending = ''
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        self._lock = threading.Lock()

    def _target(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stderr

    def ignored(self, text: str) -> bool:
        """True if text contains any ignored phrase."""
        return any(phrase in text for phrase in self.ignores)

    def _emit(self, line: str) -> None:
        if not self.ignored(line):
            self._target().write(f"{self.prefix} {line}")

    def write(self, data: Union[str, bytes]) -> int:
        """Write data, prefixing every completed line.

        Always reports the full input length as written, including for
        dropped lines, so callers never retry.
        """
        with self._lock:
            # bytes may end mid-character; the decoder keeps the tail
            text = self._decoder.decode(data) if isinstance(data, bytes) else data
            *lines, self._pending = (self._pending + text).split('\n')
            for line in lines:
                self._emit(line + '\n')
        return len(data)

    def flush(self) -> None:
        with self._lock:
            if self._pending:
                self._emit(self._pending)
                self._pending = ''
        self._target().flush()

    def writable(self) -> bool:
        return True


def prefix_lines(lines: Iterable[str], prefix: str,
                 ignores: Sequence[str] = ()) -> Iterator[str]:
    """Yield each line with the prefix, skipping lines with ignored phrases."""
    for line in lines:
        if any(phrase in line for phrase in ignores):
            continue
        yield f"{prefix} {line}"
