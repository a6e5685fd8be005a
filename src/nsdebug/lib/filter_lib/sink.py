"""
Emission sink -- writes enabled debug lines to a stream.

Line format:

    15:04:05.000 app:server Server starting on port 8080
"""

import sys
import threading
from datetime import datetime
from typing import Callable, Optional, TextIO


TIME_FORMAT = '%H:%M:%S'


def format_timestamp(now: datetime) -> str:
    """Format a wall-clock time as HH:MM:SS.mmm."""
    return f"{now.strftime(TIME_FORMAT)}.{now.microsecond // 1000:03d}"


def format_line(channel: str, message: str, now: datetime) -> str:
    """Build one output line (without the trailing newline)."""
    return f"{format_timestamp(now)} {channel} {message}"


class StreamSink:
    """Writes timestamped debug lines to a text stream.

    Lines from concurrent threads never interleave; each write is one
    locked write + flush.

    Args:
        stream: Target stream. None resolves sys.stderr at write time, so
            pytest's capsys and redirect_stderr see the output.
        clock: Returns the current datetime (for tests)
    """

    def __init__(self, stream: Optional[TextIO] = None,
                 clock: Callable[[], datetime] = None):
        self.stream = stream
        self.clock = clock or datetime.now
        self._lock = threading.Lock()

    def write(self, channel: str, message: str) -> None:
        line = format_line(channel, message, self.clock()) + "\n"
        stream = self.stream if self.stream is not None else sys.stderr
        with self._lock:
            stream.write(line)
            stream.flush()

    __call__ = write


# Shared default; every debugger without its own sink writes here
default_sink = StreamSink()
