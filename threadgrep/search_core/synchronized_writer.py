"""
Per-task output buffering in front of a shared output stream

Each search task gets its own SynchronizedWriter. Nothing reaches the shared
stream until the writer is flushed, and then the header and the whole body go
out under the sink's lock, so output from different files never interleaves.
"""

import io
import threading
from typing import List, TextIO


class SharedSink:
    """A text stream shared by many writers"""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self._lock = threading.Lock()

    def write_unit(self, header: str, payload: str) -> None:
        """Write ``header`` on its own line followed by ``payload``, atomically"""
        with self._lock:
            self.stream.write(f"{header}\n")
            self.stream.write(payload)
            self.stream.flush()


class SynchronizedWriter(io.TextIOBase):
    """
    Buffered text writer bound to a SharedSink and a header line

    The header is written if and only if something was written to the
    writer. Closing the writer, leaving its ``with`` block, or letting it be
    garbage collected flushes whatever is still buffered.
    """

    def __init__(self, sink: SharedSink, header: str):
        super().__init__()
        self.sink = sink
        self.header = header
        self._parts: List[str] = []

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        if self.closed:
            raise ValueError("write to closed SynchronizedWriter")
        if text:
            self._parts.append(text)
        return len(text)

    @property
    def pending(self) -> bool:
        return bool(self._parts)

    def flush(self) -> None:
        if not self._parts:
            return
        payload = ''.join(self._parts)
        self.sink.write_unit(self.header, payload)
        self._parts.clear()
