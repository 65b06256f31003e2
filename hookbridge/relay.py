"""Background copy of a subprocess's output to the host's own output."""

from __future__ import annotations

import sys
import threading
from typing import BinaryIO, Optional

from hookbridge.log_manager import log

CHUNK_SIZE = 8192


def default_sink() -> Optional[BinaryIO]:
    """Return the binary side of the host's standard output, if it has one."""
    return getattr(sys.stdout, "buffer", None)


class OutputRelay(threading.Thread):
    """
    Drain ``stream`` into ``sink`` until end of file.

    The relay must be started before the caller blocks waiting for the process,
    otherwise a child filling the pipe buffer never exits. When ``sink`` is None
    the output is read and discarded.
    """

    def __init__(self, stream: BinaryIO, sink: Optional[BinaryIO] = None, name: str = "hook-output"):
        super().__init__(name=name, daemon=True)
        self.stream = stream
        self.sink = sink
        self.bytes_relayed = 0

    def run(self) -> None:
        read = getattr(self.stream, "read1", self.stream.read)
        try:
            while True:
                chunk = read(CHUNK_SIZE)
                if not chunk:
                    break
                self.bytes_relayed += len(chunk)
                if self.sink is not None:
                    self.sink.write(chunk)
                    self.sink.flush()
        except (OSError, ValueError) as exc:
            # ValueError: I/O on a closed file
            log.debug("Output relay stopped: %s", exc)

    def stop(self, timeout: float = 5.0) -> bool:
        """
        Wait up to ``timeout`` seconds for the relay to reach end of file.

        Returns False when something still holds the pipe open, typically a background
        grandchild of the hook; the caller has to get rid of it and join again.
        """
        self.join(timeout)
        if self.is_alive():
            return False
        log.debug("Relayed %d bytes of hook output", self.bytes_relayed)
        return True
