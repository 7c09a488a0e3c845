"""Line reassembly for chunked subprocess output."""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass, field

LINE_SEPARATOR = re.compile(r"\r?\n")


@dataclass
class LineReassembler:
    """Turns arbitrarily split output chunks into complete lines.

    Each call to :meth:`feed` returns the lines completed by that chunk, with
    their ``\\n`` / ``\\r\\n`` separators stripped.  Whatever follows the last
    separator is kept in ``unfinished`` until a later chunk completes it.
    Trailing data is never emitted implicitly; call :meth:`flush` for that.
    """

    encoding: str = "utf-8"
    unfinished: str = ""
    _decoder: codecs.IncrementalDecoder | None = field(default=None, repr=False)

    def feed(self, chunk: str | bytes) -> list[str]:
        if isinstance(chunk, bytes):
            chunk = self._decode(chunk)
        if not chunk:
            return []

        # Joining first keeps a "\r\n" split across two chunks intact
        parts = LINE_SEPARATOR.split(self.unfinished + chunk)
        self.unfinished = parts.pop()
        return parts

    def flush(self) -> str | None:
        """Return and clear the unterminated remainder, if any."""
        if self._decoder is not None:
            self.unfinished += self._decoder.decode(b"", final=True)
        rest, self.unfinished = self.unfinished, ""
        return rest or None

    def _decode(self, data: bytes) -> str:
        if self._decoder is None:
            self._decoder = codecs.getincrementaldecoder(self.encoding)(errors="replace")
        return self._decoder.decode(data)
