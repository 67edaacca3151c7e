from .errors import OversizeDataError, OversizeDataWarning

import logging
import warnings


class MetricBuffer:
    """Accumulates encoded metric lines into packets of at most max_buffer_size bytes.

    A line is size-checked before it is appended so a packet always consists of
    whole, newline terminated lines.  A line that could never fit on its own is
    dropped with a warning (or OversizeDataError when raise_on_oversize is set).

    ``send`` is called with the packet contents and must raise on failure; the
    buffer is emptied before the call so failed packets are not retried.
    """

    def __init__(self, *, max_buffer_size, send, autoflush=False, raise_on_oversize=False):
        self.log = logging.getLogger("MetricBuffer")
        self.max_buffer_size = max_buffer_size
        self.autoflush = autoflush
        self.raise_on_oversize = raise_on_oversize
        self._send = send
        self._data = bytearray()
        self.entry_num = 0
        self.total_size = 0
        self.dropped_lines = 0
        self.flush_count = 0

    def __len__(self):
        return len(self._data)

    @property
    def bytes_used(self):
        return len(self._data)

    def getvalue(self):
        return bytes(self._data)

    def record(self, line):
        """Add an encoded line, flushing first if it would not fit. Returns False if the line was dropped."""
        if len(line) >= self.max_buffer_size:
            self.dropped_lines += 1
            message = "Metric line of {} bytes does not fit in buffer of {} bytes: {!r}".format(
                len(line), self.max_buffer_size, line[:64]
            )
            if self.raise_on_oversize:
                raise OversizeDataError(message)
            self.log.warning("Dropping oversized metric line: %s", message)
            warnings.warn(message, OversizeDataWarning, stacklevel=2)
            return False

        if self.bytes_used + len(line) >= self.max_buffer_size:
            try:
                self.flush()
            finally:
                self._append(line)
        else:
            self._append(line)

        if self.autoflush:
            self.flush()
        return True

    def _append(self, line):
        self._data += line
        self.entry_num += 1
        self.total_size += len(line)

    def flush(self):
        """Send the buffered lines as one packet. Returns the number of bytes sent, 0 if the buffer was empty."""
        if not self._data:
            return 0

        packet = bytes(self._data)
        self._data.clear()
        self.flush_count += 1
        self.log.debug("Flushing %d bytes", len(packet))
        return self._send(packet)
