import gzip
import io
import logging
import re
import sys
from collections import namedtuple

from tracesim.errors import TraceFormatError
from tracesim.model.cache import AccessKind

logger = logging.getLogger(__name__)

AccessRecord = namedtuple('AccessRecord', ['kind', 'address', 'instruction_count'])

_DECIMAL = re.compile(r'[0-9]+\Z')
_HEX = re.compile(r'(0[xX])?[0-9a-fA-F]+\Z')


def parse_line(text, line_number=None):
    """Parse `<marker> <kind> <address-hex> <icount>` into an AccessRecord."""
    parts = text.split()
    if len(parts) != 4:
        raise TraceFormatError(f"expected 4 fields, got {len(parts)}",
                               line_number, text)
    _marker, kind, address, icount = parts
    if not _DECIMAL.match(kind):
        raise TraceFormatError(f"bad access kind {kind!r}", line_number, text)
    if not _HEX.match(address):
        raise TraceFormatError(f"bad hex address {address!r}", line_number, text)
    if not _DECIMAL.match(icount):
        raise TraceFormatError(f"bad instruction count {icount!r}", line_number, text)
    return AccessRecord(AccessKind.from_code(int(kind)), int(address, 16), int(icount))


class TraceReader:
    """Iterate access records from a text stream.

    A malformed line is logged and ends the trace, unless `skip_malformed`
    is set, in which case it is logged and skipped. Blank lines are ignored.
    """

    def __init__(self, stream, skip_malformed=False):
        self.stream = stream
        self.skip_malformed = skip_malformed
        self.malformed = 0
        self.records = 0

    def __iter__(self):
        for number, line in enumerate(self.stream, start=1):
            s = line.strip()
            if not s:
                continue
            try:
                record = parse_line(s, number)
            except TraceFormatError as e:
                self.malformed += 1
                if not self.skip_malformed:
                    logger.warning("stopping at malformed trace %s", e)
                    return
                logger.warning("skipping malformed trace %s", e)
                continue
            self.records += 1
            yield record


def _text(binary):
    # undecodable bytes become U+FFFD and then fail parse_line
    return io.TextIOWrapper(binary, encoding='ascii', errors='replace')


def open_trace(path=None):
    """Open a trace for reading; None or '-' is stdin, '*.gz' is decompressed."""
    if path is None or path == '-':
        return _text(sys.stdin.buffer)
    if str(path).endswith('.gz'):
        return _text(gzip.open(path, 'rb'))
    return open(path, 'r', encoding='ascii', errors='replace')


def is_stdin(path):
    return path is None or path == '-'
