"""Writes diagnostic records for failed operations to a side file.

Each failure logged with exception info becomes a block like this::

    === ERROR LOG ===
    Timestamp: 2012-05-02 03:04:05
    Exception: PermissionError
    Message: [Errno 13] Permission denied: '/notes/notes.txt'
    Stack Trace:
    	at add (/usr/lib/python3/site-packages/notesfile/store.py:120)
    --------------------------------------------------

"""

from datetime import datetime
import logging
import sys
import traceback
from notesfile.models import SEPARATOR, TIMESTAMP_FORMAT


class ErrorRecordFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        lines = ['=== ERROR LOG ===',
                 f'Timestamp: {datetime.fromtimestamp(record.created).strftime(TIMESTAMP_FORMAT)}']
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            lines.append(f'Exception: {type(exc).__name__}')
            lines.append(f'Message: {exc}')
            lines.append('Stack Trace:')
            for frame in traceback.extract_tb(exc.__traceback__):
                lines.append(f'\tat {frame.name} ({frame.filename}:{frame.lineno})')
        else:
            lines.append(f'Message: {record.getMessage()}')
        lines.append(SEPARATOR)
        # FileHandler adds the terminator after this, which leaves the trailing blank line.
        lines.append('')
        return '\n'.join(lines)


class ErrorRecordHandler(logging.FileHandler):
    """Appends :class:`ErrorRecordFormatter` blocks to a file.

    The file is not opened until the first record is emitted, so nothing is created when no errors occur.
    A failure to write the record is reported on stderr and otherwise ignored.
    """
    def __init__(self, path: str):
        super().__init__(path, mode='a', delay=True)
        self.setLevel(logging.ERROR)
        self.setFormatter(ErrorRecordFormatter())

    def emit(self, record: logging.LogRecord) -> None:
        try:
            super().emit(record)
        except Exception:
            self.handleError(record)

    def handleError(self, record: logging.LogRecord) -> None:
        err = sys.exc_info()[1]
        print(f'Failed to log exception: {err}', file=sys.stderr)


def attach(path: str, logger_name: str = 'notesfile') -> ErrorRecordHandler:
    """Starts sending error records from the named logger to the file at path.

    Call :func:`detach` with the returned handler when done.
    """
    handler = ErrorRecordHandler(path)
    logging.getLogger(logger_name).addHandler(handler)
    return handler


def detach(handler: ErrorRecordHandler, logger_name: str = 'notesfile') -> None:
    logging.getLogger(logger_name).removeHandler(handler)
    handler.close()
