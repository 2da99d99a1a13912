"""Defines the note record format and the :class:`Note` class.

Notes are stored one after another in a single text file. Each record looks like this::

    === Groceries ===
    Created: 2012-05-02 03:04:05
    --------------------------------------------------
    Milk, eggs, bread

The record is terminated by a blank line.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Iterator, List, Optional


DELIMITER_PREFIX = '=== '
DELIMITER_SUFFIX = ' ==='
CREATED_PREFIX = 'Created: '
SEPARATOR = '-' * 50
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def is_delimiter(line: str) -> bool:
    """Returns True if the line starts a record, i.e. looks like ``=== title ===``."""
    return line.startswith(DELIMITER_PREFIX) and line.endswith(DELIMITER_SUFFIX)


def delimiter_title(line: str) -> str:
    """Returns the title enclosed by a delimiter line.

    The line should already be known to satisfy :func:`is_delimiter`.
    """
    return line[len(DELIMITER_PREFIX):len(line) - len(DELIMITER_SUFFIX)]


def delimiter_for(title: str) -> str:
    return f'{DELIMITER_PREFIX}{title}{DELIMITER_SUFFIX}'


@dataclass
class Note:
    """A single note, as parsed from (or about to be written to) the notes file.

    Notes are not kept in memory between operations; instances are created fresh from the file text
    each time they are needed.
    """

    title: str
    """Used to look up notes for deletion. Comparisons are case-insensitive."""

    body: List[str] = field(default_factory=list)
    """Lines of content. A body line is never blank, since a blank line ends the record."""

    created: Optional[str] = None
    """The text of the ``Created:`` line, if present. This is informational only and is not parsed."""

    def record_lines(self) -> List[str]:
        """Returns the lines of the serialized record, including the terminating blank line."""
        lines = [delimiter_for(self.title)]
        if self.created is not None:
            lines.append(f'{CREATED_PREFIX}{self.created}')
        lines.append(SEPARATOR)
        lines.extend(self.body)
        lines.append('')
        return lines

    def record(self) -> str:
        return ''.join(f'{line}\n' for line in self.record_lines())

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'title': self.title,
            'created': self.created,
            'body': list(self.body),
        }

    @classmethod
    def create(cls, title: str, body: List[str], now: datetime = None) -> Note:
        now = now or datetime.now()
        return cls(title=title, body=body, created=now.strftime(TIMESTAMP_FORMAT))


def parse_notes(lines: Iterable[str]) -> Iterator[Note]:
    """Parses notes out of the lines of a notes file.

    Lines outside of any record are skipped. The ``Created:`` and separator lines are optional,
    so records written by hand are still recognized as long as they begin with a delimiter line.
    """
    note = None
    header = False
    for line in lines:
        if is_delimiter(line):
            if note is not None:
                yield note
            note = Note(delimiter_title(line))
            header = True
        elif note is None:
            continue
        elif not line:
            yield note
            note = None
        elif header and note.created is None and not note.body and line.startswith(CREATED_PREFIX):
            note.created = line[len(CREATED_PREFIX):]
        elif header and line == SEPARATOR:
            header = False
        else:
            header = False
            note.body.append(line)
    if note is not None:
        yield note
