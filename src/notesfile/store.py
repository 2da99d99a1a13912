"""Provides :class:`NoteStore`, which reads and changes the notes file.

Every operation goes back to the file; nothing is cached between calls. Failures are raised as subclasses
of :exc:`Error` so that callers can decide how to present them.
"""

from __future__ import annotations
from contextlib import contextmanager
from datetime import datetime
import logging
import os
import os.path
import shutil
from tempfile import mkstemp
from typing import Iterator, List, Optional
from notesfile.conf import NotesfileConf
from notesfile.models import Note, delimiter_title, is_delimiter, parse_notes


_logger = logging.getLogger(__name__)


class Error(Exception):
    """Base class for failures reported by :class:`NoteStore`."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(Error):
    """Raised when an argument is unusable, such as an empty title. Nothing is read or written."""


class NotFoundError(Error):
    """Raised when a note to delete does not exist. The notes file is left untouched."""
    def __init__(self, message: str, title: str):
        super().__init__(message)
        self.title = title


class StoreIOError(Error):
    """Raised when the notes file (or an export destination) cannot be read or written."""
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(message)
        self.path = path
        self.cause = cause


def _nonempty(value: str, message: str) -> str:
    value = (value or '').strip()
    if not value:
        raise ValidationError(message)
    return value


class NoteStore:
    """Accesses the notes kept in a single text file.

    .. attribute:: conf
       :type: notesfile.conf.NotesfileConf

    The file is assumed not to be modified by any other process while an operation is running; no locking
    is performed.
    """
    def __init__(self, conf: NotesfileConf):
        self.conf = conf

    @property
    def path(self) -> str:
        return self.conf.notes_path

    @contextmanager
    def _io_errors(self, action: str, path: str = None):
        path = path or self.path
        try:
            yield
        except (OSError, UnicodeError) as e:
            _logger.error('Error %s: %s', action, e, exc_info=True)
            raise StoreIOError(f'Error {action}: {e}', path, e) from e

    def _read_lines(self) -> Iterator[str]:
        try:
            file = open(self.path, 'r', encoding=self.conf.encoding)
        except FileNotFoundError:
            return
        with file:
            for line in file:
                yield line.rstrip('\n')

    def _rewrite(self, lines: List[str]) -> None:
        if self.conf.atomic_rewrite:
            # Resolving keeps a symlinked notes file pointing at the rewritten file.
            path = os.path.realpath(self.path)
            parent, name = os.path.split(path)
            fd, tmp = mkstemp(prefix=f'.{name}.', dir=parent)
            try:
                with os.fdopen(fd, 'w', encoding=self.conf.encoding) as file:
                    for line in lines:
                        file.write(f'{line}\n')
                if os.path.exists(path):
                    shutil.copymode(path, tmp)
                os.replace(tmp, path)
            except BaseException:
                if os.path.exists(tmp):
                    os.remove(tmp)
                raise
        else:
            with open(self.path, 'w', encoding=self.conf.encoding) as file:
                for line in lines:
                    file.write(f'{line}\n')

    def add(self, title: str, body: str, now: datetime = None) -> Note:
        """Appends a new note to the end of the file, creating the file if needed.

        Raises :exc:`ValidationError` if the title or body is empty, if the title spans multiple lines,
        or if the body would break the record format (a blank line, or a line that looks like a title
        delimiter). Duplicate titles are allowed.
        """
        title = _nonempty(title, 'Title cannot be empty!')
        if '\n' in title or '\r' in title:
            raise ValidationError('Title must be a single line!')
        body = _nonempty(body, 'Content cannot be empty!')
        body_lines = body.splitlines()
        for line in body_lines:
            if not line.strip():
                raise ValidationError('Content cannot contain blank lines!')
            if is_delimiter(line):
                raise ValidationError(f'Content cannot contain a line that looks like a title: {line}')

        note = Note.create(title, body_lines, now)
        with self._io_errors('adding note'):
            with open(self.path, 'a', encoding=self.conf.encoding) as file:
                file.write(note.record())
                file.flush()
        return note

    def lines(self) -> Iterator[str]:
        """Yields the raw lines of the notes file, without line terminators.

        Yields nothing if the file does not exist.
        """
        with self._io_errors('reading notes'):
            yield from self._read_lines()

    def notes(self) -> Iterator[Note]:
        """Yields each note parsed from the file, in file order."""
        yield from parse_notes(self.lines())

    def search(self, keyword: str) -> List[str]:
        """Returns the text of each record containing the keyword, ignoring case.

        A record here runs from its title delimiter line up to the next delimiter line (or the end of the file),
        so the text includes the record's terminating blank line and anything else before the next record.
        The title line itself is searched too. Each returned string ends with a newline.

        Raises :exc:`ValidationError` if the keyword is empty.
        """
        keyword = _nonempty(keyword, 'Search keyword cannot be empty!').lower()
        results = []
        current = None

        def check():
            if current is not None:
                text = ''.join(f'{line}\n' for line in current)
                if keyword in text.lower():
                    results.append(text)

        for line in self.lines():
            if is_delimiter(line):
                check()
                current = [line]
            elif current is not None:
                current.append(line)
        check()
        return results

    def delete(self, title: str) -> List[str]:
        """Removes the first note whose title matches, ignoring case, and returns the removed lines.

        The removed lines are the title delimiter line and every following line up to and including the next
        blank line. Other notes with the same title are kept.

        Raises :exc:`ValidationError` if the title is empty, or :exc:`NotFoundError` if no note matches,
        in which case the file is not written. In preview mode, nothing is written either.
        """
        title = _nonempty(title, 'Title cannot be empty!')
        target = title.lower()
        kept = []
        removed = []
        removing = False
        for line in self.lines():
            if removing:
                removed.append(line)
                if not line:
                    removing = False
            elif not removed and is_delimiter(line) and delimiter_title(line).lower() == target:
                removed.append(line)
                removing = True
            else:
                kept.append(line)

        if not removed:
            raise NotFoundError(f"Note with title '{title}' not found!", title)
        if not self.conf.preview_mode:
            with self._io_errors('deleting note'):
                self._rewrite(kept)
        return removed

    def count(self) -> int:
        """Returns the number of title delimiter lines in the file."""
        return sum(1 for line in self.lines() if is_delimiter(line))

    def clear(self, confirmation: Optional[str]) -> bool:
        """Deletes all notes, but only if confirmation is "y" or "yes" (ignoring case and surrounding whitespace).

        Returns True if the notes were cleared (or would have been, in preview mode), or False if cancelled.
        """
        if (confirmation or '').strip().lower() not in ('y', 'yes'):
            return False
        if not self.conf.preview_mode:
            with self._io_errors('clearing notes'):
                if self.conf.atomic_rewrite:
                    self._rewrite([])
                else:
                    open(self.path, 'w').close()
        return True

    def export_path(self, now: datetime = None) -> str:
        now = now or datetime.now()
        return os.path.join(self.conf.export_dir, now.strftime(self.conf.export_name_format))

    def export(self, now: datetime = None) -> str:
        """Copies the notes file byte-for-byte to a timestamped file and returns the new file's path.

        An existing file at that path is overwritten.
        If there is no notes file yet, the export is an empty file.
        Raises :exc:`StoreIOError` if the copy fails.
        """
        dest = self.export_path(now)
        with self._io_errors('exporting notes', dest):
            if os.path.exists(self.path):
                shutil.copyfile(self.path, dest)
            else:
                open(dest, 'wb').close()
        return dest
