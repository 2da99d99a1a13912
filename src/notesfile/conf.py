from __future__ import annotations
from dataclasses import dataclass, replace
import os.path
from typing import Optional


@dataclass
class NotesfileConf:
    notes_path: str = 'notes.txt'
    """The file that holds all of your notes. Relative paths are resolved against the working directory.

    The file is created the first time a note is added. Until then, it is treated as containing no notes.
    """

    error_log_path: Optional[str] = 'error_log.txt'
    """Where to append diagnostic records when reading or writing the notes file fails.

    Set this to None to disable error records. See :mod:`notesfile.errorlog`.
    """

    export_dir: Optional[str] = None
    """The folder that the ``export`` command writes backups into.

    If None, backups are written next to :attr:`notes_path`.
    """

    export_name_format: str = 'notes_backup_%Y%m%d_%H%M%S.txt'
    """A :meth:`datetime.strftime` format for the names of exported files.

    With the default, two exports within the same second use the same name, and the second one overwrites the first.
    """

    encoding: str = 'utf-8'
    """Text encoding of the notes file. A file that cannot be decoded is reported as a read error."""

    atomic_rewrite: bool = True
    """If True, deleting or clearing notes writes a temporary file and renames it over the notes file.

    A symlinked notes file is resolved first, so the link keeps pointing at the rewritten file.

    If False, the notes file is truncated and rewritten in place, which is what older versions did. In that mode
    a crash partway through a rewrite can leave a partial file behind.
    """

    preview_mode: bool = False
    """If True, ``delete`` and ``clear`` only report what they would remove, and do not change the file.

    Instead of setting this in your ``.notesfile.conf.py``, you can pass a ``--preview`` command-line argument to
    those commands.
    """

    @classmethod
    def user_conf_path(cls) -> str:
        return os.path.expanduser(os.path.join('~', '.notesfile.conf.py'))

    @classmethod
    def for_user(cls) -> NotesfileConf:
        """Loads the variable ``conf`` from ``~/.notesfile.conf.py``.

        If that file does not exist, a default instance is returned. Raises :exc:`Exception` if the file
        exists but does not assign an instance of this class to ``conf``.

        Example config file:

        .. code-block:: python

           from notesfile.conf import *
           conf = NotesfileConf(notes_path='/Users/jacob/notes.txt', export_dir='/Users/jacob/backups')
        """
        path = cls.user_conf_path()
        if not os.path.exists(path):
            return cls()
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of NotesfileConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self) -> NotesfileConf:
        notes_path = os.path.abspath(self.notes_path)
        return replace(
            self,
            notes_path=notes_path,
            error_log_path=os.path.abspath(self.error_log_path) if self.error_log_path else None,
            export_dir=os.path.abspath(self.export_dir) if self.export_dir else os.path.dirname(notes_path)
        )

    def instantiate(self):
        from notesfile.store import NoteStore
        return NoteStore(self.standardize())
