import logging
from pathlib import Path
import re
from notesfile import errorlog
from notesfile.conf import NotesfileConf
from notesfile.models import SEPARATOR
from notesfile.store import StoreIOError


def test_error_record(fs):
    fs.create_file('/notes/notes.txt')
    store = NotesfileConf(notes_path='/notes/notes.txt', export_dir='/nowhere').instantiate()
    handler = errorlog.attach('/notes/error_log.txt')
    try:
        assert not Path('/notes/error_log.txt').exists()
        for _ in range(2):
            try:
                store.export()
            except StoreIOError:
                pass
    finally:
        errorlog.detach(handler)

    text = Path('/notes/error_log.txt').read_text()
    blocks = text.split('=== ERROR LOG ===\n')
    assert blocks[0] == ''
    assert len(blocks) == 3
    block = blocks[1]
    assert re.match(r'Timestamp: \d{4}-\d\d-\d\d \d\d:\d\d:\d\d\n', block)
    assert '\nException: FileNotFoundError\n' in block
    assert re.search(r"\nMessage: \[Errno 2\] .*/nowhere/notes_backup_\d+_\d+\.txt'\n", block)
    assert '\nStack Trace:\n\tat ' in block
    assert block.endswith(f'\n{SEPARATOR}\n\n')


def test_detach(fs):
    handler = errorlog.attach('/error_log.txt')
    errorlog.detach(handler)
    assert handler not in logging.getLogger('notesfile').handlers
    logging.getLogger('notesfile.store').error('not recorded')
    assert not Path('/error_log.txt').exists()


def test_message_without_exception(fs):
    handler = errorlog.attach('/error_log.txt')
    try:
        logging.getLogger('notesfile.cli').error('Something odd: %s', 'details')
    finally:
        errorlog.detach(handler)
    text = Path('/error_log.txt').read_text()
    assert text.startswith('=== ERROR LOG ===\nTimestamp: ')
    assert text.endswith(f'\nMessage: Something odd: details\n{SEPARATOR}\n\n')


def test_logging_failure(fs, capsys):
    handler = errorlog.attach('/missing/dir/error_log.txt')
    try:
        logging.getLogger('notesfile.store').error('cannot be written')
    finally:
        errorlog.detach(handler)
    out, err = capsys.readouterr()
    assert err.startswith('Failed to log exception: ')
    assert not Path('/missing').exists()
