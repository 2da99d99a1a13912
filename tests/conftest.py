import pytest
from notesfile.conf import NotesfileConf


@pytest.fixture
def store(fs):
    fs.create_dir('/notes')
    return NotesfileConf(notes_path='/notes/notes.txt').instantiate()
