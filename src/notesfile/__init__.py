"""Keeps personal notes as plain-text records in a single file.

If you installed via ``pip``, run ``notesfile -h`` to get help.

To use the Python API, look at :class:`notesfile.store.NoteStore`
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
