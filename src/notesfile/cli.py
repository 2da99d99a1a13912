"""Command-line interface for notesfile."""


import argparse
import json
import sys
from terminaltables import AsciiTable
from notesfile import errorlog
from notesfile.conf import NotesfileConf
from notesfile.store import Error, NoteStore


def _add(args, store: NoteStore) -> int:
    body = args.body if args.body is not None else sys.stdin.read()
    store.add(args.title, body)
    print('Note added successfully!')
    return 0


def _list(args, store: NoteStore) -> int:
    if args.json:
        print(json.dumps([n.as_json() for n in store.notes()]))
        return 0
    if args.table:
        notes = list(store.notes())
        if not notes:
            print('No notes found. Add some notes first!')
            return 0
        data = [('Title', 'Created', 'Lines')]
        data.extend((n.title, n.created or '', str(len(n.body))) for n in notes)
        table = AsciiTable(data)
        table.justify_columns[2] = 'right'
        print(table.table)
        return 0
    empty = True
    for line in store.lines():
        print(line)
        empty = False
    if empty:
        print('No notes found. Add some notes first!')
    return 0


def _search(args, store: NoteStore) -> int:
    results = store.search(args.keyword)
    for record in results:
        print(record)
    if not results:
        print(f'No notes found containing: {args.keyword.strip().lower()}')
    return 0


def _delete(args, store: NoteStore) -> int:
    removed = store.delete(args.title)
    if store.conf.preview_mode:
        print('Would delete:')
        for line in removed:
            print(line)
    else:
        print('Note deleted successfully!')
    return 0


def _count(args, store: NoteStore) -> int:
    print(f'Total notes: {store.count()}')
    return 0


def _clear(args, store: NoteStore) -> int:
    confirmation = 'y' if args.yes else input('Are you sure you want to delete ALL notes? (y/N): ')
    if not store.clear(confirmation):
        print('Operation cancelled.')
    elif store.conf.preview_mode:
        print(f'Would clear {store.count()} notes.')
    else:
        print('All notes cleared successfully!')
    return 0


def _export(args, store: NoteStore) -> int:
    path = store.export()
    print(f'Notes exported to: {path}')
    return 0


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Keep notes in a single plain-text file. Settings are read from ~/.notesfile.conf.py '
                    'if it exists.')
    parser.set_defaults(func=None, preview=False)
    parser.add_argument('-f', '--file', nargs=1,
                        help='Notes file to use, instead of the one configured in ~/.notesfile.conf.py '
                             '(default: notes.txt in the current directory).')

    subs = parser.add_subparsers(title='Commands')

    p_add = subs.add_parser('add', help='Append a new note to the end of the notes file.')
    p_add.add_argument('title', help='Title of the note. Titles are used to find notes to delete.')
    p_add.add_argument('body', nargs='?',
                       help='Content of the note. If omitted, it is read from standard input. '
                            'The content may span several lines, but may not contain blank lines.')
    p_add.set_defaults(func=_add)

    p_list = subs.add_parser('list', help='Show all notes.')
    p_list_formats = p_list.add_mutually_exclusive_group()
    p_list_formats.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_list_formats.add_argument('-t', '--table', action='store_true',
                                help='Show a table of titles and creation times instead of the full text.')
    p_list.set_defaults(func=_list)

    p_search = subs.add_parser('search', help='Show notes whose text contains a keyword, ignoring case.')
    p_search.add_argument('keyword')
    p_search.set_defaults(func=_search)

    p_delete = subs.add_parser(
        'delete',
        help='Delete a note by title, ignoring case. If several notes have the same title, only the first is '
             'deleted.')
    p_delete.add_argument('title')
    p_delete.add_argument('-p', '--preview', action='store_true',
                          help='Print the note that would be deleted but do not change the file')
    p_delete.set_defaults(func=_delete)

    p_count = subs.add_parser('count', help='Show the number of notes.')
    p_count.set_defaults(func=_count)

    p_clear = subs.add_parser('clear', help='Delete all notes. Asks for confirmation unless --yes is given.')
    p_clear.add_argument('-y', '--yes', action='store_true', help='Do not ask for confirmation.')
    p_clear.add_argument('-p', '--preview', action='store_true',
                         help='Print how many notes would be deleted but do not change the file')
    p_clear.set_defaults(func=_clear)

    p_export = subs.add_parser(
        'export',
        help='Copy the notes file to a backup file named with the current date and time, such as '
             'notes_backup_20120502_030405.txt.')
    p_export.set_defaults(func=_export)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    if not args.func:
        parser.print_help()
        return 1
    conf = NotesfileConf.for_user()
    if args.file:
        conf.notes_path = args.file[0]
    if args.preview:
        conf.preview_mode = True
    store = conf.instantiate()
    handler = errorlog.attach(store.conf.error_log_path) if store.conf.error_log_path else None
    try:
        return args.func(args, store)
    except Error as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        if handler is not None:
            errorlog.detach(handler)
