"""
ClipTrail - Command-line clipboard utility & history manager

Pipe data in to set the clipboard, run without arguments to print it.
Everything that passes through is kept in a history directory that can
be listed, previewed, recalled and pruned.
"""
import sys
import time
import argparse

from clipboard import Clipboard
from config import Config, DEFAULT_CONFIG_PATH


__version__ = "1.0.0"

SECONDS_PER_DAY = 24 * 60 * 60


def parse_count(value, what):
    """Parse a non-negative integer argument"""
    if not value.isdigit():
        raise ValueError(f"Invalid {what}: '{value}' isn't a valid number!")
    return int(value)


def parse_dimensions(value, width, lines):
    """
    Parse a --dim argument of the form WIDTH:LINES

    An empty side removes that limit. Without a colon the value is the
    width and the line limit is removed. An empty argument removes both limits.

    Returns:
        (width, lines) tuple
    """
    if not value:
        return None, None

    if ':' not in value:
        return parse_count(value, "preview width"), None

    width_arg, _, lines_arg = value.partition(':')
    width = parse_count(width_arg, "preview width") if width_arg else None
    lines = parse_count(lines_arg, "preview line count") if lines_arg else None
    return width, lines


def show_list(clipboard, count, width, lines, quiet, out):
    """Print previews of the most recent history entries"""
    shown = 0
    for i, entry in enumerate(clipboard.history):
        if i >= count:
            break
        if i > 0:
            out.write('\n\n' if not quiet else '\n')
        if not quiet:
            out.write(f"[{i}]:\n")
        out.write(entry.preview(width, lines, not quiet))
        shown += 1
    if shown:
        out.write('\n')


def run(args, config, clipboard, stdin_data=None, out=None):
    """Carry out the parsed command line against a clipboard"""
    out = out or sys.stdout
    width = config.get('preview_width')
    lines = config.get('preview_lines')
    auto_cache = config.get('auto_cache', False)
    do_io = True

    if args.dim is not None:
        width, lines = parse_dimensions(args.dim, width, lines)

    if args.list is not None:
        do_io = False
        count = config.get('list_count', 10)
        if args.list:
            count = parse_count(args.list, "list count")
        show_list(clipboard, count, width, lines, args.quiet, out)

    if args.preview is not None:
        do_io = False
        entry = clipboard.history.get(args.preview)
        if entry is None:
            raise ValueError(f"Index {args.preview} does not exist in the history cache!")
        out.write(entry.preview(width, lines, not args.quiet) + '\n')

    # recall has to happen before caching or the indexes shift
    if args.recall is not None:
        do_io = False
        if not clipboard.recall(args.recall, cache_first=auto_cache or args.cache):
            raise ValueError(f"Index {args.recall} does not exist in the history cache!")
    elif auto_cache or args.cache:
        do_io = False
        if not clipboard.cache():
            raise ValueError("Failed to cache the current clipboard contents!")

    if args.clear_cache:
        do_io = False
        count = clipboard.history.delete_all()
        if count <= 0:
            raise ValueError("Failed to delete all cache entries!")
        if not args.quiet:
            out.write(f"Deleted {count} cached clipboard entries.\n")

    if args.prune is not None:
        do_io = False
        if args.prune < 0:
            raise ValueError(f"Invalid age: '{args.prune}' days")
        count = clipboard.history.delete_older_than(time.time() - args.prune * SECONDS_PER_DAY)
        if not args.quiet:
            out.write(f"Deleted {count} cached clipboard entries older than {args.prune:g} days.\n")

    if args.cache_size:
        do_io = False
        out.write(f"{clipboard.history.size()}\n")

    parts = []
    if stdin_data:
        parts.append(stdin_data)
    parts.extend(args.set or [])
    if parts:
        clipboard.set(*parts)

    if (do_io and not parts) or args.print_clipboard:
        out.write(clipboard.get())


def create_parser():
    parser = argparse.ArgumentParser(
        prog='cliptrail',
        description='ClipTrail - Commandline clipboard utility & history manager',
        epilog='Intended for use with shell pipes; input from STDIN always precedes --set values.'
    )
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Prevents non-essential console output')
    parser.add_argument('-O', dest='print_clipboard', action='store_true',
                        help='Print the current clipboard contents regardless of other options')
    parser.add_argument('-s', '--set', action='append', metavar='DATA',
                        help='Set clipboard data to the given string (repeatable)')
    parser.add_argument('-p', '--preview', type=int, metavar='IDX',
                        help='Show a preview of a history entry (0 is current, 1 is previous, etc.)')
    parser.add_argument('-l', '--list', nargs='?', const='', metavar='COUNT',
                        help='Show previews of the most recent history entries')
    parser.add_argument('-d', '--dim', nargs='?', const='', metavar='WID:LEN',
                        help='Preview dimensions; omit a number to remove that limit')
    parser.add_argument('-r', '--recall', type=int, metavar='IDX',
                        help='Recall a history entry to the clipboard')
    parser.add_argument('-c', '--cache', action='store_true',
                        help='Copy the current clipboard contents to the history')
    parser.add_argument('--clear-cache', action='store_true',
                        help='Delete the entire clipboard history')
    parser.add_argument('--prune', type=float, metavar='DAYS',
                        help='Delete history entries older than DAYS days')
    parser.add_argument('-S', '--cache-size', action='store_true',
                        help='Print the number of history entries')
    parser.add_argument('--write-config', action='store_true',
                        help='Write the default configuration file, then exit')
    parser.add_argument('--gui', action='store_true',
                        help='Open the history browser')
    parser.add_argument('--config', default=str(DEFAULT_CONFIG_PATH),
                        help='Configuration file location')
    parser.add_argument('--version', action='version',
                        version=f'ClipTrail v{__version__}')
    return parser


def main(argv=None):
    """Main entry point"""
    args = create_parser().parse_args(argv)

    try:
        config = Config(args.config)

        if args.write_config:
            if not config.write_defaults():
                raise OSError(f"Failed to write to config file '{config.config_path}'!")
            print(f"Successfully created '{config.config_path}'")
            return 0

        if args.gui:
            from gui import main as gui_main
            return gui_main(config)

        clipboard = Clipboard.from_config(config)

        stdin_data = None
        if sys.stdin is not None and not sys.stdin.isatty():
            stdin_data = sys.stdin.buffer.read()

        run(args, config, clipboard, stdin_data)
        return 0
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
