#!/usr/bin/env python3
"""
Command-line interface for pyjlines - source locations from Java class files.
"""

import argparse
import logging
import sys
from pathlib import Path


def _configure_logging(args):
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def lines_command(args):
    """Print the source location of classes found on a class path."""
    from .classpath import ClassPath
    from .linenumbers import for_class, pretty_name

    try:
        classpath = ClassPath.from_string(args.classpath)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    status = 0
    with classpath:
        for name in args.classes:
            cls = classpath.load_class(name)
            probe = classpath.get_resource_as_stream(cls.resource_name)
            if probe is None:
                print(f"Error: Class not found: {name}", file=sys.stderr)
                status = 1
                continue
            probe.close()

            if args.method:
                print(f"{name}.{args.method}: {for_class(name, classpath, args.method)}")
            else:
                print(pretty_name(cls))

    if status:
        sys.exit(status)


def file_command(args):
    """Print the source location recorded in .class files."""
    from .linenumbers import get_info

    for class_file in args.files:
        path = Path(class_file)
        if not path.exists():
            print(f"Error: File not found: {class_file}", file=sys.stderr)
            sys.exit(1)

        try:
            stream = open(path, "rb")
        except OSError as e:
            print(f"Error reading {class_file}: {e}", file=sys.stderr)
            sys.exit(1)

        result = get_info(stream, args.method)
        print(f"{class_file}: {result}")


def main(argv=None):
    """Main entry point for pyjlines CLI."""
    parser = argparse.ArgumentParser(
        prog="pyjlines",
        description="Extract source file and line numbers from Java class files",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every structure the reader visits",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Lines command
    lines_parser = subparsers.add_parser(
        "lines",
        help="Show where classes on a class path were defined",
    )
    lines_parser.add_argument(
        "classes",
        nargs="+",
        help="Binary class names (e.g. com.example.Foo$Bar)",
    )
    lines_parser.add_argument(
        "-cp", "--classpath",
        required=True,
        help="Classpath entries (colon-separated paths to .jar files or directories)",
    )
    lines_parser.add_argument(
        "-m", "--method",
        help="Only report lines of methods with this exact name",
    )
    lines_parser.set_defaults(func=lines_command)

    # File command
    file_parser = subparsers.add_parser(
        "file",
        help="Read .class files directly",
    )
    file_parser.add_argument(
        "files",
        nargs="+",
        help=".class files to read",
    )
    file_parser.add_argument(
        "-m", "--method",
        help="Only report lines of methods with this exact name",
    )
    file_parser.set_defaults(func=file_command)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args)
    args.func(args)


if __name__ == "__main__":
    main()
