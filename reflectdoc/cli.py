"""CLI entrypoints for reflectdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .errors import ReflectDocError
from .logging import configure_logging
from .output import dump_payload
from .pipeline import Pipeline


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reflectdoc",
        description="Flatten TypeDoc reflection output into documentation records.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    flatten_parser = subparsers.add_parser(
        "flatten",
        help="Flatten a reflection document into JSON records.",
    )
    _add_verbose_option(flatten_parser, suppress_default=True)
    flatten_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    flatten_parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Reflection JSON to read (defaults to scripts/generated/docs.json).",
    )
    flatten_parser.add_argument(
        "--output",
        default=None,
        help="Where to write records; use '-' for stdout.",
    )
    flatten_parser.add_argument(
        "--revision",
        default=None,
        help="Revision used in source links instead of the current git HEAD.",
    )
    flatten_parser.add_argument(
        "--repository-url",
        default=None,
        help="Repository base URL for source links.",
    )
    flatten_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level logs to this file.",
    )
    flatten_parser.add_argument(
        "--expand-modules",
        action="store_true",
        default=None,
        help="Flatten the members of module reflections instead of skipping them.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for reflectdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=getattr(args, "log_file", None))

    if args.command == "flatten":
        to_stdout = args.output == "-"
        output_path = Path(args.output) if args.output and not to_stdout else None
        try:
            outcome = Pipeline().run(
                args.path,
                input_path=args.input,
                output_path=output_path,
                write=not to_stdout,
                revision=args.revision,
                repository_url=args.repository_url,
                expand_modules=args.expand_modules,
            )
        except ReflectDocError as exc:
            parser.exit(1, f"reflectdoc flatten failed: {exc}\n")
        except Exception as exc:  # pragma: no cover
            parser.exit(1, f"reflectdoc flatten failed: {exc}\nRun with --verbose for more details.\n")
        if to_stdout:
            sys.stdout.write(dump_payload(outcome.payload))
        else:
            print(f"Wrote {len(outcome.records)} records to {_relativize(outcome.output_path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path | None) -> str:
    if path is None:
        return "-"
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
