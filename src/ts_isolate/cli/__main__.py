"""
Main Entry Point for ts-isolate CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `ts_isolate.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from ts_isolate.cli import commands
from ts_isolate.utils.console import set_verbose
from ts_isolate import __version__


def _positive_int(value: str) -> int:
  number = int(value)
  if number < 1:
    raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
  return number


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="ts-isolate: Add explicit types required by isolatedDeclarations")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: FIX ---
  cmd_fix = subparsers.add_parser("fix", help="Apply missing type annotation fixes across a project")
  cmd_fix.add_argument(
    "-p",
    "--project",
    dest="tsconfig",
    type=Path,
    default=None,
    help="Path to tsconfig.json (default: from pyproject.toml, else ./tsconfig.json)",
  )
  cmd_fix.add_argument(
    "--file",
    dest="files",
    type=Path,
    action="append",
    default=None,
    help="Only fix this file (repeatable)",
  )
  cmd_fix.add_argument("--write", action="store_true", help="Write changes to disk (default: dry run)")
  cmd_fix.add_argument("--workers", type=_positive_int, default=None, help="Concurrent file workers")

  # --- Command: APPLY ---
  cmd_apply = subparsers.add_parser("apply", help="Apply a saved JSON list of text changes to one file")
  cmd_apply.add_argument("file", type=Path, help="File to edit")
  cmd_apply.add_argument("changes", type=Path, help="JSON file with text changes")
  cmd_apply.add_argument("--out", type=Path, default=None, help="Output file (default: print)")
  cmd_apply.add_argument(
    "--no-rewrite",
    dest="rewrite",
    action="store_false",
    help="Splice replacements verbatim, without reference rewriting or import insertion",
  )

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  if args.command == "fix":
    return commands.handle_fix(args.tsconfig, args.files, args.write, args.workers)

  elif args.command == "apply":
    return commands.handle_apply(args.file, args.changes, args.out, args.rewrite)

  return 0


if __name__ == "__main__":
  sys.exit(main())
