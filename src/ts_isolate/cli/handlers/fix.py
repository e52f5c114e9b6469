"""
Fix Command Handler.

Implements `ts-isolate fix`: loads configuration, runs the project orchestrator
and renders a summary of the files it touched.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.result import FixResult
from ts_isolate.errors import TsIsolateError
from ts_isolate.runner import codefix_project
from ts_isolate.utils.console import console, log_error, log_info, log_success


def handle_fix(
  tsconfig: Optional[Path],
  files: Optional[List[Path]],
  write: bool,
  workers: Optional[int] = None,
) -> int:
  """
  Handles the 'fix' command execution.

  Args:
      tsconfig: Path to the project's tsconfig (None: from pyproject.toml or default).
      files: Optional allow-list of files to fix.
      write: If True, edited files are written back in place.
      workers: Number of concurrent per-file workers.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  search_path = tsconfig.parent if tsconfig is not None else None
  try:
    config = RuntimeConfig.load(
      tsconfig=tsconfig,
      files=files,
      write=write if write else None,
      max_workers=workers,
      search_path=search_path,
    )
  except ValidationError as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  try:
    results = codefix_project(config)
  except (TsIsolateError, ValidationError, ValueError, OSError) as e:
    log_error(escape(str(e)))
    return 1

  _print_fix_summary(results, config.write)
  return 0


def _print_fix_summary(results: List[FixResult], written: bool) -> None:
  """
  Renders a summary table of fixed files to the console.

  Args:
      results: Per-file results from the orchestrator.
      written: Whether the run wrote files.
  """
  if not results:
    log_success("No fixes needed.")
    return

  table = Table(title="Isolated Declarations Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Imports Added", style="magenta")

  for res in results:
    if res.written:
      status = "✅ Updated"
    elif res.changed:
      status = "📝 Pending"
    else:
      status = "➖ Unchanged"
    imports = "; ".join(f"{module}: {', '.join(names)}" for module, names in res.imports_added.items())
    table.add_row(res.file_name, status, imports or "-")

  console.print(table)

  changed = sum(1 for r in results if r.changed)
  console.print(f"\n[bold]Summary:[/bold] {changed}/{len(results)} files changed.")
  if not written and changed:
    log_info("Dry run. Re-run with [code]--write[/code] to apply.")
