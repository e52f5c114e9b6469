"""
Project Orchestrator.

Runs the whole pipeline for one project:

1.  Validate the optional file allow-list.
2.  Drain the fix discovery loop (sequential, talks to the language service).
3.  Apply each file's fix concurrently with the :class:`FixEngine` and either
    write the result or report it as a dry run.

Writes are not transactional: if one file fails, files already written stay
written.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.edits import TextChange
from ts_isolate.core.engine import FixEngine
from ts_isolate.core.result import FixResult
from ts_isolate.discovery import gen_code_fixes
from ts_isolate.errors import InvalidFilesError
from ts_isolate.service.protocol import LanguageService
from ts_isolate.service.tsserver import TsServerLanguageService
from ts_isolate.utils.console import log_info, log_success, log_warning


def validate_files(files: Iterable[Path]) -> Tuple[List[Path], List[Path]]:
  """
  Splits an allow-list into existing and missing files.

  Duplicates are dropped, first occurrence wins.

  Args:
      files: Paths given by the user.

  Returns:
      Tuple[List[Path], List[Path]]: Valid and invalid paths, in input order.

  Raises:
      InvalidFilesError: If no path is valid.
  """
  valid: List[Path] = []
  invalid: List[Path] = []
  seen: Set[Path] = set()

  for path in files:
    path = Path(path)
    if path in seen:
      continue
    seen.add(path)
    (valid if path.is_file() else invalid).append(path)

  if not valid:
    raise InvalidFilesError("All provided files are invalid")
  return valid, invalid


def _allow_set(files: Sequence[Path], current_directory: str) -> Set[str]:
  return {os.path.relpath(os.path.abspath(f), current_directory) for f in files}


def _fix_file(
  service: LanguageService,
  engine: FixEngine,
  file_name: str,
  changes: List[TextChange],
  write: bool,
) -> FixResult:
  log_info(f"Applying fixes to file: [path]{file_name}[/path]")

  text = service.get_source_text(file_name)
  if text is None:
    raise FileNotFoundError(f"File {file_name} not found in project")

  result = engine.run(file_name, text, changes)

  if write:
    target = Path(service.current_directory) / file_name
    with open(target, "wt", encoding="utf-8", newline="") as f:
      f.write(result.code)
    result.written = True
    log_success(f"Updated [path]{file_name}[/path]")
  else:
    log_info(f"Not writing changes to [path]{file_name}[/path]")

  return result


def codefix_project(config: RuntimeConfig, service: Optional[LanguageService] = None) -> List[FixResult]:
  """
  Applies the configured combined fix across a project.

  Args:
      config: Runtime configuration.
      service: Language service to use. When omitted, a tsserver-backed
          service is created for ``config.tsconfig`` and closed afterwards.

  Returns:
      List[FixResult]: One result per fixed file, in discovery order.

  Raises:
      InvalidFilesError: If every file of the allow-list is missing.
      TsIsolateError: On configuration, protocol or invariant failures.
      OSError: If a file cannot be read or written.
  """
  valid_files: Optional[List[Path]] = None
  if config.files is not None:
    valid_files, invalid_files = validate_files(config.files)
    if invalid_files:
      listing = "\n".join(f"  - {p}" for p in invalid_files)
      log_warning(f"The following files are invalid and will be skipped:\n{listing}")

  log_info("Starting...")

  owns_service = service is None
  if service is None:
    service = TsServerLanguageService.create(config)

  try:
    allowed = _allow_set(valid_files, service.current_directory) if valid_files is not None else None

    fixes = list(
      gen_code_fixes(
        service,
        files=allowed,
        fix_id=config.fix_id,
        preferences=config.preferences,
        vendor_dir=config.vendor_dir,
      )
    )

    engine = FixEngine(config)
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
      futures = [
        executor.submit(_fix_file, service, engine, file_name, changes, config.write) for file_name, changes in fixes
      ]

    return [future.result() for future in futures]
  finally:
    if owns_service:
      service.close()
