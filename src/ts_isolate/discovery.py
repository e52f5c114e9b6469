"""
Fix Discovery Loop.

Walks the program's files and asks the language service for one combined fix
per project source file. Vendored dependencies and declaration files are never
touched.
"""

import os
import re
from typing import AbstractSet, Any, Dict, Iterator, List, Optional, Tuple

from ts_isolate.config import DEFAULT_FIX_ID, default_preferences
from ts_isolate.core.edits import TextChange
from ts_isolate.errors import MultipleFixesError
from ts_isolate.service.protocol import LanguageService, SourceFileInfo
from ts_isolate.utils.console import log_info


def is_vendored(file_name: str, vendor_dir: str = "node_modules") -> bool:
  """
  Checks whether a path lies inside a vendored dependency directory.

  Only whole path segments count: ``my_node_modules/x.ts`` is not vendored.

  Args:
      file_name: Path using either separator.
      vendor_dir: Directory name marking vendored code.

  Returns:
      bool: True if any directory segment equals ``vendor_dir``.
  """
  return re.search(rf"(?:^|[\\/]){re.escape(vendor_dir)}[\\/]", file_name) is not None


def is_project_source(info: SourceFileInfo, vendor_dir: str = "node_modules") -> bool:
  """
  Decides whether a program file is eligible for fixing.

  Args:
      info: File as reported by the language service.
      vendor_dir: Directory name marking vendored code.

  Returns:
      bool: False for vendored files and declaration files.
  """
  return not info.is_declaration_file and not is_vendored(info.file_name, vendor_dir)


def gen_code_fixes(
  service: LanguageService,
  files: Optional[AbstractSet[str]] = None,
  fix_id: str = DEFAULT_FIX_ID,
  preferences: Optional[Dict[str, Any]] = None,
  vendor_dir: str = "node_modules",
) -> Iterator[Tuple[str, List[TextChange]]]:
  """
  Yields the text changes of the combined fix for every eligible file.

  Args:
      service: Language service over the resolved project.
      files: Optional allow-set of paths relative to the service directory.
      fix_id: Combined fix identifier.
      preferences: User preferences for the service.
      vendor_dir: Directory name marking vendored code.

  Yields:
      Tuple[str, List[TextChange]]: Relative file name and its edits.

  Raises:
      MultipleFixesError: If a fix touches more than one file entry.
  """
  if preferences is None:
    preferences = default_preferences()
  current_directory = service.current_directory

  for info in service.get_source_files():
    if not is_project_source(info, vendor_dir):
      continue

    rel = os.path.relpath(info.file_name, current_directory)
    if files is not None and rel not in files:
      continue

    log_info(f"Getting codefixes for [path]{rel}[/path]")
    fix = service.get_combined_code_fix(rel, fix_id, preferences)

    if not fix.changes:
      continue
    if len(fix.changes) > 1:
      raise MultipleFixesError(f"Multiple fixes found for {rel}")

    yield rel, list(fix.changes[0].text_changes)
