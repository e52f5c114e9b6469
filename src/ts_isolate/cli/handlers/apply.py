"""
Apply Command Handler.

Implements `ts-isolate apply`: replays a saved list of text changes against one
file, either through the full Fix Engine (reference rewriting and import
consolidation) or through the plain span applier.

The changes file holds either a JSON list of text changes or a single file
entry of the form ``{"fileName": ..., "textChanges": [...]}``. Each change is
``{"span": {"start": int, "length": int}, "newText": str}``.
"""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.edits import TextChange, apply_text_changes
from ts_isolate.core.engine import FixEngine
from ts_isolate.errors import TsIsolateError
from ts_isolate.utils.console import console, log_error, log_info, log_success

_CHANGES_ADAPTER = TypeAdapter(List[TextChange])


def load_text_changes(path: Path) -> List[TextChange]:
  """
  Reads text changes from a JSON file.

  Args:
      path: JSON file with a change list or a ``textChanges`` entry.

  Returns:
      List[TextChange]: The parsed changes.

  Raises:
      ValueError: If the document has neither shape.
      ValidationError: If an entry is not a valid text change.
  """
  with open(path, "rt", encoding="utf-8") as f:
    data = json.load(f)

  if isinstance(data, dict):
    if "textChanges" not in data:
      raise ValueError(f"{path}: expected a list or an object with 'textChanges'")
    data = data["textChanges"]

  return _CHANGES_ADAPTER.validate_python(data)


def handle_apply(file_path: Path, changes_path: Path, output_path: Optional[Path], rewrite: bool = True) -> int:
  """
  Handles the 'apply' command execution.

  Args:
      file_path: File to edit.
      changes_path: JSON document with the changes.
      output_path: Destination for the result. Printed to stdout when None.
      rewrite: If False, changes are spliced verbatim.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  for path in (file_path, changes_path):
    if not path.is_file():
      log_error(f"Input not found: {path}")
      return 1

  try:
    changes = load_text_changes(changes_path)
  except (ValueError, ValidationError) as e:
    log_error(f"Invalid changes file: {e}")
    return 1

  with open(file_path, "rt", encoding="utf-8", newline="") as f:
    text = f.read()

  try:
    if rewrite:
      config = RuntimeConfig.load(search_path=file_path.parent)
      result = FixEngine(config).run(str(file_path), text, changes)
      new_text = result.code
      if result.imports_added:
        log_info(f"Added {result.import_count} import(s) from {len(result.imports_added)} module(s)")
    else:
      new_text = apply_text_changes(text, changes)
  except (TsIsolateError, ValueError) as e:
    log_error(str(e))
    return 1

  if output_path is None:
    console.print(new_text, markup=False, highlight=False, soft_wrap=True, end="")
    return 0

  output_path.parent.mkdir(parents=True, exist_ok=True)
  with open(output_path, "wt", encoding="utf-8", newline="") as f:
    f.write(new_text)
  log_success(f"Saved to [path]{output_path}[/path]")
  return 0
