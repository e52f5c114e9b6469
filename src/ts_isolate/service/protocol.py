"""
Language Service Interface.

The core only needs four things from the external analysis engine: the list of
files in the program, their text, the combined code fix for one file, and the
directory file names are relative to. This module describes that surface and
the data exchanged over it.
"""

import re
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from ts_isolate.core.edits import TextChange

# ``.d.ts``, ``.d.mts``, ``.d.cts`` and arbitrary-extension declarations like ``.d.css.ts``.
_DECLARATION_FILE = re.compile(r"\.d\.(?:ts|mts|cts|[^.\\/]+\.ts)$")


def is_declaration_file_name(file_name: str) -> bool:
  """
  Classifies declaration-only files by name, as the TypeScript compiler does.

  Args:
      file_name: Path or file name.

  Returns:
      bool: True for declaration files.
  """
  return _DECLARATION_FILE.search(file_name) is not None


class SourceFileInfo(BaseModel):
  """A file of the resolved program."""

  model_config = ConfigDict(frozen=True)

  file_name: str = Field(..., description="Path as resolved by the project (usually absolute).")
  is_declaration_file: bool = Field(False, description="True for declaration-only files.")


class FileTextChanges(BaseModel):
  """The edits a fix makes to one file."""

  model_config = ConfigDict(populate_by_name=True)

  file_name: str = Field(..., alias="fileName")
  text_changes: List[TextChange] = Field(default_factory=list, alias="textChanges")


class CombinedCodeFix(BaseModel):
  """A single, already merged fix for a class of diagnostics in one file."""

  changes: List[FileTextChanges] = Field(default_factory=list)


class LanguageService(Protocol):
  """
  The operations the fix discovery loop and the orchestrator consume.
  """

  @property
  def current_directory(self) -> str:
    """Directory that relative file names are resolved against."""
    ...

  def get_source_files(self) -> List[SourceFileInfo]:
    """Every file of the program, including library and vendored files."""
    ...

  def get_source_text(self, file_name: str) -> Optional[str]:
    """Text of a program file, or None if the file is not part of the program."""
    ...

  def get_combined_code_fix(self, file_name: str, fix_id: str, preferences: Dict[str, Any]) -> CombinedCodeFix:
    """Requests the combined fix ``fix_id`` scoped to one file."""
    ...

  def close(self) -> None:
    """Releases the engine."""
    ...
