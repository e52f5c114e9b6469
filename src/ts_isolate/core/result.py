"""
Data structures representing the output of a per-file fix application.

This module defines the `FixResult` Pydantic model, which carries the edited
text of one file together with what happened to it.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class FixResult(BaseModel):
  """
  Container for the result of applying one combined fix to one file.
  """

  file_name: str = Field(..., description="File name relative to the project directory.")
  code: str = Field(default="", description="The edited file text.")
  changed: bool = Field(default=False, description="True if the edited text differs from the original.")
  written: bool = Field(default=False, description="True if the edited text was persisted.")
  imports_added: Dict[str, List[str]] = Field(
    default_factory=dict, description="Identifiers imported per module by the rewrite pass."
  )

  @property
  def import_count(self) -> int:
    """
    Number of identifiers imported across all modules.

    Returns:
        int: Total identifiers.
    """
    return sum(len(names) for names in self.imports_added.values())
