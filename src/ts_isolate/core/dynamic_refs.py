"""
Dynamic-Reference Rewriter.

The language service annotates exports with inline type references into other
modules, e.g. ``import("./models/user").User``. This module rewrites such
references in a replacement text to the bare identifier (``User``) and records
the import each one now requires.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern

from ts_isolate.core.edits import TextChange, apply_text_changes
from ts_isolate.core.import_demand import ImportDemand
from ts_isolate.errors import MalformedReferenceError

DEFAULT_KEYWORD = "import"


def compile_reference_pattern(keyword: str = DEFAULT_KEYWORD) -> Pattern[str]:
  """
  Builds the regex matching ``<keyword>("<module>").<Identifier>``.

  Args:
      keyword: The loader callee preceding the quoted module specifier.

  Returns:
      Pattern[str]: Compiled pattern with ``module`` and ``identifier`` groups.
  """
  return re.compile(rf'\b{re.escape(keyword)}\("(?P<module>[^"]+)"\)\.(?P<identifier>[A-Za-z0-9_]+)\b')


DYNAMIC_REFERENCE_PATTERN = compile_reference_pattern()


@dataclass(frozen=True)
class DynamicReference:
  """A single dynamic reference found in a text."""

  module: str
  identifier: str
  start: int
  end: int

  def as_change(self) -> TextChange:
    """The edit replacing the whole reference with its bare identifier."""
    return TextChange.at(self.start, self.end - self.start, self.identifier)


def find_dynamic_references(text: str, pattern: Pattern[str] = DYNAMIC_REFERENCE_PATTERN) -> List[DynamicReference]:
  """
  Lists the non-overlapping dynamic references in ``text``, left to right.

  Args:
      text: Text to scan.
      pattern: Reference pattern exposing ``module`` and ``identifier`` groups.

  Returns:
      List[DynamicReference]: The matches.

  Raises:
      MalformedReferenceError: If a match lacks a module or identifier.
  """
  refs = []
  for match in pattern.finditer(text):
    module, identifier = match.group("module"), match.group("identifier")
    if not module or not identifier:
      raise MalformedReferenceError(f"Malformed dynamic reference: {match.group(0)!r}")
    refs.append(DynamicReference(module, identifier, match.start(), match.end()))
  return refs


def contains_dynamic_reference(text: str, pattern: Pattern[str] = DYNAMIC_REFERENCE_PATTERN) -> bool:
  """True if ``text`` holds at least one dynamic reference."""
  return pattern.search(text) is not None


def rewrite_dynamic_references(
  old_text: str,
  new_text: str,
  demand: ImportDemand,
  pattern: Pattern[str] = DYNAMIC_REFERENCE_PATTERN,
) -> str:
  """
  Rewrites the dynamic references of one replacement text.

  If ``old_text`` (the slice being replaced) already contains a dynamic
  reference, the replacement is returned untouched and nothing is recorded:
  the construct pre-existed in the file and is left as written. This is a
  textual heuristic and can misfire on coincidental matches.

  Otherwise each reference is recorded in ``demand`` and replaced by its
  identifier. The nested edits go through the plain applier, so rewriting is
  exactly one level deep.

  Args:
      old_text: Original text covered by the edit.
      new_text: The edit's replacement text.
      demand: Run-scoped import demand, updated in place.
      pattern: Reference pattern.

  Returns:
      str: The replacement text to splice.
  """
  if contains_dynamic_reference(old_text, pattern):
    return new_text

  refs = find_dynamic_references(new_text, pattern)
  for ref in refs:
    demand.add(ref.module, ref.identifier)

  return apply_text_changes(new_text, [ref.as_change() for ref in refs])
