"""
Import Consolidator.

Turns the import demand collected while rewriting dynamic references into
merged import statements, inserted right after the last top-level import
declaration of the edited file.
"""

import logging
import re

from ts_isolate.core.import_demand import ImportDemand
from ts_isolate.core.syntax import find_import_declarations
from ts_isolate.errors import MissingImportAnchorError

logger = logging.getLogger(__name__)

# Exact shape the language service emits for the automatic JSX runtime.
JSX_RUNTIME_IMPORT = re.compile(r"import \{( type)? JSX \} from 'react/jsx-runtime';\n")


def strip_jsx_runtime_imports(text: str) -> str:
  """
  Removes ``import { JSX } from 'react/jsx-runtime';`` lines (type-only or not).

  Only this exact line shape is removed; this is not unused-import elimination.

  Args:
      text: File text.

  Returns:
      str: Text without those lines.
  """
  return JSX_RUNTIME_IMPORT.sub("", text)


def find_import_insertion_point(text: str) -> int:
  """
  Offset right after the last top-level import declaration.

  Args:
      text: File text.

  Returns:
      int: Insertion offset.

  Raises:
      MissingImportAnchorError: If the file has no import declaration.
  """
  declarations = find_import_declarations(text)
  if not declarations:
    raise MissingImportAnchorError("No import declaration found to anchor the inserted imports after")
  return declarations[-1].end


def render_import_block(demand: ImportDemand) -> str:
  """
  Renders one import statement per module, newline separated.

  Args:
      demand: Modules in first-seen order, identifiers in insertion order.

  Returns:
      str: e.g. ``import {X} from 'm1';\\nimport {Y, Z} from 'm2';``
  """
  return "\n".join(f"import {{{', '.join(names)}}} from '{module}';" for module, names in demand.items())


def insert_imports(text: str, demand: ImportDemand) -> str:
  """
  Inserts the merged import block after the last import declaration.

  Args:
      text: File text with all edits applied.
      demand: Imports to add. Nothing happens when empty.

  Returns:
      str: Text with the block inserted, preceded by a newline.

  Raises:
      MissingImportAnchorError: If imports are demanded but the file has none.
  """
  if not demand:
    return text

  position = find_import_insertion_point(text)
  logger.debug("Inserting imports for %d module(s) at offset %d", len(demand), position)
  return f"{text[:position]}\n{render_import_block(demand)}{text[position:]}"
