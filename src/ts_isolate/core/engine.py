"""
Per-file Fix Engine.

Applies one combined code fix to the text of one file:

1.  **Splicing**: every text change is applied right-to-left against the
    original coordinates (see :mod:`ts_isolate.core.edits`).
2.  **Reference rewriting**: each replacement text has its dynamic type
    references rewritten to bare identifiers, accumulating an
    :class:`ImportDemand` (see :mod:`ts_isolate.core.dynamic_refs`).
3.  **Import consolidation**: stale JSX runtime imports are dropped and one
    merged import per demanded module is inserted after the last import
    declaration (see :mod:`ts_isolate.core.imports`).

The demand is created and discarded inside each call, so files can be
processed concurrently.
"""

import logging
from typing import Optional, Pattern, Sequence, Tuple

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.dynamic_refs import (
  DEFAULT_KEYWORD,
  DYNAMIC_REFERENCE_PATTERN,
  compile_reference_pattern,
  rewrite_dynamic_references,
)
from ts_isolate.core.edits import TextChange, splice_changes
from ts_isolate.core.import_demand import ImportDemand
from ts_isolate.core.imports import insert_imports, strip_jsx_runtime_imports
from ts_isolate.core.result import FixResult

logger = logging.getLogger(__name__)


def apply_code_fix(
  text: str,
  changes: Sequence[TextChange],
  pattern: Pattern[str] = DYNAMIC_REFERENCE_PATTERN,
) -> Tuple[str, ImportDemand]:
  """
  Applies edits with dynamic-reference rewriting and import consolidation.

  This is the rewrite-enabled counterpart of
  :func:`ts_isolate.core.edits.apply_text_changes`; both share the same
  splicing loop.

  Edits are processed by descending start offset, and that processing order
  fixes emission order: ``a: import("m").A`` followed later in the file by
  ``c: import("m").C`` yields ``import {C, A} from 'm';``.

  Args:
      text: Original file text.
      changes: Mutually non-overlapping edits in original coordinates.
      pattern: Dynamic reference pattern.

  Returns:
      Tuple[str, ImportDemand]: The new file text and the imports it received.

  Raises:
      MissingImportAnchorError: If imports are demanded but the file has none.
  """
  demand = ImportDemand()

  def rewrite(old_text: str, new_text: str) -> str:
    return rewrite_dynamic_references(old_text, new_text, demand, pattern)

  text = splice_changes(text, changes, hook=rewrite)
  text = strip_jsx_runtime_imports(text)
  text = insert_imports(text, demand)
  return text, demand


class FixEngine:
  """
  Applies combined fixes to file texts under one configuration.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, keyword: Optional[str] = None):
    """
    Initializes the Engine.

    Args:
        config: Runtime configuration; supplies the dynamic reference keyword.
        keyword: Explicit keyword override (takes precedence over ``config``).
    """
    if keyword is None:
      keyword = config.dynamic_reference_keyword if config else DEFAULT_KEYWORD
    self.keyword = keyword
    self.pattern = DYNAMIC_REFERENCE_PATTERN if keyword == DEFAULT_KEYWORD else compile_reference_pattern(keyword)

  def run(self, file_name: str, text: str, changes: Sequence[TextChange]) -> FixResult:
    """
    Applies one file's changes.

    Args:
        file_name: File name, for reporting.
        text: Original file text.
        changes: The file's text changes.

    Returns:
        FixResult: Edited text and import summary.
    """
    new_text, demand = apply_code_fix(text, changes, self.pattern)
    if demand:
      logger.debug("%s: rewrote dynamic references from %s", file_name, ", ".join(m for m, _ in demand.items()))
    return FixResult(
      file_name=file_name,
      code=new_text,
      changed=new_text != text,
      imports_added=demand.as_dict(),
    )
