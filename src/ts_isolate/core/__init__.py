"""
Core edit-application engine.

Pure, I/O free building blocks:

- ``edits``: Text span models and the right-to-left Span Edit Applier.
- ``dynamic_refs``: Dynamic type reference detection and rewriting.
- ``import_demand``: Per-run module to identifiers record.
- ``syntax``: Top-level import declarations via tree-sitter.
- ``imports``: Import insertion point lookup and merged import emission.
- ``engine``: The per-file operation combining the above.
"""

from ts_isolate.core.edits import TextChange, TextSpan, apply_text_changes
from ts_isolate.core.engine import FixEngine, apply_code_fix
from ts_isolate.core.import_demand import ImportDemand
from ts_isolate.core.result import FixResult

__all__ = [
  "FixEngine",
  "FixResult",
  "ImportDemand",
  "TextChange",
  "TextSpan",
  "apply_code_fix",
  "apply_text_changes",
]
