"""
ts-isolate Package.

Adds the explicit type annotations that TypeScript's ``isolatedDeclarations``
requires on exported declarations, by applying the compiler's own combined
code fix to every file of a project and tidying the result:

- dynamic type references such as ``import("./mod").Foo`` in inserted
  annotations are rewritten to ``Foo``;
- one merged ``import { ... } from '...'`` statement per referenced module is
  added after the file's last import declaration.

Usage
-----

Whole Project
^^^^^^^^^^^^^

.. code-block:: python

    from ts_isolate import RuntimeConfig, codefix_project

    config = RuntimeConfig(tsconfig="tsconfig.json", write=True)
    for result in codefix_project(config):
        print(result.file_name, result.imports_added)

Single Text
^^^^^^^^^^^

.. code-block:: python

    import ts_isolate

    changes = [ts_isolate.TextChange.at(29, 0, ': import("./t").T')]
    print(ts_isolate.fix_text(text, changes))
"""

from typing import Sequence

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.edits import TextChange, TextSpan, apply_text_changes
from ts_isolate.core.engine import FixEngine, apply_code_fix
from ts_isolate.core.result import FixResult
from ts_isolate.runner import codefix_project

__version__ = "0.0.1"


def fix_text(text: str, changes: Sequence[TextChange], keyword: str = "import") -> str:
  """
  Applies a combined fix to a string, with reference rewriting and imports.

  Args:
      text (str): Original file text.
      changes (Sequence[TextChange]): Edits in the coordinates of ``text``.
      keyword (str): Callee of dynamic type references.

  Returns:
      str: The edited text.

  Raises:
      MissingImportAnchorError: If imports are needed but ``text`` has none.
  """
  return FixEngine(keyword=keyword).run("<string>", text, changes).code


__all__ = [
  "FixEngine",
  "FixResult",
  "RuntimeConfig",
  "TextChange",
  "TextSpan",
  "apply_code_fix",
  "apply_text_changes",
  "codefix_project",
  "fix_text",
  "__version__",
]
