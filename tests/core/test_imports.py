"""
Tests for the Import Consolidator.

Verifies:
1.  Rendering of merged import statements.
2.  Insertion after the last top-level import declaration.
3.  Removal of stale JSX runtime imports.
"""

import pytest

from ts_isolate.core.import_demand import ImportDemand
from ts_isolate.core.imports import (
  find_import_insertion_point,
  insert_imports,
  render_import_block,
  strip_jsx_runtime_imports,
)
from ts_isolate.errors import MissingImportAnchorError


def _demand(*pairs):
  demand = ImportDemand()
  for module, identifier in pairs:
    demand.add(module, identifier)
  return demand


def test_render_import_block():
  demand = _demand(("m1", "X"), ("m2", "Y"), ("m2", "Z"))
  assert render_import_block(demand) == "import {X} from 'm1';\nimport {Y, Z} from 'm2';"


def test_insert_after_last_import():
  text = "import a from 'a';\nimport {b} from 'b';\n\nexport const x = 1;\n"
  result = insert_imports(text, _demand(("./m", "T")))
  assert result == "import a from 'a';\nimport {b} from 'b';\nimport {T} from './m';\n\nexport const x = 1;\n"


def test_insert_after_import_without_semicolon():
  text = "import a from 'a'\nexport const x = 1\n"
  result = insert_imports(text, _demand(("./m", "T")))
  assert result == "import a from 'a'\nimport {T} from './m';\nexport const x = 1\n"


def test_empty_demand_is_noop_even_without_imports():
  text = "export const x = 1;\n"
  assert insert_imports(text, ImportDemand()) == text


def test_missing_anchor_raises():
  with pytest.raises(MissingImportAnchorError):
    insert_imports("export const x = 1;\n", _demand(("./m", "T")))


def test_insertion_point_ignores_nested_imports():
  text = 'import a from "a";\ndeclare module "m" {\n  import b from "b";\n}\n'
  assert find_import_insertion_point(text) == len('import a from "a";')


def test_insertion_point_after_jsx_text_with_apostrophe():
  text = (
    "import React from 'react';\n"
    "export function A() { return <p>it's</p>; }\n"
    "import { B } from './b';\n"
    "export const b = B;\n"
  )
  assert find_import_insertion_point(text) == 95


def test_strip_jsx_runtime_imports():
  text = (
    "import { JSX } from 'react/jsx-runtime';\n"
    "import { type JSX } from 'react/jsx-runtime';\n"
    "import React from 'react';\n"
  )
  assert strip_jsx_runtime_imports(text) == "import React from 'react';\n"


def test_strip_requires_exact_shape():
  text = 'import { JSX } from "react/jsx-runtime";\n'
  assert strip_jsx_runtime_imports(text) == text
