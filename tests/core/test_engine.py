"""
Tests for the per-file Fix Engine.

Verifies the full rewrite-enabled pass: splicing, reference rewriting,
JSX runtime cleanup and import insertion, end to end.
"""

import pytest

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.edits import TextChange
from ts_isolate.core.engine import FixEngine, apply_code_fix
from ts_isolate.errors import MissingImportAnchorError


def _after(text, needle):
  return text.index(needle) + len(needle)


def test_annotation_with_reference_adds_import():
  text = "import { helper } from './helper';\n\nexport const value = helper();\n"
  changes = [TextChange.at(_after(text, "const value"), 0, ': import("./types").Result')]

  result = FixEngine().run("src/value.ts", text, changes)

  assert result.code == (
    "import { helper } from './helper';\n"
    "import {Result} from './types';\n"
    "\n"
    "export const value: Result = helper();\n"
  )
  assert result.changed
  assert result.imports_added == {"./types": ["Result"]}
  assert result.import_count == 1
  assert not result.written


def test_imports_are_merged_in_application_order():
  # Edits are applied right-to-left, so the last reference in the file is seen first.
  text = "import x from 'x';\nexport const a = x.a;\nexport const b = x.b;\nexport const c = x.c;\n"
  changes = [
    TextChange.at(_after(text, "const a"), 0, ': import("./m").A'),
    TextChange.at(_after(text, "const b"), 0, ': import("./n").B'),
    TextChange.at(_after(text, "const c"), 0, ': import("./m").C'),
  ]

  code, demand = apply_code_fix(text, changes)

  assert code.startswith("import x from 'x';\nimport {C, A} from './m';\nimport {B} from './n';\n")
  assert "export const a: A = x.a;" in code
  assert "export const b: B = x.b;" in code
  assert "export const c: C = x.c;" in code
  assert list(demand.items()) == [("./m", ["C", "A"]), ("./n", ["B"])]


def test_plain_annotations_leave_imports_alone():
  text = "export const n = 1;\n"
  result = FixEngine().run("n.ts", text, [TextChange.at(_after(text, "const n"), 0, ": number")])
  assert result.code == "export const n: number = 1;\n"
  assert result.imports_added == {}


def test_jsx_runtime_import_is_dropped():
  text = "import { JSX } from 'react/jsx-runtime';\nimport React from 'react';\nexport const el = <div />;\n"
  result = FixEngine().run("el.tsx", text, [TextChange.at(_after(text, "const el"), 0, ": JSX.Element")])
  assert result.code == "import React from 'react';\nexport const el: JSX.Element = <div />;\n"


def test_preexisting_reference_is_not_rewritten():
  text = 'import a from "a";\nexport type T = import("./m").X;\n'
  start = text.index('import("./m")')
  changes = [TextChange.at(start, len('import("./m").X'), 'import("./m").X')]

  result = FixEngine().run("t.ts", text, changes)

  assert result.code == text
  assert not result.changed
  assert result.imports_added == {}


def test_reference_without_anchor_raises():
  text = "export const v = make();\n"
  with pytest.raises(MissingImportAnchorError):
    FixEngine().run("v.ts", text, [TextChange.at(_after(text, "const v"), 0, ': import("./m").V')])


def test_keyword_comes_from_config():
  engine = FixEngine(RuntimeConfig(dynamic_reference_keyword="lookup"))
  text = "import z from 'z';\nexport const q = z;\n"

  result = engine.run("q.ts", text, [TextChange.at(_after(text, "const q"), 0, ': lookup("./q").Q')])

  assert engine.keyword == "lookup"
  assert "export const q: Q = z;" in result.code
  assert "import {Q} from './q';" in result.code


def test_explicit_keyword_overrides_config():
  engine = FixEngine(RuntimeConfig(dynamic_reference_keyword="lookup"), keyword="require")
  assert engine.keyword == "require"
  assert "require" in engine.pattern.pattern
