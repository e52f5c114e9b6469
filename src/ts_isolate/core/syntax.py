"""
Top-level Import Declarations.

Parses a file with the tree-sitter TSX grammar (a superset of TypeScript, so
``.ts`` and ``.tsx`` sources both parse) and lists the import declarations
that are direct children of the program: ``import ... from '...'`` and
side-effect ``import '...'``.

Not import declarations, and therefore ignored:

- ``import x = require("y")`` (an ``import_require_clause``) and
  ``import A = B.C`` (an ``import_alias``),
- ``import("y")`` expressions and ``import.meta``,
- imports nested in other statements, e.g. inside ``declare module "x" { ... }``.

Offsets are ``str`` indices. tree-sitter reports UTF-8 byte offsets, which are
converted back before they leave this module.
"""

from dataclasses import dataclass
from typing import List

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())


@dataclass(frozen=True)
class ImportDeclaration:
  """
  A top-level import declaration.

  Attributes:
      start: Offset of the ``import`` keyword.
      end: Offset one past the declaration (semicolon included when present).
      module: Module specifier without quotes.
      type_only: True for ``import type ...``.
  """

  start: int
  end: int
  module: str
  type_only: bool = False


def _is_import_declaration(node: Node) -> bool:
  if node.type != "import_statement":
    return False
  return not any(child.type == "import_require_clause" for child in node.children)


def _module_of(node: Node) -> str:
  source = node.child_by_field_name("source")
  if source is None:
    return ""
  return source.text.decode("utf-8")[1:-1]


def find_import_declarations(text: str) -> List[ImportDeclaration]:
  """
  Lists the top-level import declarations of a TypeScript or TSX text.

  Args:
      text: Source text.

  Returns:
      List[ImportDeclaration]: Declarations in source order.
  """
  data = text.encode("utf-8")
  # Parsers are cheap and not shareable across threads.
  tree = Parser(TSX_LANGUAGE).parse(data)

  def to_index(byte_offset: int) -> int:
    return len(data[:byte_offset].decode("utf-8"))

  declarations = []
  for node in tree.root_node.children:
    if not _is_import_declaration(node):
      continue
    declarations.append(
      ImportDeclaration(
        start=to_index(node.start_byte),
        end=to_index(node.end_byte),
        module=_module_of(node),
        type_only=any(child.type == "type" for child in node.children),
      )
    )
  return declarations
