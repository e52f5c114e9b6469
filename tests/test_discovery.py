"""
Tests for the Fix Discovery Loop.

Verifies:
1.  Vendored and declaration files are never queried.
2.  The allow-set filters by path relative to the service directory.
3.  Empty fixes are skipped and multi-file fixes abort the run.
"""

import pytest

from ts_isolate.core.edits import TextChange
from ts_isolate.discovery import gen_code_fixes, is_project_source, is_vendored
from ts_isolate.errors import MultipleFixesError
from ts_isolate.service.protocol import SourceFileInfo

from fakes import FakeLanguageService


@pytest.mark.parametrize(
  "path,expected",
  [
    ("/repo/node_modules/lib/index.ts", True),
    ("C:\\repo\\node_modules\\lib\\index.ts", True),
    ("node_modules/lib/index.ts", True),
    ("/repo/my_node_modules/index.ts", False),
    ("/repo/node_modules_backup/index.ts", False),
    ("/repo/src/node_modules.ts", False),
  ],
)
def test_is_vendored(path, expected):
  assert is_vendored(path) is expected


def test_is_project_source():
  assert is_project_source(SourceFileInfo(file_name="/repo/src/a.ts"))
  assert not is_project_source(SourceFileInfo(file_name="/repo/src/a.d.ts", is_declaration_file=True))
  assert not is_project_source(SourceFileInfo(file_name="/repo/vendor/a.ts"), vendor_dir="vendor")


def _service(fixes, files=None, declarations=()):
  files = files or {name: "" for name in fixes}
  return FakeLanguageService("/repo", files, fixes, declarations)


def test_skips_vendored_declarations_and_empty_fixes():
  change = TextChange.at(0, 0, "x")
  service = _service(
    {"src/a.ts": [change], "src/empty.ts": []},
    files={"src/a.ts": "", "src/empty.ts": "", "node_modules/x/i.ts": "", "src/types.d.ts": ""},
    declarations={"src/types.d.ts"},
  )

  fixes = list(gen_code_fixes(service))

  assert fixes == [("src/a.ts", [change])]
  assert service.requested == ["src/a.ts", "src/empty.ts"]


def test_allow_set_filters_files():
  change = TextChange.at(0, 0, "x")
  service = _service({"src/a.ts": [change], "src/b.ts": [change]})

  fixes = list(gen_code_fixes(service, files={"src/b.ts"}))

  assert [name for name, _ in fixes] == ["src/b.ts"]
  assert service.requested == ["src/b.ts"]


def test_multiple_fixes_abort():
  change = TextChange.at(0, 0, "x")
  service = _service({"src/a.ts": [[change], [change]]})

  with pytest.raises(MultipleFixesError, match="Multiple fixes found for src/a.ts"):
    list(gen_code_fixes(service))


def test_default_preferences_are_sent():
  service = _service({"src/a.ts": []})
  list(gen_code_fixes(service))
  assert service.preferences_seen == [
    {"allowRenameOfImportPath": False, "includeCompletionsForImportStatements": True}
  ]
