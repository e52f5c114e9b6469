"""
Tests for the project orchestrator (`codefix_project`).

Verifies:
1.  Dry runs report results without touching disk.
2.  Write mode persists every fixed file.
3.  Allow-list validation (all invalid, partially invalid).
4.  Failure propagation and service ownership.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.edits import TextChange
from ts_isolate.errors import InvalidFilesError, MissingImportAnchorError, MultipleFixesError
from ts_isolate.runner import codefix_project, validate_files
from ts_isolate.utils.console import set_console

A_TS = "import { b } from './b';\n\nexport const a = b();\n"
C_TS = "export const c = 3;\n"


def _after(text, needle):
  return text.index(needle) + len(needle)


@pytest.fixture
def project(fake_service_factory):
  files = {"src/a.ts": A_TS, "src/c.ts": C_TS, "src/untouched.ts": "export {};\n"}
  fixes = {
    "src/a.ts": [TextChange.at(_after(A_TS, "const a"), 0, ': import("./b").B')],
    "src/c.ts": [TextChange.at(_after(C_TS, "const c"), 0, ": number")],
  }
  return fake_service_factory(files, fixes)


@pytest.fixture
def captured():
  buf = Console(record=True, width=200)
  set_console(buf)
  return buf


def test_dry_run_reports_without_writing(project, tmp_path, captured):
  results = codefix_project(RuntimeConfig(), service=project)

  assert [r.file_name for r in results] == ["src/a.ts", "src/c.ts"]
  assert results[0].code == (
    "import { b } from './b';\nimport {B} from './b';\n\nexport const a: B = b();\n"
  )
  assert results[1].code == "export const c: number = 3;\n"
  assert not any(r.written for r in results)
  assert (tmp_path / "src" / "a.ts").read_text(encoding="utf-8") == A_TS

  out = captured.export_text()
  assert "Starting..." in out
  assert "Getting codefixes for src/a.ts" in out
  assert "Applying fixes to file: src/c.ts" in out
  assert "Not writing changes to src/a.ts" in out


def test_write_mode_updates_files(project, tmp_path, captured):
  results = codefix_project(RuntimeConfig(write=True, max_workers=2), service=project)

  assert all(r.written for r in results)
  assert (tmp_path / "src" / "c.ts").read_text(encoding="utf-8") == "export const c: number = 3;\n"
  assert "import {B} from './b';" in (tmp_path / "src" / "a.ts").read_text(encoding="utf-8")
  assert (tmp_path / "src" / "untouched.ts").read_text(encoding="utf-8") == "export {};\n"
  assert "Updated src/c.ts" in captured.export_text()


def test_injected_service_is_not_closed(project):
  codefix_project(RuntimeConfig(), service=project)
  assert not project.closed


def test_allow_list_limits_files(project, tmp_path):
  config = RuntimeConfig(files=[Path("src/c.ts")])
  results = codefix_project(config, service=project)

  assert [r.file_name for r in results] == ["src/c.ts"]
  assert project.requested == ["src/c.ts"]


def test_partially_invalid_allow_list_warns(project, captured):
  config = RuntimeConfig(files=[Path("src/c.ts"), Path("src/missing.ts")])
  results = codefix_project(config, service=project)

  assert [r.file_name for r in results] == ["src/c.ts"]
  out = captured.export_text()
  assert "invalid" in out
  assert "src/missing.ts" in out


def test_all_invalid_allow_list_fails_before_analysis(project):
  config = RuntimeConfig(files=[Path("nope.ts"), Path("also-nope.ts")])
  with pytest.raises(InvalidFilesError, match="All provided files are invalid"):
    codefix_project(config, service=project)
  assert project.requested == []


def test_multiple_fixes_fail_the_run(fake_service_factory):
  change = TextChange.at(0, 0, "// x\n")
  service = fake_service_factory({"src/a.ts": "a\n"}, {"src/a.ts": [[change], [change]]})
  with pytest.raises(MultipleFixesError):
    codefix_project(RuntimeConfig(write=True), service=service)


def test_per_file_failure_propagates(fake_service_factory, tmp_path):
  ok = "import x from 'x';\nexport const ok = x;\n"
  bad = "export const bad = make();\n"
  service = fake_service_factory(
    {"src/ok.ts": ok, "src/bad.ts": bad},
    {
      "src/ok.ts": [TextChange.at(_after(ok, "const ok"), 0, ": number")],
      "src/bad.ts": [TextChange.at(_after(bad, "const bad"), 0, ': import("./m").M')],
    },
  )

  with pytest.raises(MissingImportAnchorError):
    codefix_project(RuntimeConfig(write=True), service=service)

  # No rollback: the healthy file was still written.
  assert (tmp_path / "src" / "ok.ts").read_text(encoding="utf-8") == "import x from 'x';\nexport const ok: number = x;\n"
  assert (tmp_path / "src" / "bad.ts").read_text(encoding="utf-8") == bad


def test_missing_text_raises(fake_service_factory):
  service = fake_service_factory({"src/a.ts": "a\n"}, {"src/a.ts": [TextChange.at(0, 0, "x")]})
  service.get_source_text = MagicMock(return_value=None)

  with pytest.raises(FileNotFoundError, match="File src/a.ts not found in project"):
    codefix_project(RuntimeConfig(), service=service)


def test_created_service_is_closed(project):
  with patch("ts_isolate.runner.TsServerLanguageService.create", return_value=project) as mock_create:
    codefix_project(RuntimeConfig())

  mock_create.assert_called_once()
  assert project.closed


def test_validate_files(tmp_path):
  real = tmp_path / "a.ts"
  real.write_text("", encoding="utf-8")
  missing = tmp_path / "b.ts"

  valid, invalid = validate_files([real, missing, real, tmp_path])

  assert valid == [real]
  assert invalid == [missing, tmp_path]
