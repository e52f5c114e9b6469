"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so captured output from one test does not leak into another.
- Builders for small TypeScript projects and in-memory language services.
"""

import os
import sys
import pytest
from pathlib import Path

# Add src to path so we can import 'ts_isolate' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from ts_isolate.utils.console import reset_console  # noqa: E402

from fakes import FakeLanguageService  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_console():
  """Ensures console and log level are reset to defaults around every test."""
  reset_console()
  yield
  reset_console()


@pytest.fixture
def fake_service_factory(tmp_path, monkeypatch):
  """
  Builds a project on disk under ``tmp_path`` (made the working directory)
  and a matching in-memory language service.

  Usage: ``service = fake_service_factory({"src/a.ts": "..."}, fixes={"src/a.ts": [...]})``
  """
  monkeypatch.chdir(tmp_path)

  def _factory(files, fixes=None, declarations=()):
    for name, text in files.items():
      path = tmp_path / name
      path.parent.mkdir(parents=True, exist_ok=True)
      path.write_text(text, encoding="utf-8")
    return FakeLanguageService(os.getcwd(), files, fixes or {}, declarations)

  return _factory
