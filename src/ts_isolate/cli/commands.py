"""
CLI Command Handlers Facade.

Re-exports handlers from `ts_isolate.cli.handlers` together with the objects
they depend on, so tests can patch them in one place.
"""

from ts_isolate.cli.handlers.apply import handle_apply, load_text_changes
from ts_isolate.cli.handlers.fix import handle_fix, _print_fix_summary

from ts_isolate.config import RuntimeConfig
from ts_isolate.runner import codefix_project

__all__ = [
  "RuntimeConfig",
  "_print_fix_summary",
  "codefix_project",
  "handle_apply",
  "handle_fix",
  "load_text_changes",
]
