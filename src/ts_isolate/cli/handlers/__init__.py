from .apply import handle_apply, load_text_changes
from .fix import handle_fix, _print_fix_summary

__all__ = [
  "_print_fix_summary",
  "handle_apply",
  "handle_fix",
  "load_text_changes",
]
