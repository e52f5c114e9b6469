"""
Error Taxonomy.

All failures raised by ts-isolate derive from :class:`TsIsolateError` and also
from the builtin exception that best describes them, so callers may catch
either. Per-file I/O failures are left as the builtin ``OSError`` family.
"""


class TsIsolateError(Exception):
  """Base class for all ts-isolate failures."""


class ProjectConfigError(TsIsolateError, ValueError):
  """The project configuration (tsconfig) could not be read or resolved."""


class InvalidFilesError(TsIsolateError, ValueError):
  """Every path in the explicit file allow-list is invalid."""


class FixInvariantError(TsIsolateError, RuntimeError):
  """An assumption the whole run depends on was violated. Not recoverable."""


class MultipleFixesError(FixInvariantError):
  """The language service returned more than one combined fix for a file."""


class MissingImportAnchorError(FixInvariantError):
  """Imports must be inserted but the file has no import declaration to follow."""


class MalformedReferenceError(FixInvariantError):
  """A dynamic reference match did not yield a module and identifier."""


class TsServerError(TsIsolateError, RuntimeError):
  """The tsserver process failed, closed its pipe or rejected a request."""
