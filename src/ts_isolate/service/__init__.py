"""
Language Service Adapters.

Connects the core to the TypeScript toolchain:

- ``protocol``: The ``LanguageService`` interface and exchanged data.
- ``project``: tsconfig resolution via ``tsc --listFilesOnly``.
- ``locations``: ``{line, offset}`` to string index conversion.
- ``tsserver``: stdio client and the tsserver-backed service.
"""

from ts_isolate.service.project import ResolvedProject, resolve_project
from ts_isolate.service.protocol import (
  CombinedCodeFix,
  FileTextChanges,
  LanguageService,
  SourceFileInfo,
  is_declaration_file_name,
)
from ts_isolate.service.tsserver import TsServerClient, TsServerLanguageService

__all__ = [
  "CombinedCodeFix",
  "FileTextChanges",
  "LanguageService",
  "ResolvedProject",
  "SourceFileInfo",
  "TsServerClient",
  "TsServerLanguageService",
  "is_declaration_file_name",
  "resolve_project",
]
