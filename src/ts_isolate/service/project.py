"""
Project Resolution.

Resolves a tsconfig into the flat list of files in its program by asking the
compiler itself (``tsc -p <tsconfig> --listFilesOnly``), so that ``include``,
``exclude``, ``files``, ``extends`` and project references behave exactly as
they do for the language service.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from ts_isolate.errors import ProjectConfigError

logger = logging.getLogger(__name__)


@dataclass
class ResolvedProject:
  """
  A tsconfig resolved into its program files.

  Attributes:
      config_path: Absolute path of the tsconfig.
      current_directory: Directory relative file names are computed against.
      file_names: Absolute paths of every program file, in program order.
  """

  config_path: Path
  current_directory: str
  file_names: List[str] = field(default_factory=list)


def resolve_project(tsconfig: Path, tsc_command: Sequence[str] = ("tsc",)) -> ResolvedProject:
  """
  Lists the files of a TypeScript project.

  Args:
      tsconfig: Path to the project's tsconfig.
      tsc_command: Command line invoking the compiler.

  Returns:
      ResolvedProject: The resolved file list.

  Raises:
      ProjectConfigError: If the tsconfig is missing, the compiler cannot be
          started, or the compiler rejects the configuration. The compiler's
          formatted diagnostics are carried in the message.
  """
  config_path = tsconfig.resolve()
  if not config_path.is_file():
    raise ProjectConfigError(f"Cannot find a tsconfig file at the specified path: '{tsconfig}'")

  cmd = [*tsc_command, "-p", str(config_path), "--listFilesOnly"]
  logger.debug("Resolving project: %s", " ".join(cmd))

  try:
    proc = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8")
  except OSError as e:
    raise ProjectConfigError(f"Could not run '{tsc_command[0]}': {e}") from e

  if proc.returncode != 0:
    diagnostics = "\n".join(part for part in (proc.stdout.strip(), proc.stderr.strip()) if part)
    raise ProjectConfigError(diagnostics or f"'{tsc_command[0]}' exited with status {proc.returncode}")

  file_names = [os.path.normpath(line.strip()) for line in proc.stdout.splitlines() if line.strip()]
  return ResolvedProject(config_path=config_path, current_directory=os.getcwd(), file_names=file_names)
