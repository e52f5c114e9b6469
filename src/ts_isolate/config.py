"""
Runtime Configuration Store.

Settings come from three layers, highest precedence first: explicit arguments
(the CLI), the ``[tool.ts_isolate]`` table of the nearest ``pyproject.toml``,
and the field defaults below.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

DEFAULT_FIX_ID = "fixMissingTypeAnnotationOnExports"


def default_preferences() -> Dict[str, Any]:
  """
  User preferences sent to the language service before requesting fixes.

  Returns:
      Dict[str, Any]: Fresh preferences dictionary.
  """
  return {
    "allowRenameOfImportPath": False,
    "includeCompletionsForImportStatements": True,
  }


class RuntimeConfig(BaseModel):
  """
  Global configuration container for a fix run.
  """

  tsconfig: Path = Field(Path("tsconfig.json"), description="Path to the project's tsconfig.")
  files: Optional[List[Path]] = Field(None, description="Explicit allow-list of files to fix.")
  write: bool = Field(False, description="If True, overwrite files in place. If False, dry run.")

  fix_id: str = Field(DEFAULT_FIX_ID, description="Combined code fix identifier to request.")
  dynamic_reference_keyword: str = Field("import", description="Callee of dynamic type references.")
  vendor_dir: str = Field("node_modules", description="Path segment marking vendored dependencies.")
  max_workers: Optional[int] = Field(None, ge=1, description="Concurrent per-file workers (None: executor default).")

  tsc_command: List[str] = Field(default_factory=lambda: ["tsc"], description="Command used to resolve projects.")
  tsserver_command: List[str] = Field(default_factory=lambda: ["tsserver"], description="Command starting tsserver.")
  preferences: Dict[str, Any] = Field(default_factory=default_preferences, description="Language service preferences.")

  @field_validator("dynamic_reference_keyword")
  @classmethod
  def validate_keyword(cls, v: str) -> str:
    """
    Ensures the keyword is a plain identifier.

    Args:
        v (str): Raw keyword.

    Returns:
        str: The stripped keyword.

    Raises:
        ValueError: If the keyword is not an identifier.
    """
    v_clean = v.strip()
    if not v_clean.isidentifier():
      raise ValueError(f"Dynamic reference keyword must be an identifier, got '{v}'")
    return v_clean

  @field_validator("tsc_command", "tsserver_command")
  @classmethod
  def validate_command(cls, v: List[str]) -> List[str]:
    """Rejects empty command lines."""
    if not v:
      raise ValueError("Command must not be empty")
    return v

  @property
  def project_dir(self) -> Path:
    """
    Directory holding the tsconfig.

    Returns:
        Path: Absolute directory path.
    """
    return self.tsconfig.resolve().parent

  @classmethod
  def load(
    cls,
    tsconfig: Optional[Path] = None,
    files: Optional[List[Path]] = None,
    write: Optional[bool] = None,
    max_workers: Optional[int] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        tsconfig (Optional[Path]): Override for the tsconfig path.
        files (Optional[List[Path]]): Override for the file allow-list.
        write (Optional[bool]): Override for write mode.
        max_workers (Optional[int]): Override for worker count.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    # 1. Project
    final_tsconfig = tsconfig
    if final_tsconfig is None and "tsconfig" in toml_config:
      final_tsconfig = Path(toml_config["tsconfig"])
      if toml_dir and not final_tsconfig.is_absolute():
        final_tsconfig = toml_dir / final_tsconfig

    # 2. Write mode
    if write is not None:
      final_write = write
    else:
      final_write = toml_config.get("write", False)

    # 3. Language service preferences merge over defaults
    final_prefs = {**default_preferences(), **toml_config.get("preferences", {})}

    overrides: Dict[str, Any] = {
      "files": files,
      "write": final_write,
      "preferences": final_prefs,
      "max_workers": max_workers if max_workers is not None else toml_config.get("max_workers"),
    }
    if final_tsconfig is not None:
      overrides["tsconfig"] = final_tsconfig

    for key in ("fix_id", "dynamic_reference_keyword", "vendor_dir", "tsc_command", "tsserver_command"):
      if key in toml_config:
        overrides[key] = toml_config[key]

    return cls(**overrides)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError:
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("ts_isolate", {}), parent

  return {}, None
