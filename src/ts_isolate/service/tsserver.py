"""
tsserver Client.

Drives the TypeScript server over stdio. Requests are written as one JSON
object per line; the server answers with ``Content-Length`` framed JSON
messages, interleaving ``event`` messages with ``response`` messages that
reference the request's ``seq``.

:class:`TsServerLanguageService` combines the client with a project resolved by
:func:`ts_isolate.service.project.resolve_project` to implement the
:class:`~ts_isolate.service.protocol.LanguageService` protocol.
"""

import json
import logging
import os
import subprocess
from typing import IO, Any, Dict, List, Optional, Sequence, Set

from ts_isolate.config import RuntimeConfig
from ts_isolate.core.edits import TextChange
from ts_isolate.errors import TsServerError
from ts_isolate.service.locations import LineIndex
from ts_isolate.service.project import ResolvedProject, resolve_project
from ts_isolate.service.protocol import (
  CombinedCodeFix,
  FileTextChanges,
  SourceFileInfo,
  is_declaration_file_name,
)

logger = logging.getLogger(__name__)


class TsServerClient:
  """
  Minimal synchronous tsserver session.

  Only one request is in flight at a time. Messages that do not answer the
  pending request (events, acknowledgements of notifications) are skipped.
  """

  def __init__(
    self,
    command: Sequence[str] = ("tsserver",),
    cwd: Optional[str] = None,
    process: Optional[subprocess.Popen] = None,
  ):
    """
    Starts (or adopts) a tsserver process.

    Args:
        command: Command line starting tsserver.
        cwd: Working directory for the server.
        process: An already running process with binary ``stdin``/``stdout``.

    Raises:
        TsServerError: If the process cannot be started.
    """
    self.command = list(command)
    self._seq = 0

    if process is None:
      try:
        process = subprocess.Popen(
          self.command,
          stdin=subprocess.PIPE,
          stdout=subprocess.PIPE,
          stderr=subprocess.DEVNULL,
          cwd=cwd,
        )
      except OSError as e:
        raise TsServerError(f"Could not start '{self.command[0]}': {e}") from e
    self.proc = process

  # ---------- framing ----------

  def _send(self, command: str, arguments: Optional[Dict[str, Any]] = None) -> int:
    self._seq += 1
    message: Dict[str, Any] = {"seq": self._seq, "type": "request", "command": command}
    if arguments is not None:
      message["arguments"] = arguments

    stdin: IO[bytes] = self.proc.stdin
    try:
      stdin.write(json.dumps(message, ensure_ascii=False).encode("utf-8") + b"\n")
      stdin.flush()
    except (BrokenPipeError, ValueError) as e:
      raise TsServerError(f"tsserver is not accepting requests: {e}") from e
    return self._seq

  def _read_exact(self, size: int) -> bytes:
    stdout: IO[bytes] = self.proc.stdout
    chunks = []
    remaining = size
    while remaining > 0:
      chunk = stdout.read(remaining)
      if not chunk:
        raise TsServerError("tsserver closed its output mid-message")
      chunks.append(chunk)
      remaining -= len(chunk)
    return b"".join(chunks)

  def _receive(self) -> Dict[str, Any]:
    stdout: IO[bytes] = self.proc.stdout
    content_length: Optional[int] = None

    while True:
      line = stdout.readline()
      if not line:
        raise TsServerError("tsserver closed its output")
      if line.strip() == b"":
        if content_length is not None:
          break
        continue
      key, _, value = line.decode("ascii").partition(":")
      if key.strip().lower() == "content-length":
        content_length = int(value.strip())

    return json.loads(self._read_exact(content_length).decode("utf-8"))

  # ---------- messaging ----------

  def notify(self, command: str, arguments: Optional[Dict[str, Any]] = None) -> None:
    """
    Sends a command without waiting for an answer.

    Args:
        command: tsserver command name.
        arguments: Command arguments.
    """
    self._send(command, arguments)

  def request(self, command: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
    """
    Sends a command and waits for its response.

    Args:
        command: tsserver command name.
        arguments: Command arguments.

    Returns:
        Any: The response ``body`` (None when absent).

    Raises:
        TsServerError: If the server reports failure or stops responding.
    """
    seq = self._send(command, arguments)
    while True:
      message = self._receive()
      if message.get("type") != "response" or message.get("request_seq") != seq:
        logger.debug("Skipping tsserver message: %s", message.get("event") or message.get("command"))
        continue
      if not message.get("success", False):
        raise TsServerError(f"tsserver '{command}' failed: {message.get('message', 'unknown error')}")
      return message.get("body")

  # ---------- commands ----------

  def configure(self, preferences: Dict[str, Any]) -> None:
    """Sets user preferences for subsequent requests."""
    self.notify("configure", {"preferences": preferences})

  def open(self, file_name: str, content: Optional[str] = None, project_root: Optional[str] = None) -> None:
    """
    Opens a file so the server attaches it to its project.

    Args:
        file_name: Absolute file path.
        content: Text to use instead of the file on disk.
        project_root: Root the server should search projects under.
    """
    arguments: Dict[str, Any] = {"file": file_name}
    if content is not None:
      arguments["fileContent"] = content
    if project_root is not None:
      arguments["projectRootPath"] = project_root
    self.notify("open", arguments)

  def get_combined_code_fix(self, file_name: str, fix_id: str) -> Dict[str, Any]:
    """
    Requests the combined fix ``fix_id`` for one file.

    Returns:
        Dict[str, Any]: Raw body with ``changes`` in ``{line, offset}`` form.
    """
    body = self.request(
      "getCombinedCodeFix",
      {"scope": {"type": "file", "args": {"file": file_name}}, "fixId": fix_id},
    )
    return body or {"changes": []}

  def close(self) -> None:
    """Asks the server to exit and reaps the process."""
    try:
      self.notify("exit")
      self.proc.stdin.close()
    except (TsServerError, OSError):
      # already gone
      pass
    try:
      self.proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
      self.proc.kill()
      self.proc.wait()


class TsServerLanguageService:
  """
  :class:`~ts_isolate.service.protocol.LanguageService` backed by tsserver.

  File texts are read once from disk and also handed to the server, so the
  positions it reports always refer to the text the core edits.
  """

  def __init__(self, project: ResolvedProject, client: TsServerClient):
    self.project = project
    self.client = client
    self._program_files = {os.path.normcase(name) for name in project.file_names}
    self._texts: Dict[str, str] = {}
    self._opened: Set[str] = set()
    self._preferences: Optional[Dict[str, Any]] = None

  @classmethod
  def create(cls, config: RuntimeConfig) -> "TsServerLanguageService":
    """
    Resolves the configured project and starts tsserver for it.

    Args:
        config: Runtime configuration.

    Returns:
        TsServerLanguageService: A ready service.

    Raises:
        ProjectConfigError: If the project cannot be resolved.
        TsServerError: If tsserver cannot be started.
    """
    project = resolve_project(config.tsconfig, config.tsc_command)
    client = TsServerClient(config.tsserver_command, cwd=project.current_directory)
    return cls(project, client)

  @property
  def current_directory(self) -> str:
    return self.project.current_directory

  def _absolute(self, file_name: str) -> str:
    return os.path.normpath(os.path.join(self.project.current_directory, file_name))

  def get_source_files(self) -> List[SourceFileInfo]:
    return [
      SourceFileInfo(file_name=name, is_declaration_file=is_declaration_file_name(name))
      for name in self.project.file_names
    ]

  def get_source_text(self, file_name: str) -> Optional[str]:
    path = self._absolute(file_name)
    if os.path.normcase(path) not in self._program_files:
      return None
    if path not in self._texts:
      try:
        with open(path, "rt", encoding="utf-8", newline="") as f:
          self._texts[path] = f.read()
      except FileNotFoundError:
        return None
    return self._texts[path]

  def get_combined_code_fix(self, file_name: str, fix_id: str, preferences: Dict[str, Any]) -> CombinedCodeFix:
    path = self._absolute(file_name)
    text = self.get_source_text(file_name)
    if text is None:
      raise FileNotFoundError(f"File {file_name} not found in project")

    if preferences != self._preferences:
      self.client.configure(preferences)
      self._preferences = dict(preferences)

    if path not in self._opened:
      self.client.open(path, content=text, project_root=str(self.project.config_path.parent))
      self._opened.add(path)

    body = self.client.get_combined_code_fix(path, fix_id)
    return CombinedCodeFix(changes=[self._convert_file_changes(raw) for raw in body.get("changes", [])])

  def _convert_file_changes(self, raw: Dict[str, Any]) -> FileTextChanges:
    file_name = raw["fileName"]
    text = self.get_source_text(file_name)
    if text is None:
      raise FileNotFoundError(f"File {file_name} not found in project")

    index = LineIndex(text)
    changes = [
      TextChange(span=index.to_span(edit["start"], edit["end"]), new_text=edit["newText"])
      for edit in raw.get("textChanges", [])
    ]
    return FileTextChanges(file_name=file_name, text_changes=changes)

  def close(self) -> None:
    self.client.close()
