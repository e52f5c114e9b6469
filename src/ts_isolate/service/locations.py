"""
Location Conversion.

tsserver reports positions as 1-based ``{line, offset}`` pairs where the offset
counts UTF-16 code units. Python strings index code points, so characters
outside the Basic Multilingual Plane count twice on the wire and once here.
"""

from typing import List, Mapping

from ts_isolate.core.edits import TextSpan

_LINE_BREAKS = ("\n", "\u2028", "\u2029")


class LineIndex:
  """
  Line start table for one text, matching the compiler's notion of line breaks
  (``\\r\\n``, ``\\r``, ``\\n``, U+2028, U+2029).
  """

  def __init__(self, text: str):
    self.text = text
    self.line_starts: List[int] = [0]

    i = 0
    while i < len(text):
      char = text[i]
      if char == "\r":
        if text[i + 1 : i + 2] == "\n":
          i += 1
        self.line_starts.append(i + 1)
      elif char in _LINE_BREAKS:
        self.line_starts.append(i + 1)
      i += 1

  def to_offset(self, line: int, offset: int) -> int:
    """
    Converts a tsserver location into a string index.

    Args:
        line: 1-based line number.
        offset: 1-based column in UTF-16 code units.

    Returns:
        int: Index into ``text``.

    Raises:
        ValueError: If the line does not exist or the column is not positive.
    """
    if line < 1 or line > len(self.line_starts):
      raise ValueError(f"Line {line} out of range (1..{len(self.line_starts)})")
    if offset < 1:
      raise ValueError(f"Offset must be positive, got {offset}")

    pos = self.line_starts[line - 1]
    units = offset - 1
    while units > 0 and pos < len(self.text):
      units -= 2 if ord(self.text[pos]) > 0xFFFF else 1
      pos += 1
    return pos

  def to_span(self, start: Mapping[str, int], end: Mapping[str, int]) -> TextSpan:
    """
    Converts a tsserver ``start``/``end`` location pair into a span.

    Args:
        start: ``{"line": ..., "offset": ...}`` of the first character.
        end: Location one past the last character.

    Returns:
        TextSpan: The equivalent span.
    """
    first = self.to_offset(start["line"], start["offset"])
    last = self.to_offset(end["line"], end["offset"])
    return TextSpan(start=first, length=max(0, last - first))
