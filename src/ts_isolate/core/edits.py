"""
Span Edit Applier.

Applies a batch of disjoint text edits, expressed in the coordinate space of the
original text, to that text. Edits are spliced right-to-left: an edit is only
ever preceded by edits lying strictly to its right, so its own offsets (and the
offsets of every edit still pending) stay valid in the partially edited string.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Hook applied to each replacement before it is spliced: (old_text, new_text) -> text.
ReplacementHook = Callable[[str, str], str]


class TextSpan(BaseModel):
  """
  Half-open range ``[start, start + length)`` within a text.
  """

  model_config = ConfigDict(frozen=True)

  start: int = Field(..., ge=0, description="Offset of the first replaced character.")
  length: int = Field(..., ge=0, description="Number of replaced characters.")

  @property
  def end(self) -> int:
    """
    Exclusive end offset.

    Returns:
        int: ``start + length``.
    """
    return self.start + self.length


class TextChange(BaseModel):
  """
  Replacement of ``text[span.start:span.end]`` with ``new_text``.

  Accepts the language service wire name ``newText`` as well as ``new_text``.
  """

  model_config = ConfigDict(frozen=True, populate_by_name=True)

  span: TextSpan
  new_text: str = Field(..., alias="newText")

  @classmethod
  def at(cls, start: int, length: int, new_text: str) -> "TextChange":
    """
    Shorthand constructor.

    Args:
        start: Span start offset.
        length: Span length.
        new_text: Replacement text.

    Returns:
        TextChange: The edit.
    """
    return cls(span=TextSpan(start=start, length=length), new_text=new_text)


def order_for_application(changes: Sequence[TextChange]) -> List[TextChange]:
  """
  Sorts edits into application order: descending start offset.

  Edits sharing a start (zero-length insertions) are ordered by descending input
  index, which makes right-to-left splicing produce the same text as an in-order
  reconstruction.

  Args:
      changes: Edits in any order.

  Returns:
      List[TextChange]: Edits in the order they must be spliced.
  """
  indexed: List[Tuple[int, TextChange]] = list(enumerate(changes))
  indexed.sort(key=lambda pair: (pair[1].span.start, pair[0]), reverse=True)
  return [change for _, change in indexed]


def splice_changes(text: str, changes: Sequence[TextChange], hook: Optional[ReplacementHook] = None) -> str:
  """
  Core right-to-left splicing loop shared by every edit operation.

  Args:
      text: The original text; every span refers to it.
      changes: Mutually non-overlapping edits. Overlaps are not detected.
      hook: Optional transformation of each replacement, given the original
          slice it replaces and its new text.

  Returns:
      str: The edited text.

  Raises:
      ValueError: If a span extends past the end of ``text``.
  """
  for change in order_for_application(changes):
    start, end = change.span.start, change.span.end
    if end > len(text):
      raise ValueError(f"Span [{start}, {end}) is out of range for text of length {len(text)}")

    replacement = change.new_text
    if hook is not None:
      replacement = hook(text[start:end], replacement)

    text = f"{text[:start]}{replacement}{text[end:]}"
  return text


def apply_text_changes(text: str, changes: Sequence[TextChange]) -> str:
  """
  Applies edits verbatim, without any rewriting of the replacement texts.

  Args:
      text: The original text.
      changes: Mutually non-overlapping edits in original coordinates.

  Returns:
      str: The edited text. ``apply_text_changes(text, []) == text``.
  """
  return splice_changes(text, changes)
