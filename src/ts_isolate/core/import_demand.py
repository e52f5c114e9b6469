"""
Import Demand.

Record of which identifiers must be imported from which module as a result of
rewriting dynamic references. One instance belongs to exactly one file
application run.
"""

from typing import Dict, Iterator, List, Tuple


class ImportDemand:
  """
  Insertion-ordered mapping of module specifier to an ordered set of identifiers.

  Modules iterate in first-seen order and identifiers in first-added order.
  Adding a pair twice has no effect.

  "First seen" follows processing order, not source order: edits are applied
  by descending start offset, so references from later in a file are recorded
  before earlier ones. Within one replacement text they are recorded left to
  right.
  """

  def __init__(self) -> None:
    # dict keys double as an ordered set
    self._by_module: Dict[str, Dict[str, None]] = {}

  def add(self, module: str, identifier: str) -> None:
    """
    Records that ``identifier`` must be imported from ``module``.

    Args:
        module: Module specifier exactly as written in the reference.
        identifier: Exported member name.
    """
    self._by_module.setdefault(module, {})[identifier] = None

  def identifiers(self, module: str) -> List[str]:
    """
    Identifiers demanded from one module.

    Args:
        module: Module specifier.

    Returns:
        List[str]: Identifiers in insertion order (empty if the module is unknown).
    """
    return list(self._by_module.get(module, {}))

  def items(self) -> Iterator[Tuple[str, List[str]]]:
    """
    Iterates ``(module, identifiers)`` pairs in emission order.

    Yields:
        Tuple[str, List[str]]: Module and its identifiers.
    """
    for module, names in self._by_module.items():
      yield module, list(names)

  def as_dict(self) -> Dict[str, List[str]]:
    """Plain-data snapshot, for results and logging."""
    return dict(self.items())

  def __bool__(self) -> bool:
    return bool(self._by_module)

  def __len__(self) -> int:
    return len(self._by_module)

  def __contains__(self, module: object) -> bool:
    return module in self._by_module

  def __repr__(self) -> str:
    return f"ImportDemand({self.as_dict()!r})"
