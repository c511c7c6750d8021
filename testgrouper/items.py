"""
Work items and the classifier that normalises raw caller input.

Callers hand the grouper a sequence of bare identifiers, ``(identifier,
weight)`` pairs, or ``(identifier, tags)`` pairs.  The shape is decided once,
from the first compound element, and every item is converted into one of the
explicit variants below so the rest of the package never has to inspect raw
tuples again.
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
import math
import numbers
import os
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from testgrouper.constants import DEFAULT_WEIGHT
from testgrouper.errors import MixedItemShapesError


class ItemShape(enum.Enum):
  PLAIN = 'plain'
  WEIGHTED = 'weighted'
  TAGGED = 'tagged'


@dataclass(frozen=True)
class Item:
  """A single unit of work, identified by a test file or scenario locator."""

  identifier: str

  def __post_init__(self) -> None:
    object.__setattr__(self, 'identifier', _coerce_identifier(self.identifier))

  @property
  def weight(self) -> float:
    return DEFAULT_WEIGHT

  @property
  def tags(self) -> Tuple[str, ...]:
    return ()


@dataclass(frozen=True)
class Plain(Item):
  pass


@dataclass(frozen=True)
class Weighted(Item):
  """
  Item carrying a numeric cost, typically its historical runtime in seconds.

  A ``None`` weight falls back to the default weight of 1.
  """

  size: Optional[float] = None

  def __post_init__(self) -> None:
    super().__post_init__()
    object.__setattr__(self, 'size', _coerce_weight(self.identifier, self.size))

  @property
  def weight(self) -> float:
    return self.size  # type: ignore[return-value]


@dataclass(frozen=True)
class Tagged(Item):
  """Item carrying tags; the tags only drive pinning, never balancing."""

  labels: Tuple[str, ...] = ()

  def __post_init__(self) -> None:
    super().__post_init__()
    object.__setattr__(self, 'labels', tuple(str(tag) for tag in self.labels))

  @property
  def tags(self) -> Tuple[str, ...]:
    return self.labels


RawItem = Union[str, 'os.PathLike[str]', Item, Tuple[Any, Any], List[Any]]


def _coerce_identifier(identifier: Any) -> str:
  if isinstance(identifier, os.PathLike):
    return os.fspath(identifier)
  if not isinstance(identifier, str):
    raise TypeError(f"Item identifier must be a string or path, got {identifier!r}")
  return identifier


def _coerce_weight(identifier: str, size: Any) -> float:
  if size is None:
    return DEFAULT_WEIGHT
  if isinstance(size, bool) or not isinstance(size, numbers.Real):
    raise TypeError(f"Weight for {identifier!r} must be a number, got {size!r}")
  if not math.isfinite(size):
    raise ValueError(f"Weight for {identifier!r} must be finite, got {size!r}")
  if size < 0:
    raise ValueError(f"Weight for {identifier!r} must be non-negative, got {size!r}")
  return size


def _is_tag_list(value: Any) -> bool:
  if isinstance(value, (str, bytes)):
    return False
  if not isinstance(value, (list, tuple, set, frozenset)):
    return False
  return all(isinstance(tag, str) for tag in value)


def _shape_of(raw: Any) -> Optional[ItemShape]:
  """Return the shape of a compound element, ``None`` for a bare identifier."""
  if isinstance(raw, Weighted):
    return ItemShape.WEIGHTED
  if isinstance(raw, Tagged):
    return ItemShape.TAGGED
  if isinstance(raw, Item):
    return None
  if isinstance(raw, (tuple, list)):
    if len(raw) != 2:
      raise TypeError(f"Compound items must be (identifier, weight-or-tags) pairs, got {raw!r}")
    descriptor = raw[1]
    if descriptor is None or (isinstance(descriptor, numbers.Real) and not isinstance(descriptor, bool)):
      return ItemShape.WEIGHTED
    if _is_tag_list(descriptor):
      return ItemShape.TAGGED
    raise TypeError(f"Cannot interpret {descriptor!r} as a weight or a tag list")
  return None


def _convert(raw: Any, shape: ItemShape) -> Item:
  found = _shape_of(raw)
  if shape is ItemShape.PLAIN:
    return raw if isinstance(raw, Plain) else Plain(raw.identifier if isinstance(raw, Item) else raw)
  if found is not shape:
    raise MixedItemShapesError(
      f"Item {raw!r} does not match the {shape.value} shape of the first compound item"
    )
  if isinstance(raw, Item):
    return raw
  if shape is ItemShape.WEIGHTED:
    return Weighted(raw[0], raw[1])
  return Tagged(raw[0], tuple(raw[1]))


@dataclass(frozen=True)
class ClassifiedItems:
  """Items of a single, uniform shape in caller order."""

  shape: ItemShape
  items: Tuple[Item, ...]

  def __len__(self) -> int:
    return len(self.items)

  def __iter__(self):
    return iter(self.items)

  @property
  def identifiers(self) -> List[str]:
    return [item.identifier for item in self.items]

  @property
  def total_weight(self) -> float:
    return sum(item.weight for item in self.items)


def classify_items(raw_items: Iterable[RawItem]) -> ClassifiedItems:
  """
  Decide the item shape from the first compound element and convert all items.

  Sequences mixing shapes are rejected with :class:`MixedItemShapesError`.
  Classified input is returned unchanged.
  """
  if isinstance(raw_items, ClassifiedItems):
    return raw_items

  raw_list = list(raw_items)
  shape = ItemShape.PLAIN
  for raw in raw_list:
    found = _shape_of(raw)
    if found is not None:
      shape = found
      break

  return ClassifiedItems(shape=shape, items=tuple(_convert(raw, shape) for raw in raw_list))


def items_to_group(items: Sequence[Item]) -> List[Item]:
  """
  Order items for the greedy balancer.

  Weighted items go largest first (the sort is stable, so equal weights keep
  their caller order); tagged and plain items keep their original order.
  """
  item_list = list(items)
  if item_list and isinstance(item_list[0], Weighted):
    return sorted(item_list, key=lambda item: item.weight, reverse=True)
  return item_list
