"""
Greedy balancing of work items across a fixed set of groups.

Each item, in the order given, goes to the group with the smallest
accumulated size; ties go to the first such group.  Fed largest-first this is
the classic LPT heuristic, so the heaviest group never exceeds the mean load
by more than the single heaviest item.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from testgrouper.items import Item


@dataclass(frozen=True)
class Group:
  """Immutable snapshot of one worker's share of the items."""

  items: Tuple[str, ...] = ()
  size: float = 0

  def __len__(self) -> int:
    return len(self.items)

  def sorted(self) -> 'Group':
    return Group(items=tuple(sorted(self.items)), size=self.size)


@dataclass
class GroupBuilder:
  """Mutable accumulator used while a plan is being built."""

  items: List[str] = field(default_factory=list)
  size: float = 0

  def add(self, identifier: str, weight: float) -> None:
    self.items.append(identifier)
    self.size += weight

  def freeze(self) -> Group:
    return Group(items=tuple(self.items), size=self.size)


def empty_groups(num_groups: int) -> List[GroupBuilder]:
  return [GroupBuilder() for _ in range(num_groups)]


def group_features_by_size(items: Iterable[Item], groups_to_fill: Sequence[GroupBuilder]) -> None:
  """
  Assign ``items`` to ``groups_to_fill`` in place, always picking the lightest group.

  ``groups_to_fill`` may already hold items (e.g. pinned ones); their sizes
  are taken into account.  Item order is respected as given, so callers are
  expected to pass weighted items largest first.
  """
  item_list = list(items)
  if not item_list:
    return
  if not groups_to_fill:
    raise ValueError("Cannot balance items into an empty list of groups")

  sizes = np.array([group.size for group in groups_to_fill], dtype=np.float64)
  for item in item_list:
    # argmin returns the first index on ties
    smallest = int(np.argmin(sizes))
    weight = item.weight
    groups_to_fill[smallest].add(item.identifier, weight)
    sizes[smallest] += weight


def snapshot(groups: Sequence[GroupBuilder], *, sort_items: bool = True) -> List[Group]:
  frozen = [group.freeze() for group in groups]
  if sort_items:
    return [group.sorted() for group in frozen]
  return frozen
