"""
Explicit ``specify_groups`` assignments.

The micro-format lists the contents of the leading groups in order::

    spec/a_spec.rb,spec/b_spec.rb|spec/c_spec.rb|spec/d_spec.rb

Segments are separated by ``|`` and names within a segment by ``,``.  Names
are stripped of surrounding whitespace and empty names are skipped.  Trailing
empty segments are dropped, while a leading or inner empty segment stands for
an explicitly empty group.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from testgrouper.balancer import Group, GroupBuilder, empty_groups, group_features_by_size
from testgrouper.constants import SPECIFY_GROUP_SEPARATOR, SPECIFY_ITEM_SEPARATOR
from testgrouper.errors import (
  SpecifyGroupsAmbiguousItem,
  SpecifyGroupsDuplicateItem,
  SpecifyGroupsTooMany,
  SpecifyGroupsUnknownItem,
  SpecifyGroupsUnrouted,
)
from testgrouper.items import Item, items_to_group


@dataclass(frozen=True)
class SpecifiedGroups:
  """Parsed ``specify_groups`` value: one tuple of names per explicit group."""

  segments: Tuple[Tuple[str, ...], ...]

  def __len__(self) -> int:
    return len(self.segments)

  @property
  def names(self) -> List[str]:
    return [name for segment in self.segments for name in segment]


def parse_specify_groups(text: str) -> SpecifiedGroups:
  raw_segments = text.split(SPECIFY_GROUP_SEPARATOR)
  while raw_segments and not raw_segments[-1].strip():
    raw_segments.pop()

  segments = []
  for raw_segment in raw_segments:
    names = (name.strip() for name in raw_segment.split(SPECIFY_ITEM_SEPARATOR))
    segments.append(tuple(name for name in names if name))
  return SpecifiedGroups(segments=tuple(segments))


def _validate(
  specified: SpecifiedGroups,
  items: Sequence[Item],
  num_groups: int,
) -> List[Item]:
  """Run every check in order and return the items no segment names."""
  if len(specified) > num_groups:
    raise SpecifyGroupsTooMany(len(specified), num_groups)

  names = specified.names
  known = {item.identifier for item in items}
  missing = [name for name in names if name not in known]
  if missing:
    raise SpecifyGroupsUnknownItem(missing)

  duplicates = [name for name, count in Counter(names).items() if count > 1]
  if duplicates:
    raise SpecifyGroupsDuplicateItem(duplicates)

  occurrences = Counter(item.identifier for item in items)
  ambiguous = [name for name in names if occurrences[name] > 1]
  if ambiguous:
    raise SpecifyGroupsAmbiguousItem(ambiguous)

  named = set(names)
  remaining = [item for item in items if item.identifier not in named]
  if len(specified) == num_groups and remaining:
    raise SpecifyGroupsUnrouted([item.identifier for item in remaining])
  return remaining


def resolve_specified_groups(
  items: Sequence[Item],
  num_groups: int,
  specify_groups: str,
) -> List[Group]:
  """
  Build ``num_groups`` groups with the explicit segments first.

  Explicit groups keep the user's order; the remaining items are balanced
  into the trailing groups, which are then sorted by identifier.
  """
  specified = parse_specify_groups(specify_groups)
  remaining = _validate(specified, items, num_groups)

  weights: Dict[str, float] = {}
  for item in items:
    weights.setdefault(item.identifier, item.weight)

  explicit: List[Group] = []
  for segment in specified.segments:
    builder = GroupBuilder()
    for name in segment:
      builder.add(name, weights[name])
    explicit.append(builder.freeze())

  trailing = empty_groups(num_groups - len(specified))
  group_features_by_size(items_to_group(remaining), trailing)
  return explicit + [group.freeze().sorted() for group in trailing]
