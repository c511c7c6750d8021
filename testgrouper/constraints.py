"""
Pinning rules applied before the free balancing pass.

``single_process`` patterns (or, failing those, the ``single_process_tag``
pattern) mark items that must not be spread across the workers.  What happens
to them depends on the isolation count:

* with ``isolate``/``isolate_count`` the marked items are spread over the
  first ``isolate_count`` groups, which receive nothing else;
* without it they all share the first group, which still takes its part of
  the remaining items.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from testgrouper.balancer import GroupBuilder, group_features_by_size
from testgrouper.errors import IsolationBudgetExceeded
from testgrouper.items import Item, items_to_group
from testgrouper.options import GrouperOptions


def _is_single_process(item: Item, options: GrouperOptions) -> bool:
  if options.single_process:
    return any(pattern.search(item.identifier) for pattern in options.single_process)
  if options.single_process_tag is not None:
    return any(options.single_process_tag.search(tag) for tag in item.tags)
  return False


def separate_single_process(
  items: Sequence[Item],
  options: GrouperOptions,
) -> Tuple[List[Item], List[Item]]:
  """Split ``items`` into (single-process, remaining), both in input order."""
  single: List[Item] = []
  remaining: List[Item] = []
  for item in items:
    if _is_single_process(item, options):
      single.append(item)
    else:
      remaining.append(item)
  return single, remaining


def check_isolation_budget(options: GrouperOptions, num_groups: int) -> int:
  isolate_count = options.resolved_isolate_count
  if isolate_count >= num_groups:
    raise IsolationBudgetExceeded(isolate_count, num_groups)
  return isolate_count


def allocate_with_isolation(
  items: Sequence[Item],
  groups: List[GroupBuilder],
  options: GrouperOptions,
) -> None:
  """Fill ``groups`` in place, honouring the single-process and isolation rules."""
  isolate_count = check_isolation_budget(options, len(groups))
  single, remaining = separate_single_process(items, options)

  if isolate_count >= 1:
    group_features_by_size(items_to_group(single), groups[:isolate_count])
    group_features_by_size(items_to_group(remaining), groups[isolate_count:])
  else:
    if single:
      group_features_by_size(items_to_group(single), groups[:1])
    group_features_by_size(items_to_group(remaining), groups)
