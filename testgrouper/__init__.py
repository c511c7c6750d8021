"""
Weighted partitioning of test items into parallel worker groups.

The top-level objects exported here let callers classify test items, pin or
isolate the ones that must not be spread around, apply explicit group
assignments and balance everything else so no worker becomes a straggler.
"""

from __future__ import annotations

from .balancer import Group, GroupBuilder, group_features_by_size
from .dual import by_scenarios_runtime, calculate_num_groups, split_by_categories
from .errors import (
  GrouperError,
  IsolationBudgetExceeded,
  MixedItemShapesError,
  RuntimeLogTooSmallError,
  SpecifyGroupsAmbiguousItem,
  SpecifyGroupsDuplicateItem,
  SpecifyGroupsError,
  SpecifyGroupsTooMany,
  SpecifyGroupsUnknownItem,
  SpecifyGroupsUnrouted,
)
from .grouper import (
  balance_by_tags,
  balance_by_weight,
  by_scenarios,
  by_steps,
  in_even_groups_by_size,
  partition,
  plan_groups,
)
from .items import ClassifiedItems, Item, ItemShape, Plain, Tagged, Weighted, classify_items
from .options import GrouperOptions
from .runtime import RuntimeLog, read_runtime_log
from .specify import parse_specify_groups

__all__ = [
  "Group",
  "GroupBuilder",
  "group_features_by_size",
  "by_scenarios_runtime",
  "calculate_num_groups",
  "split_by_categories",
  "GrouperError",
  "IsolationBudgetExceeded",
  "MixedItemShapesError",
  "RuntimeLogTooSmallError",
  "SpecifyGroupsAmbiguousItem",
  "SpecifyGroupsDuplicateItem",
  "SpecifyGroupsError",
  "SpecifyGroupsTooMany",
  "SpecifyGroupsUnknownItem",
  "SpecifyGroupsUnrouted",
  "balance_by_tags",
  "balance_by_weight",
  "by_scenarios",
  "by_steps",
  "in_even_groups_by_size",
  "partition",
  "plan_groups",
  "ClassifiedItems",
  "Item",
  "ItemShape",
  "Plain",
  "Tagged",
  "Weighted",
  "classify_items",
  "GrouperOptions",
  "RuntimeLog",
  "read_runtime_log",
  "parse_specify_groups",
]
