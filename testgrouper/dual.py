"""
Splitting the worker budget between two disjoint categories.

UI and API scenarios have very different runtimes and should not share a
worker, so each category gets its own slice of the ``num_groups`` budget in
proportion to its total weight and is balanced independently.
"""

from __future__ import annotations

import math
from typing import Any, List, Literal, Optional, Sequence, TextIO, Tuple

from testgrouper.balancer import Group
from testgrouper.constants import API_TAG, UI_TAG
from testgrouper.grouper import OptionsLike, ScenarioSource, check_num_groups, plan_groups
from testgrouper.items import classify_items
from testgrouper.options import GrouperOptions
from testgrouper.report import report_category_split
from testgrouper.runtime import RuntimeLog

AllocationMethod = Literal["legacy", "largest_remainder"]


def _round_half_up(value: float) -> int:
  return int(math.floor(value + 0.5))


def _share(total_num_groups: int, total_size: float, partition_size: float) -> int:
  if partition_size <= 0:
    return 0
  return max(_round_half_up(total_num_groups * partition_size / total_size), 1)


def _largest_remainder(total_num_groups: int, total_size: float, sizes: Tuple[float, float]) -> Tuple[int, int]:
  quotas = [total_num_groups * size / total_size for size in sizes]
  shares = [int(math.floor(quota)) for quota in quotas]
  # each category with weight gets at least one group when the budget allows
  for index, size in enumerate(sizes):
    if size > 0 and shares[index] == 0:
      shares[index] = 1
  while sum(shares) > total_num_groups:
    donor = max(range(2), key=lambda i: (shares[i], i))
    shares[donor] -= 1
  leftover = total_num_groups - sum(shares)
  # ties go to the first category
  order = sorted(range(2), key=lambda i: (-(quotas[i] - math.floor(quotas[i])), i))
  for index in order[:leftover]:
    shares[index] += 1
  return shares[0], shares[1]


def calculate_num_groups(
  total_num_groups: int,
  partition1_size: float,
  partition2_size: float,
  *,
  method: AllocationMethod = "legacy",
) -> Tuple[int, int]:
  """
  Divide ``total_num_groups`` between two categories by weight.

  The legacy rule rounds each share half-up, keeps at least one group for a
  category with any weight, and takes one group back from the larger share
  (the second on a tie) when the two overshoot the budget.
  ``largest_remainder`` is the Hamilton apportionment of the same budget.
  """
  total_size = partition1_size + partition2_size
  if total_size <= 0:
    return 0, 0

  if method == "largest_remainder":
    return _largest_remainder(total_num_groups, total_size, (partition1_size, partition2_size))
  if method != "legacy":
    raise ValueError(f"Unknown allocation method: {method!r}")

  num_groups1 = _share(total_num_groups, total_size, partition1_size)
  num_groups2 = _share(total_num_groups, total_size, partition2_size)

  if num_groups1 + num_groups2 > total_num_groups:
    if num_groups1 > num_groups2:
      num_groups1 -= 1
    else:
      num_groups2 -= 1

  return num_groups1, num_groups2


def split_by_categories(
  first: Sequence[Any],
  second: Sequence[Any],
  num_groups: int,
  options: OptionsLike = None,
  *,
  method: AllocationMethod = "legacy",
  stream: Optional[TextIO] = None,
  quiet: bool = False,
) -> List[Group]:
  """
  Balance two disjoint categories into their proportional share of groups.

  The first category's groups come first in the result.  When neither
  category has any weight the shares follow item counts instead, and when
  both are empty the first category takes the whole (empty) budget.
  """
  num_groups = check_num_groups(num_groups)
  opts = GrouperOptions.from_mapping(options)
  first_items = classify_items(first)
  second_items = classify_items(second)

  first_size = first_items.total_weight
  second_size = second_items.total_weight
  if first_size + second_size <= 0:
    first_size, second_size = len(first_items), len(second_items)
  if first_size + second_size <= 0:
    first_num_groups, second_num_groups = num_groups, 0
  else:
    first_num_groups, second_num_groups = calculate_num_groups(
      num_groups, first_size, second_size, method=method
    )

  if not quiet:
    report_category_split(first_num_groups, second_num_groups, stream)

  groups: List[Group] = []
  if first_num_groups > 0:
    groups.extend(plan_groups(first_items, first_num_groups, opts, stream=stream, quiet=quiet))
  if second_num_groups > 0:
    groups.extend(plan_groups(second_items, second_num_groups, opts, stream=stream, quiet=quiet))
  return groups


def by_scenarios_runtime(
  tests: Sequence[str],
  num_groups: int,
  options: OptionsLike = None,
  *,
  scenarios: ScenarioSource,
  resolver: Optional[RuntimeLog] = None,
  **kwargs: Any,
) -> List[List[str]]:
  """
  Group UI and API scenarios separately, weighting both by recorded runtime.

  ``scenarios`` expands ``tests`` into scenario locators, skipping the ones
  tagged with ``options.ignore_tag_pattern``; it is called once per category.
  """
  opts = GrouperOptions.from_mapping(options)
  runtime_log = resolver if resolver is not None else RuntimeLog.from_options(opts)

  ui_scenarios = runtime_log.add_size(_identifiers(scenarios(tests, opts.merge(ignore_tag_pattern=API_TAG))))
  api_scenarios = runtime_log.add_size(_identifiers(scenarios(tests, opts.merge(ignore_tag_pattern=UI_TAG))))

  groups = split_by_categories(ui_scenarios, api_scenarios, num_groups, opts, **kwargs)
  return [list(group.items) for group in groups]


def _identifiers(found) -> List[str]:
  return classify_items(found).identifiers
