"""
Entry points for splitting test items into balanced worker groups.

The grouper classifies the caller's items, applies explicit assignments or
pinning rules, balances what is left with the greedy smallest-group policy
and prints a short summary of the estimated groups.
"""

from __future__ import annotations

import numbers
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, TextIO, Tuple, Union

from testgrouper.balancer import Group, empty_groups, snapshot
from testgrouper.constraints import allocate_with_isolation
from testgrouper.items import ClassifiedItems, RawItem, Tagged, Weighted, classify_items
from testgrouper.options import GrouperOptions
from testgrouper.report import report_groups
from testgrouper.specify import resolve_specified_groups

OptionsLike = Union[GrouperOptions, Mapping[str, Any], None]
ScenarioSource = Callable[[Sequence[str], GrouperOptions], Iterable[RawItem]]


def check_num_groups(num_groups: int) -> int:
  if isinstance(num_groups, bool) or not isinstance(num_groups, numbers.Integral):
    raise TypeError(f"num_groups must be an integer, got {num_groups!r}")
  if num_groups < 1:
    raise ValueError("num_groups must be at least 1")
  return int(num_groups)


def plan_groups(
  items: Union[Iterable[RawItem], ClassifiedItems],
  num_groups: int,
  options: OptionsLike = None,
  *,
  stream: Optional[TextIO] = None,
  quiet: bool = False,
) -> List[Group]:
  """
  Partition ``items`` into exactly ``num_groups`` groups.

  Returns immutable :class:`Group` snapshots carrying the identifiers and the
  accumulated size of each group.  Validation happens before anything is
  assigned, so a failure never leaves a partial plan behind.
  """
  num_groups = check_num_groups(num_groups)
  opts = GrouperOptions.from_mapping(options)
  classified = classify_items(items)

  if opts.specify_groups:
    groups = resolve_specified_groups(classified.items, num_groups, opts.specify_groups)
  else:
    builders = empty_groups(num_groups)
    allocate_with_isolation(classified.items, builders, opts)
    groups = snapshot(builders)

  if not quiet:
    report_groups(groups, stream)
  return groups


def in_even_groups_by_size(
  items: Union[Iterable[RawItem], ClassifiedItems],
  num_groups: int,
  options: OptionsLike = None,
  *,
  stream: Optional[TextIO] = None,
  quiet: bool = False,
) -> List[List[str]]:
  groups = plan_groups(items, num_groups, options, stream=stream, quiet=quiet)
  return [list(group.items) for group in groups]


partition = in_even_groups_by_size


def balance_by_weight(
  items: Iterable[Union[Tuple[Any, Optional[float]], Weighted]],
  num_groups: int,
  options: OptionsLike = None,
  **kwargs: Any,
) -> List[List[str]]:
  """Balance ``(identifier, weight)`` pairs, heaviest items placed first."""
  weighted = [item if isinstance(item, Weighted) else Weighted(item[0], item[1]) for item in items]
  return in_even_groups_by_size(weighted, num_groups, options, **kwargs)


def balance_by_tags(
  items: Iterable[Union[Tuple[Any, Sequence[str]], Tagged]],
  num_groups: int,
  options: OptionsLike = None,
  **kwargs: Any,
) -> List[List[str]]:
  """Balance ``(identifier, tags)`` pairs by count, keeping their original order."""
  tagged = [item if isinstance(item, Tagged) else Tagged(item[0], tuple(item[1])) for item in items]
  return in_even_groups_by_size(tagged, num_groups, options, **kwargs)


def by_scenarios(
  tests: Sequence[str],
  num_groups: int,
  options: OptionsLike = None,
  *,
  scenarios: ScenarioSource,
  **kwargs: Any,
) -> List[List[str]]:
  """
  Group the scenarios found in ``tests``.

  ``scenarios`` is the framework collaborator that expands feature files into
  scenario locators (optionally with tags); it receives the parsed options.
  """
  opts = GrouperOptions.from_mapping(options)
  return in_even_groups_by_size(list(scenarios(tests, opts)), num_groups, opts, **kwargs)


def by_steps(
  tests: Sequence[str],
  num_groups: int,
  options: OptionsLike = None,
  *,
  features_with_steps: ScenarioSource,
  **kwargs: Any,
) -> List[List[str]]:
  """
  Group feature files weighted by their step count.

  ``features_with_steps`` returns ``(feature, step_count)`` pairs.  The
  options only reach the collaborator; pinning and explicit groups do not
  apply to step-based grouping.
  """
  opts = GrouperOptions.from_mapping(options)
  return in_even_groups_by_size(list(features_with_steps(tests, opts)), num_groups, **kwargs)
