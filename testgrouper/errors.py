"""
Exceptions raised while building test groups.

Every error is a configuration problem reported straight to the caller; the
grouper never retries and never returns a partial plan.
"""

from __future__ import annotations

from typing import Sequence, Tuple


class GrouperError(ValueError):
  """Base class for all grouping failures."""


class MixedItemShapesError(GrouperError, TypeError):
  """Raised when items disagree with the shape sampled from the first one."""


class IsolationBudgetExceeded(GrouperError):
  def __init__(self, isolate_count: int, num_groups: int) -> None:
    self.isolate_count = isolate_count
    self.num_groups = num_groups
    super().__init__(
      f"Number of isolated processes ({isolate_count}) must be less than "
      f"the total number of processes ({num_groups})"
    )


class SpecifyGroupsError(GrouperError):
  """Base class for ``specify_groups`` validation failures."""


class SpecifyGroupsTooMany(SpecifyGroupsError):
  def __init__(self, segment_count: int, num_groups: int) -> None:
    self.segment_count = segment_count
    self.num_groups = num_groups
    super().__init__(
      f"Number of processes separated by pipe ({segment_count}) must be less than "
      f"or equal to the total number of processes ({num_groups})"
    )


class SpecifyGroupsUnknownItem(SpecifyGroupsError):
  def __init__(self, missing: Sequence[str]) -> None:
    self.missing: Tuple[str, ...] = tuple(missing)
    super().__init__(
      f"Could not find {list(self.missing)} from --specify-groups in the selected files & folders"
    )


class SpecifyGroupsUnrouted(SpecifyGroupsError):
  def __init__(self, unrouted: Sequence[str]) -> None:
    self.unrouted: Tuple[str, ...] = tuple(unrouted)
    super().__init__(
      "The number of groups in --specify-groups matches the number of groups from -n "
      "but there were other specs found in the selected files & folders not specified "
      "in --specify-groups. Make sure -n is larger than the number of processes in "
      "--specify-groups if there are other specs that need to be run. "
      f"The specs that aren't run: {list(self.unrouted)}"
    )


class SpecifyGroupsDuplicateItem(SpecifyGroupsError):
  def __init__(self, duplicates: Sequence[str]) -> None:
    self.duplicates: Tuple[str, ...] = tuple(duplicates)
    super().__init__(
      f"{list(self.duplicates)} listed more than once in --specify-groups"
    )


class RuntimeLogTooSmallError(GrouperError):
  def __init__(self, runtime_log: str, test_count: int) -> None:
    self.runtime_log = runtime_log
    self.test_count = test_count
    super().__init__(
      f"Runtime log file '{runtime_log}' does not contain sufficient data to sort "
      f"{test_count} test files, please update or remove it."
    )


class SpecifyGroupsAmbiguousItem(SpecifyGroupsError):
  def __init__(self, ambiguous: Sequence[str]) -> None:
    self.ambiguous: Tuple[str, ...] = tuple(ambiguous)
    super().__init__(
      f"{list(self.ambiguous)} from --specify-groups match more than one of the selected files & folders"
    )
