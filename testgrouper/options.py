"""
Typed options recognised by the grouper.

The option surface is closed: :meth:`GrouperOptions.from_mapping` reads the
keys listed in ``constants.option_keys`` and silently ignores anything else,
so callers can forward a whole CLI option dictionary unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import re
from typing import Any, Mapping, Optional, Tuple, Union

from testgrouper.constants import DEFAULT_ALLOWED_MISSING_PERCENT, option_keys

PatternLike = Union[str, re.Pattern[str]]


def _compile(pattern: PatternLike) -> re.Pattern[str]:
  if isinstance(pattern, re.Pattern):
    return pattern
  if isinstance(pattern, str):
    return re.compile(pattern)
  raise TypeError(f"Expected a regular expression or string, got {pattern!r}")


@dataclass(frozen=True)
class GrouperOptions:
  """
  Options controlling how items are pinned and balanced.

  Parameters
  ----------
  single_process:
      Patterns matched against item identifiers; matching items share one
      group (or the isolated groups when ``isolate``/``isolate_count`` is set).
  single_process_tag:
      Pattern matched against item tags, used when ``single_process`` is empty.
  isolate / isolate_count:
      Number of groups reserved for the single-process items.  An
      ``isolate_count`` above one wins; otherwise ``isolate`` reserves one.
  specify_groups:
      Explicit ``a,b|c`` assignment of identifiers to leading groups.
  ignore_tag_pattern, runtime_log, allowed_missing_percent:
      Passed through to the weight resolver and scenario collaborators.
  """

  single_process: Tuple[re.Pattern[str], ...] = ()
  single_process_tag: Optional[re.Pattern[str]] = None
  isolate: bool = False
  isolate_count: Optional[int] = None
  specify_groups: Optional[str] = None
  ignore_tag_pattern: Optional[str] = None
  runtime_log: Optional[str] = None
  allowed_missing_percent: float = DEFAULT_ALLOWED_MISSING_PERCENT

  def __post_init__(self) -> None:
    patterns = self.single_process
    if isinstance(patterns, (str, re.Pattern)):
      patterns = (patterns,)
    object.__setattr__(self, 'single_process', tuple(_compile(p) for p in patterns or ()))
    if self.single_process_tag is not None:
      object.__setattr__(self, 'single_process_tag', _compile(self.single_process_tag))
    object.__setattr__(self, 'isolate', bool(self.isolate))

    if self.isolate_count is not None:
      if isinstance(self.isolate_count, bool) or not isinstance(self.isolate_count, int):
        raise TypeError("isolate_count must be an integer")
      if self.isolate_count < 0:
        raise ValueError("isolate_count must be non-negative")
    if self.specify_groups is not None and not isinstance(self.specify_groups, str):
      raise TypeError("specify_groups must be a string")
    if self.allowed_missing_percent is None:
      object.__setattr__(self, 'allowed_missing_percent', DEFAULT_ALLOWED_MISSING_PERCENT)
    if not 0 <= self.allowed_missing_percent <= 100:
      raise ValueError("allowed_missing_percent must be between 0 and 100")

  @classmethod
  def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> 'GrouperOptions':
    if values is None:
      return cls()
    if isinstance(values, GrouperOptions):
      return values
    known = {key: values[key] for key in option_keys if key in values and values[key] is not None}
    return cls(**known)

  @property
  def resolved_isolate_count(self) -> int:
    if self.isolate_count is not None and self.isolate_count > 1:
      return self.isolate_count
    if self.isolate:
      return 1
    return 0

  def merge(self, **overrides: Any) -> 'GrouperOptions':
    """Return a copy with ``overrides`` applied."""
    return replace(self, **overrides)
