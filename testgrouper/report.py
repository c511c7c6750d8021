"""Console summaries of a grouping plan."""

from __future__ import annotations

import sys
from typing import List, Optional, Sequence, TextIO

from testgrouper.balancer import Group


def format_duration(seconds: float) -> str:
  total = int(seconds)
  return "%02d:%02d" % (total // 60 % 60, total % 60)


def summary_lines(groups: Sequence[Group]) -> List[str]:
  lines = ["Estimated groups:"]
  for index, group in enumerate(groups, start=1):
    lines.append(f"#{index}: {len(group.items)} tests, {format_duration(group.size)}")
  return lines


def report_groups(groups: Sequence[Group], stream: Optional[TextIO] = None) -> None:
  out = stream if stream is not None else sys.stdout
  for line in summary_lines(groups):
    print(line, file=out, flush=True)


def report_category_split(ui_num_groups: int, api_num_groups: int, stream: Optional[TextIO] = None) -> None:
  out = stream if stream is not None else sys.stdout
  print(f"UI number: {ui_num_groups}", file=out, flush=True)
  print(f"API number: {api_num_groups}", file=out, flush=True)
