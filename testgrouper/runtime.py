"""
Runtime-log weight resolver.

Test runners record how long each test file took in a plain text log, one
``path:seconds`` entry per line.  :class:`RuntimeLog` turns that log into
weights for the grouper: known tests get their recorded runtime, unknown
ones get ``unknown_runtime`` (or the mean of the known runtimes), and a log
that covers too few of the requested tests is rejected.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Dict, Iterable, List, Optional, TextIO, Union

import numpy as np
import pandas as pd

from testgrouper.constants import DEFAULT_ALLOWED_MISSING_PERCENT, DEFAULT_RUNTIME_LOG, DEFAULT_WEIGHT
from testgrouper.errors import RuntimeLogTooSmallError
from testgrouper.items import Weighted
from testgrouper.options import GrouperOptions


def read_runtime_log(path: Union[str, Path]) -> pd.Series:
  """
  Parse a runtime log into a ``test -> seconds`` series.

  Each line is split on its last colon.  Later entries for the same test
  win, lines without a colon are skipped, and empty, unparsable or
  non-finite runtimes count as zero.  Test names are taken verbatim, so
  locators such as ``NA`` or ``null`` are never read as missing values.
  """
  lines = pd.Series(Path(path).read_text().splitlines(), dtype=object).str.strip()
  lines = lines[lines != '']
  if lines.empty:
    return pd.Series(dtype=np.float64)

  parts = lines.str.rpartition(':')
  parts = parts[parts[1] == ':']
  runtime = pd.to_numeric(parts[2].str.strip(), errors='coerce')
  runtime = runtime.replace([np.inf, -np.inf], np.nan).fillna(0.0)

  frame = pd.DataFrame({'test': parts[0].to_numpy(), 'runtime': runtime.to_numpy(dtype=np.float64)})
  frame = frame.drop_duplicates(subset='test', keep='last')
  return pd.Series(frame['runtime'].to_numpy(dtype=np.float64), index=frame['test'].to_numpy())


class RuntimeLog:
  """
  Weight resolver backed by a runtime log file.

  Parameters
  ----------
  path:
      Location of the ``path:seconds`` log.
  allowed_missing_percent:
      Share of requested tests (0-100) allowed to be absent from the log.
  unknown_runtime:
      Weight given to tests absent from the log.  Defaults to the mean of the
      known runtimes, or 1 when none is known.
  """

  def __init__(
    self,
    path: Union[str, Path] = DEFAULT_RUNTIME_LOG,
    *,
    allowed_missing_percent: float = DEFAULT_ALLOWED_MISSING_PERCENT,
    unknown_runtime: Optional[float] = None,
  ) -> None:
    if not 0 <= allowed_missing_percent <= 100:
      raise ValueError("allowed_missing_percent must be between 0 and 100")
    if unknown_runtime is not None and unknown_runtime < 0:
      raise ValueError("unknown_runtime must be non-negative")
    self.path = Path(path)
    self.allowed_missing_percent = float(allowed_missing_percent)
    self.unknown_runtime = unknown_runtime
    self._runtimes: Optional[pd.Series] = None

  @classmethod
  def from_options(cls, options: Optional[GrouperOptions] = None, **kwargs) -> 'RuntimeLog':
    opts = options or GrouperOptions()
    return cls(
      opts.runtime_log or DEFAULT_RUNTIME_LOG,
      allowed_missing_percent=opts.allowed_missing_percent,
      **kwargs,
    )

  @property
  def entries(self) -> pd.Series:
    if self._runtimes is None:
      self._runtimes = read_runtime_log(self.path)
    return self._runtimes

  def runtimes(self, tests: Iterable[str]) -> Dict[str, float]:
    entries = self.entries
    return {test: float(entries[test]) for test in tests if test in entries.index}

  def _fallback(self, known: Iterable[float]) -> float:
    if self.unknown_runtime is not None:
      return self.unknown_runtime
    values = np.fromiter(known, dtype=np.float64)
    if values.size == 0:
      return DEFAULT_WEIGHT
    return float(values.mean())

  def add_size(
    self,
    tests: Iterable[str],
    *,
    verbose: bool = False,
    stream: Optional[TextIO] = None,
  ) -> List[Weighted]:
    """Return the tests, sorted by name, paired with their runtime weights."""
    ordered = sorted(tests)
    known = self.runtimes(ordered)

    missing = sum(1 for test in ordered if test not in known)
    if missing > len(ordered) * self.allowed_missing_percent / 100.0:
      raise RuntimeLogTooSmallError(str(self.path), len(ordered))

    if verbose:
      out = stream if stream is not None else sys.stdout
      print(f"Runtime found for {len(known)} of {len(ordered)} tests", file=out, flush=True)

    fallback = self._fallback(known.values())
    return [Weighted(test, known.get(test, fallback)) for test in ordered]

  def weight_for(self, identifier: str, category_filter: Optional[str] = None) -> float:
    """
    Weight of a single test.

    A runtime log has no notion of categories, so ``category_filter`` is
    accepted for interface compatibility and ignored.
    """
    entries = self.entries
    if identifier in entries.index:
      return float(entries[identifier])
    return self._fallback(entries.to_numpy())
