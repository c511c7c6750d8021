from __future__ import annotations

import io

import pytest

from testgrouper import GrouperOptions, RuntimeLog, RuntimeLogTooSmallError, read_runtime_log


def _write_log(tmp_path):
  log = tmp_path / "parallel_runtime_test.log"
  log.write_text(
    "\n".join(
      [
        "spec/a_spec.rb:1.5",
        "spec/b_spec.rb:2",
        "spec/a_spec.rb:3",
        "features/x.feature:12:4.25",
        "not a runtime line",
        "spec/c_spec.rb:oops",
      ]
    )
    + "\n"
  )
  return log


def test_read_runtime_log_splits_on_last_colon(tmp_path) -> None:
  entries = read_runtime_log(_write_log(tmp_path))
  assert entries.to_dict() == {
    "spec/a_spec.rb": 3.0,
    "spec/b_spec.rb": 2.0,
    "features/x.feature:12": 4.25,
    "spec/c_spec.rb": 0.0,
  }


def test_empty_log_has_no_entries(tmp_path) -> None:
  log = tmp_path / "empty.log"
  log.write_text("")
  assert read_runtime_log(log).empty


def test_add_size_fills_unknown_runtimes_with_the_mean(tmp_path) -> None:
  runtime_log = RuntimeLog(_write_log(tmp_path))
  sized = runtime_log.add_size(["spec/b_spec.rb", "spec/a_spec.rb", "spec/d_spec.rb"])
  assert [(item.identifier, item.weight) for item in sized] == [
    ("spec/a_spec.rb", 3.0),
    ("spec/b_spec.rb", 2.0),
    ("spec/d_spec.rb", 2.5),
  ]


def test_add_size_uses_explicit_unknown_runtime(tmp_path) -> None:
  runtime_log = RuntimeLog(_write_log(tmp_path), unknown_runtime=7)
  sized = runtime_log.add_size(["spec/a_spec.rb", "spec/d_spec.rb"])
  assert [item.weight for item in sized] == [3.0, 7]


def test_add_size_rejects_a_log_missing_too_many_tests(tmp_path) -> None:
  runtime_log = RuntimeLog(_write_log(tmp_path))
  with pytest.raises(RuntimeLogTooSmallError) as excinfo:
    runtime_log.add_size(["spec/a_spec.rb", "spec/d_spec.rb", "spec/e_spec.rb"])
  assert "sufficient data to sort 3 test files" in str(excinfo.value)


def test_add_size_without_known_runtimes_defaults_to_one(tmp_path) -> None:
  runtime_log = RuntimeLog(_write_log(tmp_path), allowed_missing_percent=100)
  sized = runtime_log.add_size(["spec/y_spec.rb", "spec/z_spec.rb"])
  assert [item.weight for item in sized] == [1, 1]


def test_add_size_reports_coverage_when_verbose(tmp_path) -> None:
  stream = io.StringIO()
  runtime_log = RuntimeLog(_write_log(tmp_path))
  runtime_log.add_size(["spec/a_spec.rb", "spec/b_spec.rb", "spec/d_spec.rb"], verbose=True, stream=stream)
  assert stream.getvalue() == "Runtime found for 2 of 3 tests\n"


def test_weight_for_known_and_unknown_tests(tmp_path) -> None:
  runtime_log = RuntimeLog(_write_log(tmp_path))
  assert runtime_log.weight_for("features/x.feature:12", "@ui") == 4.25
  assert runtime_log.weight_for("spec/missing_spec.rb") == pytest.approx((3.0 + 2.0 + 4.25 + 0.0) / 4)


def test_from_options_reads_path_and_missing_percent(tmp_path) -> None:
  log = _write_log(tmp_path)
  options = GrouperOptions(runtime_log=str(log), allowed_missing_percent=10)
  runtime_log = RuntimeLog.from_options(options)
  assert runtime_log.path == log
  assert runtime_log.allowed_missing_percent == 10
  with pytest.raises(RuntimeLogTooSmallError):
    runtime_log.add_size(["spec/a_spec.rb", "spec/d_spec.rb"])


def test_invalid_settings_are_rejected() -> None:
  with pytest.raises(ValueError):
    RuntimeLog("x.log", allowed_missing_percent=-1)
  with pytest.raises(ValueError):
    RuntimeLog("x.log", unknown_runtime=-2)


def test_read_runtime_log_keeps_names_that_look_like_missing_values(tmp_path) -> None:
  log = tmp_path / "runtime.log"
  log.write_text("NA:5\nnull:7\nspec/x_spec.rb:\nspec/y_spec.rb:2\nspec/z_spec.rb:inf\n")
  entries = read_runtime_log(log)
  assert entries.to_dict() == {
    "NA": 5.0,
    "null": 7.0,
    "spec/x_spec.rb": 0.0,
    "spec/y_spec.rb": 2.0,
    "spec/z_spec.rb": 0.0,
  }
