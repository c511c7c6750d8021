from __future__ import annotations

import pytest

from testgrouper import (
  SpecifyGroupsAmbiguousItem,
  SpecifyGroupsDuplicateItem,
  SpecifyGroupsTooMany,
  SpecifyGroupsUnknownItem,
  SpecifyGroupsUnrouted,
  in_even_groups_by_size,
  parse_specify_groups,
  plan_groups,
)


def test_parse_splits_segments_and_names() -> None:
  parsed = parse_specify_groups("a, b||c|")
  assert parsed.segments == (("a", "b"), (), ("c",))
  assert parsed.names == ["a", "b", "c"]


def test_explicit_groups_come_first_and_rest_is_balanced() -> None:
  items = [("a", 1), ("b", 1), ("c", 1), ("d", 5), ("e", 1)]
  groups = in_even_groups_by_size(items, 3, {"specify_groups": "a,b|c"}, quiet=True)
  assert groups == [["a", "b"], ["c"], ["d", "e"]]


def test_explicit_groups_keep_user_order_while_trailing_groups_are_sorted() -> None:
  items = ["e", "d", "c", "b", "a"]
  groups = in_even_groups_by_size(items, 3, {"specify_groups": "c"}, quiet=True)
  assert groups == [["c"], ["b", "e"], ["a", "d"]]

  groups = in_even_groups_by_size(["a", "b", "c"], 2, {"specify_groups": "b,a"}, quiet=True)
  assert groups == [["b", "a"], ["c"]]


def test_explicit_group_sizes_use_item_weights() -> None:
  items = [("a", 10), ("b", 2), ("c", 3)]
  groups = plan_groups(items, 2, {"specify_groups": "b,c"}, quiet=True)
  assert [group.size for group in groups] == [5, 10]


def test_segments_may_cover_every_group() -> None:
  groups = in_even_groups_by_size(["a", "b", "c"], 2, {"specify_groups": "c,a|b"}, quiet=True)
  assert groups == [["c", "a"], ["b"]]


def test_too_many_segments() -> None:
  with pytest.raises(SpecifyGroupsTooMany):
    in_even_groups_by_size(["a", "b", "c"], 2, {"specify_groups": "a|b|c"}, quiet=True)


def test_segment_count_is_checked_before_names() -> None:
  with pytest.raises(SpecifyGroupsTooMany):
    in_even_groups_by_size(["a"], 2, {"specify_groups": "x|y|z"}, quiet=True)


def test_unknown_names_are_reported_together() -> None:
  with pytest.raises(SpecifyGroupsUnknownItem) as excinfo:
    in_even_groups_by_size(["y", "z"], 3, {"specify_groups": "x|y"}, quiet=True)
  assert excinfo.value.missing == ("x",)
  assert "x" in str(excinfo.value)

  with pytest.raises(SpecifyGroupsUnknownItem) as excinfo:
    in_even_groups_by_size(["a"], 3, {"specify_groups": "x,a|w"}, quiet=True)
  assert excinfo.value.missing == ("x", "w")


def test_unrouted_items_fail_when_segments_fill_every_group() -> None:
  with pytest.raises(SpecifyGroupsUnrouted) as excinfo:
    in_even_groups_by_size(["a", "b", "c", "d"], 2, {"specify_groups": "a|b"}, quiet=True)
  assert excinfo.value.unrouted == ("c", "d")
  assert "['c', 'd']" in str(excinfo.value)


def test_duplicate_names_are_rejected() -> None:
  with pytest.raises(SpecifyGroupsDuplicateItem):
    in_even_groups_by_size(["a", "b"], 3, {"specify_groups": "a|a,b"}, quiet=True)


def test_isolation_options_do_not_apply_to_explicit_groups() -> None:
  options = {"specify_groups": "a", "isolate_count": 5}
  assert in_even_groups_by_size(["a", "b"], 2, options, quiet=True) == [["a"], ["b"]]


def test_named_items_must_be_unique_in_the_input() -> None:
  with pytest.raises(SpecifyGroupsAmbiguousItem) as excinfo:
    in_even_groups_by_size(["a", "a", "b"], 3, {"specify_groups": "a"}, quiet=True)
  assert excinfo.value.ambiguous == ("a",)


def test_unnamed_repeated_identifiers_are_still_balanced() -> None:
  groups = in_even_groups_by_size(["a", "b", "b"], 3, {"specify_groups": "a"}, quiet=True)
  assert groups == [["a"], ["b"], ["b"]]
