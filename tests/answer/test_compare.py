"""Tests for strict comparison of raw answer values."""

import pytest

from examgrade.answer.compare import contains, index_of, same_value


class TestSameValue:
    """Test strict equality."""

    @pytest.mark.parametrize(
        "left, right",
        [
            (1, 1),
            (1, 1.0),
            ("Paris", "Paris"),
            (None, None),
            (True, True),
            ([0, "a"], (0, "a")),
            ({"x": [1, 2]}, {"x": [1, 2]}),
        ],
    )
    def test_equal(self, left, right):
        """Test equal."""
        assert same_value(left, right) is True
        assert same_value(right, left) is True

    @pytest.mark.parametrize(
        "left, right",
        [
            (True, 1),
            (False, 0),
            (True, 1.0),
            (True, False),
            ("0", 0),
            ([1, 0], [True, False]),
            ([1], [1, 1]),
            ({"x": 1}, {"x": True}),
            ({"x": 1}, {"y": 1}),
            ([1], {"x": 1}),
        ],
    )
    def test_not_equal(self, left, right):
        """Test not equal."""
        assert same_value(left, right) is False
        assert same_value(right, left) is False


class TestLookup:
    """Test membership and position helpers."""

    def test_contains(self):
        """Test contains."""
        assert contains([0, 1], 1) is True
        assert contains([0, 1], True) is False
        assert contains([("x", 0)], ("x", False)) is False
        assert contains([], None) is False

    def test_index_of(self):
        """Test index of."""
        assert index_of(["a", 0, False], False) == 2
        assert index_of(["a", 0, False], 0) == 1
        assert index_of(["a"], "b") is None
