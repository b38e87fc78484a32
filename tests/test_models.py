# Copyright (c) Syntropy Systems
"""Tests for the --also-measure specification."""

import pytest

from absh.errors import MeasureSpecError
from absh.models.measure import UserMeasureSpec


class TestUserMeasureSpec:
    """Tests for UserMeasureSpec parsing."""

    def test_parse_and_serialize(self) -> None:
        """Test a size metric parses and re-serializes identically."""
        text = "rss:1:Resident Set:cat /proc/self/status"
        spec = UserMeasureSpec.parse(text)
        assert spec.id == "rss"
        assert spec.is_size is True
        assert spec.name == "Resident Set"
        assert spec.cmd == "cat /proc/self/status"
        assert str(spec) == text

    def test_plain_number(self) -> None:
        """Test is_size 0."""
        spec = UserMeasureSpec.parse("n:0:Count:echo 3")
        assert spec.is_size is False
        assert str(spec) == "n:0:Count:echo 3"

    def test_command_may_contain_colons(self) -> None:
        """Test only the first three colons separate fields."""
        spec = UserMeasureSpec.parse("t:0:Time:date +%H:%M")
        assert spec.cmd == "date +%H:%M"

    @pytest.mark.parametrize(
        "text",
        ["", "rss", "rss:1:Resident", "rss:2:Resident:cmd", "rss:true:Resident:cmd"],
    )
    def test_malformed(self, text: str) -> None:
        """Test malformed specs raise a configuration error."""
        with pytest.raises(MeasureSpecError):
            _ = UserMeasureSpec.parse(text)

    def test_error_is_value_error(self) -> None:
        """Test the error can be caught as ValueError."""
        with pytest.raises(ValueError, match="id:0|1:description:command"):
            _ = UserMeasureSpec.parse("bad")
