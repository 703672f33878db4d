"""
Tests for gatekeeper/permissions/hashing.py

Known values were computed with the reference SuperFastHash over the UTF-8
bytes of the normalized name.
"""

import pytest

from gatekeeper.permissions.hashing import get_unique_id, super_fast_hash


class TestSuperFastHash:
    """Tests for the raw 32-bit hash"""

    def test_empty_input_hashes_to_zero(self):
        assert super_fast_hash(b"") == 0

    @pytest.mark.parametrize(
        "data, expected",
        [
            (b"a", 291415938),
            (b"ab", 1366002500),
            (b"abc", 3535673738),
            (b"abcd", 3671636187),
            (b"default", 2004946474),
            (b"vip", 3148795852),
            (b"vips", 3946977726),
        ],
    )
    def test_known_values(self, data, expected):
        """Every remainder length (0-3 trailing bytes) is covered"""
        assert super_fast_hash(data) == expected

    def test_result_is_unsigned_32_bit(self):
        for data in (b"x" * n for n in range(1, 40)):
            value = super_fast_hash(data)
            assert 0 <= value <= 0xFFFFFFFF


class TestGetUniqueId:
    """Tests for normalized name identities"""

    def test_case_and_whitespace_insensitive(self):
        assert get_unique_id("  VIP ") == get_unique_id("vip") == 3148795852

    def test_default_group_identity(self):
        assert get_unique_id("Default") == 2004946474

    def test_distinct_names_differ(self):
        assert get_unique_id("vip") != get_unique_id("vips")

    def test_blank_name(self):
        assert get_unique_id("   ") == 0

    def test_deterministic(self):
        assert get_unique_id("Moderator") == get_unique_id("moderator")
