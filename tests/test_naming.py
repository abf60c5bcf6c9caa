"""Tests for timestamped file naming."""

from datetime import datetime

import pytest

from gudang_backup.backup.naming import build_timestamped_file_base, slugify


class TestSlugify:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("gudang-backup", "gudang-backup"),
            ("toko sumber/jaya", "toko-sumber-jaya"),
            ("stok_2026", "stok_2026"),
            ("café", "caf-"),
        ],
    )
    def test_unsafe_characters_replaced(self, raw, expected):
        assert slugify(raw) == expected

    def test_empty_uses_export(self):
        assert slugify("") == "export"
        assert slugify(None) == "export"


class TestTimestampedBase:
    def test_format(self):
        when = datetime(2026, 1, 2, 3, 4, 5)
        assert build_timestamped_file_base("gudang-backup", when) == "gudang-backup_20260102-030405"

    def test_zero_padded(self):
        when = datetime(2026, 11, 30, 23, 59, 9)
        assert build_timestamped_file_base("a b", when) == "a-b_20261130-235909"
