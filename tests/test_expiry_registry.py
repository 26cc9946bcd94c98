"""
Tests for the expiry registry and its formatting helpers.
"""

import pytest
from pydantic import ValidationError

from tempbox.schemas.files import ResourceRecord
from tempbox.services.expiry_registry import (
    EXPIRY_OPTIONS,
    ExpiryRegistry,
    expiry_timestamp,
    format_file_size,
    format_time_remaining,
)

from conftest import NOW, make_record

MINUTE = 60_000


class TestRegistryBasics:

    def test_add_and_get(self, registry):
        record = make_record("a", NOW + MINUTE)
        registry.add(record)

        assert registry.get("a") == record
        assert registry.get("missing") is None
        assert registry.size() == 1
        assert len(registry) == 1
        assert "a" in registry

    def test_add_overwrites_existing_id(self, registry):
        registry.add(make_record("a", NOW + MINUTE, name="first"))
        registry.add(make_record("a", NOW + 2 * MINUTE, name="second"))

        assert registry.size() == 1
        assert registry.get("a").name == "second"
        assert registry.get("a").expires_at == NOW + 2 * MINUTE

    def test_get_all_is_a_snapshot(self, registry):
        registry.add(make_record("a", NOW + MINUTE))
        registry.add(make_record("b", NOW - MINUTE))

        snapshot = registry.get_all()
        registry.clear()

        assert {record.id for record in snapshot} == {"a", "b"}
        assert registry.size() == 0

    def test_remove_reports_presence(self, registry):
        registry.add(make_record("a", NOW + MINUTE))

        assert registry.remove("a") is True
        assert registry.remove("a") is False
        assert registry.size() == 0

    def test_remove_multiple_is_idempotent(self, registry):
        for resource_id in ("a", "b", "c"):
            registry.add(make_record(resource_id, NOW - MINUTE))

        registry.remove_multiple(["a", "b", "unknown"])
        after_first = {record.id for record in registry.get_all()}
        registry.remove_multiple(["a", "b", "unknown"])
        after_second = {record.id for record in registry.get_all()}

        assert after_first == after_second == {"c"}

    def test_remove_multiple_accepts_empty_input(self, registry):
        registry.add(make_record("a", NOW))
        registry.remove_multiple([])
        assert registry.size() == 1

    def test_clear(self, registry):
        for i in range(4):
            registry.add(make_record(f"r{i}", NOW + i))
        registry.clear()
        assert registry.size() == 0
        assert registry.get_all() == []

    def test_never_evicts_expired_records(self, registry):
        registry.add(make_record("old", NOW - 365 * 24 * 60 * MINUTE))

        registry.get_expired(NOW)
        registry.get_expiring_soon(60, NOW)

        assert registry.get("old") is not None


class TestTimeQueries:

    def test_expired_includes_boundary(self, registry):
        registry.add(make_record("due", NOW))
        registry.add(make_record("past", NOW - 1))
        registry.add(make_record("future", NOW + 1))

        assert [record.id for record in registry.get_expired(NOW)] == ["due", "past"]

    def test_expired_is_recomputed_as_time_passes(self, registry):
        registry.add(make_record("a", NOW + MINUTE))

        assert registry.get_expired(NOW) == []
        assert [record.id for record in registry.get_expired(NOW + MINUTE)] == ["a"]

    def test_expired_defaults_to_wall_clock(self, registry):
        registry.add(make_record("ancient", 1_000, created_at=0))
        assert [record.id for record in registry.get_expired()] == ["ancient"]

    def test_expiring_soon_window_bounds(self, registry):
        registry.add(make_record("expired", NOW))
        registry.add(make_record("soon", NOW + 1))
        registry.add(make_record("edge", NOW + 60 * MINUTE))
        registry.add(make_record("later", NOW + 60 * MINUTE + 1))

        soon = {record.id for record in registry.get_expiring_soon(60, NOW)}

        assert soon == {"soon", "edge"}

    @pytest.mark.parametrize("offset", [-10 * MINUTE, -1, 0, 1, 30 * MINUTE, 60 * MINUTE, 61 * MINUTE])
    def test_queries_never_overlap(self, registry, offset):
        registry.add(make_record("r", NOW + offset))

        expired = {record.id for record in registry.get_expired(NOW)}
        soon = {record.id for record in registry.get_expiring_soon(60, NOW)}

        assert not expired & soon
        if offset <= 0:
            assert expired == {"r"}
        elif offset <= 60 * MINUTE:
            assert soon == {"r"}
        else:
            assert not expired and not soon


class TestResourceRecord:

    def test_expiry_must_follow_creation(self):
        with pytest.raises(ValidationError):
            ResourceRecord(id="a", created_at=NOW, expires_at=NOW)

    def test_auxiliary_fields_round_trip(self, registry):
        record = make_record(
            "a",
            NOW + MINUTE,
            mimetype="image/png",
            download_url="https://gofile.io/d/abc",
            folder_id="folder-1",
            download_count=3,
        )
        registry.add(record)

        stored = registry.get("a")
        assert stored.mimetype == "image/png"
        assert stored.folder_id == "folder-1"
        assert stored.download_count == 3


class TestHelpers:

    def test_expiry_options(self):
        values = {option["display"]: option["value"] for option in EXPIRY_OPTIONS}
        assert values["15m"] == 15 * MINUTE
        assert values["1w"] == 7 * 24 * 60 * MINUTE
        assert len(EXPIRY_OPTIONS) == 6

    def test_expiry_timestamp(self):
        assert expiry_timestamp(MINUTE, now=NOW) == NOW + MINUTE

    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 Bytes"),
            (512, "512 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5 MB"),
            (3 * 1024 ** 3, "3 GB"),
        ],
    )
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    @pytest.mark.parametrize(
        "remaining, expected",
        [
            (0, "Expired"),
            (-MINUTE, "Expired"),
            (30 * 1000, "0m"),
            (9 * MINUTE, "9m"),
            (135 * MINUTE, "2h 15m"),
            ((2 * 24 + 3) * 60 * MINUTE, "2d 3h"),
        ],
    )
    def test_format_time_remaining(self, remaining, expected):
        assert format_time_remaining(NOW + remaining, now=NOW) == expected
