"""Tests for read-time activation evaluation."""

from datetime import datetime, timedelta, timezone

import pytest

from alerte_meteo.activation import evaluate_activation, is_now_between, parse_iso
from alerte_meteo.models import default_alert, iso_utc
from alerte_meteo.normalizer import normalize_alert

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _rec(**fields):
    return normalize_alert(fields)


class TestParseIso:
    def test_z_suffix(self):
        assert parse_iso("2026-01-15T12:00:00.000Z") == NOW

    def test_offset(self):
        assert parse_iso("2026-01-15T13:00:00+01:00") == NOW

    def test_naive_is_utc(self):
        assert parse_iso("2026-01-15T12:00") == NOW

    @pytest.mark.parametrize("value", ["", "garbage", "2026-13-45"])
    def test_invalid(self, value):
        assert parse_iso(value) is None


class TestIsNowBetween:
    def test_unbounded(self):
        assert is_now_between("", "", NOW)

    def test_before_start(self):
        assert not is_now_between(iso_utc(NOW + timedelta(minutes=1)), "", NOW)

    def test_after_end(self):
        assert not is_now_between("", iso_utc(NOW - timedelta(seconds=1)), NOW)

    def test_bounds_inclusive(self):
        assert is_now_between(iso_utc(NOW), iso_utc(NOW), NOW)

    def test_unparseable_bound_ignored(self):
        assert is_now_between("not a date", iso_utc(NOW + timedelta(hours=1)), NOW)


class TestEvaluateActivation:
    @pytest.mark.parametrize("level", ["yellow", "orange", "red"])
    def test_no_window_active_when_level_set(self, level):
        out = evaluate_activation(_rec(level=level, regions=["Alger"]), NOW)
        assert out.active is True
        assert out.level == level
        assert out.regions == ["Alger"]

    def test_level_none_is_default_record(self):
        rec = _rec(level="none", title="Vieux titre", message="texte", regions=["Oran"],
                   updatedAt="2026-01-01T00:00:00.000Z")
        out = evaluate_activation(rec, NOW)
        expected = default_alert()
        expected.updatedAt = "2026-01-01T00:00:00.000Z"
        assert out == expected

    def test_missing_updated_at_gets_fresh_stamp(self):
        out = evaluate_activation(_rec(level="none"), NOW)
        assert out.updatedAt == iso_utc(NOW)

    def test_inside_window(self):
        rec = _rec(
            level="yellow",
            startAt=iso_utc(NOW - timedelta(hours=1)),
            endAt=iso_utc(NOW + timedelta(hours=1)),
        )
        out = evaluate_activation(rec, NOW)
        assert out.active is True
        assert out.startAt == rec.startAt

    @pytest.mark.parametrize("level", ["none", "yellow", "orange", "red"])
    def test_future_start_is_inactive(self, level):
        rec = _rec(level=level, regions=["Alger"], startAt=iso_utc(NOW + timedelta(minutes=5)))
        assert evaluate_activation(rec, NOW).active is False

    def test_expired_window_resets_content(self):
        rec = _rec(
            level="red",
            regions=["Alger", "Oran"],
            title="Tempête",
            message="Restez chez vous",
            startAt=iso_utc(NOW - timedelta(hours=3)),
            endAt=iso_utc(NOW - timedelta(hours=1)),
            updatedAt="2026-01-15T08:00:00.000Z",
        )
        out = evaluate_activation(rec, NOW)
        assert out.active is False
        assert out.level == "none"
        assert out.regions == []
        assert out.region == ""
        assert out.title == "Aucune alerte"
        assert out.message == ""
        assert out.startAt == "" and out.endAt == ""
        assert out.updatedAt == "2026-01-15T08:00:00.000Z"

    def test_does_not_mutate_input(self):
        rec = _rec(level="red", endAt=iso_utc(NOW - timedelta(hours=1)))
        evaluate_activation(rec, NOW)
        assert rec.level == "red"

    def test_active_result_does_not_share_regions(self):
        rec = _rec(level="red", regions=["Alger"])
        out = evaluate_activation(rec, NOW)
        out.regions.append("Oran")
        assert rec.regions == ["Alger"]

    def test_naive_now_treated_as_utc(self):
        rec = _rec(level="red", endAt=iso_utc(NOW + timedelta(minutes=1)))
        assert evaluate_activation(rec, NOW.replace(tzinfo=None)).active is True
