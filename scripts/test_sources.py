#!/usr/bin/env python3
"""Test script for source chains, synthetic sources, config and compass helpers.

Run from project root:
    python scripts/test_sources.py
"""

import os
import sys
import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.clients.synthetic import (
    SYNTHETIC_DIRECTIONS,
    SyntheticTideSource,
    SyntheticWeatherSource,
    weather_seed,
)
from src.core.compass import CompassDirection
from src.core.conditions import TideType
from src.core.config import AppConfig, load_config, load_env_value
from src.core.errors import ConfigurationMissing, EmptyData, SourceUnavailable
from src.core.route import Leg, WindEffect, parse_route
from src.core.sources import SourceChain, SourceStrategy, collect_statuses
from src.core.units import m_s_to_kmh, round_half_up, round_to_tenth


DAY = date(2024, 8, 17)


def failing(error):
    def fetch(*args):
        raise error
    return fetch


def test_chain_first_success():
    chain = SourceChain("test", [
        SourceStrategy("live", failing(SourceUnavailable("HTTP 503", source="live"))),
        SourceStrategy("backup", lambda day: f"backup {day}"),
        SourceStrategy("never", lambda day: "unused"),
    ])
    outcome = chain.first_success(DAY)

    assert outcome.value == "backup 2024-08-17"
    assert outcome.source == "backup"
    assert len(outcome.attempts) == 2
    assert outcome.errors == ["live: HTTP 503"]


def test_chain_all_fail():
    chain = SourceChain("test", [
        SourceStrategy("live", failing(ConfigurationMissing("no key"))),
        SourceStrategy("empty", lambda: None),
    ])
    outcome = chain.first_success()

    assert outcome.value is None
    assert outcome.source is None
    assert len(outcome.errors) == 2
    assert outcome.errors[1] == "empty: empty returned no data"


def test_chain_propagates_programming_errors():
    """Only SourceErrors are turned into failed results."""
    chain = SourceChain("test", [SourceStrategy("broken", failing(KeyError("wind")))])
    try:
        chain.first_success()
    except KeyError:
        pass
    else:
        raise AssertionError("Expected KeyError to propagate")


def test_collect_statuses():
    first = SourceChain("weather", [
        SourceStrategy("live", failing(EmptyData("no samples"))),
        SourceStrategy("synthetic", lambda: 1),
    ]).first_success()
    second = SourceChain("tides", [SourceStrategy("synthetic", lambda: 2)]).first_success()

    statuses = {s.name: s for s in collect_statuses([first, second])}

    assert statuses["live"].failure_count == 1
    assert statuses["live"].success_rate == 0.0
    assert statuses["live"].last_error == "no samples"
    assert statuses["synthetic"].success_count == 2
    assert statuses["synthetic"].total_calls == 2
    assert statuses["synthetic"].success_rate == 100.0


def test_rounding_helpers():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -2
    assert round_half_up(0.25, 1) == 0.3
    assert round_to_tenth(1.04) == 1.0
    assert m_s_to_kmh(5) == 18
    assert m_s_to_kmh(2.5) == 9


def test_compass_round_trip():
    for direction in CompassDirection:
        assert CompassDirection.from_degrees(direction.degrees) is direction

    assert CompassDirection.from_degrees(360) is CompassDirection.N
    assert CompassDirection.from_degrees(11.25) is CompassDirection.NNE
    assert CompassDirection.from_degrees(348.75) is CompassDirection.N
    assert CompassDirection.from_degrees(225) is CompassDirection.SW
    assert CompassDirection.parse(" ne ") is CompassDirection.NE
    assert str(CompassDirection.WSW) == "WSW"

    try:
        CompassDirection.parse("XX")
    except ValueError:
        pass
    else:
        raise AssertionError("Expected ValueError for unknown direction")


def test_route_rejects_shared_tailwinds():
    try:
        parse_route({"legs": {"outgoing": {"tailwinds": ["NE", "SW"]}}})
    except ValueError as e:
        assert "SW" in str(e)
    else:
        raise AssertionError("Expected ValueError for overlapping tailwinds")

    route = parse_route({"name": "Okahu Bay", "crosswinds": ["N"]})
    assert route.incoming.destination == "Okahu Bay"
    assert route.wind_effect(Leg.OUTGOING, CompassDirection.S) is WindEffect.NEUTRAL


def test_config_defaults():
    config = AppConfig()

    assert config.route.name == "Ian Shaw Park"
    assert config.forecast.start_hour == 6
    assert config.forecast.end_hour == 22
    assert config.openweathermap.api_key == ""
    assert not config.offline


def test_load_config_file():
    yaml_text = "\n".join([
        "route:",
        "  name: Okahu Bay",
        "sources:",
        "  offline: true",
        "  niwa:",
        "    api_key_env: PADDLE_TEST_NIWA_KEY",
        "    datum: LAT",
        "forecast:",
        "  start_hour: 7",
        "  end_hour: 19",
    ])
    os.environ["PADDLE_TEST_NIWA_KEY"] = "abc123"
    try:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "paddle.yaml"
            path.write_text(yaml_text)

            config = load_config(path)
            assert config.route.name == "Okahu Bay"
            assert config.offline
            assert config.niwa.api_key == "abc123"
            assert config.niwa.datum == "LAT"
            assert config.forecast.start_hour == 7
            assert config.forecast.end_hour == 19
            assert config.forecast.timezone == "Pacific/Auckland"

            assert not load_config(path, offline=False).offline
    finally:
        del os.environ["PADDLE_TEST_NIWA_KEY"]


def test_load_config_errors():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            load_config(Path(tmp) / "missing.yaml")
        except FileNotFoundError:
            pass
        else:
            raise AssertionError("Expected FileNotFoundError for an explicit missing path")

        path = Path(tmp) / "paddle.yaml"
        path.write_text("forecast:\n  start_hour: 20\n  end_hour: 8\n")
        try:
            load_config(path)
        except ValueError:
            pass
        else:
            raise AssertionError("Expected ValueError for start hour after end hour")


def test_env_value():
    os.environ["PADDLE_TEST_VALUE"] = "from-env"
    try:
        assert load_env_value("PADDLE_TEST_VALUE") == "from-env"
    finally:
        del os.environ["PADDLE_TEST_VALUE"]


def test_weather_seed():
    assert weather_seed(DAY, 17) == 17 + 17 * 24 + 7 * 744
    assert weather_seed(date(2024, 1, 1), 0) == 24


def test_synthetic_weather_reproducible():
    source = SyntheticWeatherSource()

    for hour in range(24):
        first = source.sample(DAY, hour)
        second = SyntheticWeatherSource().sample(DAY, hour)
        assert first == second
        assert first.wind_speed >= 3
        assert first.gust_speed >= first.wind_speed + 3
        assert first.wind_direction in SYNTHETIC_DIRECTIONS
        assert first.timestamp == datetime(2024, 8, 17, hour)

    assert source.sample_at(datetime(2024, 8, 17, 9, 45)) == source.sample(DAY, 9)
    assert len(source.get_day_forecast(DAY, 6, 22)) == 17


def test_synthetic_tides_reproducible():
    source = SyntheticTideSource()
    tides = source.get_daily_extrema(DAY)

    assert tides == SyntheticTideSource().get_daily_extrema(DAY)
    assert tides.date == DAY
    assert len(tides.tides) == 4
    assert [t.type for t in tides.tides] == [TideType.HIGH, TideType.LOW, TideType.HIGH, TideType.LOW]

    for extremum, base_hour in zip(tides.tides, [2, 8, 14, 20]):
        base = datetime(2024, 8, 17, base_hour)
        assert abs(extremum.time - base) <= timedelta(hours=1)
        if extremum.type is TideType.HIGH:
            assert 1.3 <= extremum.height <= 1.7
        else:
            assert 0.0 <= extremum.height <= 0.4

    other_day = source.get_daily_extrema(DAY + timedelta(days=1))
    assert other_day.tides != tides.tides


def test_synthetic_current_tide():
    source = SyntheticTideSource()
    now = datetime(2024, 8, 17, 9, 20)

    first = source.get_current_tide(now)
    assert first == SyntheticTideSource().get_current_tide(now)
    assert first.timestamp == now
    assert 0.0 <= first.height <= 2.0


def run_all_tests():
    """Run all source tests."""
    print("\n" + "="*60)
    print("SOURCES AND CONFIG TEST SUITE")
    print("="*60)

    tests = [
        ("Chain First Success", test_chain_first_success),
        ("Chain All Fail", test_chain_all_fail),
        ("Chain Propagates Bugs", test_chain_propagates_programming_errors),
        ("Collect Statuses", test_collect_statuses),
        ("Rounding Helpers", test_rounding_helpers),
        ("Compass Round Trip", test_compass_round_trip),
        ("Route Validation", test_route_rejects_shared_tailwinds),
        ("Config Defaults", test_config_defaults),
        ("Load Config File", test_load_config_file),
        ("Load Config Errors", test_load_config_errors),
        ("Env Value", test_env_value),
        ("Weather Seed", test_weather_seed),
        ("Synthetic Weather", test_synthetic_weather_reproducible),
        ("Synthetic Tides", test_synthetic_tides_reproducible),
        ("Synthetic Current Tide", test_synthetic_current_tide),
    ]

    passed = 0
    failed = 0

    for name, test_func in tests:
        try:
            test_func()
            passed += 1
            print(f"  ✓ {name}")
        except AssertionError as e:
            failed += 1
            print(f"\n  ✗ FAILED: {name}")
            print(f"    Error: {e}")
        except Exception as e:
            failed += 1
            print(f"\n  ✗ ERROR: {name}")
            print(f"    Exception: {e}")

    print("\n" + "="*60)
    print(f"  Passed: {passed}/{len(tests)}")
    print("="*60)

    return failed == 0


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
