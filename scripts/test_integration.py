#!/usr/bin/env python3
"""Integration test script to verify the full pipeline works.

Tests:
1. Offline daily and extended forecasts
2. Fallback from unconfigured live sources
3. Sample conditions
4. Digest formatting
5. Command line runner

Runs without API keys or network access.

Run from project root:
    python scripts/test_integration.py
"""

import sys
import tempfile
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.clients.synthetic import SAMPLE_TIDES
from src.core.arbiter import Recommendation
from src.core.compass import CompassDirection
from src.core.conditions import TideDirection
from src.core.config import AppConfig
from src.core.planner import PaddlePlanner, get_current_conditions
from src.digests.formatter import DigestFormatter, format_current_lines, format_sms, format_text


DAY = date(2024, 8, 17)


def offline_planner():
    return PaddlePlanner(AppConfig(offline=True))


def test_offline_daily_forecast():
    """Synthetic sources produce a full day with no errors."""
    print("\n" + "="*60)
    print("TEST: Offline Daily Forecast")
    print("="*60)

    planner = offline_planner()
    forecast = planner.get_daily_forecast(DAY)

    summary = forecast.summary
    print(f"\n  Date: {forecast.date}")
    print(f"  Best: {summary.best_time:%H:%M}  Worst: {summary.worst_time:%H:%M}")
    print(f"  Average: {summary.average_difficulty}/10")
    print(f"  {summary.conditions}")

    assert forecast.date == DAY
    assert len(forecast.hourly_forecasts) == 17
    assert forecast.weather_source == "synthetic"
    assert forecast.tide_source == "synthetic"
    assert forecast.errors == []
    assert len(forecast.tides.tides) == 4
    assert [s.name for s in forecast.source_statuses] == ["synthetic"]
    assert forecast.source_statuses[0].success_count == 2

    for hour in forecast.hourly_forecasts:
        assert hour.weather == planner.synthetic_weather.sample(DAY, hour.time.hour)
        assert 1 <= hour.difficulty.score <= 10
        assert hour.time.tzinfo is planner.tz

    # Same date, same forecast
    again = offline_planner().get_daily_forecast(DAY)
    assert again.summary == forecast.summary


def test_offline_extended_forecast():
    print("\n" + "="*60)
    print("TEST: Offline Extended Forecast")
    print("="*60)

    forecast = offline_planner().get_extended_forecast(DAY)

    for day in forecast.days:
        print(f"\n  {day.date}: avg {day.summary.average_difficulty}/10, {day.easy_hours} easy hour(s)")

    assert forecast.today.date == DAY
    assert forecast.tomorrow.date == date(2024, 8, 18)
    assert len(forecast.days) == 2


def test_unconfigured_sources_fall_back():
    """Live clients without API keys fall through to the synthetic sources."""
    print("\n" + "="*60)
    print("TEST: Fallback From Unconfigured Sources")
    print("="*60)

    planner = PaddlePlanner(AppConfig())
    forecast = planner.get_daily_forecast(DAY)

    print("\n  Errors:")
    for error in forecast.errors:
        print(f"    - {error}")

    assert forecast.weather_source == "synthetic"
    assert forecast.tide_source == "synthetic"
    assert len(forecast.hourly_forecasts) == 17
    assert {s.name for s in forecast.source_statuses} == {"openweathermap", "niwa", "synthetic"}
    assert any("NIWA API key not configured" in e for e in forecast.errors)
    assert any(e.startswith("openweathermap:") for e in forecast.errors)

    current = get_current_conditions(AppConfig())
    print(f"\n  Current: {current.weather.wind_speed}km/h {current.weather.wind_direction}, "
          f"tide {current.tide.height}m")
    assert current.location == "Ian Shaw Park"
    assert current.weather.wind_speed >= 3


def test_sample_conditions():
    print("\n" + "="*60)
    print("TEST: Sample Conditions")
    print("="*60)

    planner = offline_planner()

    conditions = planner.get_current_conditions_fallback(99, 2)
    assert conditions.weather.wind_speed == 5
    assert conditions.weather.wind_direction is CompassDirection.NE
    assert conditions.tide.direction is TideDirection.INCOMING
    assert conditions.tide == SAMPLE_TIDES[2]
    assert conditions.tide is not SAMPLE_TIDES[2]
    assert conditions.time_of_day == datetime(2024, 8, 17, 17, 30)

    assessment = planner.assess(conditions)
    print(f"\n  Out {assessment.outgoing.score}/10, In {assessment.incoming.score}/10, "
          f"{assessment.recommended.value}")
    print(f"  {assessment.reasoning}")
    assert assessment.best.score == max(assessment.outgoing.score, assessment.incoming.score)

    # Strong westerly: tailwind home, headwind out
    windy = planner.assess(planner.get_current_conditions_fallback(2, 0))
    assert windy.outgoing.score < windy.incoming.score
    assert windy.recommended in (Recommendation.INCOMING, Recommendation.NEITHER)

    lines = format_current_lines(conditions, assessment)
    assert lines[0] == "CURRENT CONDITIONS"
    assert "Wind: 5 km/h NE (gusts 8 km/h)" in lines


def test_digest_formatting():
    print("\n" + "="*60)
    print("TEST: Digest Formatting")
    print("="*60)

    planner = offline_planner()
    forecast = planner.get_extended_forecast(DAY)

    text = format_text(forecast)
    print()
    print(text)

    assert "PADDLE CONDITIONS - IAN SHAW PARK" in text
    assert "SATURDAY (Sat 17 Aug)" in text
    assert "SUNDAY (Sun 18 Aug)" in text
    assert "Tide times:" in text
    assert "synthetic: 4/4 ok (100%)" in text
    for hour in range(14, 21):
        assert f"\n{hour:02d}:00" in text
    assert "\n13:00" not in text

    sms = format_sms(forecast)
    print()
    print(sms)
    assert sms.startswith("PADDLE 17/08")
    assert "Saturday: avg" in sms
    assert len(sms) <= DigestFormatter.SMS_MAX_LENGTH

    current = planner.get_current_conditions_fallback()
    formatter = DigestFormatter(forecast, current=current, current_assessment=planner.assess(current))
    assert "CURRENT CONDITIONS" in formatter.format_text()
    assert "Now:" in formatter.format_sms()

    formatter.SMS_MAX_LENGTH = 40
    short = formatter.format_sms()
    assert len(short) == 40
    assert short.endswith("...")


def test_command_line():
    print("\n" + "="*60)
    print("TEST: Command Line Runner")
    print("="*60)

    from scripts.run_daily import main

    with tempfile.TemporaryDirectory() as tmp:
        text_path = Path(tmp) / "digest.txt"
        assert main(["--offline", "--date", "2024-08-17", "--output", str(text_path)]) == 0
        assert "PADDLE CONDITIONS" in text_path.read_text()

        sms_path = Path(tmp) / "digest.sms"
        assert main(["--offline", "--date", "2024-08-17", "--format", "sms", "-o", str(sms_path)]) == 0
        assert sms_path.read_text().startswith("PADDLE 17/08")

        current_path = Path(tmp) / "current.txt"
        assert main(["--offline", "--current", "-o", str(current_path)]) == 0
        assert current_path.read_text().startswith("CURRENT CONDITIONS")

        assert main(["--offline", "--config", str(Path(tmp) / "missing.yaml")]) == 2


def run_all_tests():
    """Run all integration tests."""
    print("\n" + "#"*60)
    print("# PADDLE CONDITIONS - INTEGRATION TESTS")
    print(f"# {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("#"*60)

    tests = [
        ("Offline Daily Forecast", test_offline_daily_forecast),
        ("Offline Extended Forecast", test_offline_extended_forecast),
        ("Unconfigured Sources", test_unconfigured_sources_fall_back),
        ("Sample Conditions", test_sample_conditions),
        ("Digest Formatting", test_digest_formatting),
        ("Command Line", test_command_line),
    ]

    results = []
    for name, test_func in tests:
        try:
            test_func()
            results.append((name, True))
        except AssertionError as e:
            print(f"\n  ASSERTION FAILED in {name}: {e}")
            results.append((name, False))
        except Exception as e:
            print(f"\n  EXCEPTION in {name}: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("INTEGRATION TEST RESULTS")
    print("="*60)

    for name, passed in results:
        status = "✓ PASS" if passed else "✗ FAIL"
        print(f"  {status}: {name}")

    passed_count = sum(1 for _, p in results if p)
    print(f"\n  Total: {passed_count}/{len(results)} tests passed")
    print("="*60)

    return all(p for _, p in results)


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
