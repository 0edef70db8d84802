"""Format paddle forecasts for terminal and SMS output.

Supports plain text (full report) and SMS (short) formats.
"""

from datetime import datetime
from typing import Optional

from src.core.arbiter import PaddleDirectionAssessment, Recommendation
from src.core.conditions import PaddlingConditions, TideDirection, TideType
from src.core.forecast import DailyForecast, ExtendedForecast, HourlyForecast, tide_time_indicator
from src.core.scorer import fmt


DIRECTION_BADGES = {
    Recommendation.BOTH: "Both",
    Recommendation.OUTGOING: "Outgoing",
    Recommendation.INCOMING: "Incoming",
    Recommendation.NEITHER: "Avoid",
}

TIDE_ARROWS = {
    TideDirection.INCOMING: "rising",
    TideDirection.OUTGOING: "falling",
    TideDirection.SLACK: "slack",
}


def format_time(when: datetime) -> str:
    """Format time as e.g. 5:30 PM"""
    return when.strftime("%I:%M %p").lstrip("0")


def format_time_short(when: datetime) -> str:
    """Format time to short form (e.g. 5:30pm)."""
    return when.strftime("%I:%M%p").lstrip("0").lower()


def format_current_lines(
    conditions: PaddlingConditions,
    assessment: Optional[PaddleDirectionAssessment] = None,
) -> list[str]:
    """Lines describing current conditions."""
    weather = conditions.weather
    tide = conditions.tide
    tide_word = "High" if tide.type is TideType.HIGH else "Low"

    lines = [
        "CURRENT CONDITIONS",
        "-" * 30,
        f"Time: {format_time(conditions.time_of_day)}",
        f"Wind: {fmt(weather.wind_speed)} km/h {weather.wind_direction} (gusts {fmt(weather.gust_speed)} km/h)",
        f"Tide: {tide_word} ({fmt(tide.height)}m) {TIDE_ARROWS[tide.direction]}",
        f"Temperature: {fmt(weather.temperature)}C",
    ]
    if tide.data_issue:
        lines.append(f"Note: {tide.data_issue}")

    if assessment is not None:
        best = assessment.best
        lines.append(f"Difficulty: {best.level.value.upper()} ({best.score}/10)")
        lines.append(
            f"Direction: {DIRECTION_BADGES[assessment.recommended]} "
            f"(Out {assessment.outgoing.score}/10, In {assessment.incoming.score}/10)"
        )
        lines.append(f"  {assessment.reasoning}")
    return lines


class DigestFormatter:
    """Formats paddle forecasts for different output channels."""

    # SMS character limits
    SMS_MAX_LENGTH = 1600  # Standard SMS limit with concatenation

    # Hours shown in the hourly table
    DISPLAY_START_HOUR = 14
    DISPLAY_END_HOUR = 20

    def __init__(
        self,
        forecast: ExtendedForecast,
        current: Optional[PaddlingConditions] = None,
        current_assessment: Optional[PaddleDirectionAssessment] = None,
        display_start_hour: int = DISPLAY_START_HOUR,
        display_end_hour: int = DISPLAY_END_HOUR,
    ):
        """Initialize formatter with a forecast.

        Args:
            forecast: Today's and tomorrow's forecasts.
            current: Current conditions, shown above the forecast.
            current_assessment: Leg assessment of the current conditions.
            display_start_hour: First hour in the hourly table.
            display_end_hour: Last hour in the hourly table.
        """
        self.forecast = forecast
        self.current = current
        self.current_assessment = current_assessment
        self.display_start_hour = display_start_hour
        self.display_end_hour = display_end_hour

    def format_text(self) -> str:
        """Format the full plain text report.

        Returns:
            Plain text formatted string.
        """
        location = self._location()
        lines = [
            "=" * 50,
            f"PADDLE CONDITIONS - {location.upper()}",
            self.forecast.today.date.strftime("%A, %B %d, %Y"),
            "=" * 50,
            "",
        ]

        if self.current is not None:
            lines.extend(format_current_lines(self.current, self.current_assessment))
            lines.append("")

        for day in self.forecast.days:
            lines.extend(self._format_day_lines(self._day_label(day), day))
            lines.append("")

        statuses = self._merged_statuses()
        if statuses:
            lines.append("DATA SOURCES")
            lines.append("-" * 30)
            for name, (ok, failed, last_error) in statuses.items():
                total = ok + failed
                rate = ok / total * 100 if total else 0.0
                line = f"{name}: {ok}/{total} ok ({rate:.0f}%)"
                if last_error:
                    line += f" - {last_error}"
                lines.append(line)
            lines.append("")

        lines.append("=" * 50)
        return "\n".join(lines)

    def format_sms(self) -> str:
        """Format forecast for SMS delivery.

        Optimized for brevity while conveying essential information.

        Returns:
            SMS-formatted string.
        """
        lines = [f"PADDLE {self.forecast.today.date.strftime('%d/%m')}"]

        if self.current is not None and self.current_assessment is not None:
            best = self.current_assessment.best
            weather = self.current.weather
            lines.append(
                f"Now: {best.score}/10 {DIRECTION_BADGES[self.current_assessment.recommended]}, "
                f"{fmt(weather.wind_speed)}km/h {weather.wind_direction}"
            )

        for day in self.forecast.days:
            label = self._day_label(day).title()
            summary = day.summary
            lines.append("")
            lines.append(
                f"{label}: avg {fmt(summary.average_difficulty)}/10, "
                f"best {format_time_short(summary.best_time)}"
            )
            if day.tides and day.tides.tides:
                tides = " ".join(
                    f"{'H' if t.type is TideType.HIGH else 'L'}{format_time_short(t.time)}"
                    for t in day.tides.tides
                )
                lines.append(f"Tides: {tides}")

        result = "\n".join(lines)

        # Truncate if too long
        if len(result) > self.SMS_MAX_LENGTH:
            result = result[:self.SMS_MAX_LENGTH - 3] + "..."

        return result

    def _format_day_lines(self, title: str, day: DailyForecast) -> list[str]:
        summary = day.summary
        lines = [
            f"{title} ({day.date.strftime('%a %d %b')})",
            "-" * 30,
            f"Best time: {format_time(summary.best_time)}",
            f"Worst time: {format_time(summary.worst_time)}",
            f"Avg difficulty: {fmt(summary.average_difficulty)}/10",
            summary.conditions,
        ]

        if day.tides and day.tides.tides:
            tides = " | ".join(
                f"{'High' if t.type is TideType.HIGH else 'Low'} {format_time(t.time)} ({fmt(t.height)}m)"
                for t in day.tides.tides
            )
            lines.append(f"Tide times: {tides}")

        lines.append("")
        lines.append(f"{'Time':<12}{'Direction':<11}{'Wind':<14}{'Tide':<16}{'Temp':<6}")
        for hour in day.window(self.display_start_hour, self.display_end_hour):
            lines.append(self._format_hour_line(hour, day))

        if day.errors:
            lines.append("")
            lines.append("Issues:")
            for error in day.errors:
                lines.append(f"  - {error}")
        return lines

    def _format_hour_line(self, hour: HourlyForecast, day: DailyForecast) -> str:
        time_str = hour.time.strftime("%H:%M")
        indicator = tide_time_indicator(hour.time, day.tides)
        if indicator is not None:
            time_str = f"{time_str} {indicator.type.value.upper()}"

        weather = hour.weather
        wind = f"{fmt(weather.wind_speed)}km/h {weather.wind_direction}"
        tide = f"{fmt(hour.tide.height)}m {TIDE_ARROWS[hour.tide.direction]}"
        badge = DIRECTION_BADGES[hour.paddle_directions.recommended]
        return f"{time_str:<12}{badge:<11}{wind:<14}{tide:<16}{fmt(weather.temperature)}C"

    def _merged_statuses(self) -> dict[str, tuple[int, int, Optional[str]]]:
        """Source statuses summed across both days."""
        merged: dict[str, tuple[int, int, Optional[str]]] = {}
        for day in self.forecast.days:
            for status in day.source_statuses:
                ok, failed, last_error = merged.get(status.name, (0, 0, None))
                merged[status.name] = (
                    ok + status.success_count,
                    failed + status.failure_count,
                    status.last_error or last_error,
                )
        return merged

    def _day_label(self, day: DailyForecast) -> str:
        """TODAY, TOMORROW or the weekday name."""
        hourly = day.hourly_forecasts
        now = datetime.now(hourly[0].time.tzinfo) if hourly else datetime.now()
        offset = (day.date - now.date()).days
        if offset == 0:
            return "TODAY"
        if offset == 1:
            return "TOMORROW"
        return day.date.strftime("%A").upper()

    def _location(self) -> str:
        if self.current is not None:
            return self.current.location
        return self.forecast.today.location or "Paddle route"



def format_text(forecast: ExtendedForecast, current: Optional[PaddlingConditions] = None) -> str:
    """Quick access to format a forecast as plain text."""
    return DigestFormatter(forecast, current).format_text()


def format_sms(forecast: ExtendedForecast) -> str:
    """Quick access to format a forecast for SMS."""
    return DigestFormatter(forecast).format_sms()
