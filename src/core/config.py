"""Application configuration.

Loads config/paddle.yaml (route, source settings, forecast window) and API
keys from the environment or a .env file. The resulting AppConfig is passed
explicitly to clients and the planner.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from src.core.route import Route, default_route, parse_route


logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


def load_env_value(name: str) -> str:
    """Load a setting from the environment or a .env file."""
    # First check environment variable
    value = os.environ.get(name, "")
    if value:
        return value

    # Try to load from .env file in project root
    env_paths = [
        PROJECT_ROOT / ".env",
        Path.cwd() / ".env",
    ]
    prefix = f"{name}="
    for env_path in env_paths:
        if not env_path.exists():
            continue
        try:
            with open(env_path) as f:
                for line in f:
                    line = line.strip()
                    if line.startswith(prefix):
                        return line.split("=", 1)[1].strip().strip('"').strip("'")
        except OSError as e:
            logger.debug(f"Could not read {env_path}: {e}")
    return ""


@dataclass
class OpenWeatherMapSettings:
    """OpenWeatherMap connection settings."""
    base_url: str = "https://api.openweathermap.org/data/2.5"
    api_key: str = ""
    timeout: float = 10
    cache_ttl: int = 1800  # 30 minutes


@dataclass
class NIWASettings:
    """NIWA tide API connection settings."""
    base_url: str = "https://forecast-v2.metservice.com/niwa/tide"
    api_key: str = ""
    timeout: float = 15
    cache_ttl: int = 3600  # 1 hour
    datum: str = "MSL"


@dataclass
class ForecastSettings:
    """Hourly grid and display window."""
    timezone: str = "Pacific/Auckland"
    start_hour: int = 6
    end_hour: int = 22
    display_start_hour: int = 14
    display_end_hour: int = 20


@dataclass
class AppConfig:
    """Everything the planner and clients need at startup."""
    route: Route = field(default_factory=default_route)
    openweathermap: OpenWeatherMapSettings = field(default_factory=OpenWeatherMapSettings)
    niwa: NIWASettings = field(default_factory=NIWASettings)
    forecast: ForecastSettings = field(default_factory=ForecastSettings)
    offline: bool = False  # synthetic sources only


def find_config_file() -> Optional[Path]:
    """Locate paddle.yaml beside the project or in the working directory."""
    possible_paths = [
        PROJECT_ROOT / "config" / "paddle.yaml",
        Path.cwd() / "config" / "paddle.yaml",
    ]
    for path in possible_paths:
        if path.exists():
            return path
    return None


def load_config(path: Optional[Path] = None, offline: Optional[bool] = None) -> AppConfig:
    """Load configuration from YAML and the environment.

    Args:
        path: Path to paddle.yaml. Defaults to config/paddle.yaml.
        offline: Override the offline flag from the file.

    Returns:
        AppConfig. Built-in defaults are used when no file is found.
    """
    if path is None:
        path = find_config_file()
    elif not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data: dict = {}
    if path is not None:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        logger.debug(f"Loaded configuration from {path}")
    else:
        logger.debug("No paddle.yaml found, using built-in defaults")

    sources = data.get("sources", {})
    owm = sources.get("openweathermap", {})
    niwa = sources.get("niwa", {})
    forecast = data.get("forecast", {})

    owm_defaults = OpenWeatherMapSettings()
    niwa_defaults = NIWASettings()
    forecast_defaults = ForecastSettings()

    config = AppConfig(
        route=parse_route(data.get("route", {})),
        openweathermap=OpenWeatherMapSettings(
            base_url=owm.get("base_url", owm_defaults.base_url),
            api_key=load_env_value(owm.get("api_key_env", "OPENWEATHER_API_KEY")),
            timeout=owm.get("timeout", owm_defaults.timeout),
            cache_ttl=owm.get("cache_ttl", owm_defaults.cache_ttl),
        ),
        niwa=NIWASettings(
            base_url=niwa.get("base_url", niwa_defaults.base_url),
            api_key=load_env_value(niwa.get("api_key_env", "NIWA_API_KEY")),
            timeout=niwa.get("timeout", niwa_defaults.timeout),
            cache_ttl=niwa.get("cache_ttl", niwa_defaults.cache_ttl),
            datum=niwa.get("datum", niwa_defaults.datum),
        ),
        forecast=ForecastSettings(
            timezone=forecast.get("timezone", forecast_defaults.timezone),
            start_hour=forecast.get("start_hour", forecast_defaults.start_hour),
            end_hour=forecast.get("end_hour", forecast_defaults.end_hour),
            display_start_hour=forecast.get("display_start_hour", forecast_defaults.display_start_hour),
            display_end_hour=forecast.get("display_end_hour", forecast_defaults.display_end_hour),
        ),
        offline=bool(sources.get("offline", False)),
    )

    if offline is not None:
        config.offline = offline

    if config.forecast.start_hour > config.forecast.end_hour:
        raise ValueError(
            f"Forecast start hour {config.forecast.start_hour} is after end hour {config.forecast.end_hour}"
        )

    return config
