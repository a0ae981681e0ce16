from __future__ import annotations

from dataclasses import dataclass

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from sabermetric_engine.exceptions import ConfigError

_DEFAULTS: dict[str, object] = {
    "win_expectancy": {
        "score_diff_cap": 11,
        "extra_innings_bucket": 10,
        "min_sample_size": 1,
    },
    "park_factors": {
        "regression_games": 162.0,
        "min_games": 1,
    },
    "leverage": {
        "low_threshold": 0.85,
        "high_threshold": 2.0,
    },
    "war": {
        "replacement_runs_per_pa": -20 / 600,
        "pitcher_replacement_runs_per_9": 1.0,
        "fielding_runs_per_play": 0.1,
    },
}


def create_config(
    yaml_path: str = "saber.yaml",
    env_prefix: str = "SABER",
    defaults: dict[str, object] | None = None,
    *,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file; a missing file is ignored.
        env_prefix: Prefix for environment variables (``SABER__WAR__FIELDING_RUNS_PER_PLAY``).
        defaults: Default configuration values.
        overrides: Values that take precedence over every other layer.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))
    return ConfigurationSet(*layers)


@dataclass(frozen=True)
class EngineSettings:
    """Tunables handed to the engines as explicit constructor arguments."""

    score_diff_cap: int = 11
    extra_innings_bucket: int = 10
    win_expectancy_min_sample_size: int = 1
    park_regression_games: float = 162.0
    park_min_games: int = 1
    low_leverage_threshold: float = 0.85
    high_leverage_threshold: float = 2.0
    replacement_runs_per_pa: float = -20 / 600
    pitcher_replacement_runs_per_9: float = 1.0
    fielding_runs_per_play: float = 0.1


def _float(cfg: ConfigurationSet, key: str) -> float:
    # env vars arrive as strings
    raw = cfg[key]
    try:
        return float(str(raw))
    except ValueError as e:
        raise ConfigError(f"Invalid value for '{key}': {raw!r}", key=key) from e


def _int(cfg: ConfigurationSet, key: str) -> int:
    value = _float(cfg, key)
    if not value.is_integer():
        raise ConfigError(f"Expected a whole number for '{key}', got {value}", key=key)
    return int(value)


def load_engine_settings(cfg: ConfigurationSet | None = None) -> EngineSettings:
    if cfg is None:
        cfg = create_config()
    settings = EngineSettings(
        score_diff_cap=_int(cfg, "win_expectancy.score_diff_cap"),
        extra_innings_bucket=_int(cfg, "win_expectancy.extra_innings_bucket"),
        win_expectancy_min_sample_size=_int(cfg, "win_expectancy.min_sample_size"),
        park_regression_games=_float(cfg, "park_factors.regression_games"),
        park_min_games=_int(cfg, "park_factors.min_games"),
        low_leverage_threshold=_float(cfg, "leverage.low_threshold"),
        high_leverage_threshold=_float(cfg, "leverage.high_threshold"),
        replacement_runs_per_pa=_float(cfg, "war.replacement_runs_per_pa"),
        pitcher_replacement_runs_per_9=_float(cfg, "war.pitcher_replacement_runs_per_9"),
        fielding_runs_per_play=_float(cfg, "war.fielding_runs_per_play"),
    )
    _validate(settings)
    return settings


def _validate(settings: EngineSettings) -> None:
    if settings.score_diff_cap < 1:
        raise ConfigError("score_diff_cap must be at least 1", key="win_expectancy.score_diff_cap")
    if settings.extra_innings_bucket < 10:
        raise ConfigError("extra_innings_bucket must be 10 or later", key="win_expectancy.extra_innings_bucket")
    if settings.win_expectancy_min_sample_size < 1:
        raise ConfigError("min_sample_size must be at least 1", key="win_expectancy.min_sample_size")
    if settings.park_regression_games < 0:
        raise ConfigError("regression_games must be non-negative", key="park_factors.regression_games")
    if settings.park_min_games < 1:
        raise ConfigError("min_games must be at least 1", key="park_factors.min_games")
    if not 0 < settings.low_leverage_threshold <= settings.high_leverage_threshold:
        raise ConfigError(
            "leverage thresholds must satisfy 0 < low <= high",
            key="leverage.low_threshold",
        )
    if settings.fielding_runs_per_play < 0:
        raise ConfigError("fielding_runs_per_play must be non-negative", key="war.fielding_runs_per_play")
