"""Faucet configuration: commands, scorers and settings."""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import structlog

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from faucet.core.bash import bash_join, is_parseable
from faucet.core.errors import ConfigError

ENV_CONFIG = "FAUCET_CONFIG"
ENV_LOG_LEVEL = "FAUCET_LOG_LEVEL"
CONFIG_NAME = "faucet.toml"

DEFAULT_MIN_THRESHOLD = 10
DEFAULT_MAX_THRESHOLD = 100
DEFAULT_MENU_COMMAND = "dmenu -l 20 -c -i -p Faucet"
DEFAULT_DATA_FILE = Path(tempfile.gettempdir()) / "faucet_data"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

RuleKind = Literal["regex", "command", "regex_multi", "command_multi"]


@dataclass(frozen=True)
class CandidateCommand:
    """A launchable command the engine may select."""

    label: str
    display: str  # menu text
    command: str  # shell template run via sh -c


@dataclass(frozen=True)
class Effect:
    """Score change applied to one command when a rule matches."""

    label: str
    delta: int


@dataclass(frozen=True)
class PatternRule:
    """Regex matched against the input's matching text."""

    pattern: str
    targets: tuple[Effect, ...]
    kind: RuleKind = "regex"

    @property
    def subject(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class CheckCommandRule:
    """Shell command whose zero exit status counts as a match."""

    check_command: str
    targets: tuple[Effect, ...]
    kind: RuleKind = "command"

    @property
    def subject(self) -> str:
        return self.check_command


Rule = PatternRule | CheckCommandRule


@dataclass
class Config:
    """Parsed configuration."""

    commands: dict[str, CandidateCommand] = field(default_factory=dict)
    """Candidate commands keyed by label, in file order."""

    rules: list[Rule] = field(default_factory=list)
    """Scorers in file order."""

    min_threshold: int = DEFAULT_MIN_THRESHOLD
    max_threshold: int = DEFAULT_MAX_THRESHOLD
    data_file: Path = DEFAULT_DATA_FILE
    menu_command: str = DEFAULT_MENU_COMMAND
    log: Path | None = None  # None = log to stderr
    log_level: str = "info"
    parallel_checks: bool = False


# === Config Loading ===


def default_config_path() -> Path:
    """$FAUCET_CONFIG, else $XDG_CONFIG_HOME/faucet/faucet.toml."""
    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        return Path(env_path).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME")
    config_dir = Path(base) if base else Path.home() / ".config"
    return config_dir / "faucet" / CONFIG_NAME


def load_config(path: Path | None = None) -> Config:
    """Read, parse and validate the config file. Raises ConfigError."""
    if path is None:
        path = default_config_path()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file at '{path}': {e}") from None
    try:
        config = parse_config(text)
    except ConfigError as e:
        raise ConfigError(f"Failed to parse config file '{path}':\n{e}") from None
    validate_config(config)
    return config


def parse_config(text: str) -> Config:
    """Parse TOML config text into a Config. Raises ConfigError on bad input."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(str(e)) from None

    commands = _parse_commands(data.get("commands", {}))

    raw_scorers = data.get("scorers", [])
    if not isinstance(raw_scorers, list):
        raise ConfigError("'scorers' must be an array of tables")
    rules: list[Rule] = []
    for index, raw in enumerate(raw_scorers, 1):
        try:
            rules.append(_parse_rule(raw))
        except ConfigError as e:
            raise ConfigError(f"scorer {index}: {e}") from None

    menu_command = data.get("menu_command", DEFAULT_MENU_COMMAND)
    if isinstance(menu_command, list):
        if not menu_command or not all(isinstance(w, str) for w in menu_command):
            raise ConfigError("'menu_command' list must hold strings")
        menu_command = bash_join(menu_command)
    elif not isinstance(menu_command, str) or not menu_command.strip():
        raise ConfigError("'menu_command' must be a string or list of strings")

    log_level = str(data.get("log_level", "info")).lower()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"'log_level' must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'"
        )

    log = _path_setting(data, "log")
    data_file = _path_setting(data, "data_file")

    return Config(
        commands=commands,
        rules=rules,
        min_threshold=_int_setting(data, "auto_select_min_threshold", DEFAULT_MIN_THRESHOLD),
        max_threshold=_int_setting(data, "auto_select_max_threshold", DEFAULT_MAX_THRESHOLD),
        data_file=data_file or DEFAULT_DATA_FILE,
        menu_command=menu_command,
        log=log,
        log_level=log_level,
        parallel_checks=bool(data.get("parallel_checks", False)),
    )


def _int_setting(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' requires an integer, got '{value}'")
    return value


def _path_setting(data: dict, key: str) -> Path | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' requires a non-empty path string, got '{value}'")
    return Path(value).expanduser()


def _parse_commands(raw: object) -> dict[str, CandidateCommand]:
    if not isinstance(raw, dict):
        raise ConfigError("'commands' must be a table")
    commands: dict[str, CandidateCommand] = {}
    for label, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"command '{label}' must be a table")
        display = entry.get("display")
        command = entry.get("command")
        if not isinstance(display, str) or not isinstance(command, str):
            raise ConfigError(
                f"command '{label}' requires string 'display' and 'command'"
            )
        commands[label] = CandidateCommand(label, display, command)
    return commands


def _rule_kind(raw: dict) -> str:
    """Resolve a scorer's variant from an explicit kind or from its shape."""
    kind = raw.get("kind")
    if kind is not None:
        if kind not in ("regex", "command", "regex_multi", "command_multi"):
            raise ConfigError(f"unknown kind '{kind}'")
        return kind

    has_regex = "regex" in raw
    has_command = "command" in raw
    if has_regex == has_command:
        raise ConfigError("needs exactly one of 'regex' or 'command'")

    has_single = "command_label" in raw or "score_change" in raw
    has_multi = "scores" in raw
    if has_single == has_multi:
        raise ConfigError(
            "needs either 'command_label' and 'score_change' or 'scores'"
        )

    base = "regex" if has_regex else "command"
    return f"{base}_multi" if has_multi else base


def _parse_rule(raw: object) -> Rule:
    if not isinstance(raw, dict):
        raise ConfigError("must be a table")
    kind = _rule_kind(raw)

    if kind.endswith("_multi"):
        targets = _parse_scores(raw.get("scores"))
    else:
        label = raw.get("command_label")
        delta = raw.get("score_change")
        if not isinstance(label, str):
            raise ConfigError("'command_label' must be a string")
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise ConfigError("'score_change' must be an integer")
        targets = (Effect(label, delta),)

    if kind.startswith("regex"):
        pattern = raw.get("regex")
        if not isinstance(pattern, str):
            raise ConfigError("'regex' must be a string")
        return PatternRule(pattern, targets, kind=kind)

    check_command = raw.get("command")
    if not isinstance(check_command, str):
        raise ConfigError("'command' must be a string")
    return CheckCommandRule(check_command, targets, kind=kind)


def _parse_scores(raw: object) -> tuple[Effect, ...]:
    """Accept [["label", 10], ...] or {label = 10, ...}."""
    if isinstance(raw, dict):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = []
        for item in raw:
            if not isinstance(item, list) or len(item) != 2:
                raise ConfigError("'scores' entries must be [label, score] pairs")
            pairs.append((item[0], item[1]))
    else:
        raise ConfigError("'scores' must be an array of pairs or a table")

    effects = []
    for label, delta in pairs:
        if not isinstance(label, str) or isinstance(delta, bool) or not isinstance(delta, int):
            raise ConfigError(f"bad score entry ({label!r}, {delta!r})")
        effects.append(Effect(label, delta))
    if not effects:
        raise ConfigError("'scores' must not be empty")
    return tuple(effects)


# === Validation ===


def validate_config(config: Config) -> None:
    """Check thresholds and scorer references. Raises ConfigError."""
    if config.min_threshold >= config.max_threshold:
        raise ConfigError(
            f"Bad auto select values: min ({config.min_threshold}) "
            f">= max ({config.max_threshold})"
        )

    missing = [
        f"{rule.kind} '{rule.subject}' -> command '{effect.label}'"
        for rule in config.rules
        for effect in rule.targets
        if effect.label not in config.commands
    ]
    if missing:
        raise ConfigError(
            f"Scorers reference non-existent commands: {', '.join(missing)}"
        )


def lint_shell_templates(config: Config) -> list[str]:
    """Return shell templates bashlex cannot parse. These still run; sh decides."""
    templates = [cmd.command for cmd in config.commands.values()]
    templates += [r.check_command for r in config.rules if isinstance(r, CheckCommandRule)]
    return [t for t in templates if not is_parseable(t)]


# === Logging ===


def configure_logging(config: Config) -> None:
    """Configure structlog from config settings. Call once at startup."""
    level_name = os.environ.get(ENV_LOG_LEVEL, config.log_level).lower()
    level = LOG_LEVELS.get(level_name, logging.INFO)

    processors: list = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]
    if config.log is not None:
        try:
            config.log.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(config.log, encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot open log file '{config.log}': {e}") from None
        logging.basicConfig(format="%(message)s", handlers=[file_handler], level=level)
        stream = file_handler.stream
        processors.append(structlog.processors.JSONRenderer())
    else:
        stream = sys.stderr
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=False,
    )
