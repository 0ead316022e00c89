"""Configuration loading: the allow-list of executable base commands."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from txtmanip.errors import StartupError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "txtmanip.toml"


@dataclass(frozen=True)
class AllowList:
    """Base command names that may be executed. Matching is exact."""

    commands: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, *commands: str) -> AllowList:
        return cls(frozenset(commands))

    def __contains__(self, command: object) -> bool:
        return command in self.commands


@dataclass(frozen=True)
class Config:
    """Parsed ``txtmanip.toml``."""

    enable_commands: tuple[str, ...] = ()

    @property
    def allow_list(self) -> AllowList:
        return AllowList(frozenset(self.enable_commands))


def parse_config(data: dict) -> Config:
    """Validate a decoded TOML document."""
    commands = data.get("enable_commands", [])
    if not isinstance(commands, list) or not all(isinstance(c, str) for c in commands):
        raise StartupError("Read config failed: enable_commands must be a list of strings")
    return Config(enable_commands=tuple(commands))


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Read and validate the configuration file at *path*.

    Raises :class:`StartupError` when the file is missing, unreadable or
    malformed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise StartupError(f"Read config failed: {exc}") from exc

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise StartupError(f"Read config failed: {path}: {exc}") from exc

    config = parse_config(data)
    logger.debug("Loaded %d enabled commands from %s", len(config.enable_commands), path)
    return config
