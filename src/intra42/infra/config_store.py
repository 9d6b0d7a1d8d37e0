"""Infrastructure: the per-user ``config.toml`` store.

This module locates the configuration file in the platform-standard
per-user config directory, writes it once through an injected setup
prompter, and reads it back into a
:class:`~intra42.core.models.Configuration`.

Rules
-----
* No ``print()``: guidance is shown through the prompter, probe results
  are returned as :class:`~intra42.core.models.ConfigStatus`.
* ``OSError`` and ``tomllib`` errors never escape raw.
"""

from __future__ import annotations

import os
import sys
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from intra42.core.models import Configuration, ConfigStatus
from intra42.core.protocols import SetupPrompter
from intra42.exceptions import (
    ConfigurationInvalidError,
    ConfigurationMissingError,
    FileSystemError,
)

CONFIG_FILENAME: str = "config.toml"
CONFIG_DIR_ENV: str = "INTRA42_CONFIG_DIR"

REDIRECT_URL: str = "http://localhost:8080"
SETUP_INSTRUCTIONS: tuple[str, ...] = (
    "Browse to: https://profile.intra.42.fr/oauth/applications/new",
    "Create new Application",
    f'Set redirect_url to "{REDIRECT_URL}"',
)

# (key, prompt, masked)
_SETUP_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("client_id", "Enter client id:", False),
    ("client_secret", "Enter client secret:", True),
    ("login", "Enter intra login:", False),
)


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

def user_config_dir() -> Path | None:
    """Per-user configuration directory, or ``None`` if it cannot be resolved.

    ``$INTRA42_CONFIG_DIR`` takes precedence over the platform default.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)

    try:
        home = Path.home()
    except RuntimeError:
        return None

    if sys.platform.startswith("win"):
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return home / ".config"


def default_config_path() -> Path | None:
    directory = user_config_dir()
    if directory is None:
        return None
    return directory / CONFIG_FILENAME


def _toml_string(value: str) -> str:
    """Quote *value* as a TOML basic string.

    Control characters other than tab are written as ``\\uXXXX``.
    """
    escaped: list[str] = []
    for char in value:
        if char in ('"', "\\"):
            escaped.append("\\" + char)
        elif char != "\t" and (ord(char) < 0x20 or ord(char) == 0x7F):
            escaped.append(f"\\u{ord(char):04X}")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class ConfigStore:
    """Read and create the ``config.toml`` holding the intra credentials.

    Parameters
    ----------
    path:
        Explicit file location.  Defaults to :func:`default_config_path`.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path: Path | None = path if path is not None else default_config_path()

    @property
    def path(self) -> Path | None:
        return self._path

    def exists(self) -> bool:
        """True iff the file is present.  An unresolvable directory is absence."""
        return self._path is not None and self._path.is_file()

    def create_interactive(self, prompter: SetupPrompter) -> Path:
        """Collect the three secrets through *prompter* and write the file.

        Answers are trimmed and written as ``key="value"`` lines, in
        prompt order.  Nothing is written unless every prompt is answered.

        Raises
        ------
        FileSystemError
            If the directory cannot be resolved, or the file cannot be
            created or written.
        ConfigurationMissingError
            If the user cancels a prompt.
        """
        prompter.instructions(SETUP_INSTRUCTIONS)

        if self._path is None:
            raise FileSystemError(
                "Could not determine the user config directory.",
                hint=f"Set {CONFIG_DIR_ENV} to a writable directory.",
            )
        path = self._path

        lines: list[str] = []
        for key, message, secret in _SETUP_FIELDS:
            answer = prompter.ask(message, secret=secret)
            if answer is None:
                raise ConfigurationMissingError(
                    "Setup cancelled; no configuration was saved.",
                )
            lines.append(f"{key}={_toml_string(answer.strip())}\n")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.writelines(lines)
            path.chmod(0o600)
        except OSError as exc:
            raise FileSystemError(
                f"Could not write {path}: {exc.strerror or exc}",
            ) from exc
        return path

    def check(self) -> ConfigStatus:
        """Probe the file without raising for read, parse or invariant problems."""
        try:
            self.load()
        except ConfigurationMissingError as exc:
            return ConfigStatus(
                found=False, valid=False, path=self._path, reason=str(exc),
            )
        except ConfigurationInvalidError as exc:
            return ConfigStatus(
                found=True, valid=False, path=self._path, reason=str(exc),
            )
        return ConfigStatus(found=True, valid=True, path=self._path)

    def validate(self) -> bool:
        return self.check().valid

    def load(self) -> Configuration:
        """Read, parse and validate the configuration.

        Raises
        ------
        ConfigurationMissingError
            If the directory cannot be resolved or the file does not exist.
        ConfigurationInvalidError
            If the file is unreadable, malformed, or violates the
            credential invariant.
        """
        if self._path is None:
            raise ConfigurationMissingError(
                "Could not determine the user config directory.",
            )
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigurationMissingError(f"{CONFIG_FILENAME} not found") from exc
        except PermissionError as exc:
            raise ConfigurationInvalidError(
                f"{CONFIG_FILENAME} not readable",
            ) from exc
        except OSError as exc:
            raise ConfigurationInvalidError(
                f"{CONFIG_FILENAME} could not be read: {exc.strerror or exc}",
            ) from exc

        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationInvalidError(
                f"{CONFIG_FILENAME} is not valid TOML: {exc}",
            ) from exc

        config = self._parse(data)
        problems = config.problems()
        if problems:
            raise ConfigurationInvalidError(
                f"{CONFIG_FILENAME} is invalid: " + "; ".join(problems),
            )
        return config

    @staticmethod
    def _parse(data: Mapping[str, Any]) -> Configuration:
        """Convert the TOML table to a :class:`Configuration`."""
        values: dict[str, str] = {}
        for key, _message, _secret in _SETUP_FIELDS:
            raw = data.get(key)
            if raw is None:
                raise ConfigurationInvalidError(
                    f"{CONFIG_FILENAME} is missing the {key!r} key",
                )
            if not isinstance(raw, str):
                raise ConfigurationInvalidError(
                    f"{CONFIG_FILENAME}: {key!r} must be a string",
                )
            values[key] = raw

        cursus = data.get("cursus")
        if cursus is not None and not isinstance(cursus, str):
            raise ConfigurationInvalidError(
                f"{CONFIG_FILENAME}: 'cursus' must be a string",
            )
        return Configuration(cursus=cursus or None, **values)
