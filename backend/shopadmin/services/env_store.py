"""
Env File Store

Reads and rewrites the flat KEY=value env file that backs runtime settings.

Only the lines for the keys being set are touched. Comments, blank lines
and the order of every other key are written back verbatim.

Concurrent set() calls are not serialised: each call reads the whole file,
patches it in memory and writes it back, so the last writer wins.
"""

import re
from pathlib import Path
from typing import Iterable, Mapping

from ..common.exceptions import ConfigWriteError
from ..common.logging_setup import get_service_logger

logger = get_service_logger("env_store")


def format_env_value(value: str) -> str:
    """Quote values that are empty or contain a space."""
    if value == "" or " " in value:
        return f'"{value}"'
    return value


def parse_env_value(value: str) -> str:
    """Strip one pair of surrounding double quotes."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


class EnvStore:
    """
    Key/value access to a single env file.

    Usage:
        store = EnvStore(Path(".env"))
        store.get({"MAIL_HOST", "MAIL_PORT"})
        store.set({"MAIL_HOST": "smtp.example.com"})
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def get_all(self) -> dict[str, str]:
        """
        Parse every KEY=value line of the file.

        Comment lines, blank lines and lines without "=" are skipped.
        """
        try:
            content = self._read()
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}")
            return {}

        env = {}
        for raw_line in content.split("\n"):
            line = raw_line.strip()

            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, value = line.split("=", 1)
            env[key.strip()] = parse_env_value(value.strip())

        return env

    def get(self, keys: Iterable[str]) -> dict[str, str]:
        """Values for the requested keys. Keys not in the file are left out."""
        wanted = set(keys)
        return {key: value for key, value in self.get_all().items() if key in wanted}

    def set(self, values: Mapping[str, str]) -> bool:
        """
        Write the given keys to the file.

        Existing KEY= lines are replaced in place, new keys are appended.

        Returns:
            False if values is empty or the file could not be written
        """
        if not values:
            return False

        try:
            content = self._read()
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}")
            return False

        for key, value in values.items():
            line = f"{key}={format_env_value(value)}"

            # Anchored on "=" so MAIL never matches MAIL_HOST
            pattern = re.compile(rf"^{re.escape(key)}=.*$", re.MULTILINE)
            if pattern.search(content):
                content = pattern.sub(lambda _match: line, content)
            else:
                content += f"\n{line}"

        try:
            self._write(content)
        except ConfigWriteError as e:
            logger.error(e.message, extra={"path": str(self.path)})
            return False

        logger.info(
            f"Updated {len(values)} key(s) in {self.path.name}",
            extra={"keys": sorted(values.keys())},
        )
        return True

    def _read(self) -> str:
        if not self.path.exists():
            return ""
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def _write(self, content: str) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ConfigWriteError(str(e), path=str(self.path)) from e


def to_env_values(values: Mapping[str, object]) -> dict[str, str]:
    """
    Stringify form values for set(): booleans become true/false,
    None becomes an empty string.
    """
    env_values = {}
    for key, value in values.items():
        if isinstance(value, bool):
            env_values[key] = "true" if value else "false"
        elif value is None:
            env_values[key] = ""
        else:
            env_values[key] = str(value)
    return env_values
