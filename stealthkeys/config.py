"""
Runtime configuration: sanctions list source and logging.

Environment:
    STEALTHKEYS_SANCTIONS_FILE   path to the initial sanctions list
    STEALTHKEYS_LOG_LEVEL        logging level name (default INFO)

The sanctions file is either a JSON array of strings or plain text with one
address per line ('#' starts a comment).
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from stealthkeys.address import is_address, to_checksum_address
from stealthkeys.errors import ConfigError
from stealthkeys.screen import AddressScreen

logger = logging.getLogger(__name__)

ENV_SANCTIONS_FILE = "STEALTHKEYS_SANCTIONS_FILE"
ENV_LOG_LEVEL = "STEALTHKEYS_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    sanctions_file: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        path = environ.get(ENV_SANCTIONS_FILE)
        return cls(
            sanctions_file=Path(path) if path else None,
            log_level=environ.get(ENV_LOG_LEVEL, "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigError(f"unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)


def normalize_entry(entry: str) -> str:
    """Checksum Ethereum-shaped entries so they match address_of(); keep others verbatim."""
    entry = entry.strip()
    return to_checksum_address(entry) if is_address(entry) else entry


def load_sanctions(path: Path) -> List[str]:
    """Read and normalize the addresses in a sanctions list file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read sanctions file {path}: {e}") from e

    if text.lstrip().startswith("["):
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"malformed JSON in {path}: {e}") from e
        if not all(isinstance(item, str) for item in raw):
            raise ConfigError(f"{path}: sanctions list must contain only strings")
    else:
        raw = [line.split("#", 1)[0] for line in text.splitlines()]

    addresses = [normalize_entry(item) for item in raw if item.strip()]
    logger.debug("Loaded %d sanctions entries from %s", len(addresses), path)
    return addresses


def build_screen(settings: Settings) -> AddressScreen:
    if settings.sanctions_file is None:
        return AddressScreen()
    return AddressScreen(load_sanctions(settings.sanctions_file))
