"""Environment and configuration helpers for fasta_io."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from dotenv import load_dotenv as _dotenv_load

DEFAULT_BUFFER_SIZE = 4096
DEFAULT_COMPRESS_LEVEL = 6

ENVIRONMENT_VARIABLES = (
    "FASTAIO_BUFFER_SIZE",
    "FASTAIO_COMPRESS_LEVEL",
    "FASTAIO_VERBOSE",
)

PathLike = Union[str, Path]


@dataclass
class IOSettings:
    """Tunable defaults shared by readers, writers and the CLI."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    compress_level: int = DEFAULT_COMPRESS_LEVEL
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
        if not 0 <= self.compress_level <= 9:
            raise ValueError(f"compress_level must be between 0 and 9, got {self.compress_level}")


def find_env_file(start_path: Optional[PathLike] = None) -> Optional[Path]:
    """Search for the closest .env file starting from start_path or CWD."""
    search_root = Path(start_path).resolve() if start_path else Path.cwd().resolve()
    for candidate_dir in _walk_upwards(search_root):
        candidate = candidate_dir / ".env"
        if candidate.exists():
            return candidate
    return None


def load_dotenv(start_path: Optional[PathLike] = None) -> Optional[Path]:
    """Load .env values into os.environ without overriding pre-existing values."""
    env_path = find_env_file(start_path)
    if not env_path:
        return None
    _dotenv_load(env_path, override=False)
    return env_path


def collect_settings(start_path: Optional[PathLike] = None) -> IOSettings:
    """Source the .env file and build IOSettings from the environment."""
    load_dotenv(start_path)
    env = os.environ
    return IOSettings(
        buffer_size=_int_from_env(env, "FASTAIO_BUFFER_SIZE", DEFAULT_BUFFER_SIZE),
        compress_level=_int_from_env(env, "FASTAIO_COMPRESS_LEVEL", DEFAULT_COMPRESS_LEVEL),
        verbose=_bool_from_env(env, "FASTAIO_VERBOSE"),
    )


def _int_from_env(env, key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def _bool_from_env(env, key: str) -> bool:
    return (env.get(key) or "").strip().lower() in {"1", "true", "yes", "on"}


def _walk_upwards(start: Path) -> Iterable[Path]:
    current = start
    last = None
    while last != current:
        yield current
        last = current
        current = current.parent
