"""Location of encoding data files used by ``get_encoding``."""

import os
from pathlib import Path

DATA_DIR_ENV = "RANKTOK_DATA_DIR"
DEFAULT_DATA_DIR = Path.home() / ".cache" / "ranktok"

_data_dir: Path | None = None


def set_data_dir(path: str | os.PathLike[str]) -> None:
    """Use ``path`` for all encoding lookups by name."""
    global _data_dir
    _data_dir = Path(path)


def reset_data_dir() -> None:
    """Forget the directory set by ``set_data_dir``."""
    global _data_dir
    _data_dir = None


def get_data_dir() -> Path:
    """Return the data directory (explicit setting, then env var, then default)."""
    if _data_dir is not None:
        return _data_dir
    env_dir = os.environ.get(DATA_DIR_ENV, "").strip()
    if env_dir:
        return Path(env_dir).expanduser()
    return DEFAULT_DATA_DIR
