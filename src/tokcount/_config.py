import os
from pathlib import Path

DATA_DIR_ENV = "TOKCOUNT_DATA_DIR"

_data_dir: Path = Path.home() / ".cache" / "tokcount"


def set_data_dir(path: str | Path) -> None:
    """Set the directory that vocabulary files are read from."""
    global _data_dir
    _data_dir = Path(path)


def get_data_dir() -> Path:
    """Return the vocabulary directory (respects env var override)."""
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    if override:
        return Path(override)
    return _data_dir
