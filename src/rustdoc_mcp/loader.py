"""Read and write rustdoc JSON files on disk."""

import os
from pathlib import Path

from .config import Config, DecodeConfig
from .logging import get_logger
from .rustdoc import Crate, DecodeResult, decode, encode

logger = get_logger("loader")


class CrateFileError(Exception):
    """Raised when a rustdoc JSON file cannot be read."""

    pass


def load_crate(path: Path, config: Config | DecodeConfig | None = None) -> DecodeResult:
    """
    Load and decode a rustdoc JSON file.

    Args:
        path: Path to the JSON file written by `rustdoc --output-format json`
        config: Decode settings; a full Config or just its decode section

    Returns:
        DecodeResult with the crate and any diagnostics

    Raises:
        CrateFileError: If the file is missing, too large or not UTF-8
        DecodeError: If the document itself is rejected
    """
    if config is None:
        settings = DecodeConfig()
    elif isinstance(config, Config):
        settings = config.decode
    else:
        settings = config

    if not path.is_file():
        raise CrateFileError(f"No such file: {path}")

    size = path.stat().st_size
    if size > settings.max_input_bytes:
        raise CrateFileError(
            f"Crate file too large: {size} > {settings.max_input_bytes} bytes"
        )

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise CrateFileError(f"{path} is not valid UTF-8: {e}") from e

    logger.debug("Read %d bytes from %s", size, path, extra={"crate_path": str(path)})
    return decode(text, strict=settings.strict)


def save_crate(crate: Crate, path: Path, indent: int | None = None) -> None:
    """
    Save a crate as rustdoc JSON.

    Uses write-to-temp-then-rename so readers never see a partial file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(encode(crate, indent=indent))
            f.flush()
            os.fsync(f.fileno())

        temp_path.replace(path)
        logger.debug("Saved crate to %s", path)
    except OSError:
        if temp_path.exists():
            temp_path.unlink()
        raise
