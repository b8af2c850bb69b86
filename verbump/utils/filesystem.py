"""
Manifest file IO.

Text is read and written with ``newline=""`` so line endings survive an
update byte for byte. Every failure surfaces as
:class:`~verbump.exceptions.FileOperationError`.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from datetime import datetime
from typing import Optional, Union

from verbump.constants import MAX_FILE_SIZE
from verbump.utils.logger import get_logger
from verbump.exceptions import FileOperationError

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def read_text_file(file_path: PathLike, *, max_size: Optional[int] = MAX_FILE_SIZE) -> str:
    """Return the UTF-8 contents of *file_path* with line endings untouched.

    Raises:
        FileOperationError: The path is not a regular file, is larger than
            *max_size* bytes, or cannot be read or decoded.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileOperationError(
            f"Not a readable file: {path}", file_path=str(path), operation="read"
        )

    try:
        size = path.stat().st_size
        if max_size is not None and size > max_size:
            raise FileOperationError(
                f"File too large: {size} bytes (max {max_size})",
                file_path=str(path),
                operation="read",
            )
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def write_text_file(
    file_path: PathLike,
    content: str,
    *,
    backup: bool = False,
) -> Optional[Path]:
    """Replace *file_path* with *content* atomically.

    The text goes to a temporary file in the same directory, which then
    replaces the target, so readers never see a partial manifest.

    Returns:
        The backup path when *backup* is set and the file existed.
    """
    path = Path(file_path)
    backup_path = backup_file(path) if backup and path.is_file() else None

    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to write file: {exc}",
            file_path=str(path),
            operation="write",
            original_error=exc,
        ) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, path)
    except OSError as exc:
        try:
            os.unlink(temp_name)
        except OSError:
            logger.warning("Could not remove temporary file %s", temp_name)
        raise FileOperationError(
            f"Failed to write file: {exc}",
            file_path=str(path),
            operation="write",
            original_error=exc,
        ) from exc

    logger.debug("Wrote %d characters to %s", len(content), path)
    return backup_path


def backup_file(file_path: PathLike) -> Path:
    """Copy *file_path* to ``{stem}.{YYYYmmdd_HHMMSS}.backup{suffix}`` beside it."""
    path = Path(file_path)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    target = path.with_name(f"{path.stem}.{stamp}.backup{path.suffix}")

    try:
        shutil.copy2(path, target)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to create backup: {exc}",
            file_path=str(path),
            operation="backup",
            original_error=exc,
        ) from exc

    logger.debug("Backed up %s to %s", path, target)
    return target
