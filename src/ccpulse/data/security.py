"""Permission and symlink checks applied before reading sensitive files."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from result import Err, Ok, Result

logger = logging.getLogger(__name__)


def validate_file_permissions(path: Path) -> str | None:
    """Return a rejection reason for ``path``, or None if it is safe to read.

    A missing file is not rejected; the caller handles absence separately.
    """
    try:
        info = path.lstat()
    except FileNotFoundError:
        return None
    except OSError as exc:
        return f"Security: Cannot read attributes of '{path.name}': {exc}"

    if stat.S_ISLNK(info.st_mode):
        return f"Security: '{path.name}' is a symlink, refusing to load"

    if info.st_uid not in (os.getuid(), 0):
        return f"Security: '{path.name}' is owned by another user (UID: {info.st_uid})"

    mode = stat.S_IMODE(info.st_mode)
    if mode & stat.S_IWOTH:
        return (
            f"Security: '{path.name}' is world-writable (permissions: {mode:o}). "
            f"Please run: chmod 600 '{path}'"
        )
    if mode & stat.S_IROTH:
        # Default umask leaves most files 644; warn only.
        logger.warning("'%s' is world-readable. Consider: chmod 600 '%s'", path.name, path)

    return None


def load_secure_bytes(path: Path) -> Result[bytes, str]:
    """Validate ``path`` and return its contents, or Err with the reason."""
    reason = validate_file_permissions(path)
    if reason is not None:
        logger.error(reason)
        return Err(reason)

    standardized = os.path.abspath(path)
    if os.path.realpath(standardized) != standardized:
        reason = f"Security: '{path.name}' appears to be a symlink"
        logger.error(reason)
        return Err(reason)

    try:
        return Ok(path.read_bytes())
    except OSError as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        return Err(f"Cannot read '{path.name}': {exc}")
