"""Destination path derivation and the upload-root containment check."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PureWindowsPath
from typing import Callable, Optional

from media_uploader.errors import PathInvalidError
from media_uploader.models import SanitizedTarget

logger = logging.getLogger(__name__)

FilenameSanitizer = Callable[[str], str]

_INVALID_FILENAME_CHARS = frozenset('<>:"/\\|?*') | frozenset(chr(c) for c in range(32))


def get_valid_filename(name: str) -> str:
    """Replace characters that are illegal in file names with a space."""
    cleaned = "".join(" " if ch in _INVALID_FILENAME_CHARS else ch for ch in name)
    return cleaned.strip()


def strip_directories(name: str) -> str:
    """Keep only the last path segment, for both ``/`` and ``\\`` separators."""
    return PureWindowsPath(name).name


def filesystem_is_case_sensitive(directory: Path) -> bool:
    """Tell whether *directory* lives on a case-sensitive filesystem.

    The canonical path with its case swapped is compared against the
    original by inode. When that cannot be decided (no letters in the path,
    directory missing) the platform convention from ``os.path.normcase``
    is used.
    """
    swapped = Path(str(directory).swapcase())
    if swapped != directory and directory.is_dir():
        try:
            return not os.path.samefile(directory, swapped)
        except OSError:
            return True
    return os.path.normcase("A") == "A"


def is_within(candidate: Path, root: Path, *, case_sensitive: bool = True) -> bool:
    """True when *candidate* is strictly below *root*.

    Both paths must already be canonical. The comparison is segment aligned,
    so ``/data/up`` does not contain ``/data/upload2/x``.
    """
    root_str = str(root)
    cand_str = str(candidate)
    if not case_sensitive:
        root_str = root_str.casefold()
        cand_str = cand_str.casefold()
    prefix = root_str if root_str.endswith(os.sep) else root_str + os.sep
    return cand_str.startswith(prefix) and len(cand_str) > len(prefix)


def _reject(attempted: Path, resolved: object, allowed: object) -> PathInvalidError:
    logger.error(
        "Invalid target path generated. Attempted path: '%s', resolved path: '%s', allowed directory: '%s'",
        attempted,
        resolved,
        allowed,
    )
    return PathInvalidError(str(attempted), str(resolved), str(allowed))


def sanitize_target(
    root: str,
    caller_file_name: str,
    sanitizer: FilenameSanitizer = get_valid_filename,
    *,
    case_sensitive: Optional[bool] = None,
) -> SanitizedTarget:
    """Derive the save path for *caller_file_name* under *root*.

    The sanitizer output is not trusted: the joined path is canonicalized and
    must still resolve inside the canonical root, otherwise
    ``PathInvalidError`` is raised and nothing is written.

    ``case_sensitive=None`` asks the filesystem holding *root*; pass a bool
    to force the comparison mode.
    """
    safe_name = sanitizer(strip_directories(caller_file_name))
    attempted = Path(root) / safe_name

    if "\x00" in safe_name:
        raise _reject(attempted, attempted, root)
    try:
        allowed = Path(root).resolve()
        resolved = attempted.resolve()
    except (OSError, ValueError, RuntimeError) as exc:
        raise _reject(attempted, exc, root) from exc

    if case_sensitive is None:
        case_sensitive = filesystem_is_case_sensitive(allowed)

    if not is_within(resolved, allowed, case_sensitive=case_sensitive):
        raise _reject(attempted, resolved, allowed)

    return SanitizedTarget(directory=allowed, file_name=safe_name, full_path=resolved)
