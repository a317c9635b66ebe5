"""Validation of candidate files before upload."""

import logging
import os
import stat
from typing import Iterable, Optional, Union

from ..models.validation import InvalidFile, ValidationResult

logger = logging.getLogger(__name__)


def check_file(path: Union[str, os.PathLike]) -> Optional[str]:
    """Return why ``path`` is not a usable file, or None if it is."""
    try:
        file_stat = os.stat(path)
    except FileNotFoundError:
        return "File not found"
    except PermissionError:
        return "Permission denied"
    except ValueError as e:
        return f"Invalid path: {e}"
    except OSError as e:
        return f"Cannot access file: {e.strerror or e}"

    if stat.S_ISDIR(file_stat.st_mode):
        return "Is a directory"
    if not stat.S_ISREG(file_stat.st_mode):
        return "Not a regular file"
    if file_stat.st_size == 0:
        return "File is empty"
    return None


def validate_files(paths: Iterable[Union[str, os.PathLike]]) -> ValidationResult:
    """Split ``paths`` into valid and invalid files, preserving input order."""
    result = ValidationResult()

    for path in paths:
        reason = check_file(path)
        if reason is None:
            result.valid.append(str(path))
        else:
            logger.debug(f"Rejected {path}: {reason}")
            result.invalid.append(InvalidFile(str(path), reason))

    logger.info(f"Validated {len(result.valid) + len(result.invalid)} files: "
                f"{len(result.valid)} valid, {len(result.invalid)} invalid")
    return result
