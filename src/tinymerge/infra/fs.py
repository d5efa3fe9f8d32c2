from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path normalization and the location of persistent
application data (configuration and diagnostic logs).
"""

import os
from typing import List, Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "TinyMerge"
UNIX_APP_DIR_NAME = ".tinymerge"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/TinyMerge
    - Linux/Mac: ~/.tinymerge

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str]) -> str:
    """
    Normalize a file path string into an absolute filesystem path.

    Expands environment variables ($VAR/%VAR%) and user home shortcuts (~/).
    An empty input stays empty so callers can report it as missing.

    Args:
        path: Raw input path string.

    Returns:
        str: Normalized absolute path, or "" for empty input.
    """
    p = (path or "").strip()
    if not p:
        return ""
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))

# -----------------------------------------------------------------------------
# FILESYSTEM VALIDATION API
# -----------------------------------------------------------------------------

def find_missing_files(paths: List[str]) -> List[str]:
    """
    Identify input paths that do not point to a readable regular file.

    Args:
        paths: Candidate file paths.

    Returns:
        List[str]: The offending paths, in input order.
    """
    return [p for p in paths if not p or not os.path.isfile(p)]
