"""
Oracle Client Library Setup

On Windows and macOS the directory containing the Oracle Client
libraries can be given at runtime. On other platforms the system
library search path must be set before Python starts, so no default
is used there. Without the libraries the driver runs in thin mode.
"""

import logging
import os
import sys
from typing import Optional

import oracledb

logger = logging.getLogger("plsql_record.client")

WINDOWS_LIB_DIR = r"C:\oracle\instantclient_19_12"
MACOS_LIB_DIR = os.path.join("~", "Downloads", "instantclient_19_8")

_initialized = False


def default_lib_dir(platform: Optional[str] = None) -> Optional[str]:
    """
    Well-known Instant Client location for the platform.

    Args:
        platform: sys.platform value (defaults to the running platform)

    Returns:
        Directory path, or None when the platform has no default
    """
    platform = platform or sys.platform
    if platform == "win32":
        return WINDOWS_LIB_DIR
    if platform == "darwin":
        return os.path.expanduser(MACOS_LIB_DIR)
    return None


def init_client_library(lib_dir: Optional[str] = None) -> bool:
    """
    Enable thick mode from lib_dir if that directory exists.

    Called once, before any connection is opened. A missing directory
    is not an error.

    Args:
        lib_dir: Oracle Client library directory (defaults to the
            platform's well-known location)

    Returns:
        True if the Oracle Client libraries were loaded
    """
    global _initialized

    if _initialized:
        return True

    lib_dir = lib_dir or default_lib_dir()
    if not lib_dir or not os.path.isdir(lib_dir):
        logger.debug(f"No Oracle Client library directory found ({lib_dir}), using thin mode")
        return False

    try:
        oracledb.init_oracle_client(lib_dir=lib_dir)
    except oracledb.Error as e:
        logger.warning(f"Failed to load Oracle Client libraries from {lib_dir}: {e}")
        logger.warning("Continuing in thin mode")
        return False

    _initialized = True
    logger.info(f"Oracle Client libraries loaded from {lib_dir}")
    return True
