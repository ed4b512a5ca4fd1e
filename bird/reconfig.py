"""
Last reconfiguration timestamp derived from the BIRD config file.

Used when the daemon-reported value is not meaningful, e.g. when the
config is regenerated and reloaded by an external tool.
"""

import logging
import os
import re

from bird.timestamps import from_epoch

logger = logging.getLogger(__name__)


def last_reconfig_from_file_stat(filename: str) -> str:
    """Modification time of the config file as ISO 8601 UTC, or "" if unavailable."""
    try:
        mtime = os.stat(filename).st_mtime
    except OSError as e:
        logger.warning(f"Cannot stat config file {filename}: {e}")
        return ""
    return from_epoch(mtime).isoformat()


def last_reconfig_from_file_content(filename: str, pattern: str) -> str:
    """
    First match of `pattern` in the config file.

    Returns group 1 when the pattern has a group, the whole match
    otherwise, and "" when the file, the pattern or the match is missing.
    """
    try:
        regex = re.compile(pattern)
    except re.error as e:
        logger.warning(f"Invalid reconfig timestamp pattern {pattern!r}: {e}")
        return ""

    try:
        with open(filename, encoding="utf-8", errors="replace") as f:
            content = f.read()
    except OSError as e:
        logger.warning(f"Cannot read config file {filename}: {e}")
        return ""

    match = regex.search(content)
    if not match:
        return ""
    if regex.groups:
        return (match.group(1) or "").strip()
    return match.group(0).strip()
