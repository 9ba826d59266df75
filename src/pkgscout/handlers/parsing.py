"""Helpers for turning manager output into PackageRecords.

Every helper here tolerates arbitrary input: bad JSON, truncated output,
binary junk. They return None or empty results instead of raising.
"""

import json
import logging
import re
from typing import Any, Iterator, Optional

from pydantic import ValidationError

from pkgscout.models import PackageRecord

logger = logging.getLogger(__name__)

# Package identifiers: no whitespace, quotes, braces or commas
_NAME = re.compile(r"^[A-Za-z0-9@_.][A-Za-z0-9@_./+~-]*$")
_VERSION = re.compile(r"^[A-Za-z0-9_.][A-Za-z0-9_.+!:~/-]*$")
_FLAT_OBJECT = re.compile(r"\{[^{}]*\}")


def is_package_name(value: Any) -> bool:
    return isinstance(value, str) and bool(_NAME.match(value))


def is_version(value: Any) -> bool:
    return isinstance(value, str) and bool(_VERSION.match(value))


def load_json(raw: Any) -> Optional[Any]:
    """Parse raw as JSON, returning None when it is not valid JSON."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        logger.debug("Output is not valid JSON; falling back to text parsing")
        return None


def recover_objects(raw: Any) -> list[dict]:
    """
    Salvage complete flat JSON objects from a damaged document.

    Useful for truncated array output such as ``[{"name": "a", ...}, {"na``.
    """
    if not isinstance(raw, str):
        return []
    objects = []
    for match in _FLAT_OBJECT.finditer(raw):
        try:
            value = json.loads(match.group(0))
        except ValueError:
            continue
        if isinstance(value, dict):
            objects.append(value)
    return objects


def iter_lines(raw: Any) -> Iterator[str]:
    """Non-blank stripped lines of raw."""
    if not isinstance(raw, str):
        return
    for line in raw.splitlines():
        line = line.strip()
        if line:
            yield line


def text(value: Any) -> Optional[str]:
    """value as a stripped string, or None for anything else or blank."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def make_record(**fields) -> Optional[PackageRecord]:
    """Build a PackageRecord, or None when the fields don't make a valid one."""
    try:
        return PackageRecord(**fields)
    except ValidationError:
        return None
