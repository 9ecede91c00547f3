"""
Merging of configured cache directives into handler responses.

Nothing here does I/O. The only side effect is mutation of the given
``Headers``.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from swrcache._core._headers import (
    CacheDirectiveSet,
    Directive,
    Headers,
    directive_names,
    parse_cache_control,
    serialize_vary,
    split_header_list,
)

logger = logging.getLogger("swrcache.core.merge")

STALE_WHILE_REVALIDATE = "stale-while-revalidate"


def merge_cache_control(headers: Headers, directives: Iterable[Directive]) -> None:
    """
    Append configured directives that the response does not already set.

    Directives already present on the response win by name, whatever their
    value. Existing directives keep their order and new ones are appended
    after them in configured order.

    Example:
        >>> headers = Headers({"cache-control": "max-age=0"})
        >>> merge_cache_control(headers, parse_cache_control("public, max-age=60, s-maxage=120"))
        >>> headers["cache-control"]
        'max-age=0, public, s-maxage=120'
    """
    existing_raw = headers.get("cache-control")
    present = directive_names(parse_cache_control(existing_raw))

    parts = [existing_raw] if existing_raw else []
    for directive in directives:
        if directive.name in present:
            continue
        present.add(directive.name)
        parts.append(str(directive))

    if parts:
        headers["cache-control"] = ", ".join(parts)


def compute_stale_at(directives: Iterable[Directive], now_ms: int) -> Optional[int]:
    """
    Absolute epoch milliseconds after which an entry should be refreshed.

    Only the ``stale-while-revalidate`` directive of the given set is looked
    at, a value already on the response does not count. Returns None when the
    directive is missing or its value is not a finite number.
    """
    for directive in directives:
        if directive.name != STALE_WHILE_REVALIDATE or directive.value is None:
            continue
        try:
            seconds = float(directive.value)
        except ValueError:
            logger.debug("Ignoring non-numeric stale-while-revalidate value: %r", directive.value)
            continue
        millis = seconds * 1000
        if not math.isfinite(millis):
            logger.debug("Ignoring non-finite stale-while-revalidate value: %r", directive.value)
            continue
        return now_ms + int(millis)
    return None


def merge_vary(headers: Headers, vary: Iterable[str]) -> None:
    """
    Union the response Vary header with configured names.

    Members are lowercased, deduplicated and sorted. Any ``*`` collapses the
    header to exactly ``*``.
    """
    configured = list(vary)
    if not configured:
        return

    existing = split_header_list(headers.get("vary"))
    members = sorted({member.lower() for member in [*existing, *configured]})

    if "*" in members:
        headers["vary"] = "*"
    else:
        headers["vary"] = serialize_vary(members)


def apply_cache_headers(
    headers: Headers,
    *,
    cache_control: CacheDirectiveSet,
    vary: Iterable[str],
    stale_at_header_name: str,
    now_ms: int,
) -> None:
    merge_cache_control(headers, cache_control)

    stale_at = compute_stale_at(cache_control, now_ms)
    if stale_at is not None:
        headers[stale_at_header_name] = str(stale_at)

    merge_vary(headers, vary)
