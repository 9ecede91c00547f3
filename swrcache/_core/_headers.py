from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from swrcache._exceptions import ConfigurationError


class Headers(MutableMapping[str, str]):
    """
    Case-insensitive header map that keeps every value of repeated fields.

    Reading a key joins repeated values with ``", "``, which is how HTTP
    combines list-based fields such as ``Cache-Control`` and ``Vary``.
    Assigning a key replaces all of its values, ``add`` appends one.
    """

    def __init__(self, headers: Optional[Mapping[str, Union[str, List[str]]]] = None) -> None:
        self._headers = {k.lower(): ([v] if isinstance(v, str) else v[:]) for k, v in (headers or {}).items()}

    @classmethod
    def from_raw(cls, raw: Iterable[Tuple[str, str]]) -> "Headers":
        headers = cls()
        for key, value in raw:
            headers.add(key, value)
        return headers

    def add(self, key: str, value: str) -> None:
        self._headers.setdefault(key.lower(), []).append(value)

    def raw(self) -> List[Tuple[str, str]]:
        return [(key, value) for key, values in self._headers.items() for value in values]

    def copy(self) -> "Headers":
        return Headers(self._headers)

    def __getitem__(self, key: str) -> str:
        return ", ".join(self._headers[key.lower()])

    def __setitem__(self, key: str, value: str) -> None:
        self._headers[key.lower()] = [value]

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return repr(self._headers)

    def __str__(self) -> str:
        return str(self._headers)

    def __eq__(self, other_headers: Any) -> bool:
        return isinstance(other_headers, Headers) and self._headers == other_headers._headers


@dataclass(frozen=True)
class Directive:
    """
    A single Cache-Control token, e.g. ``public`` or ``max-age=60``.

    Names are always lowercase. ``value`` is None for valueless directives.
    """

    name: str
    value: Optional[str] = None

    def __str__(self) -> str:
        if self.value is None:
            return self.name
        return f"{self.name}={self.value}"


CacheDirectiveSet = Tuple[Directive, ...]
"""Ordered, parsed Cache-Control directives."""


def parse_cache_control(raw: Optional[str]) -> CacheDirectiveSet:
    """
    Parse a Cache-Control style header value into ordered directives.

    The value is split on ``,``, every part is trimmed and its name lowercased.
    The value of a directive is whatever follows the first ``=``.

    Examples:
        >>> parse_cache_control("public, max-age=60")
        (Directive(name='public', value=None), Directive(name='max-age', value='60'))
        >>> parse_cache_control(None)
        ()
    """
    if not raw:
        return ()

    directives: List[Directive] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        name, sep, value = part.partition("=")
        name = name.strip().lower()
        if not name:
            continue
        directives.append(Directive(name=name, value=value.strip() if sep else None))
    return tuple(directives)


def serialize_cache_control(directives: Iterable[Directive]) -> str:
    return ", ".join(str(directive) for directive in directives)


def directive_names(directives: Iterable[Directive]) -> set[str]:
    return {directive.name for directive in directives}


def split_header_list(raw: Optional[str]) -> List[str]:
    """Split a comma separated header value, dropping blank members."""
    if not raw:
        return []
    return [member.strip() for member in raw.split(",") if member.strip()]


def parse_vary(raw: Union[str, Sequence[str], None]) -> frozenset[str]:
    """
    Normalize configured Vary header names.

    A sequence is used as-is (each member trimmed), a string is split on ``,``.

    Raises:
        ConfigurationError: if the result contains ``*``. A wildcard would make
            every request vary and nothing would ever be served from the cache.
    """
    if raw is None:
        return frozenset()

    if isinstance(raw, str):
        members = split_header_list(raw)
    else:
        members = [member.strip() for member in raw if member.strip()]

    if "*" in members:
        raise ConfigurationError("Middleware vary configuration cannot include '*', as it disallows effective caching.")
    return frozenset(members)


def serialize_vary(members: Iterable[str]) -> str:
    return ", ".join(members)
