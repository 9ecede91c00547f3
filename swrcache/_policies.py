from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass, field

from swrcache._core._headers import CacheDirectiveSet, parse_cache_control, parse_vary
from swrcache._core._keygen import CacheNameFactory, KeyGenerator
from swrcache._core._spec import SWROptions
from swrcache._exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class SWRCachePolicy:
    """
    Configuration of the stale-while-revalidate cache layer.

    Everything that can be checked without a request is checked here, once,
    when the policy is created.

    Args:
        cache_name: Store namespace, or a function of the request returning one.
        wait: When True the store write finishes before the response is returned.
            When False the write is handed to the host's detached task facility.
        cache_control: Directives merged into every cacheable response, e.g.
            ``"public, max-age=60, stale-while-revalidate=30"``.
        vary: Header names merged into the response Vary header. ``*`` is rejected.
        key_generator: Function of the request returning the store key.
            Defaults to the full request URL.
        swr: Header names used by the stale-while-revalidate layer.
        cacheable_methods: Requests with any other method bypass the cache.

    Raises:
        ConfigurationError: for a ``*`` vary or an empty cache name.

    Example:
        ```python
        policy = SWRCachePolicy(
            cache_name="pages",
            cache_control="public, max-age=60, stale-while-revalidate=30",
            vary=["accept-language"],
        )
        ```
    """

    cache_name: t.Union[str, CacheNameFactory]
    wait: bool = False
    cache_control: t.Optional[str] = None
    vary: t.Union[str, t.Sequence[str], None] = None
    key_generator: t.Optional[KeyGenerator] = None
    swr: SWROptions = field(default_factory=SWROptions)
    cacheable_methods: t.Sequence[str] = ("GET",)

    directives: CacheDirectiveSet = field(init=False, repr=False)
    vary_set: t.FrozenSet[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.cache_name, str) and not self.cache_name:
            raise ConfigurationError("cache_name must not be empty.")

        self.directives = parse_cache_control(self.cache_control)
        self.vary_set = parse_vary(self.vary)
        self.cacheable_methods = tuple(method.upper() for method in self.cacheable_methods)

        logger.debug(
            "Configured SWR cache policy: directives=%d vary=%s wait=%s",
            len(self.directives),
            sorted(self.vary_set),
            self.wait,
        )

    def is_cacheable_method(self, method: str) -> bool:
        return method.upper() in self.cacheable_methods
