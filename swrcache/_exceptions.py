__all__ = ("SWRCacheError", "ConfigurationError")


class SWRCacheError(Exception): ...


class ConfigurationError(SWRCacheError): ...
