"""
Logger registry: named providers, memoized named loggers, the global logger.

One ``LogFactory`` lives for the process behind ``get_log_factory()``.
Isolated registries (tests, embedded use) come from ``new_registry()``.
Backend modules add themselves to every registry with
``register_builtin_provider`` when they are imported.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import DEFAULT_NAME, DEFAULT_PROVIDER, LogConfig
from .exceptions import InvalidProviderError, ProviderNotFoundError
from .logger import Logger
from .options import Option, build_options
from .providers.base import LoggerProvider
from .providers.console import ConsoleLogger, ConsoleLoggerProvider, new_console_logger

_log = logging.getLogger(__name__)

ProviderFactory = Callable[[], LoggerProvider]

_builtin_lock = threading.Lock()
_BUILTIN_PROVIDERS: Dict[str, ProviderFactory] = {DEFAULT_PROVIDER: ConsoleLoggerProvider}


class LogFactory:
    """Thread-safe store of providers and named loggers."""

    def __init__(self, default_provider: str = DEFAULT_PROVIDER, *, builtins: bool = True) -> None:
        self._lock = threading.RLock()
        self._providers: Dict[str, LoggerProvider] = {}
        self._loggers: Dict[str, Tuple[str, Logger]] = {}
        self._default_provider = default_provider
        self._global_logger: Optional[Logger] = None
        if builtins:
            for name, make in builtin_providers().items():
                self._providers[name] = make()

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def register_provider(self, name: str, provider: LoggerProvider) -> None:
        """Insert or overwrite the provider registered under ``name``."""
        if not isinstance(provider, LoggerProvider):
            raise InvalidProviderError(name=name, provider=provider)
        with self._lock:
            self._providers[name] = provider
        _log.debug("Registered logger provider %s (%s)", name, type(provider).__name__)

    def unregister_provider(self, name: str) -> None:
        with self._lock:
            removed = self._providers.pop(name, None)
        if removed is not None:
            _log.debug("Unregistered logger provider %s", name)

    def get_provider(self, name: str) -> LoggerProvider:
        with self._lock:
            provider = self._providers.get(name)
        if provider is None:
            raise ProviderNotFoundError(provider=name)
        return provider

    def has_provider(self, name: str) -> bool:
        with self._lock:
            return name in self._providers

    def provider_names(self) -> List[str]:
        with self._lock:
            return sorted(self._providers)

    @property
    def default_provider(self) -> str:
        return self._default_provider

    def set_default_provider(self, name: str) -> None:
        """Change the provider used by ``get_logger_with_name``; it must be registered."""
        self.get_provider(name)
        with self._lock:
            self._default_provider = name

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _build(self, name: str, provider_name: str, opts: Tuple[Option, ...]) -> Logger:
        provider = self.get_provider(provider_name)
        if not opts:
            return provider.create(name)
        options = build_options(*opts, format=provider.default_format)
        return provider.create_with_options(name, options)

    def _publish(self, name: str, provider_name: str, logger: Logger) -> None:
        """Cache ``logger`` under ``name`` and release the logger it replaces.

        The global logger is never released here, even when it was cached under
        ``name``.
        """
        previous = self._loggers.get(name)
        self._loggers[name] = (provider_name, logger)
        if previous is None:
            return
        old = previous[1]
        if old is logger or old is self._global_logger:
            return
        try:
            old.close()
        except (OSError, ValueError) as e:
            _log.warning("Failed to release replaced logger %s: %s", name, e)

    def create_logger_with_provider(self, name: str, provider_name: str, *opts: Option) -> Logger:
        """Build a logger on ``provider_name`` and cache it under ``name``.

        Raises:
            ProviderNotFoundError: ``provider_name`` is not registered.
        """
        with self._lock:
            logger = self._build(name, provider_name, opts)
            self._publish(name, provider_name, logger)
        return logger

    def create_logger_with_config(self, name: str, config: Mapping[str, Any]) -> Logger:
        """Build a logger from a generic map; ``config["provider"]`` selects the backend."""
        provider_name = config.get("provider")
        if not isinstance(provider_name, str) or not provider_name:
            provider_name = self._default_provider
        with self._lock:
            logger = self.get_provider(provider_name).create_with_config(name, config)
            self._publish(name, provider_name, logger)
        return logger

    def create_logger_with_log_config(self, config: LogConfig) -> Logger:
        config.normalize()
        return self.create_logger_with_provider(config.name, config.provider, *config.to_options())

    # ------------------------------------------------------------------
    # Memoized lookups
    # ------------------------------------------------------------------

    def get_logger_with_name(self, name: str) -> Logger:
        """Return the logger cached under ``name``, creating it on the default provider."""
        with self._lock:
            cached = self._loggers.get(name)
            if cached is not None:
                return cached[1]
            return self.create_logger_with_provider(name, self._default_provider)

    def get_logger_with_provider(self, name: str, provider_name: str, *opts: Option) -> Logger:
        """Return the cached logger for ``name`` when it was built by the same provider
        and no options are given; otherwise build a new one.
        """
        with self._lock:
            self.get_provider(provider_name)
            cached = self._loggers.get(name)
            if cached is not None and cached[0] == provider_name and not opts:
                return cached[1]
            return self.create_logger_with_provider(name, provider_name, *opts)

    def cached_logger_names(self) -> List[str]:
        with self._lock:
            return sorted(self._loggers)

    # ------------------------------------------------------------------
    # Global logger
    # ------------------------------------------------------------------

    def get_logger(self) -> Logger:
        """The logger behind the package-level convenience functions."""
        with self._lock:
            if self._global_logger is None:
                self._global_logger = self.get_logger_with_name(DEFAULT_NAME)
            return self._global_logger

    def set_global_logger(self, logger: Logger) -> None:
        with self._lock:
            self._global_logger = logger


# =============================================================================
# Process-wide registry
# =============================================================================

_factory: Optional[LogFactory] = None
_factory_lock = threading.Lock()


def builtin_providers() -> Dict[str, ProviderFactory]:
    with _builtin_lock:
        return dict(_BUILTIN_PROVIDERS)


def register_builtin_provider(name: str, provider_factory: ProviderFactory) -> None:
    """Make a provider available in every registry, including the live one."""
    with _builtin_lock:
        _BUILTIN_PROVIDERS[name] = provider_factory
    factory = _factory
    if factory is not None and not factory.has_provider(name):
        factory.register_provider(name, provider_factory())


def get_log_factory() -> LogFactory:
    global _factory
    if _factory is None:
        with _factory_lock:
            if _factory is None:
                _factory = LogFactory()
    return _factory


def reset_log_factory() -> None:
    """Drop the process-wide registry (for tests)."""
    global _factory
    with _factory_lock:
        _factory = None


def new_registry(default_provider: str = DEFAULT_PROVIDER) -> LogFactory:
    return LogFactory(default_provider)


def new_default_logger(name: str = DEFAULT_NAME, *opts: Option) -> ConsoleLogger:
    """A console logger outside any registry."""
    return new_console_logger(name, *opts)
