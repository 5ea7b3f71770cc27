"""Adapter Registry — Manages registration, routing roles and retrieval of search adapters.

The registry is a central place to register adapter classes and create
adapter instances based on configuration. Once every adapter is initialized,
``configure()`` assigns the routing roles (one default, at most one fallback)
and freezes the registry; after that it is read-only and safe to share
between concurrent requests.
"""

from __future__ import annotations

import logging
from typing import Any

from magnetsearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from magnetsearch.adapters.base.exceptions import AdapterNotFoundError, ConfigurationError
from magnetsearch.models.adapter import AdapterInfo, AdapterRole

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Registry for managing search adapter instances.

    The registry maintains both adapter class registrations and
    initialized adapter instances. It supports:
      - Registering adapter classes by id
      - Creating and initializing adapter instances from config
      - Assigning the default and fallback roles
      - Resolving the adapter for a request and its fallback
      - Health checking all initialized adapters

    Example:
        >>> registry = AdapterRegistry()
        >>> registry.register("apibay", ApiBayAdapter)
        >>> await registry.initialize_adapter("apibay", timeout_ms=5000)
        >>> registry.configure(default_id="apibay", fallback_id="sample")
        >>> adapter = registry.resolve(None)
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[SearchAdapter]] = {}
        self._instances: dict[str, SearchAdapter] = {}
        self._default_id: str | None = None
        self._fallback_id: str | None = None
        self._frozen = False

    def register(self, name: str, adapter_class: type[SearchAdapter]) -> None:
        """Register an adapter class.

        Args:
            name: Unique id for this adapter type.
            adapter_class: The adapter class to register.

        Raises:
            ConfigurationError: If the registry is already configured.
        """
        self._check_not_frozen()
        if name in self._classes:
            logger.warning("Overwriting existing adapter registration: %s", name)
        self._classes[name] = adapter_class
        logger.info("Registered adapter: %s", name)

    async def initialize_adapter(self, name: str, **kwargs: Any) -> SearchAdapter:
        """Create and initialize an adapter instance.

        Args:
            name: The registered adapter id.
            **kwargs: Configuration parameters passed to the adapter constructor.

        Returns:
            The initialized adapter instance.

        Raises:
            AdapterNotFoundError: If no adapter is registered under this id.
            ConfigurationError: If the registry is already configured.
        """
        self._check_not_frozen()
        if name not in self._classes:
            raise AdapterNotFoundError(
                f"No adapter registered with name '{name}'. Available adapters: {list(self._classes.keys())}"
            )

        adapter = self._classes[name](**kwargs)
        await adapter.initialize()
        self._instances[name] = adapter
        logger.info("Initialized adapter: %s", name)
        return adapter

    async def add(self, adapter: SearchAdapter) -> SearchAdapter:
        """Initialize and add an already constructed adapter under its own id."""
        self._check_not_frozen()
        await adapter.initialize()
        self._instances[adapter.id] = adapter
        logger.info("Initialized adapter: %s", adapter.id)
        return adapter

    def configure(self, default_id: str | None = None, fallback_id: str | None = None) -> None:
        """Assign routing roles and freeze the registry.

        Args:
            default_id: Adapter used when a request names none. Defaults to
                the first initialized adapter.
            fallback_id: Adapter tried once when the primary fails or returns
                nothing. Ignored when equal to the default.

        Raises:
            ConfigurationError: If no adapter is initialized, or a configured
                id does not name an initialized adapter.
        """
        self._check_not_frozen()
        if not self._instances:
            raise ConfigurationError("No adapters are initialized.")

        default_id = default_id or next(iter(self._instances))
        if default_id not in self._instances:
            raise ConfigurationError(
                f"Default adapter '{default_id}' is not initialized. Active adapters: {self.active_adapters}"
            )
        if fallback_id and fallback_id not in self._instances:
            raise ConfigurationError(
                f"Fallback adapter '{fallback_id}' is not initialized. Active adapters: {self.active_adapters}"
            )
        if fallback_id == default_id:
            logger.warning("Fallback adapter '%s' is also the default; no fallback will be used", fallback_id)
            fallback_id = None

        self._default_id = default_id
        self._fallback_id = fallback_id or None
        self._frozen = True
        logger.info("Adapter routing configured (default: %s, fallback: %s)", self._default_id, self._fallback_id)

    # ── Lookup ───────────────────────────────────────────────────────────

    def get(self, name: str) -> SearchAdapter:
        """Get an initialized adapter instance by id.

        Raises:
            AdapterNotFoundError: If the adapter is not initialized.
        """
        if name not in self._instances:
            raise AdapterNotFoundError(f"Adapter '{name}' is not initialized. Call initialize_adapter() first.")
        return self._instances[name]

    def get_default(self) -> SearchAdapter:
        """Get the default adapter.

        Raises:
            AdapterNotFoundError: If no adapters are initialized.
        """
        if self._default_id is not None:
            return self._instances[self._default_id]
        if not self._instances:
            raise AdapterNotFoundError("No adapters are initialized.")
        return next(iter(self._instances.values()))

    def resolve(self, adapter_id: str | None) -> SearchAdapter:
        """Return the adapter for a request, substituting the default for absent or unknown ids."""
        if adapter_id:
            adapter = self._instances.get(adapter_id)
            if adapter is not None:
                return adapter
            logger.info("Unknown adapter '%s' requested, using default", adapter_id)
        return self.get_default()

    def fallback_for(self, adapter_id: str) -> SearchAdapter | None:
        """Return the fallback to try after *adapter_id*, or None.

        An adapter is never its own fallback.
        """
        if self._fallback_id is None or self._fallback_id == adapter_id:
            return None
        return self._instances[self._fallback_id]

    def role_of(self, adapter_id: str) -> AdapterRole:
        if adapter_id == self._default_id:
            return AdapterRole.DEFAULT
        if adapter_id == self._fallback_id:
            return AdapterRole.FALLBACK
        return AdapterRole.STANDARD

    def list_adapters(self) -> list[AdapterInfo]:
        """Describe every initialized adapter, default first, then by id."""
        default = self.get_default() if self._instances else None
        others = sorted(
            (adapter for adapter in self._instances.values() if adapter is not default),
            key=lambda adapter: adapter.id,
        )
        ordered = ([default] if default is not None else []) + others
        return [adapter.info(self.role_of(adapter.id)) for adapter in ordered]

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def health_check_all(self) -> dict[str, AdapterHealth]:
        """Run health checks on all initialized adapters.

        Returns:
            Dictionary mapping adapter ids to their health status.
        """
        results: dict[str, AdapterHealth] = {}
        for name, adapter in self._instances.items():
            try:
                results[name] = await adapter.health_check()
            except Exception as e:
                results[name] = AdapterHealth(status="unhealthy", message=str(e))
        return results

    async def shutdown_all(self) -> None:
        """Gracefully shut down all initialized adapters."""
        for name, adapter in self._instances.items():
            try:
                await adapter.shutdown()
                logger.info("Shut down adapter: %s", name)
            except Exception:
                logger.warning("Error shutting down adapter: %s", name, exc_info=True)
        self._instances.clear()
        self._default_id = None
        self._fallback_id = None
        self._frozen = False

    @property
    def default_id(self) -> str | None:
        return self._default_id

    @property
    def fallback_id(self) -> str | None:
        return self._fallback_id

    @property
    def configured(self) -> bool:
        return self._frozen

    @property
    def registered_adapters(self) -> list[str]:
        """List all registered adapter ids."""
        return list(self._classes.keys())

    @property
    def active_adapters(self) -> list[str]:
        """List all initialized adapter ids."""
        return list(self._instances.keys())

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise ConfigurationError("Adapter registry is already configured and cannot be modified.")
