"""
Runtime Capability Bridge

Lazily discovers and builds the conversion capability of one project.
Discovery runs at most once per session (until reset) and is thread-safe.

Discovery order, stopping at the first provider that builds:
1. Well-known provider names, loaded through the project context
2. Entry points of the configured group (service discovery)

Failing candidates are logged and skipped. When nothing builds, the
bridge settles on "unavailable" and validation becomes a no-op.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Iterable

from convcheck.capabilities.base import CapabilityProvider, ConversionCapability
from convcheck.project import ProjectContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapabilityState:
    """Snapshot of a bridge's discovery state.

    Attributes:
        resolved: Whether discovery has run since creation or last reset.
        capability: Capability handle, None when unresolved or unavailable.
        provider_id: Identifier of the provider that built the capability.
    """

    resolved: bool = False
    capability: ConversionCapability | None = None
    provider_id: str | None = None

    @property
    def available(self) -> bool:
        return self.capability is not None


class RuntimeCapabilityBridge:
    """Memoized, resettable access to a project's conversion capability.

    Thread-safe: concurrent first callers block on discovery and all
    observe its single outcome. ``reset()`` takes the same lock.
    """

    __slots__ = (
        "_lock",
        "_project",
        "_provider_names",
        "_entry_point_group",
        "_discovery_enabled",
        "_state",
        "_reset_listeners",
        "_discovery_count",
    )

    def __init__(
        self,
        project: ProjectContext,
        provider_names: Iterable[str] = (),
        entry_point_group: str | None = None,
        discovery_enabled: bool = True,
    ) -> None:
        """Initialize the bridge.

        Args:
            project: Project supplying symbol loading and entry points.
            provider_names: Well-known provider names, tried in order.
            entry_point_group: Entry point group for the fallback scan.
            discovery_enabled: If False, the fallback scan is skipped.
        """
        self._lock = RLock()
        self._project = project
        self._provider_names = tuple(provider_names)
        self._entry_point_group = entry_point_group
        self._discovery_enabled = discovery_enabled
        self._state = CapabilityState()
        self._reset_listeners: list[Callable[[], Any]] = []
        self._discovery_count = 0

    @property
    def project(self) -> ProjectContext:
        return self._project

    @property
    def state(self) -> CapabilityState:
        """Current discovery state (immutable snapshot)."""
        with self._lock:
            return self._state

    @property
    def discovery_count(self) -> int:
        """Number of discovery runs so far."""
        with self._lock:
            return self._discovery_count

    def add_reset_listener(self, listener: Callable[[], Any]) -> None:
        """Register a callable invoked (under the bridge lock) on reset."""
        with self._lock:
            self._reset_listeners.append(listener)

    def get_capability(self) -> ConversionCapability | None:
        """Return the capability, running discovery on first call.

        Returns:
            The capability, or None if no provider is available.
        """
        state = self._state
        if state.resolved:
            return state.capability

        with self._lock:
            if not self._state.resolved:
                self._state = self._discover()
            return self._state.capability

    def has_capability(self) -> bool:
        """Whether a usable capability exists (forces discovery)."""
        return self.get_capability() is not None

    def reset(self) -> None:
        """Drop the capability and clear dependent caches.

        The next ``get_capability()`` call runs discovery again.
        """
        with self._lock:
            self._state = CapabilityState()
            for listener in self._reset_listeners:
                listener()
        logger.debug("Capability bridge reset for %s", self._project.project_id)

    def _discover(self) -> CapabilityState:
        self._discovery_count += 1
        project_id = self._project.project_id

        for name in self._provider_names:
            try:
                factory = self._project.load_symbol(name)
            except (ImportError, AttributeError) as e:
                logger.debug("Capability provider %s not found: %s", name, e)
                continue
            state = self._try_provider(name, factory)
            if state is not None:
                return state

        if self._discovery_enabled and self._entry_point_group:
            try:
                candidates = list(self._project.entry_points(self._entry_point_group))
            except Exception:
                logger.info(
                    "Entry point scan failed for group %s",
                    self._entry_point_group,
                    exc_info=True,
                )
                candidates = []

            for entry_point in candidates:
                try:
                    factory = entry_point.load()
                except Exception:
                    logger.info(
                        "Cannot load capability entry point %s",
                        entry_point.name,
                        exc_info=True,
                    )
                    continue
                state = self._try_provider(entry_point.name, factory)
                if state is not None:
                    return state

        logger.warning("No capability provider found for project %s", project_id)
        return CapabilityState(resolved=True)

    def _try_provider(self, name: str, factory: Any) -> CapabilityState | None:
        try:
            provider = factory() if isinstance(factory, type) else factory
            if not isinstance(provider, CapabilityProvider):
                raise TypeError(
                    f"{name} is not a CapabilityProvider: {type(provider).__name__}"
                )
            capability = provider.build(self._project)
            if not isinstance(capability, ConversionCapability):
                raise TypeError(
                    f"{name} built {type(capability).__name__}, not a ConversionCapability"
                )
        except Exception:
            logger.info("Cannot build capability from provider %s", name, exc_info=True)
            return None

        logger.info(
            "Loaded capability provider %s for project %s",
            name,
            self._project.project_id,
        )
        return CapabilityState(
            resolved=True,
            capability=capability,
            provider_id=provider.provider_id,
        )
