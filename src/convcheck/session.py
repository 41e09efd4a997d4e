"""
Validation Sessions

A ValidationSession scopes the capability bridge and the validator cache
to one project. SessionRegistry hands out one session per project and
resets it when the project's classpath changes.
"""
from __future__ import annotations

import logging
from threading import RLock

from convcheck.bridge import RuntimeCapabilityBridge
from convcheck.cache import ValidatorCache
from convcheck.config import ConvCheckConfig, get_config
from convcheck.diagnostics import DiagnosticsCollector
from convcheck.exceptions import TypeSignatureError
from convcheck.project import ProjectContext
from convcheck.resolver import DEFAULT_STRUCTURAL_CATEGORIES, resolve_validator
from convcheck.signature import parse_signature
from convcheck.validators import Validator

logger = logging.getLogger(__name__)


class ValidationSession:
    """Validates property values of one project against type signatures.

    Example:
        >>> from convcheck import DiagnosticList, ProjectContext, ValidationSession
        >>> session = ValidationSession(ProjectContext("demo"))
        >>> diagnostics = DiagnosticList()
        >>> session.validate("1,2X,3", "int[]", diagnostics)
        >>> diagnostics.spans
        [(2, 4)]
    """

    def __init__(
        self,
        project: ProjectContext,
        config: ConvCheckConfig | None = None,
    ) -> None:
        """Initialize a session.

        Args:
            project: Project the session validates for.
            config: Configuration snapshot. Uses get_config() if None.
        """
        self._project = project
        self._config = config or get_config()
        self._categories = {
            **DEFAULT_STRUCTURAL_CATEGORIES,
            **self._config.structural_categories(),
        }
        self._cache = ValidatorCache()
        self._bridge = RuntimeCapabilityBridge(
            project,
            provider_names=self._config.provider_names,
            entry_point_group=self._config.entry_point_group,
            discovery_enabled=self._config.discovery_enabled,
        )
        self._bridge.add_reset_listener(self._cache.clear)

    @property
    def project(self) -> ProjectContext:
        return self._project

    @property
    def config(self) -> ConvCheckConfig:
        return self._config

    @property
    def bridge(self) -> RuntimeCapabilityBridge:
        return self._bridge

    @property
    def cache(self) -> ValidatorCache:
        return self._cache

    def has_capability(self) -> bool:
        """Whether a conversion capability is available for the project."""
        return self._bridge.has_capability()

    def reset(self) -> None:
        """Forget the capability and every cached validator."""
        self._bridge.reset()

    def get_validator(self, signature: str) -> Validator:
        """Return the (cached) validator for a signature.

        Raises:
            SignatureSyntaxError: If the signature is malformed.
            UnresolvableTypeError: If a type name is unknown.
        """
        return self._cache.get_or_create(signature, lambda: self._build(signature))

    def validate(
        self,
        value: str,
        signature: str,
        collector: DiagnosticsCollector,
        start: int = 0,
    ) -> None:
        """Validate ``value`` against ``signature``.

        Conversion failures are reported to ``collector``. Nothing happens
        when no capability is available. Failures raised by the capability
        itself are logged and swallowed.

        Args:
            value: Raw property value.
            signature: Declared type signature.
            collector: Diagnostics sink.
            start: Absolute offset of ``value`` in its document.

        Raises:
            TypeSignatureError: If the signature is malformed or names an
                unknown type. Only this property's validation is aborted.
        """
        try:
            if not self._bridge.has_capability():
                return
            validator = self.get_validator(signature)
            if not validator.can_validate():
                return
            validator.validate(value, start, collector)
        except TypeSignatureError as e:
            logger.debug("Cannot validate '%s' with type '%s': %s", value, signature, e)
            raise
        except Exception:
            logger.debug(
                "Error while validating '%s' value with type '%s'",
                value,
                signature,
                exc_info=True,
            )

    def _build(self, signature: str) -> Validator:
        descriptor = parse_signature(signature)
        return resolve_validator(
            descriptor,
            self._bridge,
            self._categories,
            self._config.diagnostic_source,
        )


class SessionRegistry:
    """Thread-safe registry of sessions keyed by project id."""

    __slots__ = ("_lock", "_sessions", "_config")

    def __init__(self, config: ConvCheckConfig | None = None) -> None:
        """Initialize the registry.

        Args:
            config: Configuration for sessions it creates. Uses
                get_config() at creation time if None.
        """
        self._lock = RLock()
        self._sessions: dict[str, ValidationSession] = {}
        self._config = config

    def get_or_create(self, project: ProjectContext) -> ValidationSession:
        """Get the project's session, creating it on first use."""
        with self._lock:
            session = self._sessions.get(project.project_id)
            if session is None:
                session = ValidationSession(project, self._config)
                self._sessions[project.project_id] = session
            return session

    def get(self, project_id: str) -> ValidationSession | None:
        with self._lock:
            return self._sessions.get(project_id)

    def classpath_changed(self, project_id: str) -> bool:
        """Reset the project's session after a classpath change.

        Returns:
            True if a session existed and was reset.
        """
        session = self.get(project_id)
        if session is None:
            return False
        session.reset()
        return True

    def remove(self, project_id: str) -> ValidationSession | None:
        """Drop the project's session."""
        with self._lock:
            return self._sessions.pop(project_id, None)

    def get_all(self) -> list[ValidationSession]:
        with self._lock:
            return list(self._sessions.values())

    def clear(self) -> None:
        """Remove every session."""
        with self._lock:
            self._sessions.clear()
