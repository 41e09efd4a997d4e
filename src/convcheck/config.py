"""convcheck Configuration APIs.

Public APIs for configuring convcheck:
- configure() - Set global configuration
- get_config() - Get current configuration
- load_config() - Load configuration from a YAML file
- load_env() - Apply CONVCHECK_* environment variables

Sessions take a snapshot of the configuration when they are created;
changing the configuration afterwards does not affect live sessions.
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import yaml

from convcheck.diagnostics import DEFAULT_SOURCE
from convcheck.exceptions import ConfigurationError
from convcheck.resolver import StructuralCategory

DEFAULT_PROVIDER_NAMES: Tuple[str, ...] = (
    "convcheck.capabilities.standard:StandardConversionProvider",
)

DEFAULT_ENTRY_POINT_GROUP = "convcheck.capabilities"


@dataclass(frozen=True)
class ConvCheckConfig:
    """convcheck configuration.

    Attributes:
        provider_names: Well-known capability providers, tried in order.
        entry_point_group: Entry point group scanned when no well-known
            provider could be built.
        discovery_enabled: If False, the entry point scan is skipped.
        diagnostic_source: Source identifier attached to diagnostics.
        structural_aliases: Extra raw type names mapped to a structural
            category value ("collection", "map", "optional", "wrapper").
            Stored as a read-only mapping.
    """
    provider_names: Tuple[str, ...] = DEFAULT_PROVIDER_NAMES
    entry_point_group: str = DEFAULT_ENTRY_POINT_GROUP
    discovery_enabled: bool = True
    diagnostic_source: str = DEFAULT_SOURCE
    structural_aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "structural_aliases", MappingProxyType(dict(self.structural_aliases))
        )

    def __hash__(self) -> int:
        return hash((
            self.provider_names,
            self.entry_point_group,
            self.discovery_enabled,
            self.diagnostic_source,
            frozenset(self.structural_aliases.items()),
        ))

    def structural_categories(self) -> Dict[str, StructuralCategory]:
        """Return structural aliases as StructuralCategory members."""
        return {
            name: StructuralCategory(value)
            for name, value in self.structural_aliases.items()
        }


@dataclass
class GlobalState:
    """Global configuration state."""
    config: ConvCheckConfig = field(default_factory=ConvCheckConfig)
    _lock: threading.Lock = field(default_factory=threading.Lock)


# Module-level global state
_global_state: Optional[GlobalState] = None
_state_lock = threading.Lock()


def _get_global_state() -> GlobalState:
    """Get or create global state."""
    global _global_state
    if _global_state is None:
        with _state_lock:
            if _global_state is None:
                _global_state = GlobalState()
    return _global_state


def _check_aliases(aliases: Any) -> Dict[str, str]:
    if not isinstance(aliases, Mapping):
        raise ConfigurationError(
            "structural_aliases must be a mapping",
            config_key="structural_aliases",
            expected="dict",
            got=type(aliases).__name__,
        )
    valid = {c.value for c in StructuralCategory}
    checked: Dict[str, str] = {}
    for name, value in aliases.items():
        if value not in valid:
            raise ConfigurationError(
                f"Unknown structural category for '{name}': {value!r}",
                config_key="structural_aliases",
                expected=sorted(valid),
                got=value,
            )
        checked[str(name)] = value
    return checked


def _check_names(names: Any) -> Tuple[str, ...]:
    if isinstance(names, str):
        names = [n.strip() for n in names.split(",")]
    if not isinstance(names, (list, tuple)):
        raise ConfigurationError(
            "provider_names must be a list of names",
            config_key="provider_names",
            expected="list[str]",
            got=type(names).__name__,
        )
    return tuple(str(n) for n in names if n)


def configure(
    provider_names: Optional[Iterable[str]] = None,
    entry_point_group: Optional[str] = None,
    discovery_enabled: Optional[bool] = None,
    diagnostic_source: Optional[str] = None,
    structural_aliases: Optional[Mapping[str, str]] = None,
    reset: bool = False,
) -> None:
    """Configure convcheck global settings.

    Args:
        provider_names: Well-known provider names ("module:attr").
        entry_point_group: Entry point group for the discovery scan.
        discovery_enabled: Enable/disable the entry point scan.
        diagnostic_source: Source identifier for diagnostics.
        structural_aliases: Extra name -> category mappings (replaces
            the current mapping).
        reset: If True, reset all settings to defaults first.

    Raises:
        ConfigurationError: If a value is malformed.

    Example:
        >>> import convcheck
        >>> convcheck.configure(diagnostic_source="microprofile")
        >>> convcheck.configure(reset=True)
    """
    updates: Dict[str, Any] = {}
    if provider_names is not None:
        updates["provider_names"] = _check_names(list(provider_names))
    if entry_point_group is not None:
        updates["entry_point_group"] = entry_point_group
    if discovery_enabled is not None:
        updates["discovery_enabled"] = bool(discovery_enabled)
    if diagnostic_source is not None:
        updates["diagnostic_source"] = diagnostic_source
    if structural_aliases is not None:
        updates["structural_aliases"] = _check_aliases(structural_aliases)

    state = _get_global_state()
    with state._lock:
        base = ConvCheckConfig() if reset else state.config
        state.config = replace(base, **updates)


def get_config() -> ConvCheckConfig:
    """Get current convcheck configuration.

    Returns:
        Current configuration (immutable snapshot).
    """
    state = _get_global_state()
    with state._lock:
        return state.config


def load_config(path: str) -> None:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If config file is invalid.

    YAML format::

        provider_names:
          - mypackage.conversions:SmallRyeLikeProvider
        entry_point_group: convcheck.capabilities
        discovery_enabled: true
        diagnostic_source: microprofile
        structural_aliases:
          java.util.SortedSet: collection
          java.util.OptionalInt: optional
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid config file format: {path}")

    unknown = set(data) - {
        "provider_names",
        "entry_point_group",
        "discovery_enabled",
        "diagnostic_source",
        "structural_aliases",
    }
    if unknown:
        raise ConfigurationError(
            f"Unknown config keys in {path}: {sorted(unknown)}",
            config_key=sorted(unknown)[0],
        )

    provider_names = data.get('provider_names')
    configure(
        provider_names=_check_names(provider_names) if provider_names is not None else None,
        entry_point_group=data.get('entry_point_group'),
        discovery_enabled=data.get('discovery_enabled'),
        diagnostic_source=data.get('diagnostic_source'),
        structural_aliases=data.get('structural_aliases'),
    )


def load_env(prefix: str = "CONVCHECK_") -> None:
    """Apply configuration from environment variables.

    Environment Variable Format:
        CONVCHECK_PROVIDERS={name1},{name2}
        CONVCHECK_ENTRY_POINT_GROUP={group}
        CONVCHECK_DISCOVERY={0|1|true|false}
        CONVCHECK_DIAGNOSTIC_SOURCE={source}
    """
    env = os.environ
    providers = env.get(f"{prefix}PROVIDERS")
    discovery = env.get(f"{prefix}DISCOVERY")

    configure(
        provider_names=_check_names(providers) if providers is not None else None,
        entry_point_group=env.get(f"{prefix}ENTRY_POINT_GROUP"),
        discovery_enabled=(
            discovery.strip().lower() in ("1", "true", "yes", "on")
            if discovery is not None
            else None
        ),
        diagnostic_source=env.get(f"{prefix}DIAGNOSTIC_SOURCE"),
    )
