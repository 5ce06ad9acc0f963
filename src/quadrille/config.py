"""ContextVar-based synchronization configuration for Quadrille.

Provides context-local configuration using Python's ContextVars (PEP 567).
Engines and validators read the active config when they are created, so a
host can set it once and every board opened afterwards picks it up.

Usage:
    # Explicit, per engine
    engine = SectionSyncEngine(store, "notes.md", config=SyncConfig(debounce_ms=150))

    # Ambient, for a whole host session
    from quadrille.config import set_sync_config, reset_sync_config, SyncConfig

    set_sync_config(SyncConfig(rows=48))
    try:
        result = validate_model("kanban", blocks)
    finally:
        reset_sync_config()

    # Or use the context manager
    with sync_config_context(SyncConfig(busy_frame_policy="skip")):
        engine = SectionSyncEngine(store, "notes.md")

"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Literal

from quadrille.errors import ValidationError
from quadrille.layout.model import DEFAULT_COLUMNS, DEFAULT_ROWS, GridSize

type BusyFramePolicy = Literal["defer", "skip"]

BUSY_FRAME_POLICIES: frozenset[str] = frozenset({"defer", "skip"})


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Immutable synchronization configuration.

    Frozen dataclass ensures it can be shared between engines freely.

    Attributes:
        columns: Grid width in cells (layout bounds checking)
        rows: Grid height in cells (layout bounds checking)
        debounce_ms: Quiet period before a frame's edit is committed
        cooldown_ms: How long the guard stays engaged after a write,
            absorbing the host's own change notification
        busy_frame_policy: What to do with an external change for a frame the
            user is typing in: "defer" applies it once the frame is released,
            "skip" drops it until the next change
        reject_duplicate_titles: Treat repeated level-1 headings as a
            validation error instead of letting the last one win

    """

    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS
    debounce_ms: int = 300
    cooldown_ms: int = 100
    busy_frame_policy: BusyFramePolicy = "defer"
    reject_duplicate_titles: bool = False

    def __post_init__(self) -> None:
        errors: list[str] = []
        if self.columns <= 0 or self.rows <= 0:
            errors.append(f"grid must be at least 1x1 (got {self.columns}x{self.rows})")
        if self.debounce_ms < 0:
            errors.append(f"debounce_ms must be >= 0 (got {self.debounce_ms})")
        if self.cooldown_ms < 0:
            errors.append(f"cooldown_ms must be >= 0 (got {self.cooldown_ms})")
        if self.busy_frame_policy not in BUSY_FRAME_POLICIES:
            errors.append(
                f"busy_frame_policy must be one of {sorted(BUSY_FRAME_POLICIES)} "
                f"(got {self.busy_frame_policy!r})"
            )
        if errors:
            raise ValidationError(errors)

    @property
    def grid(self) -> GridSize:
        """Grid dimensions as a GridSize."""
        return GridSize(columns=self.columns, rows=self.rows)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @property
    def cooldown_seconds(self) -> float:
        return self.cooldown_ms / 1000

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "SyncConfig":
        """Create SyncConfig from a mapping.

        Useful when settings come from a host's own storage. Only keys that
        are SyncConfig fields are used; unknown keys are silently ignored.

        Args:
            config_dict: Mapping with config values. Keys should match
                SyncConfig attribute names.

        Returns:
            New SyncConfig instance with values from the mapping.

        Raises:
            ValidationError: If a known key carries an unusable value.

        Example:
            >>> config = SyncConfig.from_dict({"debounce_ms": 500, "theme": "dark"})
            >>> config.debounce_ms
            500

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: SyncConfig = SyncConfig()

_sync_config: ContextVar[SyncConfig] = ContextVar(
    "sync_config",
    default=_DEFAULT_CONFIG,
)


def get_sync_config() -> SyncConfig:
    """Get the active synchronization configuration.

    Returns:
        The SyncConfig for this thread/context.

    """
    return _sync_config.get()


def set_sync_config(config: SyncConfig) -> None:
    """Set the synchronization configuration for the current context.

    Args:
        config: SyncConfig instance to use for this context.

    """
    _sync_config.set(config)


def reset_sync_config() -> None:
    """Reset to the default configuration."""
    _sync_config.set(_DEFAULT_CONFIG)


@contextmanager
def sync_config_context(config: SyncConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: SyncConfig to use within the context.

    Yields:
        None

    Example:
        >>> with sync_config_context(SyncConfig(rows=24)):
        ...     result = validate_model("square", blocks)
        >>> # Automatically reset to previous config

    """
    previous = _sync_config.get()
    _sync_config.set(config)
    try:
        yield
    finally:
        _sync_config.set(previous)


__all__ = [
    "BUSY_FRAME_POLICIES",
    "BusyFramePolicy",
    "SyncConfig",
    "get_sync_config",
    "reset_sync_config",
    "set_sync_config",
    "sync_config_context",
]
