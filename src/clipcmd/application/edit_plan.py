"""Edit plans — ordered edit steps replayed onto a SourceDescriptor."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from clipcmd.application.source_descriptor import SourceDescriptor
from clipcmd.domain.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditStep:
    """One edit operation and its positional arguments, e.g. ``size (400, 300)``."""

    operation: str
    arguments: tuple[float | int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.operation:
            raise ValueError("operation must not be empty")


# operation -> (argument count, integer arguments only, applier)
_OPERATIONS: dict[str, tuple[int, bool, Callable[..., SourceDescriptor]]] = {
    "trim": (2, False, SourceDescriptor.trim),
    "start": (1, False, SourceDescriptor.set_start),
    "end": (1, False, SourceDescriptor.set_end),
    "size": (2, True, SourceDescriptor.set_size),
    "crop": (4, True, SourceDescriptor.crop),
    "fps": (1, True, SourceDescriptor.set_frame_rate),
    "bitrate": (1, True, SourceDescriptor.set_bitrate),
    "mute": (0, True, SourceDescriptor.mute),
}

KNOWN_OPERATIONS: frozenset[str] = frozenset(_OPERATIONS)


def validate_step(step: EditStep) -> None:
    """Raise ValidationError if ``step`` names an unknown operation or has bad arguments."""
    entry = _OPERATIONS.get(step.operation)
    if entry is None:
        known = ", ".join(sorted(KNOWN_OPERATIONS))
        raise ValidationError(f"Unknown edit operation '{step.operation}' (expected one of: {known})")

    arity, integral, _ = entry
    if len(step.arguments) != arity:
        raise ValidationError(f"Edit '{step.operation}' takes {arity} argument(s), got {len(step.arguments)}")
    for value in step.arguments:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValidationError(f"Edit '{step.operation}' arguments must be numbers, got {value!r}")
        if integral and not isinstance(value, int):
            raise ValidationError(f"Edit '{step.operation}' arguments must be integers, got {value!r}")


def apply_edit_plan(descriptor: SourceDescriptor, steps: Iterable[EditStep]) -> SourceDescriptor:
    """Apply ``steps`` to ``descriptor`` in order. Steps are validated before any is applied."""
    plan = list(steps)
    for step in plan:
        validate_step(step)

    for step in plan:
        _, _, applier = _OPERATIONS[step.operation]
        applier(descriptor, *step.arguments)

    logger.debug("Applied %d edit steps to %s", len(plan), descriptor.path.name)
    return descriptor
