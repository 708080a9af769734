"""Edit-plan loader — read an ordered list of edits from a YAML file.

Format::

    - trim: [10, 20]
    - size: [400, 300]
    - crop: [0, 0, 200, 200]
    - fps: 48
    - mute
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from clipcmd.application.edit_plan import EditStep, validate_step
from clipcmd.domain.errors import ValidationError

logger = logging.getLogger(__name__)


def _to_step(entry: Any, index: int) -> EditStep:
    if isinstance(entry, str):
        return EditStep(operation=entry)

    if not isinstance(entry, dict) or len(entry) != 1:
        raise ValidationError(f"Edit plan entry {index + 1} must be a name or a single-key mapping, got {entry!r}")

    ((operation, raw_args),) = entry.items()
    if raw_args is None:
        arguments: tuple[Any, ...] = ()
    elif isinstance(raw_args, list):
        arguments = tuple(raw_args)
    else:
        arguments = (raw_args,)
    return EditStep(operation=str(operation), arguments=arguments)


def parse_edit_plan(text: str) -> list[EditStep]:
    """Parse YAML text into validated edit steps. Empty text is an empty plan."""
    if not text.strip():
        return []
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValidationError(f"Invalid edit plan YAML: {exc}") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        raise ValidationError(f"Edit plan root must be a list, got {type(data).__name__}")

    steps = [_to_step(entry, i) for i, entry in enumerate(data)]
    for step in steps:
        validate_step(step)
    return steps


def load_edit_plan(path: Path) -> list[EditStep]:
    """Read and parse an edit plan file."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ValidationError(f"Unable to read edit plan {path}: {exc}") from exc

    steps = parse_edit_plan(text)
    logger.info("Loaded %d edit steps from %s", len(steps), path.name)
    return steps
