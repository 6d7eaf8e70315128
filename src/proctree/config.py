"""
proctree.config
===============

TerminationConfig: the immutable knobs of one termination request.

Use `make`, `evolve`, `from_env` or `load` to get msgspec validation; the bare
constructor trusts its arguments.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any

import msgspec
import msgspec.json

from proctree.constants import (
    DEFAULT_SLEEP_BEFORE_SIGKILL_S,
    ENV_COMMAND_TIMEOUT_S,
    ENV_FORCE_KILL_IN_BACKGROUND,
    ENV_SLEEP_BEFORE_SIGKILL_MS,
)

NonNegativeSeconds = Annotated[float, msgspec.Meta(ge=0)]
PositiveSeconds = Annotated[float, msgspec.Meta(gt=0)]

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class TerminationConfig(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    sleep_before_force_kill_s: NonNegativeSeconds = DEFAULT_SLEEP_BEFORE_SIGKILL_S
    run_force_kill_in_background: bool = False
    command_timeout_s: PositiveSeconds | None = None  # None => wait on `kill` forever

    @classmethod
    def make(cls, **fields: Any) -> TerminationConfig:
        """Construct with validation (plain __init__ does not check constraints)."""
        return msgspec.convert(fields, type=cls)

    def evolve(self, **changes: Any) -> TerminationConfig:
        _validate_override_keys(changes)
        return msgspec.convert(msgspec.structs.asdict(self) | changes, type=TerminationConfig)

    @property
    def sleep_before_force_kill_ms(self) -> int:
        return int(round(self.sleep_before_force_kill_s * 1000))

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        base: TerminationConfig | None = None,
    ) -> TerminationConfig:
        """
        Overlay PROCTREE_* environment variables on `base` (defaults if None).
        Unset variables keep the base value.
        """
        env = os.environ if environ is None else environ
        cfg = base or cls()
        changes: dict[str, Any] = {}

        raw_ms = env.get(ENV_SLEEP_BEFORE_SIGKILL_MS)
        if raw_ms is not None and raw_ms.strip():
            changes["sleep_before_force_kill_s"] = float(raw_ms) / 1000.0

        raw_bg = env.get(ENV_FORCE_KILL_IN_BACKGROUND)
        if raw_bg is not None:
            changes["run_force_kill_in_background"] = _parse_bool(ENV_FORCE_KILL_IN_BACKGROUND, raw_bg)

        raw_timeout = env.get(ENV_COMMAND_TIMEOUT_S)
        if raw_timeout is not None:
            changes["command_timeout_s"] = float(raw_timeout) if raw_timeout.strip() else None

        return cfg.evolve(**changes) if changes else cfg

    @classmethod
    def load(cls, path: Path | str) -> TerminationConfig:
        data = Path(path).read_bytes()
        return msgspec.json.decode(data, type=cls)


def _parse_bool(name: str, raw: str) -> bool:
    val = raw.strip().lower()
    if val in _TRUTHY:
        return True
    if val in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


def _validate_override_keys(overrides: Mapping[str, Any]) -> None:
    known = set(TerminationConfig.__struct_fields__)
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise TypeError(f"Unknown TerminationConfig field(s): {', '.join(unknown)}")
