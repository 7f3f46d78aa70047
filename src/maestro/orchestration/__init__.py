"""Dialogue routing: prompt construction, target resolution and dispatch."""

from maestro.orchestration.dispatch import DispatchCoordinator, plan_dispatch
from maestro.orchestration.prompt import (
    SYSTEM_PROMPT,
    build_context,
    build_system_prompt,
    build_turns,
)
from maestro.orchestration.resolver import (
    DEFAULT_MAX_FALLBACK_DRAWS,
    TargetResolver,
    normalize_answer,
)

__all__ = [
    "DEFAULT_MAX_FALLBACK_DRAWS",
    "DispatchCoordinator",
    "SYSTEM_PROMPT",
    "TargetResolver",
    "build_context",
    "build_system_prompt",
    "build_turns",
    "normalize_answer",
    "plan_dispatch",
]
