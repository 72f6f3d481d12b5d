"""Generator configuration and target profile loading.

GeneratorConfig is a Pydantic model for type-safe generation settings.
Target profiles are resolved by name through ``_TARGET_MAP`` so a run only
imports the emitters it actually uses.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from entity_codegen.core.enums import InputFormat
from entity_codegen.core.exceptions import UnknownTargetError


class GeneratorConfig(BaseModel):
    """Configuration for one generation run."""

    targets: list[str] = ["typescript", "csharp"]
    input_format: InputFormat | None = None
    root_facet_type: str = "itemFacet"
    catalog_path: Path | None = None

    @field_validator("targets")
    @classmethod
    def _normalize_targets(cls, value: list[str]) -> list[str]:
        normalized: list[str] = []
        for name in value:
            lowered = name.strip().lower()
            if lowered and lowered not in normalized:
                normalized.append(lowered)
        return normalized


# Target module mapping: target name → (module_path, profile_class)
_TARGET_MAP: dict[str, tuple[str, str]] = {
    "typescript": ("entity_codegen.targets.typescript", "TypeScriptProfile"),
    "csharp": ("entity_codegen.targets.csharp", "CSharpProfile"),
    "python": ("entity_codegen.targets.python", "PythonProfile"),
}


def available_targets() -> list[str]:
    """Names accepted by :func:`load_target_profile`, sorted alphabetically."""
    return sorted(_TARGET_MAP)


def load_target_profile(target: str) -> Any:
    """Load a target profile by name."""
    target_lower = target.strip().lower()
    if target_lower not in _TARGET_MAP:
        raise UnknownTargetError(target)

    module_path, cls_name = _TARGET_MAP[target_lower]

    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise UnknownTargetError(target, f"failed to load profile: {e}") from e
