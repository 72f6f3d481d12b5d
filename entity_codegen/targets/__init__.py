"""Target language profiles."""

from __future__ import annotations

from entity_codegen.targets.csharp import CSharpProfile
from entity_codegen.targets.protocol import (
    PRINCIPAL_ODATA_TYPE,
    PrincipalMember,
    TargetProfile,
    ValidationConstraints,
)
from entity_codegen.targets.python import PythonProfile
from entity_codegen.targets.typescript import TypeScriptProfile

__all__ = [
    "PRINCIPAL_ODATA_TYPE",
    "PrincipalMember",
    "TargetProfile",
    "ValidationConstraints",
    "CSharpProfile",
    "PythonProfile",
    "TypeScriptProfile",
]
