"""
Base models for OCLA analysis records.

Provides shared base models with centralized configuration for all
analysis schema classes. Using these base models eliminates repetitive
``model_config`` declarations across the codebase.

Architecture Decision:
    Two policies exist on purpose:
    StrictModel (extra="forbid") is for user-facing input objects
    (AnalyzerConfig) where extra fields indicate user typos.
    FrozenModel (frozen=True) is for value types such as signal fragments
    that are compared, hashed and shared between analysis stages.
"""

from enum import Enum

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class OclaBaseModel(BaseModel):
    """Base model with shared configuration for all analysis models.

    Provides camelCase aliasing, assignment validation, and allows field
    population by either alias or Python name.
    """

    model_config = {
        "validate_assignment": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class StrictModel(OclaBaseModel):
    """Base model that forbids unknown fields.

    Use for user-provided objects where extra fields likely indicate
    user typos (e.g., AnalyzerConfig).
    """

    model_config = {
        **OclaBaseModel.model_config,
        "extra": "forbid",
    }


class FrozenModel(BaseModel):
    """Immutable value model.

    Note: frozen models are hashable, so they can be used in sets and as
    dictionary keys.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class SubsystemMode(str, Enum):
    """How the debug subsystem exposes its cores."""

    NATIVE = "NATIVE"
    AXI = "AXI"
    NATIVE_AXI = "NATIVE_AXI"

    @classmethod
    def from_string(cls, value: str) -> "SubsystemMode":
        """Parse a ``Mode`` parameter value.

        Raises:
            ValueError: If the value is not a known mode (case sensitive).
        """
        return cls(value)

    @property
    def has_axi_bridge(self) -> bool:
        """Check if one core is dedicated to bridging an AXI bus."""
        return self != SubsystemMode.NATIVE

    @property
    def has_native_cores(self) -> bool:
        """Check if user probes are routed to native cores."""
        return self != SubsystemMode.AXI


class AxiType(str, Enum):
    """AXI flavour probed by the AXI bridge core."""

    AXI4 = "AXI4"
    AXI_LITE = "AXILite"
