"""
Pydantic data models for OCLA analysis.

Signal fragments, typed parameter schemas and the OCLA core / debug
subsystem records built from them.
"""

from .axi import AXI4_SIGNALS, AXI_LITE_SIGNALS, AxiSignal, axi_probe_fragments, axi_probe_width
from .base import AxiType, FrozenModel, OclaBaseModel, StrictModel, SubsystemMode
from .ip import (
    CORE_SCHEMA,
    MAX_INTERFACES,
    SUBSYSTEM_SCHEMA,
    DebugSubsystem,
    IpModule,
    OclaCore,
    ProbeSlot,
)
from .schema import (
    DuplicateParameterError,
    ParameterError,
    ParameterFormatError,
    ParameterSchema,
    ParameterSlot,
    ParameterTable,
    ParamKind,
    decode_literal,
    decode_parameters,
    encode_literal,
)
from .signal import ConstFragment, SignalFragment, WireFragment, decompose, describe, render

__all__ = [
    # Base
    "OclaBaseModel",
    "StrictModel",
    "FrozenModel",
    "SubsystemMode",
    "AxiType",
    # Signals
    "SignalFragment",
    "ConstFragment",
    "WireFragment",
    "decompose",
    "describe",
    "render",
    # Schema
    "ParamKind",
    "ParameterSchema",
    "ParameterSlot",
    "ParameterTable",
    "ParameterError",
    "ParameterFormatError",
    "DuplicateParameterError",
    "decode_literal",
    "encode_literal",
    "decode_parameters",
    # IP
    "OclaCore",
    "DebugSubsystem",
    "IpModule",
    "ProbeSlot",
    "CORE_SCHEMA",
    "SUBSYSTEM_SCHEMA",
    "MAX_INTERFACES",
    # AXI
    "AxiSignal",
    "AXI4_SIGNALS",
    "AXI_LITE_SIGNALS",
    "axi_probe_fragments",
    "axi_probe_width",
]
