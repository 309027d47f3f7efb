"""
Analysis output document.

The document always carries the message log. The ``ocla`` and
``ocla_debug_subsystem`` sections are present only when at least one OCLA
core was fully validated.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from oclaprobe.model.ip import DebugSubsystem, OclaCore
from oclaprobe.model.signal import render


class ProbeInfo(BaseModel):
    """Bit range of one probe inside a native core probe bus."""

    index: int = Field(..., description="0-based probe id")
    offset: int = Field(..., description="Lowest bit inside the core probe bus")
    width: int = Field(..., description="Probe width")


class AnalysisResult(BaseModel):
    """Structured result of an OCLA analysis run."""

    messages: List[str] = Field(default_factory=list)
    ocla: Optional[List[Dict[str, Any]]] = None
    ocla_debug_subsystem: Optional[Dict[str, Any]] = None
    success_count: int = Field(default=0, exclude=True)

    @property
    def success(self) -> bool:
        return self.success_count > 0

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent, exclude_none=True)

    def write(self, path: Union[str, Path]) -> Path:
        """Write the JSON document to ``path``."""
        path = Path(path)
        path.write_text(self.to_json() + "\n", encoding="utf-8")
        return path


def probe_info(core: OclaCore, subsystem: DebugSubsystem) -> List[ProbeInfo]:
    """Bit ranges of the probes of a native core, in probe order."""
    widths = subsystem.probe_widths
    return [
        ProbeInfo(index=p, offset=subsystem.probe_to_core[p].offset, width=widths[p])
        for p in core.probe_order
    ]


def core_section(core: OclaCore, subsystem: DebugSubsystem) -> Dict[str, Any]:
    section: Dict[str, Any] = dict(core.params.as_dict())
    section["addr"] = core.base_address
    if not core.is_axi_bridge:
        section["probe_info"] = [p.model_dump() for p in probe_info(core, subsystem)]
    section["probes"] = [render(f) for f in core.probes]
    return section


def build_result(
    messages: List[str],
    cores: List[OclaCore],
    subsystem: Optional[DebugSubsystem],
    success_count: int,
) -> AnalysisResult:
    """Assemble the output document from the final analysis state."""
    if not success_count or subsystem is None:
        return AnalysisResult(messages=messages)
    return AnalysisResult(
        messages=messages,
        ocla=[core_section(core, subsystem) for core in cores],
        ocla_debug_subsystem=dict(subsystem.params.as_dict()),
        success_count=success_count,
    )
