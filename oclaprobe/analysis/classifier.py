"""
Module classifier.

Scans every module of the design, picks the ones named like the OCLA core
or the OCLA debug subsystem, decodes their parameters against the matching
schema and keeps the candidates that pass their type predicate.
"""

import bisect
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from oclaprobe.config import AnalyzerConfig
from oclaprobe.model.ip import CORE_SCHEMA, SUBSYSTEM_SCHEMA, DebugSubsystem, OclaCore
from oclaprobe.model.schema import decode_parameters
from oclaprobe.netlist.protocols import NetlistDesign, NetlistModule

from .messages import MessageLog

logger = logging.getLogger(__name__)

CORE = "core"
SUBSYSTEM = "subsystem"

_PREFIX_SEPARATORS = ("\\", "$", ".")


def match_module_name(module_name: str, name: str) -> bool:
    """Check if ``module_name`` is ``name``, optionally behind a hierarchical prefix."""
    if module_name in (name, f"\\{name}"):
        return True
    return any(module_name.endswith(f"{sep}{name}") for sep in _PREFIX_SEPARATORS)


def classify(module_name: str, config: AnalyzerConfig) -> Optional[str]:
    """Return ``"core"``, ``"subsystem"`` or None for a module name."""
    if match_module_name(module_name, config.core_module_name):
        return CORE
    if match_module_name(module_name, config.subsystem_module_name):
        return SUBSYSTEM
    return None


@dataclass
class Classification:
    """Qualified IP modules found in a design."""

    cores: List[OclaCore] = field(default_factory=list)
    subsystems: List[DebugSubsystem] = field(default_factory=list)

    def add_core(self, core: OclaCore) -> None:
        """Insert keeping ascending INDEX order (equal indexes keep discovery order)."""
        keys = [c.index for c in self.cores]
        self.cores.insert(bisect.bisect_right(keys, core.index), core)


class ModuleClassifier:
    """Build OCLA core and debug subsystem records from netlist modules."""

    def __init__(self, log: MessageLog, config: Optional[AnalyzerConfig] = None):
        self.log = log
        self.config = config or AnalyzerConfig()

    def run(self, design: NetlistDesign) -> Classification:
        result = Classification()
        for module in design.iter_modules():
            kind = classify(module.name, self.config)
            if kind == CORE:
                core = self._build_core(module)
                if core is not None:
                    result.add_core(core)
            elif kind == SUBSYSTEM:
                subsystem = self._build_subsystem(module)
                if subsystem is not None:
                    result.subsystems.append(subsystem)
        logger.info(
            "Classified %d OCLA core(s) and %d debug subsystem(s)",
            len(result.cores),
            len(result.subsystems),
        )
        return result

    def _build_core(self, module: NetlistModule) -> Optional[OclaCore]:
        self.log.post(0, f"Detected Potential OCLA: {module.name}")
        params = decode_parameters(CORE_SCHEMA, module.parameters, self.log)
        if params is not None:
            core = OclaCore(name=module.name, params=params)
            if core.check_type(self.log, self.config.ip_type):
                self.log.post(1, "Qualified as OCLA module")
                return core
        self.log.post(1, "Error: this is not qualified as OCLA module")
        return None

    def _build_subsystem(self, module: NetlistModule) -> Optional[DebugSubsystem]:
        self.log.post(0, f"Detected Potential OCLA Debug Subsystem: {module.name}")
        params = decode_parameters(SUBSYSTEM_SCHEMA, module.parameters, self.log)
        if params is not None:
            subsystem = DebugSubsystem(name=module.name, params=params)
            if subsystem.check_type(self.log, self.config.ip_type):
                self.log.post(1, "Qualified as OCLA Debug Subsystem module")
                return subsystem
        self.log.post(1, "Error: this is not qualified as OCLA Debug Subsystem module")
        return None
