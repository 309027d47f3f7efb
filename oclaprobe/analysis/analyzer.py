"""
OCLA analysis pipeline.

This piece of code extracts the OCLA debug information from a netlist:
    a. Number of OCLA instances being instantiated (if there are any)
    b. Number of OCLA Debug Subsystem instances being instantiated
        - this must be 1 instance
        - OCLA instance(s) must be instantiated by the OCLA Debug Subsystem
    c. Each signal the user would like to probe
    d. Memory depth and base address of each OCLA instance

Steps:
    1. Classify OCLA and OCLA Debug Subsystem modules
    2. Prove a unique instantiation path for the debug subsystem
    3. Collect the instantiator of each OCLA module
    4. Cross validate parameters (includes probe mapping decode)
    5. Black-box the subsystem instantiator and flatten the design
    6. Resolve probe signals from the flattened top module
    7. Finalize every OCLA module
"""

import logging
from typing import List, Optional, Tuple

from oclaprobe.config import AnalyzerConfig
from oclaprobe.model.ip import DebugSubsystem, OclaCore
from oclaprobe.model.signal import total_width
from oclaprobe.netlist.errors import NetlistError
from oclaprobe.netlist.protocols import NetlistDesign

from .classifier import ModuleClassifier
from .cross_check import CrossValidator
from .hierarchy import find_instantiators, resolve_unique_path
from .messages import MessageLog
from .result import AnalysisResult, build_result
from .signals import resolve_signals

logger = logging.getLogger(__name__)


class TopModuleNotFoundError(Exception):
    """The design has no top module; analysis cannot start."""

    def __init__(self, result: AnalysisResult):
        self.result = result
        super().__init__("Cannot find top module")


def finalize_core(
    core: OclaCore, subsystem: DebugSubsystem, log: MessageLog, indent: int = 3
) -> bool:
    """
    Validate the resolved probe bus of one core.

    The total fragment width must equal NO_OF_PROBES. For native cores the
    fragment stream is additionally walked from its least significant end,
    consuming exactly ``ProbeNN_Width`` bits per probe of ``probe_order``
    without splitting a fragment and without leftover.
    """
    total = total_width(core.probes)
    if total != core.probe_count:
        log.post(
            indent,
            f"Error: Invalid total probe signal(s) bus size {total} "
            f"(NO_OF_PROBES {core.probe_count})",
        )
        return False
    if core.is_axi_bridge:
        return True

    widths = subsystem.probe_widths
    stream = list(reversed(core.probes))
    pos = 0
    for probe_id in core.probe_order:
        expected = widths[probe_id]
        consumed = 0
        while consumed < expected and pos < len(stream):
            consumed += stream[pos].width
            pos += 1
        if consumed != expected:
            log.post(
                indent,
                f"Error: Probe{probe_id + 1:02d} expects {expected} bit(s), "
                f"but its connection provides {consumed}",
            )
            return False
    if pos != len(stream):
        log.post(indent, f"Error: {len(stream) - pos} probe signal(s) left unassigned")
        return False
    return True


class OclaAnalyzer:
    """
    Analyze OCLA information from a design.

    The design is mutated (black-box + flatten) once the pre-flatten checks
    pass; analyze a copy if the hierarchy is still needed afterwards.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()

    def analyze(self, design: NetlistDesign) -> AnalysisResult:
        """
        Run the whole pipeline.

        Returns:
            AnalysisResult; ``success_count`` is the number of finalized cores
            (0 when any structural or resolution check failed)

        Raises:
            TopModuleNotFoundError: If the design has no top module
        """
        log = MessageLog()
        log.post(0, "Start of OCLA Analysis")
        if design.top_module() is None:
            log.post(0, "Cannot find top module")
            log.post(0, "End of OCLA Analysis")
            logger.error("Cannot find top module")
            raise TopModuleNotFoundError(build_result(log.messages, [], None, 0))

        cores, subsystem, count = self._run(design, log)
        log.post(0, "End of OCLA Analysis")
        logger.info("OCLA analysis finished: %d core(s) qualified", count)
        return build_result(log.messages, cores, subsystem, count)

    def _run(
        self, design: NetlistDesign, log: MessageLog
    ) -> Tuple[List[OclaCore], Optional[DebugSubsystem], int]:
        classification = ModuleClassifier(log, self.config).run(design)
        cores = classification.cores
        subsystems = classification.subsystems
        if not cores or len(subsystems) != 1:
            log.post(
                0,
                f"Warning/Error: OCLA module count={len(cores)}, "
                f"OCLA Debug Subsystem module count={len(subsystems)}",
            )
            return cores, None, 0
        subsystem = subsystems[0]

        path = resolve_unique_path(design, subsystem.name, log)
        if path is None:
            log.post(1, "Error: Currently only support one OCLA Debug Subsystem instance in a design")
            return cores, subsystem, 0

        instantiators: List[str] = []
        for core in cores:
            instantiators.extend(find_instantiators(design, core.name, log))
        if not instantiators:
            log.post(0, "Error: Does not find any OCLA instantiator")
            return cores, subsystem, 0

        if not CrossValidator(subsystem, cores, instantiators, log).validate_all():
            log.post(0, "Error: Sanity check fail")
            return cores, subsystem, 0

        logger.info("Flattening design around %s", path.instantiator)
        try:
            log.post(0, f"Run command: blackbox {path.instantiator}")
            design.blackbox(path.instantiator)
            log.post(0, "Run command: flatten")
            design.flatten()
        except NetlistError as e:
            log.post(0, f"Error: {e}")
            return cores, subsystem, 0

        if not resolve_signals(
            design.top_module(),
            subsystem.axi_type,
            subsystem.no_axi_bus,
            cores,
            path.instantiator,
            log,
            self.config,
        ):
            log.post(0, "Error: Fail to get probe signals")
            return cores, subsystem, 0

        count = 0
        for core in cores:
            log.post(1, f"Module: {core.name}")
            log.post(2, "Final checking ...")
            if not finalize_core(core, subsystem, log, 3):
                log.post(3, "Error: Disqualify this module")
                count = 0
                break
            log.post(3, "Probes:")
            for fragment in core.probes:
                log.post(4, f"--> {fragment.full_name}")
                log.post(5, f": {fragment.name} (width={fragment.width}, offset={fragment.offset})")
            count += 1
        return cores, subsystem, count


def analyze_design(design: NetlistDesign, config: Optional[AnalyzerConfig] = None) -> AnalysisResult:
    """Convenience function to analyze a design with an optional configuration."""
    return OclaAnalyzer(config).analyze(design)
