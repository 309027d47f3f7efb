"""
Post-flatten probe signal resolution.

Must only run after the debug subsystem instantiator has been black-boxed
and the design flattened: the instantiator then appears as a single cell in
the top module whose ``probe_<n>`` connections are the user's probed wires.
"""

import logging
from typing import List, Optional

from oclaprobe.config import AnalyzerConfig
from oclaprobe.model.axi import axi_probe_fragments
from oclaprobe.model.base import AxiType
from oclaprobe.model.ip import OclaCore
from oclaprobe.model.signal import SignalFragment, decompose
from oclaprobe.netlist.protocols import NetlistCell, NetlistModule

from .messages import MessageLog

logger = logging.getLogger(__name__)


def resolve_signals(
    top: NetlistModule,
    axi_type: Optional[AxiType],
    no_axi_bus: int,
    cores: List[OclaCore],
    instantiator: str,
    log: MessageLog,
    config: Optional[AnalyzerConfig] = None,
) -> bool:
    """
    Record the probe fragments of every core.

    Native cores collect the instantiator connection of each probe, walking
    ``probe_order`` backwards so the fragment list is the core probe bus
    most significant first. The AXI bridge core gets the fixed AXI signal
    table instead.

    Args:
        top: Flattened top module
        axi_type: Probed AXI flavour (only used for the AXI bridge core)
        no_axi_bus: Number of probed AXI buses
        cores: Validated OCLA cores
        instantiator: Module name of the (black-boxed) subsystem instantiator
        log: Diagnostic message log
        config: Analyzer configuration (probe port naming)

    Returns:
        True if every core received its probe signals
    """
    config = config or AnalyzerConfig()
    log.post(0, f"Retrieve OCLA signals from instantiator: {instantiator}")
    cells = [cell for cell in top.iter_cells() if cell.type == instantiator]
    for cell in cells:
        log.post(1, f"Instantiated as {cell.name}")
    if not cells:
        log.post(1, f"Error: Does not find instantiator {instantiator} in {top.name}")
        return False

    status = True
    for core in cores:
        if core.probes:
            log.post(1, f"Error: Module {core.name} Duplicated connection")
            status = False
            continue
        if core.is_axi_bridge:
            core.probes = list(axi_probe_fragments(axi_type, no_axi_bus))
            log.post(
                1,
                f"Module {core.name} probes {no_axi_bus} {axi_type.value} bus(es) "
                f"({len(core.probes)} signals)",
            )
            continue
        for probe_id in reversed(core.probe_order):
            fragments = _probe_fragments(cells, config.probe_port(probe_id), log)
            if not fragments:
                status = False
                break
            core.probes.extend(fragments)

    if status:
        for core in cores:
            if not core.probes:
                log.post(
                    2, f"Module {core.name} (INDEX={core.index}) failed to get probe signals"
                )
                status = False
    return status


def _probe_fragments(cells: List[NetlistCell], port: str, log: MessageLog) -> List[SignalFragment]:
    connections = [(cell, cell.connection(port)) for cell in cells]
    connections = [(cell, sig) for cell, sig in connections if sig is not None]
    if not connections:
        log.post(2, f"Error: Missing probe connection {port}")
        return []
    if len(connections) > 1:
        log.post(2, f"Error: Duplicated connection {port}")
        return []

    cell, sig = connections[0]
    log.post(2, f"Probe Connection: {cell.name}.{port}")
    fragments = decompose(sig)
    if not fragments:
        log.post(3, f"Error: Fail to parse connection {port}")
        return []
    log.post(3, "Connected to {" + ", ".join(f.full_name for f in fragments) + "}")
    logger.debug("Resolved %s into %d fragment(s)", port, len(fragments))
    return fragments
