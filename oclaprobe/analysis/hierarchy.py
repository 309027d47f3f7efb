"""
Hierarchy path resolver.

Proves that a module is instantiated exactly once on a single chain of
instantiations leading up to the design top.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from oclaprobe.model.signal import display_name
from oclaprobe.netlist.protocols import NetlistDesign

from .messages import MessageLog

logger = logging.getLogger(__name__)


@dataclass
class HierarchyPath:
    """Unique instantiation chain of a module."""

    instantiator: str
    chain: List[str] = field(default_factory=list)  # instance names, nearest first

    @property
    def depth(self) -> int:
        return len(self.chain)

    @property
    def connection_name(self) -> str:
        """Dotted instance path from the top module down to the module."""
        return ".".join(display_name(name) for name in reversed(self.chain))


def resolve_unique_path(
    design: NetlistDesign, module_name: str, log: MessageLog
) -> Optional[HierarchyPath]:
    """
    Walk the instantiation graph from ``module_name`` up to the design top.

    At every level exactly one cell in the whole design may instantiate the
    current target. The walk succeeds when the top module is reached after at
    least two levels; the first parent module is the instantiator.

    Args:
        design: Netlist before flattening
        module_name: Module whose instantiation path is checked
        log: Diagnostic message log

    Returns:
        HierarchyPath, or None when the path is missing or not unique
    """
    top = design.top_module()
    log.post(0, "Check uniqueness of OCLA Debug Subsystem")
    if top is None:
        log.post(1, "Error: Cannot find top module")
        return None

    target = module_name
    visited = {module_name}
    chain: List[str] = []
    instantiator: Optional[str] = None
    while True:
        log.post(1, f"Module: {target}")
        parents = [
            (module.name, cell.name)
            for module in design.iter_modules()
            for cell in module.iter_cells()
            if cell.type == target
        ]
        for parent_name, cell_name in parents:
            log.post(2, f"Instantiated by {parent_name} as {cell_name}")
        if len(parents) != 1:
            log.post(2, f"Error: Expect exactly one instantiation, but found {len(parents)}")
            return None

        parent_name, cell_name = parents[0]
        chain.append(cell_name)
        if instantiator is None:
            instantiator = parent_name

        if parent_name == top.name:
            log.post(3, "This is top module")
            if len(chain) < 2:
                log.post(3, "Error: Hierarchy level for OCLA Debug Subsystem is out of expectation")
                return None
            path = HierarchyPath(instantiator=instantiator, chain=chain)
            log.post(3, f"Connection chain for OCLA Debug Subsystem: {path.connection_name}")
            break

        if parent_name in visited:
            log.post(2, f"Error: Recursive instantiation of {parent_name}")
            return None
        visited.add(parent_name)
        target = parent_name

    log.post(1, f"OCLA Debug Subsystem Instantiator: {instantiator}")
    logger.debug("Debug subsystem path %s (depth %d)", path.connection_name, path.depth)
    return path


def find_instantiators(design: NetlistDesign, module_name: str, log: MessageLog) -> List[str]:
    """Names of the modules instantiating ``module_name`` (one entry per cell)."""
    log.post(0, f"Check instantiator for OCLA module {module_name}")
    found = []
    for module in design.iter_modules():
        for cell in module.iter_cells():
            if cell.type == module_name:
                log.post(1, f"Instantiated by {module.name}")
                found.append(module.name)
    if not found:
        log.post(1, "Warning: Does not detect any instantiator")
    return found
