"""
Probe-to-core mapping decoder.

Each ``IFn_Probes`` parameter of the debug subsystem packs the ordered list of
probes routed to interface (core) ``n``: one 1-based probe number per nibble,
least significant nibble first. For example ``IF01_Probes = 0x21`` routes
probe 1 then probe 2 to core 0, so probe 1 occupies the low bits of the core
probe bus and probe 2 follows right above it.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from oclaprobe.model.ip import MAX_INTERFACES, DebugSubsystem, ProbeSlot

from .messages import MessageLog

logger = logging.getLogger(__name__)

NIBBLE_BITS = 4
NIBBLE_MASK = 0xF


def unpack_nibbles(packed: int) -> List[int]:
    """Split a packed field into nibbles, least significant first."""
    nibbles = []
    while packed:
        nibbles.append(packed & NIBBLE_MASK)
        packed >>= NIBBLE_BITS
    return nibbles


def pack_nibbles(probes: List[int]) -> int:
    """Inverse of :func:`unpack_nibbles` for 1-based probe numbers."""
    packed = 0
    for shift, probe in enumerate(probes):
        packed |= (probe & NIBBLE_MASK) << (shift * NIBBLE_BITS)
    return packed


@dataclass
class ProbeMap:
    """Decoded probe routing of the debug subsystem."""

    probe_order: List[List[int]] = field(
        default_factory=lambda: [[] for _ in range(MAX_INTERFACES)]
    )
    probe_to_core: List[Optional[ProbeSlot]] = field(
        default_factory=lambda: [None] * MAX_INTERFACES
    )
    calculated_core_width: List[int] = field(default_factory=lambda: [0] * MAX_INTERFACES)

    @property
    def probe_count(self) -> int:
        return sum(1 for slot in self.probe_to_core if slot is not None)


def decode_probe_map(
    subsystem: DebugSubsystem, log: MessageLog, indent: int = 1
) -> Optional[ProbeMap]:
    """
    Decode the packed ``IFn_Probes`` fields and record the result.

    On success ``subsystem.probe_to_core`` and
    ``subsystem.calculated_core_width`` are set; they can only be set once.

    Args:
        subsystem: Qualified debug subsystem
        log: Diagnostic message log
        indent: Message indentation level

    Returns:
        ProbeMap, or None if the packed fields are inconsistent
    """
    if subsystem.is_mapped:
        log.post(indent, "Error: Probe mapping had already been decoded")
        return None

    probe_map = ProbeMap()
    mode = subsystem.mode
    if not mode.has_native_cores:
        log.post(indent, f"Skip probe mapping in {mode.value} mode")
        _record(subsystem, probe_map)
        return probe_map

    native = subsystem.native_core_count
    no_probes = subsystem.no_probes
    max_probe = min(MAX_INTERFACES, no_probes)
    widths = subsystem.probe_widths
    packed_fields = subsystem.packed_probes

    log.post(indent, f"Decode IF[1..{native}]_Probes, probe number must be 1..{max_probe}")
    seen = set()
    for i in range(MAX_INTERFACES):
        packed = packed_fields[i]
        if i >= native:
            if packed:
                log.post(indent + 1, f"Error: IF{i + 1:02d}_Probes (0x{packed:016X}) must be null")
                return None
            continue
        if not packed:
            log.post(indent + 1, f"Error: IF{i + 1:02d}_Probes must not be null")
            return None
        for probe in unpack_nibbles(packed):
            if probe < 1 or probe > max_probe:
                log.post(
                    indent + 1,
                    f"Error: IF{i + 1:02d}_Probes has invalid probe number {probe}",
                )
                return None
            if widths[probe - 1] == 0:
                log.post(indent + 1, f"Error: Probe{probe:02d}_Width must not be zero")
                return None
            if probe in seen:
                log.post(indent + 1, f"Error: Duplicated Probe{probe:02d} in IF{i + 1:02d}_Probes")
                return None
            seen.add(probe)
            offset = probe_map.calculated_core_width[i]
            probe_map.probe_order[i].append(probe - 1)
            probe_map.probe_to_core[probe - 1] = ProbeSlot(core=i, offset=offset)
            probe_map.calculated_core_width[i] += widths[probe - 1]
            log.post(
                indent + 1,
                f"IF{i + 1:02d}: Probe{probe:02d} (width={widths[probe - 1]}, offset={offset})",
            )

    if len(seen) != no_probes:
        log.post(
            indent + 1,
            f"Error: Decoded probe count {len(seen)} does not match No_Probes={no_probes}",
        )
        return None
    for i in range(native):
        if not probe_map.probe_order[i]:
            log.post(indent + 1, f"Error: Interface {i} does not own any probe")
            return None
    axi_index = subsystem.axi_core_index
    if axi_index is not None and probe_map.probe_order[axi_index]:
        log.post(indent + 1, f"Error: AXI interface {axi_index} must not own any probe")
        return None

    _record(subsystem, probe_map)
    logger.debug("Decoded %d probe(s) over %d native core(s)", len(seen), native)
    return probe_map


def _record(subsystem: DebugSubsystem, probe_map: ProbeMap) -> None:
    subsystem.probe_to_core = list(probe_map.probe_to_core)
    subsystem.calculated_core_width = list(probe_map.calculated_core_width)
