"""
Cross validation of the discovered OCLA cores against the debug subsystem.

Checks run in a fixed order and stop at the first failing check; every
message posted so far stays in the log.
"""

import logging
from typing import Callable, List, Optional

from oclaprobe.model.ip import MAX_INTERFACES, DebugSubsystem, OclaCore

from .messages import MessageLog
from .probe_map import ProbeMap, decode_probe_map

logger = logging.getLogger(__name__)


class CrossValidator:
    """
    Sanity check of all retrieved parameter information.

    Besides validating, the checks resolve per-core derived state: AXI
    bridge flag, probe order and base address.
    """

    def __init__(
        self,
        subsystem: DebugSubsystem,
        cores: List[OclaCore],
        instantiators: List[str],
        log: MessageLog,
    ):
        self.subsystem = subsystem
        self.cores = cores
        self.instantiators = instantiators
        self.log = log
        self.probe_map: Optional[ProbeMap] = None

    def validate_all(self) -> bool:
        """
        Run all checks in order.

        Returns:
            True if every check passed
        """
        self.log.post(0, "Sanity Check")
        checks: List[Callable[[], bool]] = [
            self.check_instantiator_count,
            self.check_core_count,
            self.check_index_sequence,
            self.check_instantiator_name,
            self.check_ip_identity,
            self.check_axi_widths,
            self.check_probe_map,
            self.check_probe_counts,
            self.check_unused_interfaces,
            self.check_probes_sum,
            self.check_base_addresses,
        ]
        for check in checks:
            if not check():
                logger.info("Sanity check %s failed", check.__name__)
                return False
        return True

    def check_instantiator_count(self) -> bool:
        if len(self.cores) != len(self.instantiators):
            self.log.post(
                1,
                f"Error: Not all the OCLA module (count={len(self.cores)}) found the "
                f"instantiator (count={len(self.instantiators)})",
            )
            return False
        return True

    def check_core_count(self) -> bool:
        if self.subsystem.cores != len(self.cores):
            self.log.post(
                1,
                f"Error: OCLA Debug Subsystem parameter Cores={self.subsystem.cores} does not "
                f"match with detected OCLA module count={len(self.cores)}",
            )
            return False
        return True

    def check_index_sequence(self) -> bool:
        self.log.post(
            1, f"Check module parameter INDEX sequence, must be 0 .. {self.subsystem.cores - 1}"
        )
        status = True
        for sequence, core in enumerate(self.cores):
            if core.index != sequence:
                self.log.post(
                    2,
                    f"Error: Module {core.name} has unexpected INDEX, "
                    f"expectation={sequence}, but found {core.index}",
                )
                status = False
        return status

    def check_instantiator_name(self) -> bool:
        expected = self.subsystem.name
        self.log.post(1, f"All modules should be instantiated by {expected}")
        status = True
        for name in self.instantiators:
            if name != expected:
                self.log.post(2, f"Error: Found unexpected instantiator: {name}")
                status = False
        return status

    def check_ip_identity(self) -> bool:
        sub = self.subsystem
        self.log.post(
            1,
            f"Parameter IP_TYPE={sub.ip_type}, IP_VERSION=0x{sub.version:08X}, "
            f"IP_ID=0x{sub.ip_id:08X} must match",
        )
        status = True
        for core in self.cores:
            if (core.ip_type, core.version, core.ip_id) != (sub.ip_type, sub.version, sub.ip_id):
                self.log.post(
                    2,
                    f"Error: Module {core.name} has mismatch parameter IP_TYPE={core.ip_type}, "
                    f"IP_VERSION=0x{core.version:08X}, IP_ID=0x{core.ip_id:08X}",
                )
                status = False
        return status

    def check_axi_widths(self) -> bool:
        addr_width = self.cores[0].axi_addr_width
        data_width = self.cores[0].axi_data_width
        self.log.post(
            1, f"Parameter AXI_ADDR_WIDTH={addr_width}, AXI_DATA_WIDTH={data_width} must match"
        )
        status = True
        for core in self.cores:
            if (core.axi_addr_width, core.axi_data_width) != (addr_width, data_width):
                self.log.post(
                    2,
                    f"Error: Module {core.name} has mismatch parameter "
                    f"AXI_ADDR_WIDTH={core.axi_addr_width}, AXI_DATA_WIDTH={core.axi_data_width}",
                )
                status = False
        return status

    def check_probe_map(self) -> bool:
        self.log.post(1, f"Decode probe mapping (Mode={self.subsystem.mode.value})")
        self.probe_map = decode_probe_map(self.subsystem, self.log, indent=2)
        return self.probe_map is not None

    def check_probe_counts(self) -> bool:
        sub = self.subsystem
        widths = sub.calculated_core_width
        axi_index = sub.axi_core_index
        self.log.post(1, "Parameter NO_OF_PROBES must match")
        status = True
        for core in self.cores:
            if core.index == axi_index:
                core.is_axi_bridge = True
                expected = sub.axi_probe_count
                self.log.post(
                    2,
                    f"Module {core.name} is AXI bridge ({sub.axi_type.value} x {sub.no_axi_bus})",
                )
                if core.probe_count != expected or widths[core.index]:
                    self.log.post(
                        2,
                        f"Error: Module {core.name} has mismatch parameter "
                        f"NO_OF_PROBES={core.probe_count}, expected AXI probe width={expected} "
                        f"(calculated probe width={widths[core.index]})",
                    )
                    status = False
                continue
            core.probe_order = list(self.probe_map.probe_order[core.index])
            if core.probe_count != widths[core.index]:
                self.log.post(
                    2,
                    f"Error: Module {core.name} has mismatch parameter "
                    f"NO_OF_PROBES={core.probe_count}, calculated probe width="
                    f"{widths[core.index]}",
                )
                status = False
        return status

    def check_unused_interfaces(self) -> bool:
        cores = self.subsystem.cores
        if cores >= MAX_INTERFACES:
            return True
        self.log.post(1, f"Unused IF[{cores + 1}..{MAX_INTERFACES}] must be null")
        status = True
        for i in range(cores, MAX_INTERFACES):
            if self.subsystem.calculated_core_width[i]:
                self.log.post(2, f"Error: IF{i + 1:02d} is not null")
                status = False
        return status

    def check_probes_sum(self) -> bool:
        sub = self.subsystem
        axi = sub.axi_probe_count
        self.log.post(1, "Parameter Probes_Sum must match")
        declared = sum(sub.probe_widths) + axi
        if declared != sub.probes_sum:
            self.log.post(
                2,
                f"Error: Probes_Sum by declared width ({declared}) does not match "
                f"with definition ({sub.probes_sum})",
            )
            return False
        calculated = sum(sub.calculated_core_width) + axi
        if calculated != sub.probes_sum:
            self.log.post(
                2,
                f"Error: Probes_Sum by calculated width ({calculated}) does not match "
                f"with definition ({sub.probes_sum})",
            )
            return False
        return True

    def check_base_addresses(self) -> bool:
        self.log.post(1, f"Parameter IF[1..{len(self.cores)}]_BaseAddress must not conflict")
        addresses = self.subsystem.base_addresses
        seen = set()
        status = True
        for core in self.cores:
            core.base_address = addresses[core.index]
            if core.base_address in seen:
                self.log.post(
                    2, f"Error: Module {core.name} has conflict base address 0x{core.base_address:08X}"
                )
                status = False
            else:
                self.log.post(2, f"Module {core.name} has base address 0x{core.base_address:08X}")
                seen.add(core.base_address)
        return status
