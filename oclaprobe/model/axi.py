"""
AXI probe signal library.

When the debug subsystem bridges an AXI bus, the bridging OCLA core does not
probe user signals. Its probe bus is a fixed, ordered set of AXI channel
signals repeated once per probed bus. The tables below must match the RTL of
the debug subsystem bit for bit.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .base import AxiType
from .signal import WireFragment


@dataclass(frozen=True)
class AxiSignal:
    """Definition of one probed AXI signal."""

    name: str
    width: int

    def suffixed(self, bus: Optional[int]) -> str:
        """Signal name for a given bus number (no suffix when ``bus`` is None)."""
        return self.name if bus is None else f"{self.name}_{bus}"


AXI_LITE_SIGNALS: List[AxiSignal] = [
    AxiSignal("AWADDR", 32),
    AxiSignal("AWPROT", 3),
    AxiSignal("AWVALID", 1),
    AxiSignal("AWREADY", 1),
    AxiSignal("WDATA", 32),
    AxiSignal("WSTRB", 4),
    AxiSignal("WVALID", 1),
    AxiSignal("WREADY", 1),
    AxiSignal("BRESP", 2),
    AxiSignal("BVALID", 1),
    AxiSignal("BREADY", 1),
    AxiSignal("ARADDR", 32),
    AxiSignal("ARPROT", 3),
    AxiSignal("ARVALID", 1),
    AxiSignal("ARREADY", 1),
    AxiSignal("RDATA", 32),
    AxiSignal("RRESP", 2),
    AxiSignal("RVALID", 1),
    AxiSignal("RREADY", 1),
]

AXI4_SIGNALS: List[AxiSignal] = [
    # write address channel
    AxiSignal("AWADDR", 32),
    AxiSignal("AWPROT", 3),
    AxiSignal("AWVALID", 1),
    AxiSignal("AWREADY", 1),
    AxiSignal("AWBURST", 2),
    AxiSignal("AWID", 16),
    AxiSignal("AWCACHE", 4),
    AxiSignal("AWREGION", 4),
    AxiSignal("AWUSER", 1),
    AxiSignal("AWQOS", 4),
    AxiSignal("AWLOCK", 1),
    # write data channel
    AxiSignal("WDATA", 32),
    AxiSignal("WSTRB", 4),
    AxiSignal("WVALID", 1),
    AxiSignal("WREADY", 1),
    AxiSignal("WLAST", 1),
    # write response channel
    AxiSignal("BRESP", 2),
    AxiSignal("BVALID", 1),
    AxiSignal("BREADY", 1),
    AxiSignal("BID", 16),
    # read address channel
    AxiSignal("ARADDR", 32),
    AxiSignal("ARPROT", 3),
    AxiSignal("ARVALID", 1),
    AxiSignal("ARREADY", 1),
    AxiSignal("ARBURST", 2),
    AxiSignal("ARID", 16),
    AxiSignal("ARCACHE", 4),
    AxiSignal("ARREGION", 4),
    AxiSignal("ARUSER", 1),
    AxiSignal("ARQOS", 4),
    AxiSignal("ARLOCK", 1),
    # read data channel
    AxiSignal("RDATA", 32),
    AxiSignal("RRESP", 2),
    AxiSignal("RVALID", 1),
    AxiSignal("RREADY", 1),
    AxiSignal("RLAST", 1),
    AxiSignal("RID", 16),
]

_TABLES: Dict[AxiType, List[AxiSignal]] = {
    AxiType.AXI4: AXI4_SIGNALS,
    AxiType.AXI_LITE: AXI_LITE_SIGNALS,
}


def axi_signal_table(axi_type: AxiType) -> List[AxiSignal]:
    """Get the ordered per-bus signal table for an AXI flavour."""
    return _TABLES[axi_type]


def axi_probe_width(axi_type: AxiType) -> int:
    """Probe bits needed for one bus (152 for AXILite, 250 for AXI4)."""
    return sum(s.width for s in axi_signal_table(axi_type))


def axi_probe_fragments(axi_type: AxiType, no_axi_bus: int) -> List[WireFragment]:
    """
    Synthesize the probe fragments of an AXI bridge core.

    Args:
        axi_type: Probed AXI flavour
        no_axi_bus: Number of probed buses

    Returns:
        One fragment per signal and bus; names carry a ``_<bus>`` suffix only
        when more than one bus is probed
    """
    fragments = []
    for bus in range(1, no_axi_bus + 1):
        suffix_bus = bus if no_axi_bus > 1 else None
        for signal in axi_signal_table(axi_type):
            fragments.append(
                WireFragment(
                    wire=signal.suffixed(suffix_bus),
                    width=signal.width,
                    offset=0,
                    wire_width=signal.width,
                )
            )
    return fragments
