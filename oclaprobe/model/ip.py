"""
OCLA IP records.

Two kinds of IP modules are detected in a netlist:
    a. OCLA core (``ocla``)
    b. OCLA debug subsystem (``ocla_debug_subsystem``)

Both share the ``IP_TYPE``, ``IP_VERSION`` and ``IP_ID`` parameters and are
modelled as a tagged union (``kind``) around a shared ParameterTable.
"""

from typing import TYPE_CHECKING, Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .axi import axi_probe_width
from .base import AxiType, SubsystemMode
from .schema import ParameterSchema, ParameterTable, ParamKind
from .signal import SignalFragment

if TYPE_CHECKING:
    from oclaprobe.analysis.messages import MessageLog

MAX_INTERFACES = 15

COMMON_SCHEMA = ParameterSchema(
    [
        ("IP_TYPE", ParamKind.STR),
        ("IP_VERSION", ParamKind.UINT32),
        ("IP_ID", ParamKind.UINT32),
    ]
)

CORE_SCHEMA = COMMON_SCHEMA.extend(
    [
        ("AXI_ADDR_WIDTH", ParamKind.UINT32),
        ("AXI_DATA_WIDTH", ParamKind.UINT32),
        ("MEM_DEPTH", ParamKind.UINT32),
        ("NO_OF_PROBES", ParamKind.UINT32),
        ("INDEX", ParamKind.UINT32),
    ]
)


def probe_width_key(n: int) -> str:
    return f"Probe{n:02d}_Width"


def base_address_key(n: int) -> str:
    return f"IF{n:02d}_BaseAddress"


def packed_probes_key(n: int) -> str:
    return f"IF{n:02d}_Probes"


SUBSYSTEM_SCHEMA = (
    COMMON_SCHEMA.extend(
        [
            ("Mode", ParamKind.STR),
            ("Axi_Type", ParamKind.STR),
            ("No_AXI_Bus", ParamKind.UINT32),
            ("Cores", ParamKind.UINT32),
            ("No_Probes", ParamKind.UINT32),
            ("Probes_Sum", ParamKind.UINT32),
        ]
    )
    .extend((probe_width_key(n), ParamKind.UINT32) for n in range(1, MAX_INTERFACES + 1))
    .extend((base_address_key(n), ParamKind.UINT32) for n in range(1, MAX_INTERFACES + 1))
    .extend((packed_probes_key(n), ParamKind.UINT64) for n in range(1, MAX_INTERFACES + 1))
)


class ProbeSlot(BaseModel):
    """Location of one probe inside the probe bus of a core."""

    core: int = Field(..., description="Interface (core) index owning the probe")
    offset: int = Field(..., description="Bit offset inside the core probe bus")


class OclaCore(BaseModel):
    """OCLA core module and the state derived for it during analysis."""

    kind: Literal["core"] = "core"
    name: str = Field(..., description="Netlist module name")
    params: ParameterTable = Field(default_factory=ParameterTable)

    base_address: int = Field(default=0, description="Resolved IFn_BaseAddress")
    is_axi_bridge: bool = Field(default=False, description="Core probes an AXI bus")
    probe_order: List[int] = Field(
        default_factory=list, description="0-based probe ids, least significant first"
    )
    probes: List[SignalFragment] = Field(
        default_factory=list, description="Resolved probe bus, most significant first"
    )

    @property
    def ip_type(self) -> str:
        return self.params["IP_TYPE"]

    @property
    def version(self) -> int:
        return self.params["IP_VERSION"]

    @property
    def ip_id(self) -> int:
        return self.params["IP_ID"]

    @property
    def axi_addr_width(self) -> int:
        return self.params["AXI_ADDR_WIDTH"]

    @property
    def axi_data_width(self) -> int:
        return self.params["AXI_DATA_WIDTH"]

    @property
    def mem_depth(self) -> int:
        return self.params["MEM_DEPTH"]

    @property
    def probe_count(self) -> int:
        return self.params["NO_OF_PROBES"]

    @property
    def index(self) -> int:
        return self.params["INDEX"]

    def check_type(self, log: "MessageLog", ip_type: str) -> bool:
        """Determine if the decoded parameters describe a usable OCLA core."""
        if self.ip_type == ip_type and self.mem_depth > 0 and self.probe_count > 0:
            return True
        log.post(1, "Error: Fail to validate parameters")
        log.post(2, f"IP_TYPE: {self.ip_type}")
        log.post(2, f"MEM_DEPTH: {self.mem_depth}")
        log.post(2, f"NO_OF_PROBES: {self.probe_count}")
        return False


class DebugSubsystem(BaseModel):
    """OCLA debug subsystem module and its decoded probe mapping."""

    kind: Literal["subsystem"] = "subsystem"
    name: str = Field(..., description="Netlist module name")
    params: ParameterTable = Field(default_factory=ParameterTable)

    probe_to_core: Optional[List[Optional[ProbeSlot]]] = Field(
        default=None, description="Per probe: owning core and bit offset"
    )
    calculated_core_width: Optional[List[int]] = Field(
        default=None, description="Per interface: sum of mapped probe widths"
    )

    @property
    def ip_type(self) -> str:
        return self.params["IP_TYPE"]

    @property
    def version(self) -> int:
        return self.params["IP_VERSION"]

    @property
    def ip_id(self) -> int:
        return self.params["IP_ID"]

    @property
    def mode(self) -> SubsystemMode:
        return SubsystemMode.from_string(self.params["Mode"])

    @property
    def axi_type(self) -> Optional[AxiType]:
        try:
            return AxiType(self.params["Axi_Type"])
        except ValueError:
            return None

    @property
    def no_axi_bus(self) -> int:
        return self.params["No_AXI_Bus"]

    @property
    def cores(self) -> int:
        return self.params["Cores"]

    @property
    def no_probes(self) -> int:
        return self.params["No_Probes"]

    @property
    def probes_sum(self) -> int:
        return self.params["Probes_Sum"]

    @property
    def probe_widths(self) -> List[int]:
        return [self.params[probe_width_key(n)] for n in range(1, MAX_INTERFACES + 1)]

    @property
    def base_addresses(self) -> List[int]:
        return [self.params[base_address_key(n)] for n in range(1, MAX_INTERFACES + 1)]

    @property
    def packed_probes(self) -> List[int]:
        return [self.params[packed_probes_key(n)] for n in range(1, MAX_INTERFACES + 1)]

    @property
    def native_core_count(self) -> int:
        """Number of cores that receive user probes."""
        mode = self.mode
        if mode == SubsystemMode.NATIVE:
            return self.cores
        if mode == SubsystemMode.NATIVE_AXI:
            return self.cores - 1
        return 0

    @property
    def axi_core_index(self) -> Optional[int]:
        """INDEX of the AXI bridge core, None in NATIVE mode."""
        if self.mode.has_axi_bridge:
            return self.native_core_count
        return None

    @property
    def axi_probe_count(self) -> int:
        """Probe bus width of the AXI bridge core (0 in NATIVE mode)."""
        if not self.mode.has_axi_bridge:
            return 0
        return self.no_axi_bus * axi_probe_width(self.axi_type)

    @property
    def is_mapped(self) -> bool:
        return self.probe_to_core is not None

    def check_type(self, log: "MessageLog", ip_type: str) -> bool:
        """Determine if the decoded parameters describe a usable debug subsystem."""
        if self._is_valid(ip_type):
            return True
        log.post(1, "Error: Fail to validate parameters")
        log.post(2, f"IP_TYPE: {self.ip_type}")
        log.post(2, f"Mode: {self.params['Mode']}")
        log.post(2, f"Axi_Type: {self.params['Axi_Type']}")
        log.post(2, f"No_AXI_Bus: {self.no_axi_bus}")
        log.post(2, f"Cores: {self.cores}")
        log.post(2, f"No_Probes: {self.no_probes}")
        return False

    def _is_valid(self, ip_type: str) -> bool:
        if self.ip_type != ip_type or self.no_probes > MAX_INTERFACES:
            return False
        try:
            mode = self.mode
        except ValueError:
            return False
        if mode.has_axi_bridge and (self.axi_type is None or self.no_axi_bus < 1):
            return False
        if mode.has_native_cores and self.no_probes < 1:
            return False
        if mode == SubsystemMode.NATIVE:
            return 1 <= self.cores <= MAX_INTERFACES
        if mode == SubsystemMode.AXI:
            return self.cores == 1
        return 2 <= self.cores <= MAX_INTERFACES


IpModule = Annotated[Union[OclaCore, DebugSubsystem], Field(discriminator="kind")]
