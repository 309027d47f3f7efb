"""
In-memory hierarchical netlist.

A small RTLIL-like graph: a Design holds Modules, a Module holds Wires and
Cells, and cell port connections are signals made of SigChunks (least
significant chunk first). Besides enumeration, the design supports the two
hierarchy transformations the OCLA analysis depends on: black-boxing a
module and flattening the design into its top module.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .errors import NetlistError

logger = logging.getLogger(__name__)


class PortDirection(str, Enum):
    """Port direction enumeration."""

    INPUT = "input"
    OUTPUT = "output"
    INOUT = "inout"

    @classmethod
    def from_string(cls, value: str) -> "PortDirection":
        """Normalize common direction aliases into ``PortDirection``."""
        normalized = value.lower().strip()
        mapping = {
            "in": cls.INPUT,
            "input": cls.INPUT,
            "out": cls.OUTPUT,
            "output": cls.OUTPUT,
            "inout": cls.INOUT,
        }
        if normalized not in mapping:
            raise ValueError(f"Unknown port direction '{value}'")
        return mapping[normalized]


@dataclass(eq=False)
class Wire:
    """Named multi-bit wire; a port when ``direction`` is set."""

    name: str
    width: int = 1
    direction: Optional[PortDirection] = None
    upto: bool = False

    def __post_init__(self):
        if self.width <= 0:
            raise NetlistError(f"Wire '{self.name}' must have a positive width")

    @property
    def is_port(self) -> bool:
        return self.direction is not None


# A single signal bit: (wire, bit index) or a constant state character.
SigBit = Union[Tuple[Wire, int], str]


@dataclass
class SigChunk:
    """Contiguous slice of a wire, or a constant (``data`` is MSB first)."""

    wire: Optional[Wire] = None
    offset: int = 0
    width: int = 0
    data: str = ""

    @classmethod
    def const(cls, bits: str) -> "SigChunk":
        return cls(wire=None, offset=0, width=len(bits), data=bits)

    @classmethod
    def of_wire(cls, wire: Wire, offset: int = 0, width: Optional[int] = None) -> "SigChunk":
        width = wire.width - offset if width is None else width
        if offset < 0 or width <= 0 or offset + width > wire.width:
            raise NetlistError(
                f"Slice [{offset + width - 1}:{offset}] out of range for wire "
                f"'{wire.name}' of width {wire.width}"
            )
        return cls(wire=wire, offset=offset, width=width)

    def bits(self) -> List[SigBit]:
        """Bits of this chunk, least significant first."""
        if self.wire is None:
            return list(reversed(self.data))
        return [(self.wire, self.offset + i) for i in range(self.width)]


SigSpec = List[SigChunk]


def sig_bits(sig: SigSpec) -> List[SigBit]:
    """Flatten a signal into its bits, least significant first."""
    bits: List[SigBit] = []
    for chunk in sig:
        bits.extend(chunk.bits())
    return bits


def chunks_from_bits(bits: List[SigBit]) -> SigSpec:
    """Pack bits (LSB first) into maximal chunks."""
    chunks: SigSpec = []
    for bit in bits:
        last = chunks[-1] if chunks else None
        if isinstance(bit, str):
            if last is not None and last.wire is None:
                last.data = bit + last.data
                last.width += 1
            else:
                chunks.append(SigChunk.const(bit))
            continue
        wire, index = bit
        if last is not None and last.wire is wire and last.offset + last.width == index:
            last.width += 1
        else:
            chunks.append(SigChunk(wire=wire, offset=index, width=1))
    return chunks


def sig_width(sig: SigSpec) -> int:
    return sum(chunk.width for chunk in sig)


def hier_name(cell_name: str, name: str) -> str:
    """Name of an object inlined from cell ``cell_name`` (``\\u_a.data``)."""
    if name.startswith("\\"):
        name = name[1:]
    return f"{cell_name}.{name}"


@dataclass
class Cell:
    """Instance of a module (or primitive) inside a module."""

    name: str
    type: str
    parameters: Dict[str, str] = field(default_factory=dict)
    connections: Dict[str, SigSpec] = field(default_factory=dict)

    def connection(self, port: str) -> Optional[SigSpec]:
        """Connection of ``port``, matching with or without escape marker."""
        if port in self.connections:
            return self.connections[port]
        escaped = port[1:] if port.startswith("\\") else f"\\{port}"
        return self.connections.get(escaped)


@dataclass
class Module:
    """Module definition: wires, cells and parameter default values."""

    name: str
    wires: Dict[str, Wire] = field(default_factory=dict)
    cells: Dict[str, Cell] = field(default_factory=dict)
    parameters: Dict[str, str] = field(default_factory=dict)
    blackbox: bool = False

    @property
    def ports(self) -> List[Wire]:
        return [w for w in self.wires.values() if w.is_port]

    def add_wire(self, wire: Wire) -> Wire:
        if wire.name in self.wires:
            raise NetlistError(f"Duplicate wire '{wire.name}' in module '{self.name}'")
        self.wires[wire.name] = wire
        return wire

    def add_cell(self, cell: Cell) -> Cell:
        if cell.name in self.cells:
            raise NetlistError(f"Duplicate cell '{cell.name}' in module '{self.name}'")
        self.cells[cell.name] = cell
        return cell

    def wire(self, name: str) -> Optional[Wire]:
        return self.wires.get(name)

    def iter_cells(self) -> Iterator[Cell]:
        return iter(list(self.cells.values()))


class Design:
    """
    Collection of modules with a designated top module.

    The top module is either set explicitly (``set_top``) or selected with
    ``auto_top``. Analysis code reads the design through ``iter_modules``
    and ``top_module`` and only mutates it through ``blackbox`` and
    ``flatten``.
    """

    def __init__(self, top: Optional[str] = None):
        self.modules: Dict[str, Module] = {}
        self.top: Optional[str] = top

    def add_module(self, module: Module) -> Module:
        if module.name in self.modules:
            raise NetlistError(f"Duplicate module '{module.name}'")
        self.modules[module.name] = module
        return module

    def module(self, name: str) -> Optional[Module]:
        return self.modules.get(name)

    def iter_modules(self) -> Iterator[Module]:
        return iter(list(self.modules.values()))

    def top_module(self) -> Optional[Module]:
        if self.top is None:
            return None
        return self.modules.get(self.top)

    def set_top(self, name: str) -> Module:
        if name not in self.modules:
            raise NetlistError(f"Module '{name}' is not defined")
        self.top = name
        return self.modules[name]

    def auto_top(self) -> Module:
        """Pick the uninstantiated module with the deepest hierarchy as top."""
        instantiated = {c.type for m in self.modules.values() for c in m.cells.values()}
        candidates = [
            m for m in self.modules.values() if m.name not in instantiated and not m.blackbox
        ]
        if not candidates:
            raise NetlistError("No top module candidate found")
        depths: Dict[str, int] = {}
        best = max(
            sorted(candidates, key=lambda m: m.name),
            key=lambda m: self._depth(m.name, depths, set()),
        )
        logger.debug("Auto-selected top module %s", best.name)
        self.top = best.name
        return best

    def _depth(self, name: str, memo: Dict[str, int], stack: set) -> int:
        if name in memo:
            return memo[name]
        module = self.modules.get(name)
        if module is None or module.blackbox:
            return 0
        if name in stack:
            raise NetlistError(f"Recursive instantiation of module '{name}'")
        stack.add(name)
        depth = 1 + max(
            (self._depth(c.type, memo, stack) for c in module.cells.values()), default=0
        )
        stack.discard(name)
        memo[name] = depth
        return depth

    # --- Hierarchy transformations ---

    def blackbox(self, name: str) -> None:
        """Turn a module into a black box: drop its contents, keep its ports."""
        module = self.modules.get(name)
        if module is None:
            raise NetlistError(f"Cannot blackbox unknown module '{name}'")
        module.cells.clear()
        module.wires = {n: w for n, w in module.wires.items() if w.is_port}
        module.blackbox = True
        logger.debug("Black-boxed module %s", name)

    def flatten(self) -> None:
        """
        Inline every non-blackbox module instance into the top module.

        Inlined wires and cells are renamed ``<cell>.<name>``; port wires of
        an inlined module alias the parent's connection bit by bit (unconnected
        bits become ``x``). Modules that are no longer instantiated by the top
        module are removed from the design afterwards.

        Raises:
            NetlistError: If the design has no top module or is recursive
        """
        top = self.top_module()
        if top is None:
            raise NetlistError("Cannot flatten a design without top module")

        for _ in range(len(self.modules) + 1):
            targets = [c for c in top.iter_cells() if self._is_inlinable(c.type)]
            if not targets:
                break
            for cell in targets:
                self._inline(top, cell)
        else:
            raise NetlistError(f"Recursive hierarchy below top module '{top.name}'")

        used = {c.type for c in top.cells.values()}
        for name in list(self.modules):
            if name != top.name and name not in used:
                del self.modules[name]
        logger.debug("Flattened design into %s (%d cells)", top.name, len(top.cells))

    def _is_inlinable(self, cell_type: str) -> bool:
        module = self.modules.get(cell_type)
        return module is not None and not module.blackbox

    def _inline(self, parent: Module, cell: Cell) -> None:
        sub = self.modules[cell.type]
        bitmap: Dict[Tuple[str, int], SigBit] = {}
        for wire in sub.wires.values():
            conn = cell.connection(wire.name) if wire.is_port else None
            if conn is not None:
                bits = sig_bits(conn)[: wire.width]
                bits += ["x"] * (wire.width - len(bits))
            else:
                new_wire = parent.add_wire(
                    Wire(name=hier_name(cell.name, wire.name), width=wire.width, upto=wire.upto)
                )
                bits = [(new_wire, i) for i in range(wire.width)]
            for i, bit in enumerate(bits):
                bitmap[(wire.name, i)] = bit

        def remap(sig: SigSpec) -> SigSpec:
            mapped = [
                b if isinstance(b, str) else bitmap.get((b[0].name, b[1]), "x")
                for b in sig_bits(sig)
            ]
            return chunks_from_bits(mapped)

        for sub_cell in sub.cells.values():
            parent.add_cell(
                Cell(
                    name=hier_name(cell.name, sub_cell.name),
                    type=sub_cell.type,
                    parameters=dict(sub_cell.parameters),
                    connections={p: remap(s) for p, s in sub_cell.connections.items()},
                )
            )
        del parent.cells[cell.name]
