"""Typing protocols for the netlist consumed by the OCLA analysis."""

from typing import Dict, Iterable, List, Optional, Protocol

from .design import SigChunk


class NetlistCell(Protocol):
    """Cell view needed by the analysis."""

    name: str
    type: str

    def connection(self, port: str) -> Optional[List[SigChunk]]:
        """Signal connected to ``port`` (least significant chunk first)."""
        ...


class NetlistModule(Protocol):
    """Module view needed by the analysis."""

    name: str
    parameters: Dict[str, str]

    def iter_cells(self) -> Iterable[NetlistCell]:
        """Enumerate the cells instantiated in this module."""
        ...


class NetlistDesign(Protocol):
    """Design operations the analysis reads and the two it requests."""

    def iter_modules(self) -> Iterable[NetlistModule]:
        """Enumerate all modules of the design."""
        ...

    def top_module(self) -> Optional[NetlistModule]:
        """Designated top module, if any."""
        ...

    def blackbox(self, name: str) -> None:
        """Replace the contents of module ``name`` by a black box."""
        ...

    def flatten(self) -> None:
        """Flatten the hierarchy below the top module."""
        ...
