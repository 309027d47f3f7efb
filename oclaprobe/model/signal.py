"""
Signal fragment value types.

A probed signal is described as an ordered list of fragments, most
significant first. Each fragment is either a constant bit pattern or a
contiguous bit range of a named wire.
"""

from typing import TYPE_CHECKING, Annotated, Iterable, List, Literal, Tuple, Union

from pydantic import Field, field_validator, model_validator

from .base import FrozenModel

if TYPE_CHECKING:
    from oclaprobe.netlist.design import SigChunk


def display_name(name: str) -> str:
    """Strip the hierarchical prefix and escape marker from a netlist name.

    Example:
        >>> display_name("u_top.u_core.data")
        'data'
    """
    index = name.rfind(".")
    if index != -1:
        name = name[index + 1 :]
    if name.startswith("\\"):
        name = name[1:]
    return name


class ConstFragment(FrozenModel):
    """Constant bit pattern, most significant bit first (e.g. ``'01x0'``)."""

    kind: Literal["const"] = "const"
    bits: str = Field(..., description="Bit characters, MSB first")

    @field_validator("bits")
    @classmethod
    def validate_bits(cls, v: str) -> str:
        if not v:
            raise ValueError("Constant fragment must have a positive width")
        if any(c not in "01xz-m" for c in v):
            raise ValueError(f"Invalid constant bit pattern '{v}'")
        return v

    @property
    def width(self) -> int:
        return len(self.bits)

    @property
    def offset(self) -> int:
        return 0

    @property
    def name(self) -> str:
        return f"{self.width}'{self.bits}"

    @property
    def full_name(self) -> str:
        return self.name

    @property
    def show_index(self) -> bool:
        return False


class WireFragment(FrozenModel):
    """Contiguous bit range ``[offset + width - 1 : offset]`` of a named wire."""

    kind: Literal["wire"] = "wire"
    wire: str = Field(..., description="Full (hierarchical, escaped) wire name")
    width: int = Field(..., description="Number of bits covered", gt=0)
    offset: int = Field(default=0, description="Lowest covered bit", ge=0)
    wire_width: int = Field(..., description="Total width of the wire", gt=0)
    msb_first: bool = Field(default=True, description="Wire declared [msb:lsb] (informational)")

    @model_validator(mode="after")
    def validate_range(self) -> "WireFragment":
        if self.offset + self.width > self.wire_width:
            raise ValueError(
                f"Fragment [{self.offset + self.width - 1}:{self.offset}] exceeds "
                f"wire '{self.wire}' of width {self.wire_width}"
            )
        return self

    @property
    def name(self) -> str:
        """Display name without hierarchy prefix or escape marker."""
        return display_name(self.wire)

    @property
    def show_index(self) -> bool:
        """False only when the fragment is an entire scalar wire."""
        return not (self.width == 1 and self.wire_width == 1 and self.offset == 0)

    @property
    def full_name(self) -> str:
        """Netlist style name (``\\wire [7:4]``) used in diagnostic messages."""
        if self.width == self.wire_width and self.offset == 0:
            return self.wire
        if self.width == 1:
            return f"{self.wire} [{self.offset}]"
        return f"{self.wire} [{self.range_string}]"

    @property
    def range_string(self) -> str:
        """Bit range as ``msb:lsb`` whatever the wire declaration order."""
        return f"{self.offset + self.width - 1}:{self.offset}"


SignalFragment = Annotated[Union[ConstFragment, WireFragment], Field(discriminator="kind")]


def describe(fragment: SignalFragment) -> Tuple[str, int, int]:
    """Return ``(display_name, width, offset)`` of a fragment."""
    return fragment.name, fragment.width, fragment.offset


def render(fragment: SignalFragment) -> str:
    """Render a fragment as ``name``, ``name[offset]`` or ``name[msb:lsb]``."""
    if not fragment.show_index:
        return fragment.name
    if fragment.width == 1:
        return f"{fragment.name}[{fragment.offset}]"
    return f"{fragment.name}[{fragment.range_string}]"


def fragment_from_chunk(chunk: "SigChunk") -> SignalFragment:
    """Convert a single netlist chunk into a fragment."""
    if chunk.wire is None:
        return ConstFragment(bits=chunk.data)
    return WireFragment(
        wire=chunk.wire.name,
        width=chunk.width,
        offset=chunk.offset,
        wire_width=chunk.wire.width,
        msb_first=not chunk.wire.upto,
    )


def decompose(chunks: Iterable["SigChunk"]) -> List[SignalFragment]:
    """Decompose a netlist signal into fragments, most significant first.

    Args:
        chunks: Signal chunks in netlist order (least significant first)

    Returns:
        List of fragments; empty when the signal has no chunks
    """
    return [fragment_from_chunk(chunk) for chunk in reversed(list(chunks))]


def total_width(fragments: Iterable[SignalFragment]) -> int:
    """Sum of fragment widths."""
    return sum(f.width for f in fragments)
