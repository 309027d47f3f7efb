"""
Signal expression parser using pyparsing.

Parses Verilog-like connection expressions used in netlist files:
    data            whole wire
    data[3]         single bit
    data[7:4]       bit range
    4'b01x0         sized constant (the ``b`` is optional)
    {a, b[3], 2'01} concatenation, most significant first
"""

import logging

from pyparsing import (
    Group,
    ParseBaseException,
    ParseFatalException,
    ParserElement,
    Regex,
    Suppress,
    Word,
    ZeroOrMore,
    nums,
)
from pyparsing import Optional as Opt

from .design import Module, SigChunk, SigSpec, chunks_from_bits, sig_bits
from .errors import ParseError

logger = logging.getLogger(__name__)

ParserElement.enable_packrat()


def _const_action(s, loc, t):
    size = int(t["size"])
    bits = t["bits"].lower()
    if size == 0 or len(bits) > size:
        raise ParseFatalException(s, loc, f"constant does not fit in {size} bit(s)")
    pad = bits[0] if bits[0] in "xz" else "0"
    return [("const", pad * (size - len(bits)) + bits)]


def _wire_action(t):
    ref = t[0]
    return [("wire", ref["name"], ref.get("msb"), ref.get("lsb"))]


class SignalParser:
    """Parser turning connection expressions into netlist signals."""

    def __init__(self):
        self.identifier = Regex(r"\\[^\s\[\]{},]+|[A-Za-z_$][\w$.]*")
        self.number = Word(nums).set_parse_action(lambda t: int(t[0]))

        self.constant = Regex(r"(?P<size>\d+)'[bB]?(?P<bits>[01xzXZ]+)")
        self.constant.set_parse_action(_const_action)

        self.bit_select = (
            Suppress("[")
            + self.number.copy().set_results_name("msb")
            + Opt(Suppress(":") + self.number.copy().set_results_name("lsb"))
            + Suppress("]")
        )
        self.wire_ref = Group(self.identifier.set_results_name("name") + Opt(self.bit_select))
        self.wire_ref.set_parse_action(_wire_action)

        self.term = self.constant | self.wire_ref
        self.concat = Suppress("{") + self.term + ZeroOrMore(Suppress(",") + self.term) + Suppress("}")
        self.expression = self.concat | self.term

    def parse(self, text: str, module: Module) -> SigSpec:
        """
        Parse a connection expression in the scope of ``module``.

        Args:
            text: Expression text
            module: Module whose wires the expression refers to

        Returns:
            Signal chunks, least significant first

        Raises:
            ParseError: If the expression is malformed or refers to unknown wires
        """
        try:
            tokens = self.expression.parse_string(text, parse_all=True)
        except ParseBaseException as e:
            raise ParseError(f"Invalid signal expression '{text}': {e.msg}")

        chunks = [self._to_chunk(tok, module, text) for tok in reversed(list(tokens))]
        logger.debug("Parsed signal %s into %d chunk(s)", text, len(chunks))
        return chunks_from_bits(sig_bits(chunks))

    @staticmethod
    def _to_chunk(token, module: Module, text: str) -> SigChunk:
        if token[0] == "const":
            return SigChunk.const(token[1])
        _, name, msb, lsb = token
        wire = module.wire(name)
        if wire is None:
            raise ParseError(f"Unknown wire '{name}' in module '{module.name}' ({text})")
        if msb is None:
            offset, width = 0, wire.width
        elif lsb is None:
            offset, width = msb, 1
        else:
            offset, width = min(msb, lsb), abs(msb - lsb) + 1
        if offset + width > wire.width:
            raise ParseError(
                f"Bit select out of range for wire '{name}' of width {wire.width} ({text})"
            )
        return SigChunk.of_wire(wire, offset, width)
