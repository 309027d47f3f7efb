"""
Typed parameter schema and literal decoder.

Every OCLA IP module exposes its configuration as HDL parameters. A schema
declares which parameter keys must be present and how their literal value is
interpreted. Decoded values live in a :class:`ParameterTable`, a key
addressed table of enum-tagged value cells.

Accepted literal forms:
    - string: ``"text"`` (double quotes required)
    - integer: plain decimal digits (``1024``) or a sized binary literal
      (``8'00001111``) whose declared size matches the digit count and does
      not exceed the slot width
"""

import re
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from oclaprobe.analysis.messages import MessageLog

ParamValue = Union[int, str]

_DECIMAL_RE = re.compile(r"[0-9]+")
_SIZED_BINARY_RE = re.compile(r"([0-9]+)'([01]+)")


class ParamKind(str, Enum):
    """Storage kind of a parameter slot."""

    UINT32 = "uint32"
    UINT64 = "uint64"
    STR = "string"

    @property
    def bits(self) -> int:
        """Slot width in bits (0 for strings)."""
        return {ParamKind.UINT32: 32, ParamKind.UINT64: 64}.get(self, 0)


class ParameterError(ValueError):
    """Base class for parameter decoding errors."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(message)


class ParameterFormatError(ParameterError):
    """Literal does not follow the format required by the slot kind."""

    def __init__(self, key: str, literal: str, kind: ParamKind):
        self.literal = literal
        self.kind = kind
        super().__init__(key, f"Param {key} value {literal} does not follow {kind.value} format")


class DuplicateParameterError(ParameterError):
    """Slot was already assigned."""

    def __init__(self, key: str):
        super().__init__(key, f"Param {key} had been assigned")


def decode_literal(key: str, literal: str, kind: ParamKind) -> ParamValue:
    """
    Decode a parameter literal according to the slot kind.

    Args:
        key: Parameter name (used for error reporting)
        literal: Literal text as found in the netlist
        kind: Slot kind

    Returns:
        Decoded ``str`` or ``int``

    Raises:
        ParameterFormatError: If the literal cannot be decoded into the slot
    """
    if kind == ParamKind.STR:
        if len(literal) >= 2 and literal[0] == '"' and literal[-1] == '"':
            return literal[1:-1]
        raise ParameterFormatError(key, literal, kind)

    if _DECIMAL_RE.fullmatch(literal):
        value = int(literal)
        if value >> kind.bits:
            raise ParameterFormatError(key, literal, kind)
        return value

    match = _SIZED_BINARY_RE.fullmatch(literal)
    if match:
        size = int(match.group(1))
        digits = match.group(2)
        if size == len(digits) and size <= kind.bits:
            return int(digits, 2)
    raise ParameterFormatError(key, literal, kind)


def encode_literal(value: ParamValue, kind: ParamKind) -> str:
    """Encode a value into the canonical literal accepted by :func:`decode_literal`."""
    if kind == ParamKind.STR:
        return f'"{value}"'
    return f"{kind.bits}'{value:0{kind.bits}b}"


def normalize_key(name: str) -> str:
    """Strip the netlist escape marker from a parameter name."""
    return name[1:] if name.startswith("\\") else name


class ParameterSlot(BaseModel):
    """Single typed, assign-once parameter slot."""

    key: str = Field(..., description="Parameter name without escape marker")
    kind: ParamKind = Field(default=ParamKind.UINT32, description="Storage kind")
    assigned: bool = Field(default=False, description="Set once a value was decoded")
    value: Optional[ParamValue] = Field(default=None, description="Decoded value")

    def assign(self, literal: str) -> ParamValue:
        """Decode ``literal`` into this slot.

        Raises:
            DuplicateParameterError: If the slot already holds a value
            ParameterFormatError: If the literal is malformed
        """
        if self.assigned:
            raise DuplicateParameterError(self.key)
        self.value = decode_literal(self.key, literal, self.kind)
        self.assigned = True
        return self.value

    def describe(self) -> str:
        """Value description used in diagnostic messages."""
        if self.kind == ParamKind.STR:
            return f"{self.value}"
        digits = self.kind.bits // 4
        return f"{self.value} (0x{self.value:0{digits}X})"


class ParameterSchema:
    """Ordered declaration of the parameter slots an IP module requires."""

    def __init__(self, slots: Iterable[Tuple[str, ParamKind]]):
        self._slots: List[Tuple[str, ParamKind]] = list(slots)

    def __iter__(self):
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def keys(self) -> List[str]:
        return [key for key, _ in self._slots]

    def extend(self, slots: Iterable[Tuple[str, ParamKind]]) -> "ParameterSchema":
        """Return a new schema with additional slots appended."""
        return ParameterSchema(self._slots + list(slots))

    def new_table(self) -> "ParameterTable":
        """Create an empty (unassigned) table for this schema."""
        return ParameterTable(
            slots={key: ParameterSlot(key=key, kind=kind) for key, kind in self._slots}
        )


class ParameterTable(BaseModel):
    """Key addressed table of decoded parameter slots."""

    slots: Dict[str, ParameterSlot] = Field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.slots

    def __getitem__(self, key: str) -> ParamValue:
        slot = self.slots[key]
        if not slot.assigned:
            raise KeyError(f"Parameter {key} has not been assigned")
        return slot.value

    def get(self, key: str, default: Optional[ParamValue] = None) -> Optional[ParamValue]:
        slot = self.slots.get(key)
        if slot is None or not slot.assigned:
            return default
        return slot.value

    @property
    def missing(self) -> List[str]:
        """Keys that were never assigned."""
        return [key for key, slot in self.slots.items() if not slot.assigned]

    def as_dict(self) -> Dict[str, ParamValue]:
        """Decoded values in schema order."""
        return {key: slot.value for key, slot in self.slots.items()}


def decode_parameters(
    schema: ParameterSchema,
    params: Mapping[str, str],
    log: "MessageLog",
    indent: int = 1,
) -> Optional[ParameterTable]:
    """
    Decode the available module parameters against a schema.

    Unknown parameters are reported and ignored. Decoding stops at the first
    malformed or duplicated parameter. After all parameters are consumed,
    every declared slot must have been assigned.

    Args:
        schema: Parameter schema of the candidate IP
        params: Parameter name to literal mapping (names may carry ``\\``)
        log: Diagnostic message log
        indent: Message indentation level

    Returns:
        Fully assigned ParameterTable, or None if the candidate must be discarded
    """
    table = schema.new_table()
    for name, literal in params.items():
        key = normalize_key(name)
        if key not in table:
            log.post(indent, f"Ignore param {key}")
            continue
        slot = table.slots[key]
        try:
            slot.assign(literal)
        except ParameterError as e:
            log.post(indent, f"Error: {e}")
            return None
        log.post(indent, f"Param {key} - {slot.describe()}")

    missing = table.missing
    for key in missing:
        log.post(indent, f"Error: missing parameter {key}")
    if missing:
        return None
    return table
