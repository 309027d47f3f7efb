"""
Hierarchical netlist model, signal expression parser and YAML loader.
"""

from .design import Cell, Design, Module, PortDirection, SigChunk, Wire
from .errors import NetlistError, ParseError
from .protocols import NetlistCell, NetlistDesign, NetlistModule
from .sigparse import SignalParser
from .yaml_parser import YamlNetlistParser

__all__ = [
    "Design",
    "Module",
    "Cell",
    "Wire",
    "SigChunk",
    "PortDirection",
    "NetlistError",
    "ParseError",
    "NetlistDesign",
    "NetlistModule",
    "NetlistCell",
    "SignalParser",
    "YamlNetlistParser",
]
