"""
YAML parser for hierarchical netlists.

Example:

.. code-block:: yaml

    top: top
    modules:
      ocla:
        parameters:
          IP_TYPE: '"OCLA"'
          MEM_DEPTH: 1024
        ports:
          probes: {direction: input, width: 8}
      top:
        wires:
          data: 8
          flag: 1
        cells:
          u_dbg:
            type: ocla_wrapper
            connections:
              probe_1: "{flag, data[6:0]}"

Parameter values are kept as netlist literals: strings must carry their
double quotes, integers may be YAML integers, decimal strings or sized
binary literals (``8'00001111``).
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .design import Cell, Design, Module, PortDirection, Wire
from .errors import NetlistError, ParseError
from .sigparse import SignalParser


class YamlNetlistParser:
    """
    Parser for YAML netlist descriptions.

    Handles:
    - Module definitions (parameters, ports, internal wires)
    - Cell instances with signal expression connections
    - Top module selection
    """

    def __init__(self):
        self._signal_parser = SignalParser()
        self._current_file: Optional[Path] = None

    def parse_file(self, file_path: Union[str, Path]) -> Design:
        """
        Parse a YAML netlist file.

        Args:
            file_path: Path to the netlist YAML file

        Returns:
            Design: Netlist with its top module set when declared

        Raises:
            ParseError: If parsing or netlist construction fails
        """
        file_path = Path(file_path).resolve()
        self._current_file = file_path

        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            line = getattr(e, "problem_mark", None)
            line_num = line.line + 1 if line else None
            raise ParseError(f"YAML syntax error: {e}", file_path, line_num)

        return self.parse_data(data, file_path)

    def parse_data(self, data: Any, file_path: Optional[Path] = None) -> Design:
        """Build a Design from already loaded YAML data."""
        if not isinstance(data, dict):
            raise ParseError("Root element must be a YAML object/dictionary", file_path)

        modules = data.get("modules")
        if not isinstance(modules, dict) or not modules:
            raise ParseError("Missing required field: modules", file_path)

        design = Design()
        try:
            # Declarations first, so that connections can be resolved per module.
            for name, mod_data in modules.items():
                design.add_module(self._parse_module(str(name), mod_data or {}, file_path))
            for name, mod_data in modules.items():
                self._parse_cells(design.modules[str(name)], (mod_data or {}).get("cells", {}), file_path)

            top = data.get("top")
            if top is not None:
                design.set_top(str(top))
        except NetlistError as e:
            raise ParseError(str(e), file_path)
        return design

    def _parse_module(self, name: str, data: Dict[str, Any], file_path: Optional[Path]) -> Module:
        """Parse parameters, ports and wires of one module."""
        if not isinstance(data, dict):
            raise ParseError(f"Module '{name}' must be a YAML object", file_path)
        module = Module(name=name, blackbox=bool(data.get("blackbox", False)))

        for param, value in (data.get("parameters") or {}).items():
            module.parameters[str(param)] = self._parse_literal(name, str(param), value, file_path)

        for port, port_data in (data.get("ports") or {}).items():
            module.add_wire(self._parse_wire(str(port), port_data, file_path, is_port=True))

        for wire, wire_data in (data.get("wires") or {}).items():
            module.add_wire(self._parse_wire(str(wire), wire_data, file_path, is_port=False))
        return module

    @staticmethod
    def _parse_literal(module: str, param: str, value: Any, file_path: Optional[Path]) -> str:
        """Convert a YAML parameter value into a netlist literal."""
        if isinstance(value, bool) or value is None:
            raise ParseError(
                f"Module '{module}' parameter '{param}' has unsupported value {value!r}", file_path
            )
        if isinstance(value, int):
            if value < 0:
                return f"32'{value & 0xFFFFFFFF:032b}"
            return str(value)
        return str(value)

    @staticmethod
    def _parse_wire(name: str, data: Any, file_path: Optional[Path], is_port: bool) -> Wire:
        """Parse a wire/port declaration (``8`` or ``{width: 8, direction: input}``)."""
        try:
            if isinstance(data, int) and not isinstance(data, bool):
                direction = PortDirection.INPUT if is_port else None
                return Wire(name=name, width=data, direction=direction)
            if isinstance(data, dict):
                direction = None
                if is_port:
                    direction = PortDirection.from_string(str(data.get("direction", "input")))
                return Wire(
                    name=name,
                    width=int(data.get("width", 1)),
                    direction=direction,
                    upto=bool(data.get("upto", False)),
                )
        except (TypeError, ValueError, NetlistError) as e:
            raise ParseError(f"Error parsing wire '{name}': {e}", file_path)
        raise ParseError(f"Wire '{name}' must be a width or a YAML object", file_path)

    def _parse_cells(self, module: Module, data: Dict[str, Any], file_path: Optional[Path]) -> None:
        """Parse cell instances and their connections."""
        for cell_name, cell_data in (data or {}).items():
            if not isinstance(cell_data, dict) or "type" not in cell_data:
                raise ParseError(
                    f"Cell '{cell_name}' in module '{module.name}' requires a type", file_path
                )
            cell = Cell(name=str(cell_name), type=str(cell_data["type"]))
            for param, value in (cell_data.get("parameters") or {}).items():
                cell.parameters[str(param)] = self._parse_literal(
                    module.name, str(param), value, file_path
                )
            for port, expr in (cell_data.get("connections") or {}).items():
                try:
                    cell.connections[str(port)] = self._signal_parser.parse(str(expr), module)
                except ParseError as e:
                    raise ParseError(
                        f"Cell '{cell_name}' port '{port}' in module '{module.name}': {e}",
                        file_path,
                    )
            module.add_cell(cell)
