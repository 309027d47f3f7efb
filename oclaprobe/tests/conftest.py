import os
import sys

import pytest

# Add the project root to sys.path so that oclaprobe is importable
# This is needed because of the flat layout structure
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from oclaprobe.analysis.messages import MessageLog
from oclaprobe.analysis.probe_map import pack_nibbles
from oclaprobe.model.ip import CORE_SCHEMA, SUBSYSTEM_SCHEMA, DebugSubsystem, OclaCore
from oclaprobe.model.schema import decode_parameters
from oclaprobe.netlist.yaml_parser import YamlNetlistParser

AXI_WIDTHS = {"AXI4": 250, "AXILite": 152}


def subsystem_parameters(
    mode="NATIVE",
    widths=(4, 8, 2),
    interfaces=((1, 2), (3,)),
    axi_type="AXILite",
    no_axi_bus=1,
):
    """Consistent debug subsystem parameters (YAML values) for a probe layout."""
    axi_cores = 0 if mode == "NATIVE" else 1
    cores = len(interfaces) + axi_cores
    axi_width = axi_cores * no_axi_bus * AXI_WIDTHS.get(axi_type, 0)
    params = {
        "IP_TYPE": '"OCLA"',
        "IP_VERSION": 1,
        "IP_ID": 4660,
        "Mode": f'"{mode}"',
        "Axi_Type": f'"{axi_type}"',
        "No_AXI_Bus": no_axi_bus,
        "Cores": cores,
        "No_Probes": len(widths),
        "Probes_Sum": sum(widths) + axi_width,
    }
    for n in range(1, 16):
        params[f"Probe{n:02d}_Width"] = widths[n - 1] if n <= len(widths) else 0
        params[f"IF{n:02d}_BaseAddress"] = 0x1000 * n if n <= cores else 0
        params[f"IF{n:02d}_Probes"] = (
            pack_nibbles(list(interfaces[n - 1])) if n <= len(interfaces) else 0
        )
    return params


def core_parameters(index, no_of_probes):
    return {
        "IP_TYPE": '"OCLA"',
        "IP_VERSION": 1,
        "IP_ID": 4660,
        "AXI_ADDR_WIDTH": 32,
        "AXI_DATA_WIDTH": 32,
        "MEM_DEPTH": 1024,
        "NO_OF_PROBES": no_of_probes,
        "INDEX": index,
    }


def core_module_name(index):
    return f"$paramod$ocla{index}\\ocla"


def build_ocla_netlist(
    mode="NATIVE",
    widths=(4, 8, 2),
    interfaces=((1, 2), (3,)),
    axi_type="AXILite",
    no_axi_bus=1,
    connections=None,
    top_wires=None,
):
    """
    YAML netlist data of a complete OCLA instrumented design.

    Hierarchy: ``top.u_wrap (ocla_wrapper).u_dbg (ocla_debug_subsystem)``
    instantiating one ``ocla`` core per interface. Each probe ``n`` is a
    wrapper port ``probe_n`` driven by top wire ``pn`` unless
    ``connections`` overrides the wrapper cell connections.
    """
    sub_params = subsystem_parameters(mode, widths, interfaces, axi_type, no_axi_bus)
    modules = {}
    sub_cells = {}
    for index, probes in enumerate(interfaces):
        name = core_module_name(index)
        core_width = sum(widths[p - 1] for p in probes)
        modules[name] = {"parameters": core_parameters(index, core_width)}
        sub_cells[f"u_ocla{index}"] = {"type": name}
    if mode != "NATIVE":
        index = len(interfaces)
        name = core_module_name(index)
        modules[name] = {
            "parameters": core_parameters(index, no_axi_bus * AXI_WIDTHS[axi_type])
        }
        sub_cells[f"u_ocla{index}"] = {"type": name}

    modules["ocla_debug_subsystem"] = {"parameters": sub_params, "cells": sub_cells}
    modules["ocla_wrapper"] = {
        "ports": {f"probe_{n}": w for n, w in enumerate(widths, start=1)},
        "wires": {"internal": 4},
        "cells": {"u_dbg": {"type": "ocla_debug_subsystem"}},
    }
    if connections is None:
        connections = {f"probe_{n}": f"p{n}" for n in range(1, len(widths) + 1)}
    if top_wires is None:
        top_wires = {f"p{n}": w for n, w in enumerate(widths, start=1)}
    modules["top"] = {
        "wires": top_wires,
        "cells": {"u_wrap": {"type": "ocla_wrapper", "connections": connections}},
    }
    return {"top": "top", "modules": modules}


@pytest.fixture
def log():
    return MessageLog()


@pytest.fixture
def subsystem_params():
    """Factory returning debug subsystem parameters (see ``subsystem_parameters``)."""
    return subsystem_parameters


@pytest.fixture
def core_params():
    """Factory returning OCLA core parameters (see ``core_parameters``)."""
    return core_parameters


@pytest.fixture
def ocla_netlist():
    """Factory returning YAML netlist data (see ``build_ocla_netlist``)."""
    return build_ocla_netlist


@pytest.fixture
def ocla_design():
    """Factory returning a parsed Design (see ``build_ocla_netlist``)."""

    def _build(**kwargs):
        return YamlNetlistParser().parse_data(build_ocla_netlist(**kwargs))

    return _build


def _decode(schema, params):
    table = decode_parameters(schema, {k: str(v) for k, v in params.items()}, MessageLog())
    assert table is not None
    return table


@pytest.fixture
def make_subsystem():
    """Factory returning a decoded DebugSubsystem; ``overrides`` patch parameters."""

    def _build(overrides=None, **kwargs):
        params = subsystem_parameters(**kwargs)
        params.update(overrides or {})
        return DebugSubsystem(name="ocla_debug_subsystem", params=_decode(SUBSYSTEM_SCHEMA, params))

    return _build


@pytest.fixture
def make_core():
    """Factory returning a decoded OclaCore."""

    def _build(index, no_of_probes, overrides=None):
        params = core_parameters(index, no_of_probes)
        params.update(overrides or {})
        return OclaCore(name=core_module_name(index), params=_decode(CORE_SCHEMA, params))

    return _build
