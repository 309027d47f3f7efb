#!/usr/bin/env python3
"""
oclaprobe - OCLA debug instrumentation analysis tool.

Usage:
    python scripts/oclaprobe.py analyze design.yml --file ocla.json
    python scripts/oclaprobe.py analyze design.yml --auto-top --json  # machine readable status
    python scripts/oclaprobe.py dump-axi-table AXILite

Subcommands:
    analyze         Analyze OCLA instrumentation of a YAML netlist
    dump-axi-table  List the fixed probe table of an AXI bridge core
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from oclaprobe.analysis.analyzer import OclaAnalyzer, TopModuleNotFoundError
from oclaprobe.config import AnalyzerConfig, ConfigError
from oclaprobe.model.axi import axi_probe_width, axi_signal_table
from oclaprobe.model.base import AxiType
from oclaprobe.netlist.errors import NetlistError, ParseError
from oclaprobe.netlist.yaml_parser import YamlNetlistParser


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def cmd_analyze(args):
    """Analyze a netlist and write the OCLA document."""
    try:
        config = AnalyzerConfig.load(args.config)
        design = YamlNetlistParser().parse_file(args.input)
        if args.top:
            design.set_top(args.top)
        elif args.auto_top:
            design.auto_top()
    except (ConfigError, ParseError, NetlistError) as e:
        if args.json:
            print(json.dumps({"success": False, "error": str(e)}))
        else:
            print(f"Error: {e}")
        sys.exit(1)

    output = Path(args.file or config.output_file)
    try:
        result = OclaAnalyzer(config).analyze(design)
    except TopModuleNotFoundError as e:
        e.result.write(output)
        if args.json:
            print(json.dumps({"success": False, "error": str(e), "output": str(output)}))
        else:
            print(f"Error: {e}")
        sys.exit(1)

    result.write(output)
    if args.json:
        print(
            json.dumps(
                {
                    "success": result.success,
                    "cores": result.success_count,
                    "output": str(output),
                }
            )
        )
    else:
        for message in result.messages:
            print(message)
        if result.success:
            print(f"\n✓ {result.success_count} OCLA module(s) written to: {output}")
        else:
            print(f"\n✗ No OCLA module qualified, messages written to: {output}")
    if not result.success:
        sys.exit(1)


def cmd_dump_axi_table(args):
    """Print the fixed per-bus probe table of an AXI flavour."""
    axi_type = AxiType(args.axi_type)
    table = axi_signal_table(axi_type)
    if args.json:
        print(
            json.dumps(
                {
                    "axiType": axi_type.value,
                    "width": axi_probe_width(axi_type),
                    "signals": [{"name": s.name, "width": s.width} for s in table],
                }
            )
        )
        return
    print(f"\n{axi_type.value} ({len(table)} signals, {axi_probe_width(axi_type)} bits per bus)")
    for signal in table:
        print(f"  {signal.name:12} [{signal.width}]")


def main():
    parser = argparse.ArgumentParser(
        prog="oclaprobe", description="OCLA debug instrumentation analysis tool"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # analyze subcommand
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a YAML netlist")
    analyze_parser.add_argument("input", help="Netlist YAML file")
    top_group = analyze_parser.add_mutually_exclusive_group()
    top_group.add_argument("--top", help="Top module name (overrides the netlist)")
    top_group.add_argument(
        "--auto-top", action="store_true", help="Select the top module automatically"
    )
    analyze_parser.add_argument(
        "--file", "-f", help="Output JSON document (default: configuration outputFile)"
    )
    analyze_parser.add_argument("--config", "-c", help="Analyzer configuration YAML")
    analyze_parser.add_argument("--json", action="store_true", help="JSON status output")
    analyze_parser.set_defaults(func=cmd_analyze)

    # dump-axi-table subcommand
    axi_parser = subparsers.add_parser("dump-axi-table", help="List a fixed AXI probe table")
    axi_parser.add_argument("axi_type", choices=[t.value for t in AxiType], help="AXI flavour")
    axi_parser.add_argument("--json", action="store_true", help="JSON output")
    axi_parser.set_defaults(func=cmd_dump_axi_table)

    args = parser.parse_args()
    setup_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
