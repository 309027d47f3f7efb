"""
oclaprobe - OCLA debug instrumentation analysis.

Discovers OCLA cores and the OCLA debug subsystem inside a hierarchical
netlist, validates how they are wired and resolves the probed signals after
the design has been flattened.
"""

__version__ = "0.3.0"
