"""
OCLA analysis stages and pipeline.
"""

from .analyzer import OclaAnalyzer, TopModuleNotFoundError, analyze_design, finalize_core
from .classifier import Classification, ModuleClassifier, classify, match_module_name
from .cross_check import CrossValidator
from .hierarchy import HierarchyPath, find_instantiators, resolve_unique_path
from .messages import MessageLog
from .probe_map import ProbeMap, decode_probe_map, pack_nibbles, unpack_nibbles
from .result import AnalysisResult, ProbeInfo, build_result
from .signals import resolve_signals

__all__ = [
    "OclaAnalyzer",
    "TopModuleNotFoundError",
    "analyze_design",
    "finalize_core",
    "Classification",
    "ModuleClassifier",
    "classify",
    "match_module_name",
    "CrossValidator",
    "HierarchyPath",
    "find_instantiators",
    "resolve_unique_path",
    "MessageLog",
    "ProbeMap",
    "decode_probe_map",
    "pack_nibbles",
    "unpack_nibbles",
    "AnalysisResult",
    "ProbeInfo",
    "build_result",
    "resolve_signals",
]
