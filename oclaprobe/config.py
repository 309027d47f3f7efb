"""
Analyzer configuration.

Defaults match the OCLA RTL shipped with the debug subsystem; a YAML file
can override them, e.g.:

.. code-block:: yaml

    coreModuleName: ocla
    subsystemModuleName: ocla_debug_subsystem
    ipType: OCLA
    probePortPattern: "probe_{index}"
    outputFile: ocla.json
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import Field, ValidationError, field_validator

from oclaprobe.model.base import StrictModel


class ConfigError(Exception):
    """Invalid analyzer configuration file."""


class AnalyzerConfig(StrictModel):
    """Names and patterns the analyzer matches against the netlist."""

    core_module_name: str = Field(default="ocla", description="OCLA core module name")
    subsystem_module_name: str = Field(
        default="ocla_debug_subsystem", description="OCLA debug subsystem module name"
    )
    ip_type: str = Field(default="OCLA", description="Expected IP_TYPE parameter value")
    probe_port_pattern: str = Field(
        default="probe_{index}",
        description="Instantiator probe port name, {index} is the 1-based probe number",
    )
    output_file: str = Field(default="ocla.json", description="Default output document path")

    @field_validator("core_module_name", "subsystem_module_name", "ip_type")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty")
        return v

    @field_validator("probe_port_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        if "{index}" not in v:
            raise ValueError("probePortPattern must contain an {index} placeholder")
        return v

    def probe_port(self, probe_id: int) -> str:
        """Instantiator port name of a 0-based probe id."""
        return self.probe_port_pattern.format(index=probe_id + 1)

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "AnalyzerConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Configuration file; defaults are used when None

        Returns:
            AnalyzerConfig instance

        Raises:
            ConfigError: If the file is missing, malformed or invalid
        """
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML syntax error in {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Root element of {path} must be a YAML object/dictionary")

        try:
            return cls(**data)
        except ValidationError as e:
            errors = []
            for error in e.errors():
                loc = " -> ".join(str(x) for x in error["loc"])
                errors.append(f"{loc}: {error['msg']}")
            raise ConfigError(f"Invalid configuration {path}:\n  " + "\n  ".join(errors))
