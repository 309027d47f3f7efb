import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from oclaprobe.analysis.result import AnalysisResult
from oclaprobe.config import AnalyzerConfig


def generate_schema():
    output_dir = project_root / "schemas"
    output_dir.mkdir(parents=True, exist_ok=True)

    # Analyzer configuration file (*.yml)
    config_schema = AnalyzerConfig.model_json_schema(by_alias=True)
    with open(output_dir / "analyzer_config.schema.json", "w") as f:
        json.dump(config_schema, f, indent=2)
        f.write("\n")
    print(f"Generated {output_dir / 'analyzer_config.schema.json'}")

    # Output document (ocla.json)
    result_schema = AnalysisResult.model_json_schema()
    with open(output_dir / "ocla_document.schema.json", "w") as f:
        json.dump(result_schema, f, indent=2)
        f.write("\n")
    print(f"Generated {output_dir / 'ocla_document.schema.json'}")


if __name__ == "__main__":
    generate_schema()
