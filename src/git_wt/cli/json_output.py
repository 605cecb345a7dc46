"""JSON output utilities for machine-parseable output."""

import json
from collections.abc import Sequence

from pydantic import BaseModel

from git_wt.cli.output import machine_output


def emit_json_list(models: Sequence[BaseModel]) -> None:
    """Output a JSON array of models to stdout, indented for readability."""
    data = [model.model_dump(mode="json") for model in models]
    machine_output(json.dumps(data, indent=2))
