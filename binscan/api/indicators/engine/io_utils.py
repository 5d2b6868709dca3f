"""JSON output helpers for scan reports.

Output is deterministic (sorted keys, trailing newline) so reports from two
runs over the same binary diff cleanly.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union


def write_json(path: Union[str, Path], payload: Any) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
        f.write("\n")
    return out


def dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)
