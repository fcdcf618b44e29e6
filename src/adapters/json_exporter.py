"""JSON export of relabeled nodes.

Labels stay readable (`ensure_ascii=False`) and keys are not sorted, so
descriptors keep the caller's field order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def dumps_document(document: Any) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2) + "\n"


def export_nodes_json(*, document: Any, output_path: Path) -> Path:
    """Write the relabeled document as UTF-8 JSON."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps_document(document), encoding="utf-8")
    return output_path
