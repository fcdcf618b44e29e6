"""Node list loading (JSON).

Accepted shapes:
- A bare list of descriptors: `[{"server": ..., "name": ...}, ...]`
- A config object with a `proxies` list (Clash-style, already as JSON).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class NodeFileError(ValueError):
    """The input file does not hold a usable node list."""


def load_document(path: Path) -> Any:
    raw = path.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise NodeFileError(f"{path} is not valid JSON: {exc.msg} (line {exc.lineno})") from exc


def extract_node_list(document: Any) -> list[dict[str, Any]]:
    data = document.get("proxies") if isinstance(document, dict) else document
    if not isinstance(data, list):
        raise NodeFileError("expected a JSON list of nodes or an object with a 'proxies' list")
    if not all(isinstance(item, dict) for item in data):
        raise NodeFileError("every node must be a JSON object")
    return data


def replace_node_list(document: Any, nodes: list[dict[str, Any]]) -> Any:
    """Put relabeled nodes back into the document shape they came from."""

    if isinstance(document, dict):
        return {**document, "proxies": nodes}
    return nodes


def load_nodes(path: Path) -> list[dict[str, Any]]:
    return extract_node_list(load_document(path))
