# structcmp/structcmp/ingest.py
from __future__ import annotations
import json
import os
from typing import Any

import yaml

from structcmp import logging as slog

_FORMATS = {".json": "json", ".yml": "yaml", ".yaml": "yaml"}


class DocumentParser:
    """
    Read snapshot documents for structural comparison.
      - .json via the json module, .yml/.yaml via yaml.safe_load.
      - An empty YAML document reads as None (and so orders before anything
        that is not an empty list/mapping).
      - With expect_container=True the document root must be a list or mapping.
    """

    def __init__(self, *, expect_container: bool = False):
        self.expect_container = expect_container

    @staticmethod
    def format_of(path: str) -> str:
        ext = os.path.splitext(path)[1].lower()
        fmt = _FORMATS.get(ext)
        if fmt is None:
            raise ValueError(f"Unsupported document type '{ext or path}'. Supported: {sorted(_FORMATS)}")
        return fmt

    def parse(self, path: str) -> Any:
        fmt = self.format_of(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f) if fmt == "json" else yaml.safe_load(f)

        if self.expect_container and not isinstance(data, (list, dict)):
            raise TypeError(f"Document '{path}' must have a list or mapping at its root, got {type(data).__name__}")

        slog.log_debug(f"Parsed {fmt} document {path}: root {type(data).__name__}")
        return data
