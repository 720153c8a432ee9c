# structcmp/tests/test_ingest.py
from __future__ import annotations
from pathlib import Path
import pytest
from structcmp.comparators.engine import compare
from structcmp.ingest import DocumentParser
from utility import write_document

SNAPSHOT = {"name": "card", "algorithms": ["AES", "RSA"], "limits": {"ram": 2048}, "enabled": True}


# JSON and YAML renditions of the same data parse to structurally equal values.
@pytest.mark.parametrize("suffix", [".json", ".yml", ".yaml"])
def test_parse_supported_formats(tmp_path: Path, suffix: str):
    path = write_document(tmp_path / f"snap{suffix}", SNAPSHOT)
    data = DocumentParser().parse(str(path))
    assert data == SNAPSHOT
    assert compare(data, SNAPSHOT) == 0


# Unknown suffixes are rejected before the file is opened.
def test_parse_rejects_unknown_suffix(tmp_path: Path):
    with pytest.raises(ValueError, match="Unsupported document type"):
        DocumentParser().parse(str(tmp_path / "snap.txt"))


# An empty YAML file reads as None.
def test_parse_empty_yaml_is_none(tmp_path: Path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert DocumentParser().parse(str(path)) is None


# expect_container rejects scalar roots.
def test_expect_container(tmp_path: Path):
    path = write_document(tmp_path / "scalar.json", 42)
    assert DocumentParser().parse(str(path)) == 42
    with pytest.raises(TypeError):
        DocumentParser(expect_container=True).parse(str(path))
