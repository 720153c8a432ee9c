# structcmp/tests/utility.py
from __future__ import annotations
import json
import subprocess
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional
import yaml

from structcmp.comparators.engine import compare
from structcmp.comparators.scalars import sign


# -------------------------
# Paths
# -------------------------

# Returns repository root (one level above tests/).
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]


# Returns the command line tool path (compare_docs.py in repo root).
def compare_docs_path() -> Path:
    return project_root() / "compare_docs.py"


# -------------------------
# Sample types (module level so override annotations resolve)
# -------------------------

@dataclass
class Record:
    A: int = 0
    B: Optional[int] = None
    C: Optional[List[int]] = None
    D: Optional[Dict[int, int]] = None
    E: Any = None
    G: Any = None


@dataclass
class Node:
    value: int
    next: Optional["Node"] = None


@dataclass
class Secretive:
    visible: int
    _hidden: int = 0


@dataclass
class Wrapper:
    inner: Secretive


@dataclass
class Holder:
    items: List[Wrapper]


@dataclass
class Tagged:
    name: str
    cache: Dict[str, Any] = field(default_factory=dict, compare=False)


class Point(NamedTuple):
    x: int
    y: int


class Slotted:
    __slots__ = ("first", "second")

    def __init__(self, first, second=None):
        self.first = first
        if second is not None:
            self.second = second


class Pet(str, Enum):
    CAT = "Cat"
    DOG = "Dog"
    BAT = "Bat"


class Color(Enum):
    RED = 1
    GREEN = 2


PET_ADORABILITY = {Pet.CAT: 10, Pet.DOG: 9, Pet.BAT: 0}


class Version:
    """Opaque value type: no structural order without an override."""

    def __init__(self, text: str):
        self.text = text

    def __eq__(self, other):
        return isinstance(other, Version) and other.text == self.text

    def __hash__(self):
        return hash(self.text)


# Ordering functions used by registry and engine tests.
def compare_pets(p1: Pet, p2: Pet) -> int:
    return PET_ADORABILITY[p1] - PET_ADORABILITY[p2]


def compare_records_by_a(r1: Record, r2: Record) -> int:
    return r1.A - r2.A


def compare_squares(a: int, b: int) -> int:
    return a * a - b * b


def compare_versions(v1: Version, v2: Version) -> int:
    t1 = tuple(int(p) for p in v1.text.split("."))
    t2 = tuple(int(p) for p in v2.text.split("."))
    return (t1 > t2) - (t1 < t2)


# -------------------------
# Assertions
# -------------------------

# Asserts compare(a, b) has the expected sign and compare(b, a) the opposite one.
def assert_ordered(a: Any, b: Any, expected: int, **kwargs: Any) -> None:
    forward = sign(compare(a, b, **kwargs))
    backward = sign(compare(b, a, **kwargs))
    assert forward == expected, f"compare({a!r}, {b!r}) gave {forward}, expected {expected}"
    assert backward == -expected, f"compare({b!r}, {a!r}) gave {backward}, expected {-expected}"


# -------------------------
# Files + CLI
# -------------------------

# Writes data as JSON or YAML depending on the file suffix.
def write_document(path: Path, data: Any) -> Path:
    if path.suffix == ".json":
        path.write_text(json.dumps(data), encoding="utf-8")
    else:
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# Runs compare_docs.py in a subprocess and returns the completed process (never raises on exit status).
def run_compare_docs(args: List[str], *, cwd: Optional[Path] = None,
                     env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
    cmd = [sys.executable, str(compare_docs_path()), *args]
    return subprocess.run(cmd, cwd=str(cwd or project_root()), env=env,
                          capture_output=True, text=True)
