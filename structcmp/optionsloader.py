# structcmp/structcmp/optionsloader.py
from __future__ import annotations
import importlib
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from structcmp import logging as slog
from structcmp.comparators.interface import CompareOptions, OrderingFunc
from structcmp.comparators.registry import Comparisons
from structcmp.errors import InvalidOverrideError

_SUPPORTED_OPTIONS_VERSIONS = {"0.1"}
_TOP_LEVEL_KEYS = {"options_version", "compare", "overrides"}
_COMPARE_KEYS = {"sort_map_keys", "max_depth"}


@dataclass(frozen=True)
class LoadedConfig:
    options: CompareOptions
    comparisons: Comparisons


class OptionsLoader:
    """
    Loads comparison settings from YAML:
      options_version: "0.1"
      compare:
        sort_map_keys: bool          (default false)
        max_depth: int | null        (default null = unbounded)
      overrides:
        - "package.module:function"  (registered in order; last one per type wins)

    Notes:
      - Unknown keys are warnings in non-strict mode and errors in strict mode.
      - Wrong value types, unresolvable references and invalid ordering
        functions are always fatal.
    """

    def __init__(self, yaml_path: str, *, strict: bool = True):
        self.yaml_path = yaml_path
        self.strict = strict

    def _warn_or_raise(self, msg: str, *, fatal: bool = False) -> None:
        if fatal or self.strict:
            slog.log_err(msg)
            raise ValueError(msg)
        slog.log_warn(msg)

    def _check_unknown(self, raw: Dict[str, Any], allowed: set, where: str) -> None:
        unknown = sorted(str(k) for k in raw if k not in allowed)
        if unknown:
            self._warn_or_raise(
                f"{where}: unknown key(s) {unknown}. Allowed: {sorted(allowed)}",
                fatal=False,
            )

    def _normalize_compare(self, raw: Any) -> CompareOptions:
        if raw is None:
            return CompareOptions()
        if not isinstance(raw, dict):
            self._warn_or_raise("'compare' must be a mapping.", fatal=True)
        self._check_unknown(raw, _COMPARE_KEYS, "compare")

        sort_map_keys = raw.get("sort_map_keys", False)
        if not isinstance(sort_map_keys, bool):
            self._warn_or_raise("compare.sort_map_keys must be true or false.", fatal=True)

        max_depth = raw.get("max_depth", None)
        # bool is an int subclass; reject it explicitly
        if max_depth is not None and (isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth <= 0):
            self._warn_or_raise("compare.max_depth must be a positive integer or null.", fatal=True)

        return CompareOptions(sort_map_keys=sort_map_keys, max_depth=max_depth)

    def _resolve_ref(self, ref: Any) -> OrderingFunc:
        text = str(ref or "").strip()
        module_name, sep, attr_path = text.partition(":")
        if not sep or not module_name or not attr_path:
            self._warn_or_raise(f"Override '{text}' must look like 'package.module:function'.", fatal=True)

        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError as e:
            self._warn_or_raise(f"Override '{text}': cannot import module '{module_name}': {e}", fatal=True)

        for part in attr_path.split("."):
            if not hasattr(obj, part):
                self._warn_or_raise(f"Override '{text}': '{part}' not found.", fatal=True)
            obj = getattr(obj, part)
        return obj

    def _load_overrides(self, raw: Any, comparisons: Comparisons) -> None:
        if raw is None:
            return
        refs: List[Any] = [raw] if isinstance(raw, str) else raw
        if not isinstance(refs, list):
            self._warn_or_raise("'overrides' must be a list of 'module:function' strings.", fatal=True)

        for ref in refs:
            fn = self._resolve_ref(ref)
            try:
                comparisons.register(fn)
            except InvalidOverrideError as e:
                self._warn_or_raise(f"Override '{ref}' is not a valid ordering function: {e}", fatal=True)
            slog.log_debug(f"Override loaded: {ref}")

    def load(self, comparisons: Optional[Comparisons] = None) -> LoadedConfig:
        slog.log_step("Loading options:", self.yaml_path)
        with open(self.yaml_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            self._warn_or_raise("Options file must contain a mapping at the top level.", fatal=True)

        version = str(raw.get("options_version", "")).strip()
        if version not in _SUPPORTED_OPTIONS_VERSIONS:
            self._warn_or_raise(
                f"Unsupported or missing options_version '{version}'. Supported: {sorted(_SUPPORTED_OPTIONS_VERSIONS)}",
                fatal=True,
            )
        self._check_unknown(raw, _TOP_LEVEL_KEYS, "options")

        options = self._normalize_compare(raw.get("compare"))
        comparisons = comparisons if comparisons is not None else Comparisons()
        self._load_overrides(raw.get("overrides"), comparisons)

        slog.log_ok(f"Options loaded with {len(comparisons)} override(s).")
        return LoadedConfig(options=options, comparisons=comparisons)
