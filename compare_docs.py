#!/usr/bin/env python3
import sys
import argparse
import json
from dataclasses import replace

import yaml

from structcmp import logging as slog
from structcmp.ingest import DocumentParser
from structcmp.optionsloader import LoadedConfig, OptionsLoader
from structcmp.comparators.interface import CompareOptions
from structcmp.comparators.registry import Comparisons
from structcmp.comparators.engine import DeepComparator
from structcmp.comparators.scalars import sign
from structcmp.errors import ComparisonError


def _load_config(path):
    if not path:
        return LoadedConfig(options=CompareOptions(), comparisons=Comparisons())
    return OptionsLoader(path).load()


def _load_doc(parser: DocumentParser, title: str, path: str):
    slog.log_step(f"Reading {title} document:", path)
    data = parser.parse(path)
    slog.log_ok(f"{title} loaded.")
    return data


def _run(argv=None) -> int:
    p = argparse.ArgumentParser(
        description="Structural three-way comparison of two JSON/YAML snapshots. Prints -1, 0 or 1."
    )
    p.add_argument("-l", "--left",  required=True, help="Path to the left JSON/YAML document")
    p.add_argument("-r", "--right", required=True, help="Path to the right JSON/YAML document")
    p.add_argument("-c", "--config", default=None, help="Path to an options YAML (compare settings + overrides)")
    p.add_argument("-o", "--output-file", default=None, help="Also write the result as JSON to this path")

    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="Increase log verbosity (-v, -vv)")
    p.add_argument("--sort-map-keys", action="store_true",
                   help="Traverse mappings in sorted key order (overrides the config file)")
    p.add_argument("--require-container", action="store_true",
                   help="Reject documents whose root is not a list or mapping")
    p.add_argument("--fail-on-diff", action="store_true",
                   help="Exit with status 1 when the documents do not compare equal")

    args = p.parse_args(argv)
    slog.setup_logging(args.verbose)

    try:
        config = _load_config(args.config)
    except (ValueError, OSError, yaml.YAMLError) as e:
        slog.log_err(f"Invalid options file: {e}")
        return 2

    options = config.options
    if args.sort_map_keys:
        options = replace(options, sort_map_keys=True)

    parser = DocumentParser(expect_container=args.require_container)
    left = _load_doc(parser, "left", args.left)
    right = _load_doc(parser, "right", args.right)

    comparator = DeepComparator(config.comparisons.freeze(), options)
    slog.log_step("Comparing:", f"sort_map_keys={options.sort_map_keys} max_depth={options.max_depth}")
    try:
        result = sign(comparator.compare(left, right))
    except ComparisonError as e:
        slog.log_err(f"Documents cannot be ordered: {e}")
        return 2

    print(result)

    if args.output_file:
        slog.log_step("Writing output JSON:", args.output_file)
        with open(args.output_file, "w", encoding="utf-8") as f:
            json.dump({
                "left": args.left,
                "right": args.right,
                "result": result,
                "options": {"sort_map_keys": options.sort_map_keys, "max_depth": options.max_depth},
                "overrides": sorted(slog.type_name(t) for t in config.comparisons),
            }, f, indent=2, ensure_ascii=False)

    if args.fail_on_diff and result != 0:
        slog.log_warn(f"Documents differ (result {result}).")
        return 1

    slog.log_ok("Done.")
    return 0


def main(argv=None) -> int:
    try:
        return _run(argv)
    except Exception as e:
        slog.log_err(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
