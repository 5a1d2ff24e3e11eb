#!/usr/bin/env python3
"""Fill a prefix cache from a config file and print expected vs. actual lookups."""
import argparse
import logging
import sys
from pathlib import Path

import yaml

root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root / "src"))
from radixcache.cache import PrefixCache


def load_config(config_path: Path) -> dict:
    with open(config_path) as f:
        return yaml.safe_load(f)


def main() -> None:
    parser = argparse.ArgumentParser(description="Radix tree lookup demo")
    parser.add_argument(
        "--config",
        type=Path,
        default=root / "configs" / "demo.yaml",
        help="Config YAML with cache settings, entries and checks",
    )
    parser.add_argument("--verbose", action="store_true", help="Log edge splits")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    config = load_config(args.config)

    cache = PrefixCache.from_config(args.config, name="demo")
    for entry in config.get("entries", []):
        cache.set(str(entry["key"]), entry["value"])

    failures = 0
    for check in config.get("checks", []):
        if "get" in check:
            query = str(check["get"])
            actual = cache.get(query)
        else:
            query = str(check["best_match"])
            match = cache.lookup(query)
            actual = [match.value, match.prefix] if match is not None else None
        expected = check.get("expect")
        status = "ok" if actual == expected else "MISMATCH"
        failures += actual != expected
        print(f"{query!r}: expected {expected!r}, got {actual!r} [{status}]")

    print(f"{len(cache)} keys stored, {failures} mismatches.")
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
