#!/usr/bin/env python3
"""Lightweight smoke test for the NBBO sync application.

This script executes the example scripts end to end:

1. examples/basic_usage.py

and then runs the file-based pipeline on a generated pair of CSV sources.
If every step completes without raising an exception, the script exits with
status code 0.  Otherwise it prints a summary of the errors and exits with 1.

Usage:
    python scripts/smoke_test.py

You can also integrate it into CI pipelines, e.g.:
    - name: NBBO smoke test
      run: |
        pip install -e .
        python scripts/smoke_test.py
"""
from __future__ import annotations

import csv
import importlib.util
import pathlib
import sys
import tempfile
import time
import traceback
from typing import List, Tuple

ROOT_DIR = pathlib.Path(__file__).resolve().parent.parent
EXAMPLES_DIR = ROOT_DIR / "examples"
sys.path.insert(0, str(ROOT_DIR))

from nbbo_app.engine import NBBOSyncEngine  # noqa: E402

EXAMPLE_FILES: List[Tuple[str, str]] = [
    ("Basic Usage", "basic_usage.py"),
]

QUOTE_ROWS = [
    {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:00", "EX": "N",
     "BID": "10.00", "BIDSIZ": "100", "OFR": "10.05", "OFRSIZ": "200", "MODE": "12"},
    {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:02", "EX": "P",
     "BID": "10.01", "BIDSIZ": "50", "OFR": "10.06", "OFRSIZ": "100", "MODE": "12"},
]

TRADE_ROWS = [
    {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:01",
     "PRICE": "10.03", "SIZE": "100", "CORR": "0"},
    {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:03",
     "PRICE": "10.04", "SIZE": "100", "CORR": "0"},
]


def run_example(name: str, filename: str) -> bool:
    """Import and execute an example script.

    Returns True if the script completed successfully, False otherwise.
    """
    path = EXAMPLES_DIR / filename
    print("\n" + "=" * 60)
    print(f"🚀 Running smoke example: {name} ({filename})")
    print("=" * 60)

    if not path.exists():
        print(f"❌ File not found: {path}")
        return False

    start = time.time()
    try:
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)  # type: ignore[arg-type]
        assert spec.loader is not None  # for mypy
        spec.loader.exec_module(module)  # type: ignore[misc]

        if hasattr(module, "main") and callable(module.main):  # type: ignore[attr-defined]
            module.main()  # type: ignore[attr-defined]

        duration = time.time() - start
        print(f"✅ {name} completed in {duration:.2f}s")
        return True

    except Exception as exc:  # pylint: disable=broad-except
        duration = time.time() - start
        print(f"❌ {name} failed after {duration:.2f}s: {exc}")
        traceback.print_exc()
        return False


def write_csv(path: pathlib.Path, rows: list) -> None:
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)


def run_file_pipeline() -> bool:
    """Run the engine over temporary CSV sources with a 1-second lag."""
    print("\n" + "=" * 60)
    print("🚀 Running file pipeline")
    print("=" * 60)

    try:
        with tempfile.TemporaryDirectory() as tmp:
            tmp_dir = pathlib.Path(tmp)
            write_csv(tmp_dir / "quotes.csv", QUOTE_ROWS)
            write_csv(tmp_dir / "trades.csv", TRADE_ROWS)

            engine = NBBOSyncEngine(
                config_dir=tmp_dir,
                overrides={"session": {"start_time": "09:30:00",
                                       "end_time": "09:30:05",
                                       "lag_seconds": 1}},
            )
            rows = list(engine.run_files(tmp_dir / "quotes.csv", tmp_dir / "trades.csv"))

        if len(rows) != len(TRADE_ROWS):
            print(f"❌ Expected {len(TRADE_ROWS)} merged rows, got {len(rows)}")
            return False

        print(f"✅ File pipeline produced {len(rows)} merged rows")
        return True

    except Exception as exc:  # pylint: disable=broad-except
        print(f"❌ File pipeline failed: {exc}")
        traceback.print_exc()
        return False


def main() -> None:
    print("🧪 NBBO sync smoke-test suite")
    print("=" * 60)

    results = [run_example(name, filename) for name, filename in EXAMPLE_FILES]
    results.append(run_file_pipeline())

    total = len(results)
    successes = sum(results)
    print("\n" + "=" * 60)
    print("📋 Smoke-test summary")
    print("=" * 60)
    print(f"Total checks : {total}")
    print(f"Successful   : {successes}")
    print(f"Failed       : {total - successes}")

    if successes == total:
        print("🎉 All smoke-tests passed!")
        sys.exit(0)
    else:
        print("⚠️  Smoke-tests failed.  See logs above.")
        sys.exit(1)


if __name__ == "__main__":
    main()
