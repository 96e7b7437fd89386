"""
Command-line driver: run a merge / convert / split or analyze files.

Usage:
    python scripts/run_operation.py merge  out/all.csv  a.csv b.csv
    python scripts/run_operation.py convert out/x.xlsx  a.csv b.txt --delimiter ";"
    python scripts/run_operation.py split  out/parts   big.csv --lines 100000
    python scripts/run_operation.py split  out/parts   big.csv --files 4
    python scripts/run_operation.py analyze -          a.csv
    python scripts/run_operation.py merge  out/all.csv a.csv --config tabflow.yaml

Progress events are logged as each input file completes.  The result
dict is printed as JSON; the exit code is 1 when the operation failed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_operation")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("operation", choices=["merge", "convert", "split", "analyze"])
    parser.add_argument("output", help="Output file (merge/convert) or directory (split); '-' for analyze")
    parser.add_argument("inputs", nargs="+", help="Input .csv / .txt / .xlsx files")
    parser.add_argument("--delimiter", default=None, help="Delimiter; one character also parses text inputs (auto-detected if omitted)")
    size = parser.add_mutually_exclusive_group()
    size.add_argument("--lines", type=str, help="Split: data rows per part")
    size.add_argument("--files", type=str, help="Split: number of parts")
    parser.add_argument("--strategy", choices=["buffered", "streaming"], default=None)
    parser.add_argument("--config", default=None, help="Path to tabflow.yaml")
    return parser.parse_args(argv)


def _log_progress(event) -> None:
    log.info("  %d/%d files (%d%%)", event.current, event.total, event.percentage)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    import tabflow

    args = _parse_args(sys.argv[1:] if argv is None else argv)
    config = tabflow.load_config(args.config) if args.config else None

    if args.operation == "analyze":
        for path in args.inputs:
            print(json.dumps(tabflow.analyze_file(path, config), indent=2, ensure_ascii=False))
        return 0

    request: dict = {
        "filePaths": args.inputs,
        "operation": args.operation,
        "outputPath": args.output,
    }
    if args.delimiter:
        request["delimiter"] = args.delimiter
    if args.lines is not None:
        request["splitOptions"] = {"type": "lines", "value": args.lines}
    elif args.files is not None:
        request["splitOptions"] = {"type": "files", "value": args.files}

    log.info("=" * 70)
    log.info("%s: %d input file(s) -> %s", args.operation, len(args.inputs), args.output)
    log.info("=" * 70)

    result = tabflow.process_files(
        request, _log_progress, config=config, strategy=args.strategy
    )
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
