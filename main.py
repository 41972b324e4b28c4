# main.py

"""
Orchestrator: read params (JSON + CLI), scan mod archives, classify, copy content mods, write reports.
"""
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

from modtriage.keywords import KeywordSet
from modtriage.model import BatchResult, RunConfig, ScanRecord
from modtriage.output import copy_archive, overlaps, reset_dir
from modtriage.report import write_reports
from modtriage.scan import scan_directory
from modtriage.walk import normalize_extension


def load_config(path: Path | None) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path (Path | None): Path to the JSON configuration file.

    Returns:
        Dict[str, Any]: Configuration dictionary. Empty if no file is provided or read fails.
    """
    if not path:
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception as exc:
        print(f"[WARN] Failed to read config {path}: {exc}", file=sys.stderr)
        return {}
    if not isinstance(data, dict):
        print(f"[WARN] Ignoring config {path}: top level must be an object.", file=sys.stderr)
        return {}
    return data


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    p = argparse.ArgumentParser(
        description="Sort mod archives into content and infrastructure/library by their internal layout."
    )
    p.add_argument("--input", type=str, help="Directory holding the mod archives (not recursive).")
    p.add_argument("--output", type=str, help="Directory for kept archives (default: triage_out/mods).")
    p.add_argument("--reports", type=str, help="Directory for reports (default: triage_out/reports).")
    p.add_argument("--min-signal", type=int, dest="min_signal", help="Score at which an archive is always kept (default: 2).")
    p.add_argument("--extension", type=str, help="Archive extension to scan (default: .jar).")
    p.add_argument("--keyword", action="append", default=[], help="Extra infra keyword (repeatable).")
    p.add_argument("--dry-run", action="store_true", dest="dry_run", help="Classify and report without copying.")
    p.add_argument("--verbose", action="store_true", help="Print one line per archive.")
    p.add_argument("--config", type=str, help="Optional JSON config (flags override).")
    return p.parse_args(argv)


def _get_effective_config(args: argparse.Namespace) -> Tuple[Dict[str, Any], Path]:
    """Load CLI + JSON configuration, giving precedence to CLI flags."""
    script_dir = Path(__file__).parent
    default_config_path = script_dir / "params.json"
    config_path = Path(args.config) if args.config else default_config_path
    cfg = load_config(config_path if config_path.exists() else None)
    return cfg, config_path


def _fail(msg: str) -> None:
    print(f"[ERR] {msg}", file=sys.stderr)
    raise SystemExit(2)


def _resolve_config(args: argparse.Namespace, cfg: Dict[str, Any], config_path: Path) -> RunConfig:
    """Resolve and validate paths and options into a RunConfig."""
    raw_input = args.input or cfg.get("input", "")
    if not raw_input:
        _fail(f"--input is required (or set 'input' in {config_path.name}).")
    input_dir = Path(raw_input)
    if not input_dir.is_dir():
        _fail(f"Input not found: {input_dir}")

    output_dir = Path(args.output or cfg.get("output", "triage_out/mods"))
    report_dir = Path(args.reports or cfg.get("reports", "triage_out/reports"))
    for label, target in (("output", output_dir), ("reports", report_dir)):
        if overlaps(target, input_dir):
            _fail(f"The {label} directory {target} would wipe the input directory {input_dir}.")

    min_signal = args.min_signal if args.min_signal is not None else cfg.get("min_signal", 2)
    try:
        min_signal = int(min_signal)
    except (TypeError, ValueError):
        _fail(f"min_signal must be an integer, got {min_signal!r}.")
    if min_signal < 0:
        _fail(f"min_signal must be >= 0, got {min_signal}.")

    extra = cfg.get("extra_keywords", [])
    if isinstance(extra, str):
        extra = [extra]
    extra_keywords = tuple(str(k) for k in list(extra) + list(args.keyword))

    return RunConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        report_dir=report_dir,
        min_signal=min_signal,
        extension=normalize_extension(args.extension or cfg.get("extension", ".jar")),
        extra_keywords=extra_keywords,
        dry_run=bool(args.dry_run or cfg.get("dry_run", False)),
        verbose=bool(args.verbose or cfg.get("verbose", False)),
    )


def _print_record(record: ScanRecord) -> None:
    tag = "[KEEP]" if record.keep else "[SKIP]"
    detail = f" ({record.reason})" if record.reason else ""
    print(f"{tag} {record.file_name} score={record.score}{detail}")


def copy_kept(result: BatchResult, run: RunConfig) -> Tuple[int, int]:
    """Copy every kept archive into the output directory. Returns (copied, errors)."""
    copied = errors = 0
    for record in result.kept:
        dest = copy_archive(run.input_dir / record.file_name, run.output_dir)
        if isinstance(dest, Exception):
            errors += 1
            print(f"[WARN] Copy failed for {record.file_name}: {type(dest).__name__}: {dest}", file=sys.stderr)
        else:
            copied += 1
    return copied, errors


def _print_summary(run: RunConfig, result: BatchResult, copied: int, errors: int) -> None:
    """Print summary information to stdout."""
    print(
        f"[INFO] Done. Total: {len(result.records)} | Kept: {len(result.kept)} "
        f"| Excluded: {len(result.excluded)} | Copy errors: {errors}"
    )
    print(f"[INFO] Reports: {run.report_dir.resolve()}")
    if run.dry_run:
        print("[INFO] Copy was NOT enabled (dry-run mode).")
    else:
        print(f"[INFO] Copied {copied} archive(s) to {run.output_dir.resolve()}")


def main(argv: List[str] | None = None) -> int:
    """Main orchestration function.

    Returns:
        int: Exit code.
    """
    args = parse_args(argv)
    cfg, config_path = _get_effective_config(args)
    run = _resolve_config(args, cfg, config_path)
    keywords = KeywordSet.default(run.extra_keywords)

    print(f"[INFO] Scanning: {run.input_dir} ({run.extension}, min signal {run.min_signal})")
    result = scan_directory(
        run.input_dir,
        keywords,
        threshold=run.min_signal,
        extension=run.extension,
        on_record=_print_record if run.verbose else None,
    )

    reset_dir(run.report_dir)
    reset_dir(run.output_dir)
    copied = errors = 0
    if not run.dry_run:
        copied, errors = copy_kept(result, run)

    write_reports(run.report_dir, result, run.min_signal, run.dry_run)
    _print_summary(run, result, copied, errors)

    return 3 if errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
