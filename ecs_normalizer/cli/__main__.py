from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime, time
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, NormalizerConfig, default_config, load_config
from ..errors import UnknownSystemError, WorkbookReadError
from ..excel.reader import read_workbook
from ..logging.init import log_summary, setup_logging
from ..models.system import SystemId
from ..normalize.headers import HeaderLookup
from ..rules.registry import get_rule_set
from ..services.batch import BatchError, collect_inputs, process_files
from ..services.summary import render_summary_line

"""CLI entrypoint.

    ecs-normalizer SYSTEM [INPUT ...] [--output-dir DIR] [--now YYYY-MM-DD]
                   [--config PATH] [--debug] [--inspect-data]

Inputs default to the configured ``source_directory``. Exit codes:

- 0: every file normalized (or nothing to do)
- 2: at least one file failed
- 1: fatal (bad config, unknown system, missing input path)
"""

__all__ = [
    "EXIT_SUCCESS_ALL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_FATAL",
    "CONFIG_ENV_VAR",
    "main",
]

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "ECS_NORMALIZER_CONFIG"

INSPECT_SAMPLE_ROWS = 3


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ecs-normalizer",
        description="Normalize partner loan spreadsheets into the ECS import layout",
    )
    p.add_argument(
        "system",
        nargs="?",
        help="Partner system identifier (e.g. PAN, 'BRB-INCONTA'); defaults to config default_system",
    )
    p.add_argument("inputs", nargs="*", type=Path, help=".xlsx files or directories (default: source_directory)")
    p.add_argument("--output-dir", type=Path, help="Directory for normalized workbooks")
    p.add_argument("--now", type=_parse_now_date, help="Inclusion date as YYYY-MM-DD (default: today)")
    p.add_argument("--config", type=Path, help=f"YAML config path (default: ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print headers & first rows of each input then exit")
    return p.parse_args(argv)


def _parse_now_date(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value}") from None


def _resolve_config(explicit: Path | None) -> NormalizerConfig:
    """Explicit path, then the env var, then the default file if present."""
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()


def _inspect_data(files: list[Path], system: SystemId, cfg: NormalizerConfig) -> int:
    rule_set = get_rule_set(system)
    for f in files:
        print(f"FILE: {f.name}")
        try:
            sheet = read_workbook(f, keep_na_strings=cfg.keep_na_strings)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        lookup = HeaderLookup.from_headers(sheet.columns)
        print(f"  SHEET: {sheet.sheet_name} cols={sheet.columns}")
        print(f"  missing_required={rule_set.missing_columns(lookup)}")
        safe_rows = []
        for r in sheet.rows[:INSPECT_SAMPLE_ROWS]:
            safe_rows.append({k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.items()})
        print("    sample_rows=", safe_rows)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] from tests must not pick up pytest's argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)

    load_dotenv(dotenv_path=Path(".env"), override=False)

    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    system_text = args.system or cfg.default_system
    if not system_text:
        logger.error("no system given and no default_system configured")
        return EXIT_FATAL
    try:
        system = SystemId.parse(system_text)
    except UnknownSystemError as e:
        logger.error(str(e))
        return EXIT_FATAL

    inputs = args.inputs or [Path(cfg.source_directory)]
    try:
        files = collect_inputs(inputs)
    except BatchError as e:
        logger.error(str(e))
        return EXIT_FATAL

    logger.debug("debug mode enabled")
    logger.info(f"system={system.value} files={len(files)}")

    if args.inspect_data:
        return _inspect_data(files, system, cfg)

    now = None
    if args.now is not None:
        # noon in the configured timezone stays on the same calendar day
        now = datetime.combine(args.now.date(), time(12), tzinfo=ZoneInfo(cfg.settings.timezone))

    output_dir = args.output_dir or Path(cfg.output_directory)
    result = process_files(files, system, output_dir, cfg, now=now)

    log_summary(render_summary_line(len(files), result))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
