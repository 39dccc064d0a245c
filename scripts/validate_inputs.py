#!/usr/bin/env python
"""
Validate the three source files (skills, roles, criteria) before a session.

Usage:
    python scripts/validate_inputs.py
    python scripts/validate_inputs.py --data-dir /path/to/data
"""
import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from skillgap.config import config
from skillgap.data.loader import load_report_from_dir, read_source
from skillgap.data.schema import SOURCE_NAMES, SourceLoadFailure, clean_columns, validate_schema
from skillgap.logging_config import configure_logging

logger = logging.getLogger(__name__)


def validate_file(filepath: Path, source: str) -> dict:
    """Validate a single source file."""
    result = {
        "exists": False,
        "rows": 0,
        "columns": 0,
        "valid": False,
        "missing_required": [],
        "value_columns": [],
        "errors": []
    }

    try:
        df = clean_columns(read_source(filepath))
    except FileNotFoundError:
        result["errors"].append(f"File not found: {filepath}")
        return result
    except Exception as e:
        result["exists"] = True
        result["errors"].append(f"Failed to load: {e}")
        return result

    result["exists"] = True
    result["rows"] = len(df)
    result["columns"] = len(df.columns)

    schema_result = validate_schema(df, source, strict=False, columns=config.columns)
    result["valid"] = schema_result["is_valid"]
    result["missing_required"] = schema_result["missing_required"]
    result["value_columns"] = schema_result["value_columns"]

    return result


def main():
    parser = argparse.ArgumentParser(description="Validate skill-gap source files")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else config.log_level)

    app_config = replace(config, data_dir=Path(args.data_dir)) if args.data_dir else config
    data_dir = app_config.data_dir
    files = dict(zip(SOURCE_NAMES, (app_config.skills_path, app_config.roles_path, app_config.criteria_path)))

    print("=" * 60)
    print("Skill-Gap Source Validation")
    print("=" * 60)
    print(f"Source directory: {data_dir}")
    print()

    all_valid = True

    for source, filepath in files.items():
        print(f"Validating: {source}")
        print("-" * 40)

        result = validate_file(filepath, source)

        if result["exists"]:
            print(f"  ✓ Found: {filepath.name}")
            print(f"    Rows: {result['rows']:,}")
            print(f"    Columns: {result['columns']}")

            if result["valid"]:
                print(f"  ✓ Identity columns present")
            else:
                print(f"  ✗ Missing identity columns: {result['missing_required']}")
                all_valid = False

            if source == "skills":
                print(f"    People: {', '.join(result['value_columns']) or '(none)'}")
            elif source == "criteria":
                print(f"    Roles: {', '.join(result['value_columns']) or '(none)'}")
        else:
            print(f"  ✗ Not found: {filepath.name}")
            all_valid = False

        for err in result["errors"]:
            print(f"  ✗ Error: {err}")
            all_valid = False

        print()

    if all_valid:
        try:
            report = load_report_from_dir(app_config=app_config)
            print(f"Report: {len(report.profiles)} member(s), "
                  f"{len(report.skills)} skill(s), {len(report.criteria)} criteria row(s)")
            unmatched = sorted({
                skill.category for skill in report.skills
            } - {row.category for row in report.criteria})
            if unmatched:
                print(f"  ⚠ Categories with no criteria (expected = 0): {unmatched}")
        except SourceLoadFailure as e:
            logger.error("Full load failed: %s", e)
            all_valid = False
        print()

    print("=" * 60)
    if all_valid:
        print("✓ All validations passed")
        sys.exit(0)
    else:
        print("✗ Validation failed - see errors above")
        sys.exit(1)


if __name__ == "__main__":
    main()
