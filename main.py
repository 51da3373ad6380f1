import argparse
import json
import os
import sys
from typing import Any

from claimfill.config import configure_logging, load_settings
from claimfill.mapping import MappingInputError, build_mapping_report
from claimfill.utils.doc_filler import fill_word_document
from claimfill.utils.template_utils import extract_placeholders


def load_raw_values(path: str) -> Any:
    """Reads either {"key": "value", ...} or [{"key": ..., "value": ...}, ...]."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Resolve [placeholders] in a Word template from stored field values.")
    parser.add_argument("--values", required=True, help="Path to a JSON file of raw field values")
    parser.add_argument("--template", required=True, help="Path to the Word template")
    parser.add_argument("--output", required=True, help="Path to save the populated Word document")
    parser.add_argument("--report", help="Optional path to write the mapping report as JSON")
    parser.add_argument("--log-level", default=None, help="Logging level (default from CLAIMFILL_LOG_LEVEL)")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    # --- Input Validation ---
    if not os.path.exists(args.values):
        print(f"Error: Values file not found at {args.values}")
        return 1
    if not os.path.exists(args.template):
        print(f"Error: Template file not found at {args.template}")
        return 1

    output_dir = os.path.dirname(args.output)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    # --- Processing Steps ---
    try:
        raw_values = load_raw_values(args.values)
    except json.JSONDecodeError as e:
        print(f"Error: {args.values} is not valid JSON: {e}")
        return 1

    placeholders = extract_placeholders(args.template)
    if not placeholders:
        print(f"Warning: No [placeholders] found in {args.template}")

    try:
        report = build_mapping_report(raw_values, placeholders, settings)
    except MappingInputError as e:
        print(f"Error: {e}")
        return 1

    fill_word_document(args.template, report.values, args.output)
    print(f"Filled {report.populated_count} of {len(report.values)} placeholders -> {args.output}")

    unresolved = report.unresolved_placeholders()
    if unresolved:
        print("Left blank (no usable value): " + ", ".join(unresolved))

    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            f.write(report.model_dump_json(indent=2))
        print(f"Mapping report written to {args.report}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
