"""Command-line interface for DataLoom."""

import argparse
import json
import logging
import sys

from dataloom import __version__
from dataloom.config import get_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dataloom",
        description="Profile a CSV/Excel file and compare a numeric column across groups",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="CSV or Excel file to profile",
    )
    parser.add_argument(
        "--numeric",
        metavar="COLUMN",
        help="Numeric column to compare across groups",
    )
    parser.add_argument(
        "--group",
        metavar="COLUMN",
        help="Categorical column defining the groups",
    )
    parser.add_argument(
        "--groups",
        nargs="+",
        metavar="LABEL",
        help="Only compare these groups (the t-test uses the first two)",
    )
    parser.add_argument(
        "--welch",
        action="store_true",
        help="Use Welch's unequal-variance t-test",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print JSON instead of text",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start the API server",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="API server host (default: DATALOOM_API_HOST or 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="API server port (default: DATALOOM_API_PORT or 8000)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        try:
            import uvicorn

            from dataloom.api.app import app

            uvicorn.run(
                app,
                host=args.host or settings.api_host,
                port=args.port or settings.api_port,
            )
        except ImportError as e:
            print(f"Error: {e}. Make sure uvicorn is installed.", file=sys.stderr)
            return 1
        return 0

    if not args.file:
        parser.print_help()
        return 0

    if bool(args.numeric) != bool(args.group):
        parser.error("--numeric and --group must be given together")

    from dataloom.analysis import analyze_columns
    from dataloom.core.loader import load_dataset

    try:
        dataset = load_dataset(args.file, preview_rows=settings.preview_rows)

        if args.numeric:
            report = analyze_columns(
                dataset.rows,
                args.numeric,
                args.group,
                groups_to_compare=args.groups,
                columns=dataset.columns,
                equal_var=settings.ttest_equal_var and not args.welch,
                alpha=settings.significance_level,
            )
            output = (
                json.dumps(report.to_dict(), indent=2)
                if args.json
                else report.format_for_display()
            )
        else:
            output = (
                json.dumps(dataset.profile.to_dict(), indent=2)
                if args.json
                else dataset.profile.format_for_display()
            )
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
