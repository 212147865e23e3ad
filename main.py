"""
Entry point for the Felix to Ghost migration tool.
"""

import argparse

from felix_migrator.migration_tool import FelixMigrationTool
from felix_migrator.utils.pre_flight_checks import PreFlightCheckError, run_source_pre_flight_checks

CONFIG_FILE = "config/migration_config.json"


def main():
    """
    Main function to run the Felix to Ghost migration tool.
    """
    parser = argparse.ArgumentParser(description="Export Felix articles to a Ghost import file.")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to the JSON configuration file")
    parser.add_argument("--output", default=None, help="Override the export path from the configuration")
    parser.add_argument("--limit", type=int, default=None, help="Only export the first N articles")
    args = parser.parse_args()

    tool = FelixMigrationTool(config_file=args.config)
    if args.output:
        tool.config["migration"]["output"] = args.output
    if args.limit is not None:
        tool.config["migration"]["limit"] = args.limit

    tool.log_message("Starting Felix to Ghost migration.")
    tool.log_message(f"Source database: {tool.config['source']['database']}", level="DEBUG")

    try:
        run_source_pre_flight_checks(tool.source.con)
    except PreFlightCheckError as e:
        tool.log_message(str(e), level="ERROR")
        return 1

    result = tool.process_all()
    out_path = result.export.write(tool.config["migration"]["output"])
    tool.log_message(f"Ghost import file written to {out_path}")

    if result.failures:
        tool.log_message(
            f"{len(result.failures)} articles were not exported; see {tool.config['migration']['report_dir']}/errors.jsonl",
            level="WARNING",
        )

    tool.log_message("Migration process finished.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
