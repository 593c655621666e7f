"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service,
or runs one maintenance command against the configured database.
"""

import argparse

import uvicorn

from app.bootstrap import bootstrap_create_application, bootstrap_create_runtime
from app.config import config_configure_logging, config_load_database_url, config_load_settings
from app.db import db_migrate_to_head


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="QuickBooks Web Connector webhook adapter")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "migrate", "enqueue-sync", "clear-queue"),
        help="Runtime command: `api` starts server, `migrate` upgrades the schema, "
        "`enqueue-sync` queues a bulk query for --kind, `clear-queue` drops pending requests",
        type=str,
    )
    argument_parser.add_argument(
        "--kind",
        dest="kind",
        type=str,
        help="Entity kind or archive area for `enqueue-sync`",
    )
    parsed_arguments = argument_parser.parse_args()

    if parsed_arguments.command == "migrate":
        config_configure_logging("INFO")
        db_migrate_to_head(config_load_database_url())
        return

    if parsed_arguments.command == "enqueue-sync":
        if not parsed_arguments.kind:
            argument_parser.error("--kind is required for enqueue-sync")
        runtime = bootstrap_create_runtime()
        queue_size = runtime.enqueue_service.job_enqueue_default_sync(parsed_arguments.kind)
        print(f"queued {parsed_arguments.kind} sync, queue size {queue_size}")
        return

    if parsed_arguments.command == "clear-queue":
        runtime = bootstrap_create_runtime()
        removed_count = runtime.enqueue_service.job_queue_clear()
        print(f"removed {removed_count} queued requests")
        return

    settings = config_load_settings()
    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
