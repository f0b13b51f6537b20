"""neocities-sync - Publish a static site to Neocities, uploading only what changed."""

import argparse
import sys
from pathlib import Path

from catalog import SiteCatalog
from config import API_KEY_ENV, Config
from errors import NeocitiesError
from gateway import NeocitiesClient
from logging_setup import get_logger, setup_logging, write_progress
from uploader import collect_local_files, get_files_to_upload, get_remote_orphans, publish_site

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_NO_CREDENTIALS = 2

# command -> (min args, max args); None means unbounded
COMMAND_ARITY = {
    "info": (0, 1),
    "list": (0, 1),
    "key": (0, 0),
    "upload": (2, 2),
    "delete": (1, None),
    "push": (0, 0),
    "status": (0, 0),
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Publish a static site to Neocities, uploading only changed files",
    )
    parser.add_argument(
        "command",
        choices=sorted(COMMAND_ARITY),
        help="info [SITENAME] | list [PATH] | key | upload LOCAL REMOTE | "
             "delete PATH... | push | status",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Command arguments",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config file (default: neocities.toml)",
    )
    parser.add_argument(
        "-d", "--site-dir",
        type=str,
        default=None,
        help="Override local site directory from config",
    )
    parser.add_argument(
        "-k", "--api-key",
        type=str,
        default=None,
        help=f"API key (default: from config or ${API_KEY_ENV})",
    )
    parser.add_argument(
        "-b", "--batch-size",
        type=int,
        default=None,
        help="Number of files per upload request",
    )
    parser.add_argument(
        "--prune",
        action="store_true",
        default=False,
        help="push: delete remote files that don't exist locally",
    )
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        default=False,
        help="push: show what would change without uploading",
    )
    parser.add_argument(
        "-f", "--force",
        action="store_true",
        default=False,
        help="upload: send the file even if the remote copy is identical",
    )

    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only warnings and errors)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to file (always DEBUG level)",
    )

    args = parser.parse_intermixed_args()

    low, high = COMMAND_ARITY[args.command]
    count = len(args.args)
    if count < low or (high is not None and count > high):
        parser.error(f"wrong number of arguments for {args.command!r}")

    return args


def progress_bar(label: str, completed: int, total: int) -> None:
    percent = completed / total
    bar_width = 40
    filled = int(bar_width * percent)
    bar = "█" * filled + "░" * (bar_width - filled)
    write_progress(f"{label}: [{bar}] {completed}/{total}")


def cmd_info(args: argparse.Namespace, config: Config, client: NeocitiesClient) -> int:
    if args.args:
        print(client.info_no_auth(args.args[0]))
    else:
        print(client.info())
    return EXIT_SUCCESS


def cmd_list(args: argparse.Namespace, config: Config, client: NeocitiesClient) -> int:
    if args.args:
        print(client.list_path(args.args[0]))
    else:
        print(client.list_all())
    return EXIT_SUCCESS


def cmd_key(args: argparse.Namespace, config: Config, client: NeocitiesClient) -> int:
    print(client.get_key())
    return EXIT_SUCCESS


def cmd_upload(args: argparse.Namespace, config: Config, client: NeocitiesClient) -> int:
    logger = get_logger()
    local_path, remote_path = args.args
    remote_path = "/" + remote_path.lstrip("/")

    if not args.force:
        catalog = SiteCatalog.load(client)
        if not catalog.file_changed_local(local_path, remote_path):
            logger.info("%s is already up to date", remote_path)
            return EXIT_SUCCESS

    client.upload(local_path, remote_path.lstrip("/"))
    logger.info("Uploaded %s -> %s", local_path, remote_path)
    return EXIT_SUCCESS


def cmd_delete(args: argparse.Namespace, config: Config, client: NeocitiesClient) -> int:
    paths = [p.lstrip("/") for p in args.args]
    client.delete_multiple(paths)
    get_logger().info("Deleted %d path(s)", len(paths))
    return EXIT_SUCCESS


def cmd_status(args: argparse.Namespace, config: Config, client: NeocitiesClient) -> int:
    logger = get_logger()
    catalog = SiteCatalog.load(client)
    local_files = collect_local_files(config.site_dir)
    changed = get_files_to_upload(catalog, local_files)

    for _, remote_path in changed:
        marker = "M" if catalog.file_exists(remote_path) else "A"
        print(f"{marker} {remote_path}")
    for remote_path in get_remote_orphans(catalog, local_files):
        print(f"R {remote_path}")

    logger.info("%d of %d local files differ from the site", len(changed), len(local_files))
    return EXIT_SUCCESS


def cmd_push(args: argparse.Namespace, config: Config, client: NeocitiesClient) -> int:
    logger = get_logger()

    if not config.site_dir.is_dir():
        logger.error("Site directory not found: %s", config.site_dir)
        return EXIT_FAILURE

    logger.info("Site directory: %s", config.site_dir)
    logger.debug("Fetching site listing...")
    catalog = SiteCatalog.load(client)
    logger.info("Found %d entries on the site", len(catalog))

    def on_verify_start(total: int) -> None:
        logger.debug("Comparing %d local files...", total)

    def on_verify_progress(completed: int, total: int) -> None:
        progress_bar("Comparing", completed, total)

    def on_verify_complete(to_upload: int) -> None:
        print()  # Newline after progress bar
        logger.info("Found %d files to upload", to_upload)

    result = publish_site(
        client,
        catalog,
        config.site_dir,
        batch_size=config.batch_size,
        prune=args.prune,
        dry_run=args.dry_run,
        on_verify_start=on_verify_start,
        on_verify_progress=on_verify_progress,
        on_verify_complete=on_verify_complete,
    )

    logger.info("")
    logger.info("=" * 50)
    logger.info("Publish Summary%s", " (dry run)" if result.dry_run else "")
    logger.info("=" * 50)
    logger.info("Local files: %d", result.total_files)
    logger.info("Unchanged: %d", result.skipped_files)
    logger.info("Uploaded: %d", result.uploaded_files)
    if args.prune:
        logger.info("Deleted: %d", result.deleted_files)

    return EXIT_SUCCESS


COMMANDS = {
    "info": cmd_info,
    "list": cmd_list,
    "key": cmd_key,
    "upload": cmd_upload,
    "delete": cmd_delete,
    "push": cmd_push,
    "status": cmd_status,
}


def main() -> int:
    args = parse_args()

    verbosity = 1 if args.verbose else (-1 if args.quiet else 0)
    setup_logging(verbosity=verbosity, log_file=args.log_file)
    logger = get_logger()

    logger.debug("Loading configuration...")
    try:
        config = Config.load(
            config_path=args.config,
            site_dir_override=args.site_dir,
            api_key_override=args.api_key,
            batch_size_override=args.batch_size,
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_FAILURE

    anonymous = args.command == "info" and bool(args.args)
    if not anonymous and not config.has_credentials:
        logger.error(
            "No credentials: set api_key or username/password in the config file, "
            "pass --api-key, or export %s",
            API_KEY_ENV,
        )
        return EXIT_NO_CREDENTIALS

    client = config.make_client()
    try:
        return COMMANDS[args.command](args, config, client)
    except NeocitiesError as e:
        logger.error("Error: %s", e)
        return EXIT_FAILURE
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
