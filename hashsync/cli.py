"""CLI interface for hashsync."""

import logging
from typing import Any, Optional

import click

from .config import SyncOptions, config
from .exceptions import HashSyncError
from .output import OutputFormatter
from .storage import S3Storage
from .sync import SyncEngine
from .utils import MAX_WORKERS

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Configure logging based on the verbose flag."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("hashsync").setLevel(logging.DEBUG)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)
        for name in ("boto3", "botocore", "s3transfer", "urllib3"):
            logging.getLogger(name).setLevel(logging.WARNING)


@click.command()
@click.argument("root", type=str)
@click.argument("bucket", type=str)
@click.option(
    "--delete", "-d", is_flag=True, help="Delete objects not found in the root folder"
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Perform a dry run (only lists the bucket) and print what would be done",
)
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Force upload of all files regardless of change status",
)
@click.option("--prefix", type=str, default=None, help="Key prefix in the bucket")
@click.option(
    "--delimiter", type=str, default=None, help="Delimiter for listing the bucket"
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(1, MAX_WORKERS),
    default=None,
    help="Number of parallel uploads (default: 1, or HASHSYNC_WORKERS)",
)
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile to use")
@click.option("--region", help="AWS region of the bucket")
@click.option(
    "--endpoint-url",
    envvar="HASHSYNC_ENDPOINT_URL",
    help="Custom endpoint for S3-compatible storage",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output statistics in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="hashsync")
@click.pass_context
def main(
    ctx: Any,
    root: str,
    bucket: str,
    delete: bool,
    dry_run: bool,
    force: bool,
    prefix: Optional[str],
    delimiter: Optional[str],
    workers: Optional[int],
    profile: Optional[str],
    region: Optional[str],
    endpoint_url: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """Sync a local directory to an S3 bucket by comparing file content hashes.

    ROOT: Local folder to sync (absolute or relative to the current directory)

    BUCKET: Name of the bucket to sync into

    Only files whose MD5 hash differs from the object's ETag (or that are
    missing from the bucket) are uploaded.

    Examples:
        hashsync ./public my-site-bucket
        hashsync ./public my-site-bucket --prefix www/ --delete
        hashsync ./public my-site-bucket --dry-run -d
        hashsync ./public my-site-bucket --force -w 8
    """
    configure_logging(verbose)
    out = OutputFormatter(json_output=json, quiet=quiet)

    options = SyncOptions(
        root=root,
        bucket=bucket,
        prefix=prefix,
        delimiter=delimiter,
        delete=delete,
        dry_run=dry_run,
        force=force,
    )

    try:
        max_workers = workers if workers is not None else config.workers
        storage = S3Storage.from_config(
            config, profile=profile, region=region, endpoint_url=endpoint_url
        )
        engine = SyncEngine(storage, out, max_workers=max_workers)
        stats = engine.sync(options)

        if out.json_output:
            out.output_json(stats)

    except KeyboardInterrupt:
        out.warning("Sync cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT
    except HashSyncError as e:
        out.error(str(e))
        ctx.exit(1)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        out.error(str(e))
        ctx.exit(1)


if __name__ == "__main__":
    main()
