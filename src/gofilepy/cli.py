"""Command-line interface for the Gofile API."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from dotenv import load_dotenv
from tqdm import tqdm

from .client import GofileClient
from .config import ClientConfig
from .errors import GofileError

LOG_FORMAT = "[%(levelname)s] %(message)s"
logger = logging.getLogger("gofilepy")


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Return parsed CLI arguments."""

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-vv",
        "--verbose",
        action="store_true",
        help="Show detailed debug info.",
    )
    common.add_argument(
        "--json",
        action="store_true",
        help="Output result as JSON for scripts.",
    )
    common.add_argument("--token", default=None, help="API token (default: $GOFILE_TOKEN).")
    common.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds.")
    common.add_argument(
        "--retries", type=int, default=None, help="Retries for failed API calls."
    )

    parser = argparse.ArgumentParser(description="Gofile.io API client")
    commands = parser.add_subparsers(dest="command", required=True)

    upload = commands.add_parser("upload", parents=[common], help="Upload files.")
    upload.add_argument("files", nargs="+", help="Files to upload")
    upload.add_argument(
        "-f",
        "--folder-id",
        type=str,
        default=None,
        help="ID of an existing Gofile folder.",
    )
    target = upload.add_mutually_exclusive_group()
    target.add_argument("-s", "--server", default=None, help="Upload server name.")
    target.add_argument("-z", "--zone", default=None, help="Pick a server in this zone (eu, na).")

    servers = commands.add_parser("servers", parents=[common], help="List upload servers.")
    servers.add_argument("-z", "--zone", default=None, help="Only servers in this zone.")

    commands.add_parser("account", parents=[common], help="Show account information.")

    mkdir = commands.add_parser("mkdir", parents=[common], help="Create a folder.")
    mkdir.add_argument("parent_id", help="Parent folder ID.")
    mkdir.add_argument("name", nargs="?", default=None, help="Folder name.")

    update = commands.add_parser("update", parents=[common], help="Change a content attribute.")
    update.add_argument("content_id")
    update.add_argument(
        "attribute",
        choices=["name", "description", "tags", "public", "expiry", "password"],
    )
    update.add_argument(
        "value",
        help="New value: tags are comma separated, public is true/false, expiry is RFC3339.",
    )

    remove = commands.add_parser("rm", parents=[common], help="Delete files or folders.")
    remove.add_argument("content_ids", nargs="+")

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    """Configure logging for the CLI session."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
    httpx_logger = logging.getLogger("httpx")
    httpx_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _log_token_state(token: Optional[str], json_mode: bool) -> None:
    """Log whether a token was discovered for informational output."""

    if json_mode:
        return
    if token:
        masked_token = f"{token[:4]}..."
        logger.info("🔑 Token loaded: %s", masked_token)
    else:
        logger.warning(
            "⚠️ No GOFILE_TOKEN found in .env or environment. Requests will be unauthenticated."
        )


def _progress_callback_factory(progress_bar: Optional[tqdm]) -> Callable[[int, int], None]:
    """Return a callback that moves the progress bar to the reported total."""

    def update(done: int, total: int, active_bar: Optional[tqdm] = progress_bar) -> None:
        if active_bar:
            if active_bar.total != total:
                active_bar.total = total
            active_bar.update(done - active_bar.n)

    return update


def _create_progress_bar(filename: str, quiet: bool) -> Optional[tqdm]:
    """Create a tqdm progress bar unless JSON mode is requested."""

    if quiet:
        return None
    return tqdm(total=None, unit="B", unit_scale=True, desc=f"Uploading {filename}")


def _handle_upload_success(data: Dict[str, Any], filename: str) -> Dict[str, object]:
    """Normalize the success payload for presentation."""

    payload = data.get("data") if isinstance(data.get("data"), dict) else {}
    return {
        "file": filename,
        "status": "success",
        "downloadPage": payload.get("downloadPage"),
        "id": payload.get("id"),
        "parentFolder": payload.get("parentFolder"),
    }


def _handle_upload_error(filename: str, error: Exception) -> Dict[str, object]:
    """Normalize the error payload for presentation."""

    return {
        "file": filename,
        "status": "error",
        "message": str(error),
        "errorType": error.__class__.__name__,
    }


def upload_files(args: argparse.Namespace, client: GofileClient) -> List[Dict[str, object]]:
    """Upload each file sequentially and return the collected results."""

    results: List[Dict[str, object]] = []
    server = args.server or client.get_server(args.zone)
    logger.debug("Uploading to server: %s", server)

    for file_path in args.files:
        progress_bar = _create_progress_bar(file_path, args.json)
        progress_callback = _progress_callback_factory(progress_bar)

        try:
            result = client.upload_file(
                server,
                file_path,
                folder_id=args.folder_id,
                callback=progress_callback,
            )
            if result.ok:
                results.append(_handle_upload_success(result.raw, result.name or file_path))
            else:
                error = GofileError(f"Gofile API Error: {result.status}")
                results.append(_handle_upload_error(file_path, error))
        except GofileError as error:
            if logger.isEnabledFor(logging.DEBUG):
                logger.exception("Upload failed for %s", file_path)
            else:
                logger.error("Upload failed for %s: %s", file_path, error)
            results.append(_handle_upload_error(file_path, error))
        finally:
            if progress_bar:
                progress_bar.close()

    return results


def _parse_update_value(attribute: str, raw: str) -> Any:
    """Turn the textual CLI value into the type the attribute expects."""

    if attribute == "tags":
        return [tag.strip() for tag in raw.split(",") if tag.strip()]
    if attribute == "public":
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "1"):
            return True
        if lowered in ("false", "no", "0"):
            return False
        raise argparse.ArgumentTypeError(f"public must be true or false, got {raw!r}")
    return raw


def _response_result(name: str, response: Any) -> Dict[str, object]:
    return {
        "command": name,
        "status": "success" if response.ok else "error",
        "remoteStatus": response.status,
        "data": response.raw.get("data"),
    }


def run_command(args: argparse.Namespace, client: GofileClient) -> List[Dict[str, object]]:
    """Dispatch the selected subcommand."""

    if args.command == "upload":
        return upload_files(args, client)
    if args.command == "servers":
        return [_response_result("servers", client.get_servers(args.zone))]
    if args.command == "account":
        account = client.get_account_id()
        if not account.ok:
            return [_response_result("account", account)]
        return [_response_result("account", client.get_account_info(account.id))]
    if args.command == "mkdir":
        return [_response_result("mkdir", client.create_folder(args.parent_id, args.name))]
    if args.command == "update":
        value = _parse_update_value(args.attribute, args.value)
        response = client.update_content(args.content_id, args.attribute, value)
        return [_response_result("update", response)]
    if args.command == "rm":
        return [_response_result("rm", client.delete_content(*args.content_ids))]
    raise GofileError(f"Unknown command: {args.command}")


def output_results(results: List[Dict[str, object]], json_mode: bool) -> None:
    """Display results in either JSON or human readable form."""

    if json_mode:
        print(json.dumps(results, indent=2))
        return

    print("\n--- Summary ---")
    for result in results:
        label = result.get("file", result.get("command", "unknown"))
        if result["status"] == "success":
            detail = result.get("downloadPage") or json.dumps(result.get("data"))
            print(f"✅ {label} -> {detail}")
        else:
            message = result.get("message") or result.get("remoteStatus")
            print(f"❌ {label} -> {message}")
    successes = sum(1 for res in results if res["status"] == "success")
    failures = len(results) - successes
    logger.info("Summary: %s succeeded, %s failed", successes, failures)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entrypoint for the CLI."""

    load_dotenv()
    args = parse_arguments(argv)
    configure_logging(args.verbose)

    try:
        config = ClientConfig.from_env(args.token, retry_count=args.retries, timeout=args.timeout)
        _log_token_state(config.token, args.json)
        with GofileClient(config=config) as client:
            results = run_command(args, client)
    except (GofileError, argparse.ArgumentTypeError) as error:
        if logger.isEnabledFor(logging.DEBUG):
            logger.exception("%s failed", args.command)
        else:
            logger.error("%s failed: %s", args.command, error)
        results = [
            {
                "command": args.command,
                "status": "error",
                "message": str(error),
                "errorType": error.__class__.__name__,
            }
        ]

    output_results(results, args.json)
    if any(result["status"] != "success" for result in results):
        raise SystemExit(1)


if __name__ == "__main__":
    main()
