"""
Scheduler provider CLI: setup, list, sweep.
Run `scheduler-provider setup` once; then `scheduler-provider list` or `scheduler-provider sweep`.
"""

import logging
import os
import sys

from botocore.exceptions import BotoCoreError, ClientError

from scheduler_provider import naming
from scheduler_provider.config import ProviderConfig, default_config_path, load_provider_config, save_provider_config
from scheduler_provider.conns import AWSClient
from scheduler_provider.scheduler.sweep import SweepError, list_schedule_groups, sweep_schedule_groups


def _check_aws_credentials(config: ProviderConfig) -> bool:
    try:
        AWSClient(config).account_id
        return True
    except (BotoCoreError, ClientError):
        return False


# --- setup ---


def _cmd_setup() -> None:
    print("First-time setup. You will need:")
    print("  1) AWS credentials (e.g. run: aws sso login)")
    print("  2) Default AWS region (e.g. us-west-2)")
    print()

    region = os.environ.get("AWS_REGION", "").strip()
    if not region:
        region = input("Default AWS region (e.g. us-west-2): ").strip()
    if not region:
        print("Region is required.", file=sys.stderr)
        sys.exit(1)

    config = ProviderConfig(
        region=region,
        profile=os.environ.get("AWS_PROFILE") or None,
        endpoint_url=os.environ.get("AWS_ENDPOINT_URL") or None,
    )
    if not _check_aws_credentials(config):
        print("AWS credentials not found. Log in (e.g. aws sso login) and try again.", file=sys.stderr)
        sys.exit(1)
    print("AWS credentials OK.")

    path = save_provider_config(config, default_config_path())
    print(f"Configuration saved to {path}")
    print("Setup complete. You can now use: scheduler-provider list, scheduler-provider sweep")


# --- list ---


def _cmd_list(name_prefix: str | None) -> None:
    config = load_provider_config()
    client = AWSClient(config).scheduler
    groups = list_schedule_groups(client, name_prefix=name_prefix)
    if not groups:
        print("No schedule groups found.")
        return
    for group in sorted(groups, key=lambda g: g["Name"]):
        print(f"{group['Name']}  {group.get('State', '?')}  {group.get('Arn', '')}")


# --- sweep ---


def _cmd_sweep(prefix: str, yes: bool) -> None:
    config = load_provider_config()
    if not yes:
        confirm = input(
            f"This will delete every schedule group named '{prefix}*' in {config.region}. Continue? [y/N]: "
        )
        if confirm.strip().lower() != "y":
            print("Cancelled.")
            sys.exit(0)
    try:
        swept = sweep_schedule_groups(config, prefix=prefix)
    except SweepError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    print(f"Swept {len(swept)} schedule group(s).")
    for name in swept:
        print(f"  {name}")


def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(
        description=(
            "Manage EventBridge Scheduler schedule groups (setup, list, sweep). "
            "Run 'scheduler-provider setup' first."
        )
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log API activity")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("setup", help="One-time setup: AWS credentials and region")
    list_p = sub.add_parser("list", help="List schedule groups")
    list_p.add_argument("--prefix", default=None, help="Only groups whose name starts with this prefix")
    sweep_p = sub.add_parser("sweep", help="Delete schedule groups left behind by acceptance tests")
    sweep_p.add_argument("--prefix", default=naming.ACC_TEST_RESOURCE_PREFIX, help="Name prefix to sweep")
    sweep_p.add_argument("-y", "--yes", action="store_true", help="Don't ask for confirmation")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "setup":
        _cmd_setup()
    elif args.command == "list":
        _cmd_list(args.prefix)
    elif args.command == "sweep":
        _cmd_sweep(args.prefix, args.yes)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
