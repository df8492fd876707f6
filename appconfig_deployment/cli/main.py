#!/usr/bin/env python3
"""
AppConfig Deployment CLI

Main command-line interface for declarative AWS AppConfig deployments.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..config.constants import DEFAULT_CONFIG_FILE, DEFAULT_TIMEOUT
from ..deployment import DeployOutcome, InitOptions, WaitMode
from ..discovery import format_human_readable, format_json
from ..error_handling import DeploymentSystemError, ErrorReporter, format_user_error
from ..ui.display import format_deployment_status, format_diff_header, format_diff_summary
from .commands import AppConfigDeploymentCLI

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appconfig-deploy",
        description="Declarative deployments for AWS AppConfig",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_FILE,
        help=f"Config file path (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument("--region", help="AWS region (overrides config file)")
    parser.add_argument(
        "--silent", "-s", action="store_true", help="Suppress progress output"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Init command
    init_parser = subparsers.add_parser(
        "init", help="Create a config file from existing AppConfig resources"
    )
    init_parser.add_argument("--app", help="Application name")
    init_parser.add_argument("--profile", help="Configuration profile name")
    init_parser.add_argument("--env", help="Environment name")
    init_parser.add_argument(
        "--output-data", help="Data file name (default: derived from content type)"
    )
    init_parser.add_argument(
        "--force", action="store_true", help="Overwrite existing files"
    )

    # Diff command
    diff_parser = subparsers.add_parser(
        "diff", help="Show differences between local and deployed configuration"
    )
    diff_parser.add_argument(
        "--exit-nonzero",
        action="store_true",
        help="Exit with status 1 when differences are found",
    )

    # Run command
    run_parser = subparsers.add_parser("run", help="Deploy the local configuration")
    wait_group = run_parser.add_mutually_exclusive_group()
    wait_group.add_argument(
        "--wait-deploy",
        action="store_true",
        help="Wait until the rollout finishes (BAKING or COMPLETE)",
    )
    wait_group.add_argument(
        "--wait-bake",
        action="store_true",
        help="Wait until the deployment is COMPLETE",
    )
    run_parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT,
        help=f"Wait timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    run_parser.add_argument(
        "--force",
        action="store_true",
        help="Deploy even when the content has not changed",
    )

    # Status command
    status_parser = subparsers.add_parser("status", help="Show deployment status")
    status_parser.add_argument(
        "--deployment",
        type=int,
        metavar="N",
        help="Deployment number (default: latest)",
    )

    # Get command
    get_parser = subparsers.add_parser(
        "get", help="Print the configuration currently served to applications"
    )
    get_parser.add_argument(
        "--yes", "-y", action="store_true", help="Skip the confirmation prompt"
    )

    subparsers.add_parser(
        "pull", help="Update the local data file with the deployed configuration"
    )

    # Rollback command
    rollback_parser = subparsers.add_parser(
        "rollback", help="Stop the ongoing deployment"
    )
    rollback_parser.add_argument(
        "--yes", "-y", action="store_true", help="Skip the confirmation prompt"
    )

    # List resources command
    ls_parser = subparsers.add_parser(
        "ls-resources", help="List AppConfig resources in the region"
    )
    ls_parser.add_argument("--json", action="store_true", help="Output as JSON")
    ls_parser.add_argument(
        "--show-strategies",
        action="store_true",
        help="Include deployment strategies",
    )

    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def main(argv: Optional[List[str]] = None, cli: Optional[AppConfigDeploymentCLI] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose)

    if cli is None:
        cli = AppConfigDeploymentCLI(
            config_file=args.config, region=args.region, silent=args.silent
        )

    try:
        return execute_command(cli, args)
    except DeploymentSystemError as e:
        ErrorReporter(include_traceback=args.verbose).report_error(
            e, operation=args.command
        )
        print(format_user_error(e), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 1


def execute_command(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute the appropriate command based on arguments."""
    if args.command == "init":
        return cmd_init(cli, args)
    elif args.command == "diff":
        return cmd_diff(cli, args)
    elif args.command == "run":
        return cmd_run(cli, args)
    elif args.command == "status":
        return cmd_status(cli, args)
    elif args.command == "get":
        return cmd_get(cli, args)
    elif args.command == "pull":
        return cmd_pull(cli, args)
    elif args.command == "rollback":
        return cmd_rollback(cli, args)
    elif args.command == "ls-resources":
        return cmd_ls_resources(cli, args)
    else:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1


def cmd_init(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute init command."""
    options = InitOptions(
        application=args.app,
        configuration_profile=args.profile,
        environment=args.env,
        region=args.region,
        config_file=args.config,
        output_data=args.output_data,
        force=args.force,
    )
    result = cli.init(options)

    print(f"Created {result.config_file}")
    if result.data_path is not None:
        print(f"Created {result.data_path} (version {result.version_number})")
    print("")
    print("Next steps:")
    print("  1. Edit the data file")
    print("  2. Run 'appconfig-deploy diff' to preview changes")
    print("  3. Run 'appconfig-deploy run' to deploy")
    return 0


def cmd_diff(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute diff command."""
    result, deployment = cli.diff()
    config = cli.config

    print(
        format_diff_header(
            config.application,
            config.configuration_profile,
            config.environment,
            config.data_file,
            deployment,
        )
    )
    if result.has_changes:
        sys.stdout.write(result.unified_diff)
        print("")
    print(format_diff_summary(result))

    if args.exit_nonzero and result.has_changes:
        return 1
    return 0


def cmd_run(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute run command."""
    wait_mode = WaitMode.NONE
    if args.wait_deploy:
        wait_mode = WaitMode.DEPLOY
    elif args.wait_bake:
        wait_mode = WaitMode.BAKE

    result = cli.run(wait_mode=wait_mode, timeout=args.timeout, force=args.force)

    if result.outcome is DeployOutcome.SKIPPED:
        print("No changes to deploy")
        return 0

    print(
        f"✓ Deployment #{result.deployment_number} started "
        f"(version {result.version_number})"
    )
    if result.outcome is DeployOutcome.COMPLETED:
        print(f"✓ Deployment #{result.deployment_number} reached {result.final_state}")
    else:
        print("  Run 'appconfig-deploy status' to check progress")
    return 0


def cmd_status(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute status command."""
    print(cli.status(args.deployment))
    return 0


def cmd_get(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute get command."""
    version = cli.get(skip_confirmation=args.yes)
    # Raw bytes: deployed content need not be UTF-8
    sys.stdout.flush()
    sys.stdout.buffer.write(version.content)
    if version.content and not version.content.endswith(b"\n"):
        sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()
    return 0


def cmd_pull(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute pull command."""
    result = cli.pull()
    if not result.updated:
        print(f"✓ {result.data_file} is up to date (deployment #{result.deployment_number})")
    else:
        print(
            f"✓ Updated {result.data_file} from deployment #{result.deployment_number} "
            f"(version {result.version_number})"
        )
    return 0


def cmd_rollback(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute rollback command."""
    config = cli.config

    def show_details(deployment):
        print(
            format_deployment_status(
                deployment,
                config.application,
                config.configuration_profile,
                config.environment,
            ),
            file=sys.stderr,
        )

    deployment = cli.rollback(
        skip_confirmation=args.yes,
        show_details=None if args.silent else show_details,
    )
    print(f"✓ Deployment #{deployment.number} stopped and rolled back")
    return 0


def cmd_ls_resources(cli: AppConfigDeploymentCLI, args) -> int:
    """Execute ls-resources command."""
    tree = cli.list_resources()
    if args.json:
        sys.stdout.write(format_json(tree, args.show_strategies))
    else:
        sys.stdout.write(format_human_readable(tree, args.show_strategies))
    return 0


if __name__ == "__main__":
    sys.exit(main())
