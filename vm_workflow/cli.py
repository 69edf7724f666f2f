"""
VM Workflow - Command Line Interface

Follows gcloud conventions for flags and output formats.

Usage:
    vm-workflow walkthrough --zone=<zone> [--keep-resources] [--dry-run]
    vm-workflow list --group=<group> --zone=<zone>
    vm-workflow cleanup --group=<group> --zone=<zone>
"""

import argparse
import json
import subprocess
import sys
import traceback
from typing import Any, Dict, List, Optional

import yaml

from vm_workflow.core.config import VERSION, WorkflowConfig, load_config
from vm_workflow.core.exceptions import VMWorkflowError
from vm_workflow.main import cleanup_group, list_group, run_walkthrough

FORMATS = ['json', 'yaml', 'table', 'csv', 'disable']

VERBOSITY_LEVELS = {
    'debug': 'DEBUG',
    'info': 'INFO',
    'warning': 'WARNING',
    'error': 'ERROR',
    'critical': 'CRITICAL'
}


class OutputFormatter:
    """
    Handle output formatting similar to gcloud.

    Supports: json, yaml, table, csv
    """

    @staticmethod
    def format_output(data: Dict[str, Any], format_type: str = 'table'):
        """Format a single record."""
        if format_type == 'json':
            return json.dumps(data, indent=2)
        elif format_type == 'yaml':
            return yaml.dump(data, default_flow_style=False, sort_keys=False)
        elif format_type == 'table':
            return OutputFormatter._format_table(data)
        elif format_type == 'csv':
            return OutputFormatter._format_csv([data])
        else:
            return str(data)

    @staticmethod
    def format_rows(rows: List[Dict[str, Any]], format_type: str = 'table'):
        """Format a list of records with the same keys."""
        if format_type == 'json':
            return json.dumps(rows, indent=2)
        elif format_type == 'yaml':
            return yaml.dump(rows, default_flow_style=False, sort_keys=False)
        elif format_type == 'csv':
            return OutputFormatter._format_csv(rows)
        elif format_type == 'table':
            if not rows:
                return "Listed 0 items."
            keys = list(rows[0].keys())
            widths = [max(len(k), *(len(str(r.get(k, ''))) for r in rows)) for k in keys]
            lines = ["  ".join(k.upper().ljust(w) for k, w in zip(keys, widths))]
            for row in rows:
                lines.append("  ".join(str(row.get(k, '')).ljust(w) for k, w in zip(keys, widths)))
            return "\n".join(lines)
        else:
            return str(rows)

    @staticmethod
    def _format_table(data: Dict[str, Any]) -> str:
        lines = []
        lines.append("┌─" + "─" * 50 + "─┐")
        for key, value in data.items():
            lines.append(f"│ {key:20} │ {str(value):27} │")
        lines.append("└─" + "─" * 50 + "─┘")
        return "\n".join(lines)

    @staticmethod
    def _format_csv(rows: List[Dict[str, Any]]) -> str:
        if not rows:
            return ""
        keys = list(rows[0].keys())
        lines = [",".join(keys)]
        for row in rows:
            lines.append(",".join(str(row.get(k, '')) for k in keys))
        return "\n".join(lines)


def get_gcloud_config(key: str) -> Optional[str]:
    """
    Read configuration from gcloud config.

    Args:
        key: Config key (e.g., 'core/project', 'compute/zone')

    Returns:
        Config value or None
    """
    try:
        result = subprocess.run(
            ['gcloud', 'config', 'get-value', key],
            capture_output=True,
            text=True,
            timeout=5
        )
        value = result.stdout.strip()
        return value if value and value != '(unset)' else None
    except (subprocess.SubprocessError, FileNotFoundError):
        # gcloud not installed or not responding
        return None


def create_parser() -> argparse.ArgumentParser:
    """
    Create argument parser with gcloud-style structure.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='vm-workflow',
        description='Provision, exercise and tear down Compute Engine VMs with automatic rollback',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
    To run the walkthrough and delete everything afterwards:
        $ vm-workflow walkthrough --zone=us-central1-a

    To see what the walkthrough would do:
        $ vm-workflow walkthrough --zone=us-central1-a --dry-run

    To keep the resources and remove them later:
        $ vm-workflow walkthrough --zone=us-central1-a --keep-resources
        $ vm-workflow cleanup --group=vmwf-rg-k3x9q0ab --zone=us-central1-a
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'vm-workflow v{VERSION}'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Available commands'
    )

    # WALKTHROUGH COMMAND
    walkthrough_parser = subparsers.add_parser(
        'walkthrough',
        help='Run the VM management walkthrough',
        description='Create a resource group, disks and a VM, exercise them, then tear everything down.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
    To run with a deadline of 30 minutes:
        $ vm-workflow walkthrough --zone=us-central1-a --deadline=1800

    To read settings from a file:
        $ vm-workflow walkthrough --config=workflow.yaml

NOTES
    Any failure rolls back every resource created so far, newest first.
    --no-rollback leaves them in place for inspection.
        """
    )
    _add_location_args(walkthrough_parser, zone_required=False)
    _add_output_args(walkthrough_parser)
    _add_walkthrough_args(walkthrough_parser)

    # LIST COMMAND
    list_parser = subparsers.add_parser(
        'list',
        help='List the resources of a group',
        description='List the disks and VMs carrying a resource group label.'
    )
    _add_group_arg(list_parser)
    _add_location_args(list_parser, zone_required=True)
    _add_output_args(list_parser)

    # CLEANUP COMMAND
    cleanup_parser = subparsers.add_parser(
        'cleanup',
        help='Delete a resource group and everything in it',
        description='Delete every VM, then every disk, carrying a resource group label.'
    )
    _add_group_arg(cleanup_parser)
    _add_location_args(cleanup_parser, zone_required=True)
    _add_output_args(cleanup_parser)

    return parser


def _add_group_arg(parser: argparse.ArgumentParser):
    required = parser.add_argument_group('REQUIRED FLAGS')
    required.add_argument(
        '--group',
        metavar='GROUP',
        required=True,
        help='Name of the resource group.'
    )


def _add_location_args(parser: argparse.ArgumentParser, zone_required: bool):
    """Add location flags (gcloud style)."""
    location = parser.add_argument_group('LOCATION FLAGS')
    location.add_argument(
        '--zone',
        metavar='ZONE',
        required=zone_required,
        help='Zone to work in. Example: us-central1-a'
    )
    location.add_argument(
        '--project',
        metavar='PROJECT',
        help='GCP project ID. Defaults to gcloud config project.'
    )


def _add_output_args(parser: argparse.ArgumentParser):
    """Add output and logging flags (gcloud style)."""
    output = parser.add_argument_group('OUTPUT FLAGS')
    output.add_argument(
        '--format',
        metavar='FORMAT',
        choices=FORMATS,
        default='table',
        help='Output format. One of: json, yaml, table, csv, disable. Default: table'
    )
    output.add_argument(
        '--verbosity',
        metavar='VERBOSITY',
        choices=list(VERBOSITY_LEVELS),
        default='info',
        help='Logging verbosity. One of: debug, info, warning, error, critical. Default: info'
    )
    output.add_argument(
        '--log-file',
        metavar='LOG_FILE',
        help='Write logs to this file.'
    )
    output.add_argument(
        '--quiet',
        action='store_true',
        help='Do not draw a progress bar.'
    )


def _add_walkthrough_args(parser: argparse.ArgumentParser):
    """Add walkthrough-specific flags."""
    workflow = parser.add_argument_group('WORKFLOW FLAGS')
    workflow.add_argument(
        '--config',
        metavar='FILE',
        help='YAML file with workflow settings. Flags override file values.'
    )
    workflow.add_argument(
        '--keep-resources',
        action='store_true',
        help='Keep the resources after a successful run instead of deleting them.'
    )
    workflow.add_argument(
        '--deadline',
        type=float,
        metavar='SECONDS',
        help='Abort and roll back if provisioning takes longer than this.'
    )

    other = parser.add_argument_group('OTHER FLAGS')
    other.add_argument(
        '--dry-run',
        action='store_true',
        help='Print what would be done without actually doing it.'
    )
    other.add_argument(
        '--no-rollback',
        action='store_true',
        help='Disable automatic rollback on failure. Not recommended.'
    )


def validate_args(args: argparse.Namespace) -> bool:
    """
    Validate flag values argparse cannot check by itself.

    Returns:
        True if valid, False after printing an error
    """
    deadline = getattr(args, 'deadline', None)
    if deadline is not None and deadline <= 0:
        print("ERROR: (vm-workflow) Invalid value:", file=sys.stderr)
        print("  --deadline must be greater than 0 seconds", file=sys.stderr)
        return False

    return True


def args_to_config(args: argparse.Namespace) -> WorkflowConfig:
    """
    Convert arguments to WorkflowConfig.

    Starts from --config (if given) and applies every flag that was set.

    Raises:
        ConfigError: If the config file cannot be loaded
    """
    config_file = getattr(args, 'config', None)
    config = load_config(config_file) if config_file else WorkflowConfig()

    if args.zone:
        config.zone = args.zone
    if args.project:
        config.project = args.project

    # The walkthrough tears down after itself unless told to keep resources
    if hasattr(args, 'keep_resources'):
        config.ephemeral = not args.keep_resources
    if getattr(args, 'deadline', None) is not None:
        config.deadline_seconds = args.deadline
    if getattr(args, 'dry_run', False):
        config.dry_run = True
    if getattr(args, 'no_rollback', False):
        config.auto_rollback = False

    config.log_level = VERBOSITY_LEVELS.get(args.verbosity, 'INFO')
    if args.log_file:
        config.log_file = args.log_file

    return config


def handle_walkthrough(args: argparse.Namespace) -> int:
    """Handle walkthrough command."""
    config = args_to_config(args)
    if not config.project and not config.dry_run:
        config.project = get_gcloud_config('core/project')

    result = run_walkthrough(
        config=config,
        debug=args.verbosity == 'debug',
        show_progress=not args.quiet
    )

    # table already printed by main
    if args.format not in ('disable', 'table'):
        data = result.to_dict()
        data['zone'] = config.zone
        data['project'] = config.project or 'default'
        print(OutputFormatter.format_output(data, args.format))

    return 0 if result.success else 1


def handle_list(args: argparse.Namespace) -> int:
    """Handle list command."""
    config = args_to_config(args)
    project = config.project or get_gcloud_config('core/project')

    handles = list_group(
        args.group,
        config.zone,
        project=project,
        config=config,
        debug=args.verbosity == 'debug'
    )
    if handles is None:
        return 1

    if args.format not in ('disable', 'table'):
        rows = [
            {'name': h.name, 'kind': h.kind.value, 'group': h.group, 'id': h.id}
            for h in handles
        ]
        print(OutputFormatter.format_rows(rows, args.format))

    return 0


def handle_cleanup(args: argparse.Namespace) -> int:
    """Handle cleanup command."""
    config = args_to_config(args)
    project = config.project or get_gcloud_config('core/project')

    success = cleanup_group(
        args.group,
        config.zone,
        project=project,
        config=config,
        debug=args.verbosity == 'debug'
    )

    if args.format not in ('disable', 'table'):
        result = {
            'group': args.group,
            'zone': config.zone,
            'project': project or 'default',
            'operation': 'cleanup',
            'success': success
        }
        print(OutputFormatter.format_output(result, args.format))

    return 0 if success else 1


HANDLERS = {
    'walkthrough': handle_walkthrough,
    'list': handle_list,
    'cleanup': handle_cleanup,
}


def main(argv: List[str] = None) -> int:
    """Main CLI entry point."""
    debug = False
    try:
        parser = create_parser()
        args = parser.parse_args(argv)
        debug = args.verbosity == 'debug'

        if not validate_args(args):
            return 1

        return HANDLERS[args.command](args)

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.", file=sys.stderr)
        return 130  # Standard exit code for SIGINT
    except VMWorkflowError as e:
        print(f"ERROR: (vm-workflow) {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"ERROR: (vm-workflow) Unexpected error: {str(e)}", file=sys.stderr)
        if debug:
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
