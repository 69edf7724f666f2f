"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest

from vm_workflow.cli import (
    OutputFormatter,
    args_to_config,
    create_parser,
    main,
    validate_args,
)
from vm_workflow.core.exceptions import ConfigError
from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.orchestration import WorkflowResult


@pytest.fixture
def parser():
    return create_parser()


class TestParser:
    """Tests for create_parser."""

    def test_walkthrough_defaults(self, parser):
        """The walkthrough needs no flags."""
        args = parser.parse_args(['walkthrough'])

        assert args.command == 'walkthrough'
        assert args.zone is None
        assert args.format == 'table'
        assert not args.keep_resources
        assert not args.dry_run

    def test_list_requires_group(self, parser):
        """list without --group is a usage error."""
        with pytest.raises(SystemExit):
            parser.parse_args(['list', '--zone', 'us-central1-a'])

    def test_cleanup_requires_zone(self, parser):
        """cleanup without --zone is a usage error."""
        with pytest.raises(SystemExit):
            parser.parse_args(['cleanup', '--group', 'rg'])

    def test_unknown_format(self, parser):
        """Only known formats are accepted."""
        with pytest.raises(SystemExit):
            parser.parse_args(['walkthrough', '--format', 'xml'])


class TestArgsToConfig:
    """Tests for args_to_config and validate_args."""

    def test_flags(self, parser):
        """Every flag lands on the config."""
        args = parser.parse_args([
            'walkthrough', '--zone', 'europe-west1-b', '--project', 'p',
            '--keep-resources', '--deadline', '600', '--dry-run', '--no-rollback',
            '--verbosity', 'warning', '--log-file', '/tmp/vmwf.log',
        ])

        config = args_to_config(args)

        assert config.zone == 'europe-west1-b'
        assert config.project == 'p'
        assert config.ephemeral is False
        assert config.deadline_seconds == 600
        assert config.dry_run is True
        assert config.auto_rollback is False
        assert config.log_level == 'WARNING'
        assert config.log_file == '/tmp/vmwf.log'

    def test_walkthrough_is_ephemeral_by_default(self, parser):
        """Without --keep-resources the walkthrough tears down."""
        assert args_to_config(parser.parse_args(['walkthrough'])).ephemeral is True

    def test_list_does_not_touch_ephemeral(self, parser):
        """Only the walkthrough has --keep-resources."""
        args = parser.parse_args(['list', '--group', 'rg', '--zone', 'z'])
        assert args_to_config(args).ephemeral is False

    def test_flags_override_file(self, parser, tmp_path):
        """Flags win over the config file."""
        path = tmp_path / 'workflow.yaml'
        path.write_text("zone: asia-east1-a\nmachine_type: e2-small\n")
        args = parser.parse_args(['walkthrough', '--config', str(path), '--zone', 'us-east1-b'])

        config = args_to_config(args)

        assert config.zone == 'us-east1-b'
        assert config.machine_type == 'e2-small'

    def test_bad_config_file(self, parser, tmp_path):
        """A missing config file raises ConfigError."""
        args = parser.parse_args(['walkthrough', '--config', str(tmp_path / 'missing.yaml')])
        with pytest.raises(ConfigError):
            args_to_config(args)

    def test_non_positive_deadline(self, parser):
        """A deadline must be positive."""
        assert not validate_args(parser.parse_args(['walkthrough', '--deadline', '0']))
        assert validate_args(parser.parse_args(['walkthrough', '--deadline', '1']))


class TestMain:
    """Tests for main() exit codes."""

    def test_walkthrough_success(self, capsys):
        """A successful run exits 0 and prints the requested format."""
        with patch('vm_workflow.cli.run_walkthrough') as run:
            run.return_value = WorkflowResult(succeeded_ops=['rg'])
            code = main(['walkthrough', '--dry-run', '--format', 'json'])

        assert code == 0
        assert run.call_args.kwargs['config'].dry_run is True
        data = json.loads(capsys.readouterr().out)
        assert data['success'] is True
        assert data['project'] == 'default'

    def test_walkthrough_failure(self):
        """A failed run exits 1."""
        with patch('vm_workflow.cli.run_walkthrough') as run, \
                patch('vm_workflow.cli.get_gcloud_config', return_value='p'):
            run.return_value = WorkflowResult(failed_op='vm', error=RuntimeError('x'))
            assert main(['walkthrough', '--quiet']) == 1

        assert run.call_args.kwargs['config'].project == 'p'
        assert run.call_args.kwargs['show_progress'] is False

    def test_list(self, capsys):
        """list prints one row per handle."""
        handles = [ResourceHandle(id='vm-id', kind=ResourceKind.VIRTUAL_MACHINE, name='vm', group='rg')]
        with patch('vm_workflow.cli.list_group', return_value=handles), \
                patch('vm_workflow.cli.get_gcloud_config', return_value=None):
            code = main(['list', '--group', 'rg', '--zone', 'us-central1-a', '--format', 'csv'])

        assert code == 0
        assert capsys.readouterr().out.splitlines() == ['name,kind,group,id', 'vm,VirtualMachine,rg,vm-id']

    def test_list_failure(self):
        """A failed listing exits 1."""
        with patch('vm_workflow.cli.list_group', return_value=None):
            assert main(['list', '--group', 'rg', '--zone', 'z', '--project', 'p']) == 1

    def test_cleanup_failure(self):
        """A failed cleanup exits 1."""
        with patch('vm_workflow.cli.cleanup_group', return_value=False):
            assert main(['cleanup', '--group', 'rg', '--zone', 'z', '--project', 'p']) == 1

    def test_invalid_deadline(self):
        """Invalid flag values exit 1 without running anything."""
        with patch('vm_workflow.cli.run_walkthrough') as run:
            assert main(['walkthrough', '--deadline', '-5']) == 1
        run.assert_not_called()

    def test_config_error(self, tmp_path, capsys):
        """Package errors are printed and exit 1."""
        assert main(['walkthrough', '--config', str(tmp_path / 'missing.yaml')]) == 1
        assert 'Config file not found' in capsys.readouterr().err

    def test_keyboard_interrupt(self):
        """Ctrl-C exits 130."""
        with patch('vm_workflow.cli.run_walkthrough', side_effect=KeyboardInterrupt):
            assert main(['walkthrough', '--dry-run']) == 130


class TestOutputFormatter:
    """Tests for OutputFormatter."""

    def test_table_rows(self):
        """Rows are aligned under upper-case headers."""
        text = OutputFormatter.format_rows([{'name': 'vm', 'kind': 'VirtualMachine'}], 'table')
        lines = text.splitlines()
        assert lines[0].split() == ['NAME', 'KIND']
        assert lines[1].split() == ['vm', 'VirtualMachine']

    def test_empty_table(self):
        """No rows."""
        assert OutputFormatter.format_rows([], 'table') == "Listed 0 items."

    def test_yaml(self):
        """YAML keeps key order."""
        text = OutputFormatter.format_output({'group': 'rg', 'success': True}, 'yaml')
        assert text == "group: rg\nsuccess: true\n"
