from click.testing import CliRunner
from src.cli.commands import cli

def test_cli_help():
	r = CliRunner().invoke(cli, ['--help'])
	assert r.exit_code == 0
	assert 'backup' in r.output

def test_backup_help_mentions_backup_dir():
	r = CliRunner().invoke(cli, ['backup', '--help'])
	assert r.exit_code == 0
	assert '--backup-dir' in r.output

def test_components_lists_all_types():
	r = CliRunner().invoke(cli, ['components'])
	assert r.exit_code == 0
	assert r.output.split() == ['nodes', 'roles', 'environments', 'data_bags']
