"""CLI commands implemented with click.

- `chef-backup backup [COMPONENT ...]`: back up nodes, roles, environments
  and data bags (all of them when no component is named).
- `chef-backup components`: list the component names `backup` accepts.
"""
from __future__ import annotations
import logging, click
from pathlib import Path
from config.settings import LOG_LEVEL, LOG_LEVEL_ENV, LOG_FORMAT
from src.lib.backup import BackupConfig, BackupRunner, UsageError, validate_components
from src.lib.client import ChefServerClient, RemoteError
from src.lib.targets import target_names

def _fail(message: str) -> None:
	click.echo(f'Error: {message}', err=True)
	raise SystemExit(1)

@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Log debug output (HTTP requests, files written).')
@click.option('--log-level', envvar=LOG_LEVEL_ENV, default=LOG_LEVEL, show_default=True,
			  type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
def cli(verbose, log_level):
	"""Back up a configuration-management server to JSON files."""
	level = logging.DEBUG if verbose else getattr(logging, log_level.upper())
	logging.basicConfig(level=level, format=LOG_FORMAT)

@cli.command()
@click.argument('components', nargs=-1)
@click.option('-D', '--backup-dir', type=click.Path(file_okay=False, path_type=Path),
			  help='Write to this directory instead of <file-backup-path>/<host>_<timestamp>.')
@click.option('--server-url', help='Server URL (default: $CHEF_SERVER_URL).')
@click.option('--file-backup-path', help='Parent of generated backup directories (default: $CHEF_FILE_BACKUP_PATH).')
@click.option('--ssl-verify/--no-ssl-verify', default=None, help='Verify the server TLS certificate.')
@click.option('--client-name', help='API client used to sign requests (default: $CHEF_CLIENT_NAME).')
@click.option('--client-key', help='PEM private key of the API client (default: $CHEF_CLIENT_KEY).')
def backup(components, backup_dir, server_url, file_backup_path, ssl_verify, client_name, client_key):
	"""Back up COMPONENTS (nodes, roles, environments, data_bags); all if none given."""
	try:
		cfg = BackupConfig.from_env(
			server_url=server_url,
			file_backup_path=file_backup_path,
			backup_dir=str(backup_dir) if backup_dir else None,
			ssl_verify=ssl_verify,
			client_name=client_name,
			client_key=client_key,
		)
		validate_components(components)
		auth = cfg.auth()
		with ChefServerClient(cfg.server_url, auth=auth, timeout=cfg.timeout, verify=cfg.ssl_verify) as client:
			result = BackupRunner(client, cfg).run(components)
	except (UsageError, RemoteError, OSError) as e:
		_fail(str(e))
	else:
		click.echo(f'Backup written: {result.root} ({len(result.files)} files)')

@cli.command('components')
def list_components():
	"""List the component types that can be backed up."""
	for name in target_names():
		click.echo(name)
