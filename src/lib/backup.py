"""Backup runner: list every item of each component type and write it as JSON.

Layout under the backup root:

	nodes/<name>.json
	roles/<name>.json
	environments/<name>.json        (never _default)
	data_bags/<bag>/<item>.json
"""
from __future__ import annotations
import os, logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence
from urllib.parse import urlparse
import click
from config.settings import (
	DEFAULT_SERVER_URL, SERVER_URL_ENV, DEFAULT_FILE_BACKUP_PATH, FILE_BACKUP_PATH_ENV, BACKUP_DIR_ENV,
	DEFAULT_TIMEOUT, TIMEOUT_ENV, SSL_VERIFY_ENV, CLIENT_NAME_ENV, CLIENT_KEY_ENV,
	TIMESTAMP_FORMAT, TIMESTAMP_OFFSET, DEFAULT_ENVIRONMENT
)
from .auth import AuthError, ChefAuth
from .client import RemoteError, RemoteServerClient
from .targets import TARGETS, BackupTarget, ENVIRONMENTS, get_target, target_names
from .utils import ensure_dir, write_json

log = logging.getLogger(__name__)

class UsageError(Exception): ...

@dataclass
class BackupConfig:
	server_url: str = DEFAULT_SERVER_URL
	file_backup_path: str = DEFAULT_FILE_BACKUP_PATH
	backup_dir: Optional[str] = None
	timeout: float = DEFAULT_TIMEOUT
	ssl_verify: bool = True
	client_name: Optional[str] = None
	client_key: Optional[str] = None

	@classmethod
	def from_env(cls, **overrides) -> 'BackupConfig':
		"""Build a config from environment variables; non-None overrides win."""
		env = os.environ
		cfg = cls(
			server_url=env.get(SERVER_URL_ENV, DEFAULT_SERVER_URL),
			file_backup_path=env.get(FILE_BACKUP_PATH_ENV, DEFAULT_FILE_BACKUP_PATH),
			backup_dir=env.get(BACKUP_DIR_ENV) or None,
			timeout=_float_env(TIMEOUT_ENV, DEFAULT_TIMEOUT),
			ssl_verify=env.get(SSL_VERIFY_ENV, 'true').lower() not in ('0', 'false', 'no'),
			client_name=env.get(CLIENT_NAME_ENV) or None,
			client_key=env.get(CLIENT_KEY_ENV) or None,
		)
		return replace(cfg, **{k: v for k, v in overrides.items() if v is not None})

	@property
	def server_host(self) -> str:
		host = urlparse(self.server_url).hostname
		if not host:
			raise UsageError(f"Server URL {self.server_url!r} has no host name (expected e.g. https://chef.example.com).")
		return host

	def auth(self) -> Optional[ChefAuth]:
		"""Signing auth for the client, or None when no credentials are configured."""
		if not self.client_name and not self.client_key:
			return None
		if not (self.client_name and self.client_key):
			raise UsageError(f"Both {CLIENT_NAME_ENV} and {CLIENT_KEY_ENV} (or --client-name and --client-key) are required to sign requests.")
		try:
			return ChefAuth.from_key_file(self.client_name, self.client_key)
		except AuthError as e:
			raise UsageError(str(e)) from e

def _float_env(var: str, default: float) -> float:
	raw = os.environ.get(var)
	if raw is None:
		return default
	try:
		return float(raw)
	except ValueError:
		raise UsageError(f"{var} must be a number of seconds, got {raw!r}") from None

@dataclass
class BackupResult:
	root: Path
	files: List[Path] = field(default_factory=list)

def validate_components(names: Iterable[str]) -> List[BackupTarget]:
	"""Map requested names to targets in processing order; empty means all.

	Raises UsageError naming every unknown component type.
	"""
	names = list(names)
	bad = [n for n in names if n not in target_names()]
	if bad:
		raise UsageError(f"Component types {', '.join(bad)} are not valid.")
	if not names:
		return list(TARGETS)
	wanted = {get_target(n) for n in names}
	return [t for t in TARGETS if t in wanted]

def checked_name(name: str, kind: str) -> str:
	"""Return `name` if it is usable as a single path component.

	Raises RemoteError for server-supplied names that would leave the kind's
	directory: empty, `.`, `..`, or containing a path separator.
	"""
	seps = [s for s in ('/', os.sep, os.altsep) if s]
	if not name or name in ('.', '..') or '\0' in name or any(s in name for s in seps):
		raise RemoteError(f"Refusing to back up {kind} with unsafe name {name!r}")
	return name

class BackupRunner:
	def __init__(self, client: RemoteServerClient, config: BackupConfig,
				 echo: Callable[[str], None] = click.echo,
				 clock: Optional[Callable[[], datetime]] = None):
		self.client = client
		self.config = config
		self.echo = echo
		self.clock = clock or (lambda: datetime.now(timezone.utc))
		self._backup_dir: Optional[Path] = None

	def backup_dir(self) -> Path:
		"""Root directory for this run, resolved once.

		The configured backup_dir is used as-is; otherwise
		<file_backup_path>/<server host>_<UTC timestamp>-0000.
		"""
		if self._backup_dir is None:
			if self.config.backup_dir:
				self._backup_dir = Path(self.config.backup_dir)
			else:
				now = self.clock().astimezone(timezone.utc)
				stamp = now.strftime(TIMESTAMP_FORMAT) + TIMESTAMP_OFFSET
				self._backup_dir = Path(self.config.file_backup_path) / f"{self.config.server_host}_{stamp}"
		return self._backup_dir

	def run(self, components: Sequence[str] = ()) -> BackupResult:
		targets = validate_components(components)
		root = ensure_dir(self.backup_dir())
		log.info("backing up %s to %s", ', '.join(t.name for t in targets), root)
		result = BackupResult(root)
		for target in targets:
			self._backup_component(target, result)
		log.info("backup complete: %d files", len(result.files))
		return result

	def _backup_component(self, target: BackupTarget, result: BackupResult) -> None:
		dir_path = ensure_dir(result.root / target.name)
		self.echo(f"Creating {target.singular} backups in {dir_path}")
		for name in self.client.list(target):
			if target == ENVIRONMENTS and name == DEFAULT_ENVIRONMENT:
				continue
			checked_name(name, target.singular)
			if target.is_data_bags:
				self._write_data_bag_items(name, dir_path, result)
			else:
				obj = self.client.load(target, name)
				self.echo(f"Backing up {target.singular}[{name}]")
				result.files.append(write_json(dir_path / f"{name}.json", obj))

	def _write_data_bag_items(self, bag: str, dir_path: Path, result: BackupResult) -> None:
		bag_path = ensure_dir(dir_path / bag)
		for item in self.client.list_items(bag):
			checked_name(item, 'data_bag_item')
			obj = self.client.load_item(bag, item)
			self.echo(f"Backing up data_bag_item[{bag}/{item}]")
			result.files.append(write_json(bag_path / f"{item}.json", obj))
