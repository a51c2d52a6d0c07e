"""Remote server access.

`RemoteServerClient` is the interface the backup runner consumes;
`ChefServerClient` implements it over the server's REST API with requests.
Request signing is not done here: pass a requests auth object as `auth`
(`src.lib.auth.ChefAuth` for a real server).
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional, Protocol
from urllib.parse import quote
import requests
from config.settings import CHEF_VERSION, DEFAULT_TIMEOUT
from .targets import BackupTarget

log = logging.getLogger(__name__)

class RemoteError(Exception):
	"""Listing or loading from the server failed."""

class RemoteServerClient(Protocol):
	def list(self, target: BackupTarget) -> Mapping[str, str]: ...
	def load(self, target: BackupTarget, name: str) -> Dict[str, Any]: ...
	def list_items(self, bag: str) -> Mapping[str, str]: ...
	def load_item(self, bag: str, item: str) -> Dict[str, Any]: ...

def data_bag_item(bag: str, item: str, raw: Dict[str, Any]) -> Dict[str, Any]:
	"""Wrap a raw data bag item body the way the Chef client serialises it."""
	return {
		"name": f"data_bag_item_{bag}_{item}",
		"json_class": "Chef::DataBagItem",
		"chef_type": "data_bag_item",
		"data_bag": bag,
		"raw_data": raw,
	}

class ChefServerClient:
	def __init__(self, server_url: str, auth: Any = None, timeout: float = DEFAULT_TIMEOUT,
				 verify: bool = True, session: Optional[requests.Session] = None):
		self.base_url = server_url.rstrip('/')
		self.timeout = timeout
		self.session = session or requests.Session()
		self.session.headers.update({'Accept': 'application/json', 'X-Chef-Version': CHEF_VERSION})
		self.session.verify = verify
		if auth is not None:
			self.session.auth = auth

	def __enter__(self) -> 'ChefServerClient':
		return self

	def __exit__(self, *exc) -> None:
		self.close()

	def close(self) -> None:
		self.session.close()

	def list(self, target: BackupTarget) -> Mapping[str, str]:
		return self._get(target.endpoint)

	def load(self, target: BackupTarget, name: str) -> Dict[str, Any]:
		return self._get(target.endpoint, name)

	def list_items(self, bag: str) -> Mapping[str, str]:
		return self._get('data', bag)

	def load_item(self, bag: str, item: str) -> Dict[str, Any]:
		return data_bag_item(bag, item, self._get('data', bag, item))

	def _url(self, *parts: str) -> str:
		return '/'.join([self.base_url] + [quote(p, safe='') for p in parts])

	def _get(self, *parts: str) -> Any:
		url = self._url(*parts)
		log.debug("GET %s", url)
		try:
			resp = self.session.get(url, timeout=self.timeout)
			resp.raise_for_status()
			data = resp.json()
		except requests.RequestException as e:
			raise RemoteError(f"GET {url} failed: {e}") from e
		except ValueError as e:
			raise RemoteError(f"GET {url} returned invalid JSON") from e
		if not isinstance(data, dict):
			raise RemoteError(f"GET {url} returned {type(data).__name__}, expected an object")
		return data
