"""Request signing for the server API (authentication protocol 1.3)."""
from __future__ import annotations
import base64, hashlib, re
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse
from requests import PreparedRequest
from requests.auth import AuthBase
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from config.settings import SIGN_VERSION, SERVER_API_VERSION

class AuthError(Exception):
	pass

def _b64(data: bytes) -> str:
	return base64.b64encode(data).decode('ascii')

def canonical_path(url: str) -> str:
	path = re.sub(r'/+', '/', urlparse(url).path or '/')
	return path.rstrip('/') or '/'

class ChefAuth(AuthBase):
	"""Sign each request with the client's RSA key.

	Adds the X-Ops-* headers; the signature is split across
	X-Ops-Authorization-1..N in 60 character chunks.
	"""

	def __init__(self, client_name: str, key_pem: bytes,
				 clock: Optional[Callable[[], datetime]] = None):
		if not client_name:
			raise AuthError('Empty client name')
		try:
			self.key = serialization.load_pem_private_key(key_pem, password=None)
		except (ValueError, TypeError) as e:
			raise AuthError(f'Invalid client key: {e}') from e
		self.client_name = client_name
		self.clock = clock or (lambda: datetime.now(timezone.utc))

	@classmethod
	def from_key_file(cls, client_name: str, key_path: str) -> 'ChefAuth':
		try:
			pem = Path(key_path).read_bytes()
		except OSError as e:
			raise AuthError(f'Cannot read client key {key_path}: {e}') from e
		return cls(client_name, pem)

	def canonical_request(self, method: str, path: str, content_hash: str, timestamp: str) -> str:
		return '\n'.join([
			f'Method:{method.upper()}',
			f'Path:{path}',
			f'X-Ops-Content-Hash:{content_hash}',
			f'X-Ops-Sign:version={SIGN_VERSION}',
			f'X-Ops-Timestamp:{timestamp}',
			f'X-Ops-UserId:{self.client_name}',
			f'X-Ops-Server-API-Version:{SERVER_API_VERSION}',
		])

	def __call__(self, r: PreparedRequest) -> PreparedRequest:
		body = r.body or b''
		if isinstance(body, str): body = body.encode('utf-8')
		content_hash = _b64(hashlib.sha256(body).digest())
		timestamp = self.clock().astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')
		canonical = self.canonical_request(r.method, canonical_path(r.url), content_hash, timestamp)
		signature = _b64(self.key.sign(canonical.encode('utf-8'), padding.PKCS1v15(), hashes.SHA256()))
		r.headers.update({
			'X-Ops-Sign': f'version={SIGN_VERSION}',
			'X-Ops-UserId': self.client_name,
			'X-Ops-Timestamp': timestamp,
			'X-Ops-Content-Hash': content_hash,
			'X-Ops-Server-API-Version': SERVER_API_VERSION,
		})
		for i in range(0, len(signature), 60):
			r.headers[f'X-Ops-Authorization-{i // 60 + 1}'] = signature[i:i + 60]
		return r
