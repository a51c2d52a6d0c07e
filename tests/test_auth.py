import base64
import hashlib
from datetime import datetime, timezone
import pytest
import requests
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from src.lib.auth import AuthError, ChefAuth, canonical_path


def fixed_clock():
    return datetime(2012, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def signed(auth, url, method='GET'):
    req = requests.Request(method, url).prepare()
    return auth(req)


def test_signs_request_with_client_key(rsa_key, client_key_file):
    auth = ChefAuth('backup', client_key_file.read_bytes(), clock=fixed_clock)
    req = signed(auth, 'https://chef.example.com:9876/nodes/mynode')
    h = req.headers
    assert h['X-Ops-UserId'] == 'backup'
    assert h['X-Ops-Sign'] == 'version=1.3'
    assert h['X-Ops-Timestamp'] == '2012-01-02T03:04:05Z'
    assert h['X-Ops-Content-Hash'] == base64.b64encode(hashlib.sha256(b'').digest()).decode()
    chunks = []
    n = 1
    while f'X-Ops-Authorization-{n}' in h:
        chunks.append(h[f'X-Ops-Authorization-{n}'])
        n += 1
    assert chunks and all(len(c) <= 60 for c in chunks)
    canonical = auth.canonical_request('GET', '/nodes/mynode', h['X-Ops-Content-Hash'], h['X-Ops-Timestamp'])
    # raises InvalidSignature if the headers don't carry a signature of the canonical request
    rsa_key.public_key().verify(base64.b64decode(''.join(chunks)), canonical.encode(), padding.PKCS1v15(), hashes.SHA256())


@pytest.mark.parametrize('url,path', [
    ('https://chef.example.com/nodes', '/nodes'),
    ('https://chef.example.com//organizations//acme/nodes/', '/organizations/acme/nodes'),
    ('https://chef.example.com', '/'),
    ('https://chef.example.com/data/mybag?x=1', '/data/mybag'),
])
def test_canonical_path(url, path):
    assert canonical_path(url) == path


def test_invalid_key_rejected():
    with pytest.raises(AuthError):
        ChefAuth('backup', b'not a pem key')


def test_missing_key_file_rejected(tmp_path):
    with pytest.raises(AuthError) as exc:
        ChefAuth.from_key_file('backup', str(tmp_path / 'missing.pem'))
    assert 'missing.pem' in str(exc.value)
