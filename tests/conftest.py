import pytest
from src.lib.backup import BackupConfig
from src.lib.client import data_bag_item


class FakeClient:
    """In-memory stand-in for the server: listings plus item bodies."""

    def __init__(self):
        self.listings = {
            'nodes': {'mynode': 'http://pancakes/nodes/mynode'},
            'roles': {'myrole': 'http://pancakes/roles/myrole'},
            'environments': {'myenv': 'http://pancakes/envs/myenv'},
            'data_bags': {'mybag': 'http://pancakes/bags/mybag'},
        }
        self.bags = {'mybag': {'myitem': 'http://p/bags/mybag/myitem'}}
        self.calls = []

    def list(self, target):
        self.calls.append(('list', target.name))
        return self.listings[target.name]

    def load(self, target, name):
        self.calls.append(('load', target.name, name))
        return {'name': name, 'chef_type': target.singular, 'json_class': 'Chef::' + target.singular.title()}

    def list_items(self, bag):
        self.calls.append(('list_items', bag))
        return self.bags[bag]

    def load_item(self, bag, item):
        self.calls.append(('load_item', bag, item))
        return data_bag_item(bag, item, {'id': item})


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def config(tmp_path):
    return BackupConfig(server_url='https://chef.example.com:9876', backup_dir=str(tmp_path / 'baks'))


@pytest.fixture(scope='session')
def rsa_key():
    from cryptography.hazmat.primitives.asymmetric import rsa
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def client_key_file(tmp_path, rsa_key):
    from cryptography.hazmat.primitives import serialization
    path = tmp_path / 'backup-client.pem'
    path.write_bytes(rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    ))
    return path
