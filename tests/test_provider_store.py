import pytest
from tenacity import wait_none

from database.provider_store import PROVIDER_COLUMNS, SupabaseProviderStore


class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.ops = [('table', table)]

    def __getattr__(self, name):
        def op(*args):
            self.ops.append((name, *args))
            return self
        return op

    def execute(self):
        self.client.executed.append(self.ops)
        if self.client.failures:
            self.client.failures -= 1
            raise ConnectionError('supabase unavailable')
        return FakeResult(self.client.data)


class FakeClient:
    def __init__(self, data=None, failures=0):
        self.data = data if data is not None else []
        self.failures = failures
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)


def test_update_image_targets_one_row():
    client = FakeClient()
    SupabaseProviderStore(client).update_image('p-1', 'https://x/og.png')

    assert client.executed == [[
        ('table', 'provider_profiles'),
        ('update', {'image_url': 'https://x/og.png'}),
        ('eq', 'id', 'p-1'),
    ]]


def test_update_image_retries_transient_failure():
    client = FakeClient(failures=1)
    store = SupabaseProviderStore(client)
    SupabaseProviderStore.update_image.retry_with(wait=wait_none())(store, 'p-1', 'https://x/og.png')
    assert len(client.executed) == 2


def test_update_image_gives_up_after_three_attempts():
    client = FakeClient(failures=5)
    store = SupabaseProviderStore(client)
    with pytest.raises(ConnectionError):
        SupabaseProviderStore.update_image.retry_with(wait=wait_none())(store, 'p-1', 'https://x/og.png')
    assert len(client.executed) == 3


def test_load_providers_missing_images():
    rows = [{'id': 'p-1', 'business_name': 'Aqua Tots'}]
    client = FakeClient(rows)
    store = SupabaseProviderStore(client, table='providers')

    assert store.load_providers_missing_images(limit=10) == rows
    assert client.executed[0] == [
        ('table', 'providers'),
        ('select', PROVIDER_COLUMNS),
        ('is_', 'image_url', 'null'),
        ('order', 'created_at'),
        ('limit', 10),
    ]


def test_from_env_requires_credentials(monkeypatch):
    monkeypatch.delenv('SUPABASE_URL', raising=False)
    monkeypatch.delenv('SUPABASE_KEY', raising=False)
    with pytest.raises(ValueError):
        SupabaseProviderStore.from_env()


def test_schema_sql_mentions_table():
    assert 'ALTER TABLE providers ADD COLUMN IF NOT EXISTS image_url' in \
        SupabaseProviderStore(FakeClient(), table='providers').schema_sql()
