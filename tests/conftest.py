import pytest
from fastapi.testclient import TestClient

from protocol_z_cash.api.main import app


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def old_host_client():
    # Requests arrive with Host: p.z.cash; redirects are returned, not followed.
    return TestClient(app, base_url="http://p.z.cash", follow_redirects=False)
