import pytest

from keyfob.clock import ManualClock
from keyfob.config import ConfigError
from keyfob_backend import create_app
from keyfob_backend.device import Device
from tests.conftest import FakeMs


@pytest.fixture
def ms():
    return FakeMs()


@pytest.fixture
def device(registry, ms):
    return Device(registry, clock=ManualClock(1111111109), clock_ms=ms)


@pytest.fixture
def client(device):
    app = create_app(device=device)
    app.config['TESTING'] = True
    return app.test_client()


def test_index(client):
    data = client.get('/').get_json()
    assert "GET /api/v2/display" in data["endpoints"]


def test_display(client):
    data = client.get('/api/v2/display').get_json()
    assert data == {"label": "Google", "code_text": "081804", "seconds_remaining": 1,
                    "percent_remaining": 3, "clock_valid": True}


def test_advance_button(client, ms):
    resp = client.post('/api/v2/buttons/advance', json={"pressed": True})
    assert resp.status_code == 200
    assert resp.get_json()["buttons"]["advance"] == "settling"
    ms.now = 100
    assert client.get('/api/v2/display').get_json()["label"] == "GitHub"
    ms.now = 200
    data = client.post('/api/v2/buttons/advance', json={"pressed": False}).get_json()
    assert data["display"]["label"] == "GitHub"
    assert client.get('/api/v2/accounts').get_json() == {
        "accounts": ["Google", "GitHub", "Work"], "selected_index": 1}


def test_request_button_types_code(client, ms):
    client.post('/api/v2/buttons/request', json={"pressed": True})
    ms.now = 10
    client.get('/api/v2/display')
    assert client.get('/api/v2/keystrokes').get_json() == {"typed": ["081804"]}
    assert client.get('/api/v2/keystrokes').get_json() == {"typed": []}


def test_unknown_button(client):
    assert client.post('/api/v2/buttons/power', json={"pressed": True}).status_code == 404


@pytest.mark.parametrize("body", [None, {}, {"pressed": "yes"}])
def test_button_needs_boolean(client, body):
    assert client.post('/api/v2/buttons/advance', json=body).status_code == 400


def test_clock_not_valid(registry, ms):
    app = create_app(device=Device(registry, clock=ManualClock(50), clock_ms=ms,
                                       sync_timeout=0))
    client = app.test_client()
    client.post('/api/v2/buttons/request', json={"pressed": True})
    data = client.get('/api/v2/display').get_json()
    assert data["clock_valid"] is False
    assert data["code_text"] == "------"
    assert client.get('/api/v2/keystrokes').get_json() == {"typed": []}


def test_otpauth_uri(client):
    data = client.get('/api/v2/otpauth_uri?index=1&issuer=fob').get_json()
    assert data["label"] == "GitHub"
    assert data["otpauth_uri"].startswith("otpauth://totp/fob%3AGitHub?secret=JBSWY3DPEHPK3PXP")
    assert client.get('/api/v2/otpauth_uri?index=9').status_code == 404


def test_create_app_from_file(accounts_file):
    app = create_app(accounts_file, account="Work")
    assert app.config['DEVICE'].registry.current().label == "Work"


def test_create_app_unknown_account(accounts_file):
    with pytest.raises(ConfigError):
        create_app(accounts_file, account="Bank")


def test_failed_sync_keeps_device_withheld(registry, ms):
    clock = ManualClock(50)
    device = Device(registry, clock=clock, clock_ms=ms, sync_timeout=0)
    assert device.synced is False
    client = create_app(device=device).test_client()

    clock.set(1111111109)
    client.post('/api/v2/buttons/request', json={"pressed": True})
    ms.now += 250
    data = client.get('/api/v2/display').get_json()
    assert data["clock_valid"] is False
    assert data["code_text"] == "------"
    assert client.get('/api/v2/keystrokes').get_json() == {"typed": []}


def test_create_app_rejects_zero_period(accounts_file):
    with pytest.raises(ConfigError, match="period must be positive"):
        create_app(accounts_file, period=0)
