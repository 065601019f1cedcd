import pytest
import requests

from shelter_match.vendors import shelter_directory


class DummyResponse:
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value")
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse(payload=[])
        self.error = None

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    monkeypatch.setenv("RAPIDAPI_KEY", "test-api-key")
    monkeypatch.delenv("DIRECTORY_HOST", raising=False)
    monkeypatch.delenv("DIRECTORY_TIMEOUT", raising=False)
    session = DummySession()
    monkeypatch.setattr(shelter_directory, "_SESSION", session)
    return session


def test_fetch_by_zipcode_success(patch_session):
    patch_session.response = DummyResponse(payload=[{"id": "org123", "name": "Test Shelter"}])

    records = shelter_directory.fetch_by_zipcode("12345")

    assert records == [{"id": "org123", "name": "Test Shelter"}]
    url, params, headers, timeout = patch_session.calls[0]
    assert url == "https://homeless-shelters-and-foodbanks-api.p.rapidapi.com/resources"
    assert params == {"zipcode": "12345"}
    assert headers["x-rapidapi-key"] == "test-api-key"
    assert headers["x-rapidapi-host"] == "homeless-shelters-and-foodbanks-api.p.rapidapi.com"
    assert timeout == 10


def test_fetch_by_location_params(patch_session):
    shelter_directory.fetch_by_location(40.7128, -74.006, 1.4)

    _, params, _, _ = patch_session.calls[0]
    assert params == {"latitude": 40.7128, "longitude": -74.006, "radius": 1.4}


def test_fetch_by_state_city_params(patch_session):
    shelter_directory.fetch_by_state_city("New York", "NY")

    _, params, _, _ = patch_session.calls[0]
    assert params == {"state": "New York", "city": "NY"}


def test_fetch_list_network_error_returns_empty(patch_session, caplog):
    patch_session.error = requests.ConnectionError("boom")

    with caplog.at_level("WARNING"):
        assert shelter_directory.fetch_by_zipcode("12345") == []

    assert "Directory lookup failed" in " ".join(caplog.messages)


def test_fetch_list_invalid_json_returns_empty(patch_session):
    patch_session.response = DummyResponse(invalid_json=True)
    assert shelter_directory.fetch_by_zipcode("12345") == []


def test_fetch_list_error_status_returns_empty(patch_session):
    patch_session.response = DummyResponse(status_code=500, payload={"message": "down"})
    assert shelter_directory.fetch_by_zipcode("12345") == []


def test_fetch_list_wrong_shape_returns_empty(patch_session):
    patch_session.response = DummyResponse(payload={"message": "You are not subscribed to this API."})
    assert shelter_directory.fetch_by_zipcode("12345") == []


def test_fetch_list_drops_non_object_entries(patch_session):
    patch_session.response = DummyResponse(payload=[{"id": "a"}, "junk", None, {"id": "b"}])
    assert shelter_directory.fetch_by_zipcode("12345") == [{"id": "a"}, {"id": "b"}]


def test_fetch_by_id_success(patch_session):
    patch_session.response = DummyResponse(payload={"id": "orgSingle", "name": "Single Shelter"})

    record = shelter_directory.fetch_by_id("some id")

    assert record["name"] == "Single Shelter"
    url, params, _, _ = patch_session.calls[0]
    assert url.endswith("/resources/some%20id")
    assert params is None


def test_fetch_by_id_not_found(patch_session):
    patch_session.response = DummyResponse(status_code=404, payload={"message": "not found"})
    assert shelter_directory.fetch_by_id("missing") is None

    patch_session.response = DummyResponse(payload=None)
    assert shelter_directory.fetch_by_id("missing") is None


def test_fetch_by_id_error_returns_none(patch_session):
    patch_session.error = requests.Timeout("slow")
    assert shelter_directory.fetch_by_id("error-id") is None


def test_fetch_by_id_requires_id():
    with pytest.raises(ValueError):
        shelter_directory.fetch_by_id(None)
    with pytest.raises(ValueError):
        shelter_directory.fetch_by_id("  ")
