"""Tests for the leaderboard client, with requests.post replaced."""

import pytest
import requests

from doom_platformer.api import ScoreClient, SubmitResult


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.bad_json:
            raise ValueError("no json")
        return self.payload


class CallLog(list):
    pass


@pytest.fixture
def log(monkeypatch):
    log = CallLog()
    log.responses = []

    def fake_post(url, **kwargs):
        log.append((url, kwargs))
        result = log.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr("doom_platformer.api.requests.post", fake_post)
    return log


class TestScoreClient:
    """Submitting scores."""

    def test_disabled_without_token(self, log):
        """No token means no request at all."""
        client = ScoreClient(token=None)
        assert not client.enabled
        assert client.submit_score(100, 1, 5) == SubmitResult(ok=False, error="not logged in")
        assert client.submit_score_async(100, 1, 5) is None
        assert log == []

    def test_successful_submit(self, log):
        """The score is posted with the bearer token."""
        log.responses.append(FakeResponse({"newHighScore": True}))
        client = ScoreClient("http://example.test/api/", token="abc", timeout=2)
        result = client.submit_score(1500, 3, 40)
        assert result == SubmitResult(ok=True, new_high_score=True)

        url, kwargs = log[0]
        assert url == "http://example.test/api/scores"
        assert kwargs["json"] == {"score": 1500, "level": 3, "coins": 40}
        assert kwargs["headers"] == {"Authorization": "Bearer abc"}
        assert kwargs["timeout"] == 2

    def test_alternate_high_score_key(self, log):
        """Either high score flag spelling is understood."""
        log.responses.append(FakeResponse({"isNewHighScore": True}))
        assert ScoreClient(token="abc").submit_score(1, 0, 0).new_high_score

    def test_connection_error(self, log):
        """Network failures come back as a failed result."""
        log.responses.append(requests.ConnectionError("refused"))
        result = ScoreClient(token="abc").submit_score(1, 0, 0)
        assert not result.ok
        assert "refused" in result.error

    def test_http_error(self, log):
        """Error statuses come back as a failed result."""
        log.responses.append(FakeResponse({}, status=500))
        assert not ScoreClient(token="abc").submit_score(1, 0, 0).ok

    def test_invalid_json(self, log):
        """A body that is not JSON is a failed result."""
        log.responses.append(FakeResponse(bad_json=True))
        result = ScoreClient(token="abc").submit_score(1, 0, 0)
        assert result == SubmitResult(ok=False, error="invalid response")

    def test_async_calls_back(self, log):
        """Background submission reports through the callback."""
        log.responses.append(FakeResponse({"newHighScore": False}))
        results = []
        thread = ScoreClient(token="abc").submit_score_async(10, 0, 0, callback=results.append)
        thread.join(timeout=5)
        assert results == [SubmitResult(ok=True, new_high_score=False)]
