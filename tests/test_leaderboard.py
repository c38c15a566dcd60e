from datetime import datetime, timezone

import pytest
import requests

from flappy_dopamine.leaderboard import (
    SAVE_FAILED_NOTICE,
    Leaderboard,
    ScoreEntry,
    ScoreService,
    ScoreServiceError,
)


class FakeResponse:
    def __init__(self, payload=None, status: int = 200) -> None:
        self.payload = payload
        self.status = status

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, get=None, post=None) -> None:
        self.headers: dict[str, str] = {}
        self.get_response = get
        self.post_response = post
        self.requests: list[tuple] = []

    def _answer(self, response):
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, params=None, timeout=None):
        self.requests.append(("GET", url, params, timeout))
        return self._answer(self.get_response)

    def post(self, url, json=None, timeout=None):
        self.requests.append(("POST", url, json, timeout))
        return self._answer(self.post_response)


ROWS = [
    {"player_name": "B", "score": 5, "created_at": "2024-05-01T10:00:00Z"},
    {"player_name": "A", "score": 9, "created_at": "2024-05-01T09:00:00+00:00"},
    {"player_name": "  ", "score": 5, "created_at": "2024-05-02T10:00:00Z"},
    {"player_name": "bad", "score": "lots"},
    {"player_name": "neg", "score": -1},
    "garbage",
]


def test_service_sets_auth_headers() -> None:
    session = FakeSession()
    ScoreService("https://scores.example/rest/v1/", api_key="k", session=session)
    assert session.headers["apikey"] == "k"
    assert session.headers["Authorization"] == "Bearer k"


def test_fetch_top_sorts_and_filters() -> None:
    session = FakeSession(get=FakeResponse(ROWS))
    service = ScoreService("https://scores.example/rest/v1/", session=session, timeout=1.5)
    entries = service.fetch_top(2)
    assert [(e.name, e.score) for e in entries] == [("A", 9), ("Flappy Boys", 5)]
    method, url, params, timeout = session.requests[0]
    assert (method, url, timeout) == ("GET", "https://scores.example/rest/v1/score_entries", 1.5)
    assert params["limit"] == "2"
    assert params["order"] == "score.desc,created_at.desc"
    assert entries[0].played_at == datetime(2024, 5, 1, 9, tzinfo=timezone.utc)


def test_submit_posts_sanitized_payload() -> None:
    session = FakeSession(post=FakeResponse())
    ScoreService("https://scores.example", session=session).submit("  ", 7)
    method, url, payload, _ = session.requests[0]
    assert (method, url) == ("POST", "https://scores.example/rpc/save_score")
    assert payload == {"player_name": "Flappy Boys", "score": 7}


@pytest.mark.parametrize(
    "response",
    [
        requests.ConnectionError("down"),
        FakeResponse(status=500),
        FakeResponse(ValueError("not json")),
        FakeResponse({"rows": []}),
    ],
)
def test_fetch_failures_raise_service_error(response) -> None:
    service = ScoreService("https://scores.example", session=FakeSession(get=response))
    with pytest.raises(ScoreServiceError):
        service.fetch_top()


def test_from_env(monkeypatch) -> None:
    monkeypatch.delenv("FLAPPY_SCORES_URL", raising=False)
    assert ScoreService.from_env() is None
    monkeypatch.setenv("FLAPPY_SCORES_URL", "https://scores.example")
    monkeypatch.setenv("FLAPPY_SCORES_KEY", "secret")
    service = ScoreService.from_env()
    assert service.base_url == "https://scores.example"
    assert service.session.headers["apikey"] == "secret"


def test_disabled_leaderboard_is_a_no_op() -> None:
    board = Leaderboard()
    assert not board.enabled
    assert board.refresh() is False
    assert board.record("A", 3) is None
    assert board.entries == []


def test_record_refreshes_entries() -> None:
    session = FakeSession(get=FakeResponse(ROWS[:2]), post=FakeResponse())
    board = Leaderboard(ScoreService("https://scores.example", session=session))
    assert board.record("A", 9) is None
    assert [e.name for e in board.entries] == ["A", "B"]


def test_failures_keep_last_good_entries() -> None:
    session = FakeSession(get=FakeResponse(ROWS[:2]), post=FakeResponse())
    board = Leaderboard(ScoreService("https://scores.example", session=session))
    assert board.refresh()
    previous = list(board.entries)

    session.get_response = requests.Timeout("slow")
    assert board.refresh() is False
    assert board.entries == previous

    session.post_response = FakeResponse(status=503)
    assert board.record("A", 1) == SAVE_FAILED_NOTICE
    assert board.entries == previous


def test_entries_are_frozen() -> None:
    entry = ScoreEntry("A", 1, datetime.now(timezone.utc))
    with pytest.raises(AttributeError):
        entry.score = 2
