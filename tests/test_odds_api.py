import httpx
import pytest

from conftest import make_fixture
from data.base import ProviderError
from data.cache import TTLCache
from data.odds_api import OddsAPI, parse_events

RAW_EVENTS = [
    {
        "id": "abc123",
        "sport_key": "soccer_italy_serie_a",
        "commence_time": "2025-10-19T18:45:00Z",
        "home_team": "AC Milan",
        "away_team": "Napoli",
        "bookmakers": [
            {
                "key": "bet365",
                "title": "Bet365",
                "last_update": "2025-10-19T09:30:00Z",
                "markets": [
                    {
                        "key": "h2h",
                        "outcomes": [
                            {"name": "AC Milan", "price": 2.3},
                            {"name": "Napoli", "price": 3.1},
                            {"name": "Draw", "price": 3.3},
                        ],
                    },
                    {
                        "key": "totals",
                        "outcomes": [
                            {"name": "Over", "price": 1.9, "point": 2.5},
                            {"name": "Under", "price": 1.95, "point": 2.5},
                        ],
                    },
                ],
            }
        ],
    }
]


def _client(calls, status=200, body=RAW_EVENTS):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status, json=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_parse_events_builds_feed():
    events = parse_events(RAW_EVENTS)
    assert len(events) == 1
    event = events[0]
    assert event.home_team == "AC Milan"
    assert event.bookmakers[0].title == "Bet365"
    assert event.bookmakers[0].markets[1].outcomes[0].point == 2.5


def test_request_parameters_and_caching():
    calls = []
    api = OddsAPI("secret", "soccer_italy_serie_a", cache=TTLCache(), http_client=_client(calls))
    api.get_events()
    api.get_events()
    assert len(calls) == 1
    request = calls[0]
    assert request.url.path == "/v4/sports/soccer_italy_serie_a/odds"
    assert request.url.params["apiKey"] == "secret"
    assert request.url.params["markets"] == "h2h,totals,btts"
    assert request.url.params["oddsFormat"] == "decimal"


def test_market_odds_for_fixture():
    api = OddsAPI("secret", "soccer_italy_serie_a", http_client=_client([]))
    markets = api.get_market_odds_for_fixture(make_fixture(home="Milan", away="SSC Napoli"))
    by_selection = {m.selection: m for m in markets}
    assert set(by_selection) == {"HOME", "DRAW", "AWAY", "OVER_2_5", "UNDER_2_5"}
    assert by_selection["DRAW"].bookmakers[0].odds_decimal == 3.3
    assert by_selection["UNDER_2_5"].line == 2.5


def test_upstream_failure_raises_provider_error():
    api = OddsAPI("bad", "soccer_italy_serie_a", http_client=_client([], status=401, body={"message": "bad key"}))
    with pytest.raises(ProviderError) as excinfo:
        api.get_events()
    assert excinfo.value.status_code == 401


def test_non_json_body_raises_provider_error():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(502, text="gateway")))
    api = OddsAPI("secret", "soccer_italy_serie_a", http_client=client)
    with pytest.raises(ProviderError) as excinfo:
        api.get_events()
    assert excinfo.value.status_code == 502

    ok_client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, text="not json")))
    api = OddsAPI("secret", "soccer_italy_serie_a", http_client=ok_client)
    with pytest.raises(ProviderError, match="invalid JSON"):
        api.get_events()
