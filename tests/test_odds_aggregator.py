from conftest import btts, h2h, make_book, make_event, make_fixture, totals
from engine.odds_aggregator import aggregate_market_odds, market_odds_for_fixture, match_event
from engine.schemas import OddsMarket, OddsOutcome


def _selections(markets):
    return {(m.market, m.selection): m for m in markets}


def test_event_inside_window_matches():
    fixture = make_fixture(kickoff="2025-10-19T18:00:00Z")
    event = make_event([], commence="2025-10-19T21:59:00Z")
    assert match_event(fixture, [event]) is event


def test_event_outside_window_does_not_match():
    fixture = make_fixture(kickoff="2025-10-19T18:00:00Z")
    late = make_event([], commence="2025-10-19T22:01:00Z")
    early = make_event([], commence="2025-10-19T13:59:00Z")
    assert match_event(fixture, [late, early]) is None


def test_event_requires_both_names():
    fixture = make_fixture()
    swapped = make_event([], home="Napoli", away="Milan", event_id="swapped")
    other = make_event([], home="Milan", away="Inter", event_id="other")
    good = make_event([], event_id="good")
    assert match_event(fixture, [swapped, other, good]).id == "good"


def test_no_event_yields_empty_list():
    fixture = make_fixture(home="Inter", away="Juventus")
    event = make_event([make_book("Bet365", [h2h("Internazionale", 1.9, 3.4, "Juventus", 4.0)])],
                       home="Internazionale", away="Juventus")
    assert market_odds_for_fixture(fixture, [event]) == []


def test_aggregates_all_three_markets_in_book_order():
    fixture = make_fixture()
    event = make_event(
        [
            make_book("Bet365", [h2h("Milan", 2.1, 3.3, "Napoli", 3.6), totals(1.95, 1.85)],
                      last_update="2025-10-19T09:00:00Z"),
            make_book("Unibet", [h2h("AC Milan", 2.2, 3.2, "Napoli", 3.5), btts(1.7, 2.05)]),
        ]
    )
    markets = aggregate_market_odds(fixture, event)
    keys = [(m.market, m.selection) for m in markets]
    assert keys == [
        ("1X2", "HOME"),
        ("1X2", "DRAW"),
        ("1X2", "AWAY"),
        ("OU_2_5", "OVER_2_5"),
        ("OU_2_5", "UNDER_2_5"),
        ("BTTS", "BTTS_YES"),
        ("BTTS", "BTTS_NO"),
    ]
    home = _selections(markets)[("1X2", "HOME")]
    assert [(q.book, q.odds_decimal) for q in home.bookmakers] == [("Bet365", 2.1), ("Unibet", 2.2)]
    assert home.bookmakers[0].timestamp == "2025-10-19T09:00:00Z"
    assert home.line is None
    assert _selections(markets)[("OU_2_5", "OVER_2_5")].line == 2.5


def test_totals_only_at_two_and_a_half():
    fixture = make_fixture()
    event = make_event([make_book("Bet365", [totals(1.4, 2.9, point=1.5)])])
    assert aggregate_market_odds(fixture, event) == []


def test_both_teams_to_score_key_variant():
    fixture = make_fixture()
    event = make_event([make_book("Pinnacle", [btts(1.8, 1.95, key="both_teams_to_score")])])
    selections = _selections(aggregate_market_odds(fixture, event))
    assert selections[("BTTS", "BTTS_YES")].bookmakers[0].odds_decimal == 1.8
    assert selections[("BTTS", "BTTS_NO")].bookmakers[0].book == "Pinnacle"


def test_missing_or_non_positive_prices_are_skipped():
    fixture = make_fixture()
    event = make_event(
        [
            make_book("Bet365", [h2h("Milan", 0, None, "Napoli", -1.0)]),
            make_book("Unibet", [h2h("Milan", 2.0, None, "Napoli", 3.8)]),
        ]
    )
    selections = _selections(aggregate_market_odds(fixture, event))
    assert ("1X2", "DRAW") not in selections
    assert [q.book for q in selections[("1X2", "HOME")].bookmakers] == ["Unibet"]
    assert [q.book for q in selections[("1X2", "AWAY")].bookmakers] == ["Unibet"]


def test_unknown_outcome_names_are_ignored():
    fixture = make_fixture()
    market = OddsMarket(key="h2h", outcomes=(OddsOutcome(name="Juventus", price=2.0),))
    event = make_event([make_book("Bet365", [market])])
    assert aggregate_market_odds(fixture, event) == []


def test_fixture_without_kickoff_matches_nothing():
    fixture = make_fixture(kickoff="")
    event = make_event([make_book("Bet365", [h2h("Milan", 1.9, 3.4, "Napoli", 4.0)])])
    assert match_event(fixture, [event]) is None
    assert market_odds_for_fixture(fixture, [event]) == []
