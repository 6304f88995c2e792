"""Tests for conneg.engine — the generic negotiation engine."""

import logging

from conneg.engine import Match, perform_negotiation, rank
from conneg.matching import (
    MEDIA_RANGE,
    WILDCARD,
    exact_value_compare,
    exact_value_match,
    wildcard_value_compare,
    wildcard_value_match,
)
from conneg.tuples import ValueTuple as VT


def _scores(results: list[VT]) -> list[tuple[str, float | None]]:
    return [(r.value, r.score) for r in results]


class TestPerformNegotiation:
    def test_selects_common_value(self) -> None:
        result = perform_negotiation(
            [VT("a"), VT("b"), VT("c")],
            [VT("c"), VT("z")],
            exact_value_match,
            exact_value_compare,
        )
        assert _scores(result) == [("c", 1.0)]

    def test_no_common_values(self) -> None:
        result = perform_negotiation(
            [VT("a"), VT("b"), VT("c")],
            [VT("z")],
            exact_value_match,
            exact_value_compare,
        )
        assert result == []

    def test_empty_inputs(self) -> None:
        assert perform_negotiation([], [VT("a")], wildcard_value_match, wildcard_value_compare) == []
        assert perform_negotiation([VT("a")], [], wildcard_value_match, wildcard_value_compare) == []

    def test_full_ranking_by_score(self) -> None:
        result = perform_negotiation(
            [VT("a", {"q": 1.0}), VT("b", {"q": 1.0}), VT("c", {"q": 0.8})],
            [VT("b", {"q": 0.9}), VT("c", {"q": 1.0})],
            wildcard_value_match,
            wildcard_value_compare,
        )
        assert _scores(result) == [("b", 0.9), ("c", 0.8)]

    def test_server_weights(self) -> None:
        result = perform_negotiation(
            [VT("a"), VT("b"), VT("c")],
            [VT("b", {"q": 0.9}), VT("c")],
            exact_value_match,
            exact_value_compare,
        )
        assert result[0].value == "c"

    def test_zero_weight_is_rejection(self) -> None:
        result = perform_negotiation(
            [VT("a")],
            [VT("a", {"q": 0.0})],
            exact_value_match,
            exact_value_compare,
        )
        assert result == []

    def test_client_zero_weight_is_rejection(self) -> None:
        result = perform_negotiation(
            [VT("a", {"q": 0.0}), VT("*")],
            [VT("a"), VT("b", {"q": 0.5})],
            wildcard_value_match,
            wildcard_value_compare,
        )
        assert _scores(result) == [("b", 0.5)]

    def test_wildcard_matching(self) -> None:
        result = perform_negotiation(
            [VT("a"), VT("*", {"q": 0.5})],
            [VT("a", {"q": 0.25}), VT("b")],
            wildcard_value_match,
            wildcard_value_compare,
        )
        assert _scores(result) == [("b", 0.5), ("a", 0.25)]

    def test_wildcard_does_not_override_explicit_value(self) -> None:
        result = perform_negotiation(
            [VT("a"), VT("*", {"q": 0.5})],
            [VT("a", {"q": 0.8}), VT("b")],
            wildcard_value_match,
            wildcard_value_compare,
        )
        assert _scores(result) == [("a", 0.8), ("b", 0.5)]

    def test_winner_is_server_value(self) -> None:
        result = perform_negotiation(
            [VT("*/*")],
            [VT("text/html", {"level": "1"})],
            MEDIA_RANGE.match,
            MEDIA_RANGE.compare,
        )
        assert result == [VT("text/html", {"level": "1"}, 1.0)]

    def test_ties_keep_server_order(self) -> None:
        result = perform_negotiation(
            [VT("*")],
            [VT("x"), VT("y"), VT("z")],
            wildcard_value_match,
            wildcard_value_compare,
        )
        assert [r.value for r in result] == ["x", "y", "z"]

    def test_does_not_mutate_inputs(self) -> None:
        clients = [VT("a", {"q": 0.5})]
        servers = [VT("a", {"q": 0.5})]
        result = perform_negotiation(clients, servers, wildcard_value_match, wildcard_value_compare)
        assert servers[0].score is None
        assert result[0].properties is not servers[0].properties

    def test_idempotent(self) -> None:
        clients = [VT("text/*", {"q": 0.5}), VT("text/html")]
        servers = [VT("text/plain"), VT("text/html", {"q": 0.7})]
        first = perform_negotiation(clients, servers, MEDIA_RANGE.match, MEDIA_RANGE.compare)
        second = perform_negotiation(clients, servers, MEDIA_RANGE.match, MEDIA_RANGE.compare)
        assert first == second


class TestRank:
    def test_reports_matched_preference(self) -> None:
        matches = rank([VT("text/*", {"q": 0.5}), VT("*/*", {"q": 0.1})], [VT("text/html")], MEDIA_RANGE)
        assert matches == [Match(VT("text/html"), VT("text/*", {"q": 0.5}), 0.5)]

    def test_most_specific_preference_wins_even_with_lower_q(self) -> None:
        matches = rank([VT("gzip", {"q": 0.2}), VT("*")], [VT("gzip")], WILDCARD)
        assert matches[0].preference.value == "gzip"
        assert matches[0].score == 0.2

    def test_logs_ranking(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="conneg.engine"):
            rank([VT("a")], [VT("a"), VT("b")], WILDCARD)
        assert "wildcard ranking: a=1" in caplog.text

    def test_logs_rejection(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="conneg.engine"):
            rank([VT("a", {"q": 0.0})], [VT("a")], WILDCARD)
        assert "Rejected a" in caplog.text
        assert "<empty>" in caplog.text
