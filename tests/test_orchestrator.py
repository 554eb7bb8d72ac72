"""
Tests for the Search Orchestrator.

Content search and place lookup are mocked; extraction, aggregation,
sentiment and caching run for real.
"""

from unittest.mock import MagicMock

import pytest
from dishpulse.agents.places import fallback_map_url
from dishpulse.agents.sentiment import LexiconSentimentScorer, SentimentCombiner
from dishpulse.models.document import Comment, Post, SearchResults
from dishpulse.models.result import PlaceData
from dishpulse.orchestrator import SearchOrchestrator, get_target_channels
from dishpulse.utils.cache import CacheService


def echo_place(name, locality):
    return PlaceData(name=name, url=fallback_map_url(name, locality))


@pytest.fixture
def search_client():
    client = MagicMock()
    client.search.return_value = SearchResults()
    return client


@pytest.fixture
def place_client():
    client = MagicMock()
    client.lookup.side_effect = echo_place
    return client


def build_orchestrator(search_client, place_client, sentiment=None, max_workers=4):
    return SearchOrchestrator(
        search_client=search_client,
        place_client=place_client,
        cache=CacheService(ttl_seconds=60),
        sentiment=sentiment,
        max_workers=max_workers,
        clock=lambda: 1700000000.0
    )


def test_target_channels_for_city():
    assert get_target_channels("New York") == [
        "food", "restaurants", "foodit", "eatingout", "newyork", "newyorkfood", "AskReddit"
    ]


def test_target_channels_strip_all_whitespace():
    assert "sanfrancisco" in get_target_channels("San  Francisco")


def test_target_channels_drop_empty_and_duplicates():
    assert get_target_channels("") == ["food", "restaurants", "foodit", "eatingout", "AskReddit"]


def test_joes_pizza_end_to_end(search_client, place_client):
    search_client.search.return_value = SearchResults(posts=[
        Post(
            id="p1",
            title='Best "Joe\'s Pizza" in town',
            body='I went to "Joe\'s Pizza" and loved it!',
            channel="newyork"
        )
    ])
    orchestrator = build_orchestrator(search_client, place_client)

    response = orchestrator.search_and_aggregate("New York", "pizza")

    search_client.search.assert_called_once_with(
        "pizza restaurant", get_target_channels("New York")
    )
    assert response.query == "pizza"
    assert response.city == "New York"
    assert response.total_results == 1
    assert response.cached is False
    assert response.timestamp == 1700000000000

    restaurant = response.restaurants[0]
    assert restaurant.name == "Joe's Pizza"
    assert restaurant.mention_count == 2  # Title + body
    assert restaurant.sentiment_label == "positive"
    assert restaurant.map_url
    assert restaurant.sources == ["p1"]
    place_client.lookup.assert_called_once_with("Joe's Pizza", "New York")


def test_second_call_is_served_from_cache(search_client, place_client):
    search_client.search.return_value = SearchResults(
        posts=[Post(id="p1", title='"Corner Deli" rules', body="", channel="food")],
        comments=[Comment(id="c1", body='"Corner Deli" is great', channel="food")]
    )
    orchestrator = build_orchestrator(search_client, place_client)

    first = orchestrator.search_and_aggregate("Chicago", "sandwich")
    second = orchestrator.search_and_aggregate("Chicago", "sandwich")

    assert first.cached is False
    assert second.cached is True
    assert [r.to_dict() for r in first.restaurants] == [r.to_dict() for r in second.restaurants]
    assert second.timestamp == first.timestamp
    assert search_client.search.call_count == 1


def test_changing_a_returned_response_leaves_cache_intact(search_client, place_client):
    search_client.search.return_value = SearchResults(posts=[
        Post(id="p1", title='"Corner Deli" rules', body="", channel="food")
    ])
    orchestrator = build_orchestrator(search_client, place_client)

    first = orchestrator.search_and_aggregate("Chicago", "sandwich")
    first.restaurants[0].sources.append("tampered")
    first.restaurants[0].mention_count = 99
    first.restaurants.append(first.restaurants[0])

    second = orchestrator.search_and_aggregate("Chicago", "sandwich")
    second.restaurants[0].sources.append("again")
    third = orchestrator.search_and_aggregate("Chicago", "sandwich")

    for response in (second, third):
        assert response.cached is True
        assert len(response.restaurants) == 1
        assert response.restaurants[0].mention_count == 1
    assert third.restaurants[0].sources == ["p1"]


def test_cache_key_ignores_case(search_client, place_client):
    orchestrator = build_orchestrator(search_client, place_client)

    orchestrator.search_and_aggregate("New York", "Pizza")
    response = orchestrator.search_and_aggregate("new york", "pizza")

    assert response.cached is True
    assert response.city == "New York"
    assert search_client.search.call_count == 1


def test_search_failure_returns_empty_response(search_client, place_client):
    search_client.search.side_effect = RuntimeError("Reddit API credentials not configured")
    orchestrator = build_orchestrator(search_client, place_client)

    response = orchestrator.search_and_aggregate("Boston", "chowder")

    assert response.restaurants == []
    assert response.total_results == 0
    assert response.cached is False

    # Failures are not cached
    orchestrator.search_and_aggregate("Boston", "chowder")
    assert search_client.search.call_count == 2


def test_enrichment_failure_drops_only_that_establishment(search_client, place_client):
    search_client.search.return_value = SearchResults(posts=[
        Post(id="p1", title='"Good Place" and "Bad Place"', body="", channel="food")
    ])

    def lookup(name, locality):
        if name == "Bad Place":
            raise TimeoutError("places timed out")
        return echo_place(name, locality)

    place_client.lookup.side_effect = lookup
    orchestrator = build_orchestrator(search_client, place_client)

    response = orchestrator.search_and_aggregate("Austin", "bbq")

    assert [r.name for r in response.restaurants] == ["Good Place"]
    assert response.total_results == 1


@pytest.mark.parametrize("max_workers", [1, 4])
def test_results_sorted_by_mentions_then_sentiment(search_client, place_client, max_workers):
    search_client.search.return_value = SearchResults(posts=[
        Post(id="p1", title='"Alpha Spot"', body="", channel="food"),
        Post(id="p2", title='"Beta Spot" and "Beta Spot"', body="", channel="food"),
        Post(id="p3", title='"Gamma Spot"', body='"Gamma Spot" is great', channel="food"),
        Post(id="p4", title='"Delta Spot"', body="", channel="food"),
    ])
    sentiment = SentimentCombiner(scorer=LexiconSentimentScorer(lexicon={"great": 3.0}))
    orchestrator = build_orchestrator(search_client, place_client, sentiment, max_workers)

    response = orchestrator.search_and_aggregate("Denver", "burgers")

    assert [(r.name, r.mention_count) for r in response.restaurants] == [
        ("Gamma Spot", 2),
        ("Beta Spot", 2),
        ("Alpha Spot", 1),
        ("Delta Spot", 1),  # Tie with Alpha keeps discovery order
    ]
    assert response.restaurants[0].sentiment_score > response.restaurants[1].sentiment_score


def test_sentiment_uses_contributing_documents_only(search_client, place_client):
    search_client.search.return_value = SearchResults(
        posts=[Post(id="p1", title='"Happy Diner"', body="great great", channel="food")],
        comments=[
            Comment(id="c1", body='"Sad Diner" awful', channel="food"),
            Comment(id="c2", body="unrelated great", channel="food"),
        ]
    )
    sentiment = SentimentCombiner(
        scorer=LexiconSentimentScorer(lexicon={"great": 3.0, "awful": -3.0})
    )
    orchestrator = build_orchestrator(search_client, place_client, sentiment)

    response = orchestrator.search_and_aggregate("Miami", "brunch")
    by_name = {r.name: r for r in response.restaurants}

    assert by_name["Happy Diner"].sentiment_label == "positive"
    assert by_name["Sad Diner"].sentiment_label == "negative"
    assert by_name["Sad Diner"].sources == ["c1"]


def test_place_display_name_replaces_mentioned_name(search_client, place_client):
    search_client.search.return_value = SearchResults(posts=[
        Post(id="p1", title='"joes pizza"', body="", channel="food")
    ])
    place_client.lookup.side_effect = lambda name, locality: PlaceData(
        name="Joe's Pizza", url="https://maps.example/joes", place_id="abc"
    )
    orchestrator = build_orchestrator(search_client, place_client)

    response = orchestrator.search_and_aggregate("New York", "pizza")

    assert response.restaurants[0].name == "Joe's Pizza"
    assert response.restaurants[0].map_url == "https://maps.example/joes"


def test_empty_search_results_give_empty_response(search_client, place_client):
    orchestrator = build_orchestrator(search_client, place_client)

    response = orchestrator.search_and_aggregate("Nowhere", "anything")

    assert response.restaurants == []
    assert response.total_results == 0
    place_client.lookup.assert_not_called()


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
