"""Tests for GraphCollection paging."""

import pytest

from graph_batch import GraphCollection


class RecordingOwner:
    access_token = "token"
    app_secret = None

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    async def graph_call(self, path, args=None, verb="get", options=None, post_processing=None):
        self.calls.append((path, args))
        return self.result


def test_evaluate_wraps_data_lists():
    owner = RecordingOwner()
    response = {"data": [1, 2, 3], "paging": {"cursors": {"after": "x"}}, "summary": {"total_count": 9}}

    collection = GraphCollection.evaluate(response, owner)

    assert isinstance(collection, GraphCollection)
    assert collection == [1, 2, 3]
    assert collection.paging == {"cursors": {"after": "x"}}
    assert collection.summary == {"total_count": 9}
    assert collection.raw_response is response
    assert collection.api is owner


@pytest.mark.parametrize(
    "value",
    [{"id": "1"}, {"data": "not a list"}, [1, 2], "text", 42, True, None],
)
def test_evaluate_passes_other_values_through(value):
    assert GraphCollection.evaluate(value, RecordingOwner()) is value


def test_parse_page_url_strips_host_and_version():
    path, params = GraphCollection.parse_page_url(
        "https://graph.facebook.com/v19.0/12345/feed?limit=25&until=1700000000&access_token=abc"
    )

    assert path == "12345/feed"
    assert params == {"limit": "25", "until": "1700000000", "access_token": "abc"}


def test_parse_page_url_without_version():
    assert GraphCollection.parse_page_url("https://graph.facebook.com/me/friends?after=q") == (
        "me/friends",
        {"after": "q"},
    )


def test_no_paging_means_no_pages():
    collection = GraphCollection({"data": []}, RecordingOwner())

    assert collection.next_page_params() is None
    assert collection.previous_page_params() is None


@pytest.mark.asyncio
async def test_last_page_returns_none_without_request():
    owner = RecordingOwner()
    collection = GraphCollection({"data": [1]}, owner)

    assert await collection.next_page() is None
    assert owner.calls == []


@pytest.mark.asyncio
async def test_previous_page_with_extra_params():
    owner = RecordingOwner(result=["earlier"])
    collection = GraphCollection(
        {"data": [1], "paging": {"previous": "https://graph.facebook.com/v2.0/me/posts?before=b"}},
        owner,
    )

    assert await collection.previous_page({"limit": 10}) == ["earlier"]
    assert owner.calls == [("me/posts", {"before": "b", "limit": 10})]
