"""Basic tests for batched Graph calls using MockTransport.

These tests don't require network access or tokens and can be run in CI/CD.
"""

import json

import pytest

from graph_batch import (
    ClientError,
    GraphAPI,
    GraphCollection,
    HttpComponent,
    ServerError,
    is_error,
)
from graph_batch.testing import MockTransport, batch_response, sub_response


def identity_shaper(result, owner):
    return result


@pytest.mark.asyncio
async def test_two_gets_come_back_in_order():
    """Results are returned in the order the calls were queued."""
    transport = MockTransport(
        [
            batch_response(
                [
                    {"code": 200, "body": '{"id":"1"}', "headers": []},
                    {"code": 200, "body": '{"data":[]}', "headers": []},
                ]
            )
        ]
    )
    api = GraphAPI(access_token="token", transport=transport, result_shaper=identity_shaper)

    batch = api.batch()
    await batch.graph_call("/me")
    await batch.graph_call("/me/friends")
    results = await batch.execute()

    assert results == [{"id": "1"}, {"data": []}]
    assert transport.call_count == 1


@pytest.mark.asyncio
async def test_outer_request_is_single_post():
    """The whole batch goes out as one POST to the API root."""
    transport = MockTransport([batch_response([sub_response({"id": "1"})])])
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.get_object("me")
    await batch.execute()

    request = transport.requests[0]
    assert request.path == "/"
    assert request.http_verb == "POST"
    assert request.args["access_token"] == "token"
    assert json.loads(request.args["batch"]) == [{"method": "GET", "relative_url": "me"}]


@pytest.mark.asyncio
async def test_post_processing_applied_to_slot():
    """A call's post-processing callback replaces its slot value."""
    transport = MockTransport([batch_response([{"code": 200, "body": '{"id":"42"}'}])])
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.graph_call("me", post_processing=lambda result: result["id"])

    assert await batch.execute() == ["42"]


@pytest.mark.asyncio
async def test_skipped_slot_is_none():
    """A null entry yields None without consulting the error classifier."""
    classified = []

    class RecordingClassifier:
        def classify(self, status, body, headers):
            classified.append(status)
            return None

    transport = MockTransport(
        [batch_response([sub_response({"id": "1"}), None, sub_response({"id": "3"})])]
    )
    api = GraphAPI(access_token="token", transport=transport, error_classifier=RecordingClassifier())

    batch = api.batch()
    for path in ("1", "2", "3"):
        await batch.get_object(path)
    results = await batch.execute()

    assert results == [{"id": "1"}, None, {"id": "3"}]
    # outer response plus the two non-null slots
    assert classified == [200, 200, 200]


@pytest.mark.asyncio
async def test_failed_call_does_not_affect_siblings():
    """One sub-response with an error status leaves the others intact."""
    error_body = json.dumps(
        {"error": {"type": "GraphMethodException", "code": 100, "message": "Unsupported get"}}
    )
    transport = MockTransport(
        [
            batch_response(
                [
                    sub_response({"id": "1"}),
                    sub_response(error_body, code=400),
                    sub_response({"id": "3"}),
                ]
            )
        ]
    )
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    for path in ("1", "missing", "3"):
        await batch.get_object(path)
    results = await batch.execute()

    assert len(results) == 3
    assert results[0] == {"id": "1"}
    assert results[2] == {"id": "3"}
    assert isinstance(results[1], ClientError)
    assert is_error(results[1])
    assert results[1].error_code == 100
    assert results[1].http_status == 400


@pytest.mark.asyncio
async def test_error_slot_goes_through_post_processing():
    """The callback receives the per-call error and its return value fills the slot."""
    seen = []
    error_body = {"error": {"type": "GraphMethodException", "code": 100, "message": "Nope"}}
    transport = MockTransport(
        [batch_response([sub_response(error_body, code=400), sub_response({"id": "2"})])]
    )
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.graph_call("missing", post_processing=lambda r: seen.append(r) or "processed")
    await batch.graph_call("2", post_processing=lambda r: r["id"])
    results = await batch.execute()

    assert results == ["processed", "2"]
    assert len(seen) == 1
    assert is_error(seen[0])
    assert seen[0].error_code == 100


@pytest.mark.asyncio
async def test_error_slot_without_post_processing_holds_error():
    transport = MockTransport([batch_response([sub_response('{"error": {}}', code=500)])])
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.graph_call("me")
    results = await batch.execute()

    assert isinstance(results[0], ServerError)


@pytest.mark.asyncio
async def test_many_calls_keep_order():
    """N calls produce exactly N results in enqueue order."""
    count = 25
    transport = MockTransport(
        [batch_response([sub_response({"n": i}) for i in range(count)])]
    )
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    for i in range(count):
        await batch.get_object(str(i), post_processing=lambda result: result["n"])

    assert await batch.execute() == list(range(count))


@pytest.mark.asyncio
async def test_pageable_slot_becomes_collection():
    """Slots with a data list are wrapped for follow-up paging."""
    page = {
        "data": [{"id": "a"}, {"id": "b"}],
        "paging": {"next": "https://graph.facebook.com/v19.0/me/friends?after=xyz&limit=2"},
    }
    transport = MockTransport([batch_response([sub_response(page)])])
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.get_connections("me", "friends")
    (friends,) = await batch.execute()

    assert isinstance(friends, GraphCollection)
    assert friends == [{"id": "a"}, {"id": "b"}]
    assert friends.api is api
    assert friends.next_page_params() == ("me/friends", {"after": "xyz", "limit": "2"})


@pytest.mark.asyncio
async def test_collection_next_page_goes_through_owner_api():
    """Paging from a batch result issues a regular call on the owner API."""
    page = {"data": [{"id": "a"}], "paging": {"next": "https://graph.facebook.com/me/friends?after=xyz"}}
    transport = MockTransport(
        [
            batch_response([sub_response(page)]),
            batch_response({"data": [{"id": "b"}]}),
        ]
    )
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.get_connections("me", "friends")
    (friends,) = await batch.execute()
    next_page = await friends.next_page()

    assert next_page == [{"id": "b"}]
    request = transport.requests[1]
    assert request.path == "me/friends"
    assert request.args["after"] == "xyz"


@pytest.mark.asyncio
async def test_status_component():
    """Requesting the status yields the integer code whatever the body is."""
    transport = MockTransport([batch_response([sub_response("not json at all", code=201)])])
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.get_object("me", options={"http_component": "status"})

    assert await batch.execute() == [201]


@pytest.mark.asyncio
async def test_headers_component_last_duplicate_wins():
    """Header pairs become a dict, later duplicates overriding earlier ones."""
    headers = [("ETag", "first"), ("Content-Type", "text/javascript"), ("ETag", "second")]
    transport = MockTransport([batch_response([sub_response({}, headers=headers)])])
    api = GraphAPI(access_token="token", transport=transport)

    batch = api.batch()
    await batch.get_object("me", options={"httpComponent": HttpComponent.HEADERS})

    assert await batch.execute() == [{"ETag": "second", "Content-Type": "text/javascript"}]
