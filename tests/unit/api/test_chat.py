"""Tests for the chat endpoints."""

import json

from onefact.core.exceptions import LLMError
from onefact.infrastructure.llm import LLMResponse

BEES = "Honey bees communicate the location of flowers to each other with a waggle dance."


def events(response) -> list[dict]:
    return [
        json.loads(line.removeprefix("data: "))
        for line in response.text.splitlines()
        if line.startswith("data: ")
    ]


def test_chat_reply(client, insert, fact_factory, llm):
    fact = insert(fact_factory(content=BEES))
    llm.complete.return_value = LLMResponse(content="They dance!", model="m", usage={})

    response = client.post(
        "/api/v1/chat",
        json={"fact_id": fact.id, "messages": [{"role": "user", "content": "How?"}]},
    )

    assert response.status_code == 200
    assert response.json() == {"role": "assistant", "content": "They dance!"}
    system = llm.complete.call_args.args[1][0]
    assert BEES in system["content"]


def test_chat_defaults_to_daily_fact(client, insert, fact_factory, llm):
    insert(fact_factory(content=BEES))
    llm.complete.return_value = LLMResponse(content="Sure.", model="m", usage={})

    response = client.post("/api/v1/chat", json={"messages": [{"role": "user", "content": "?"}]})

    assert response.status_code == 200
    assert BEES in llm.complete.call_args.args[1][0]["content"]


def test_chat_unknown_fact(client):
    response = client.post(
        "/api/v1/chat",
        json={"fact_id": "missing", "messages": [{"role": "user", "content": "Hi"}]},
    )

    assert response.status_code == 404


def test_chat_invalid_role(client):
    response = client.post(
        "/api/v1/chat",
        json={"messages": [{"role": "robot", "content": "Hi"}]},
    )

    assert response.status_code == 422


def test_chat_llm_failure(client, insert, fact_factory, llm):
    fact = insert(fact_factory(content=BEES))
    llm.complete.side_effect = LLMError("provider unavailable", model="m")

    response = client.post(
        "/api/v1/chat",
        json={"fact_id": fact.id, "messages": [{"role": "user", "content": "Hi"}]},
    )

    assert response.status_code == 502
    assert response.json()["error_type"] == "LLMError"


def test_chat_stream(client, insert, fact_factory, llm):
    fact = insert(fact_factory(content=BEES))

    async def chunks(config, messages):
        yield "They "
        yield "dance."

    llm.stream = chunks

    response = client.post(
        "/api/v1/chat/stream",
        json={"fact_id": fact.id, "messages": [{"role": "user", "content": "How?"}]},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    assert events(response) == [{"content": "They "}, {"content": "dance."}, {"done": True}]


def test_chat_stream_error_event(client, insert, fact_factory, llm):
    fact = insert(fact_factory(content=BEES))

    async def chunks(config, messages):
        yield "They "
        raise LLMError("connection reset", model="m")

    llm.stream = chunks

    response = client.post(
        "/api/v1/chat/stream",
        json={"fact_id": fact.id, "messages": [{"role": "user", "content": "How?"}]},
    )

    received = events(response)
    assert received[0] == {"content": "They "}
    assert "connection reset" in received[-1]["error"]
    assert {"done": True} not in received


def test_chat_stream_unknown_fact(client):
    response = client.post(
        "/api/v1/chat/stream",
        json={"fact_id": "missing", "messages": [{"role": "user", "content": "Hi"}]},
    )

    assert response.status_code == 404
