from __future__ import annotations

from unittest.mock import patch


def test_chat_route_returns_answer_for_smalltalk(client):
    with patch("app.chat.router.complete_chat", return_value="Hey! Ask me anything about Mantle."):
        resp = client.post("/v1/chat/route", json={"message": "hello"})
    assert resp.status_code == 200

    body = resp.json()
    assert body["kind"] == "ANSWER"
    assert body["assistant_message"] == "Hey! Ask me anything about Mantle."
    assert body["classification"]["category"] == "conversational"


def test_chat_route_returns_stake_proposal(client, wallet):
    resp = client.post(
        "/v1/chat/route",
        json={"message": "stake 10 MNT", "wallet_address": wallet, "chain_id": 5000},
    )
    assert resp.status_code == 200

    body = resp.json()
    assert body["kind"] == "TRANSACTION_REQUIRED"
    assert body["action"]["kind"] == "stake"
    assert body["preview"]["safety_level"] in ("high", "medium")
    assert body["preview"]["address_risk"] == "safe"


def test_chat_route_wallet_required(client):
    resp = client.post("/v1/chat/route", json={"message": "send 5 MNT to 0x1234567890123456789012345678901234567890"})
    assert resp.status_code == 200
    assert resp.json()["kind"] == "WALLET_REQUIRED"


def test_chat_route_rejects_unknown_fields(client):
    resp = client.post("/v1/chat/route", json={"message": "hi", "conversation_id": "abc"})
    assert resp.status_code == 422


def test_chat_route_echoes_request_id(client):
    with patch("app.chat.router.complete_chat", return_value="hi"):
        resp = client.post("/v1/chat/route", json={"message": "hi"}, headers={"X-Request-Id": "req-123"})
    assert resp.headers["X-Request-Id"] == "req-123"


def test_capabilities_lists_registry(client):
    resp = client.get("/v1/chat/capabilities")
    assert resp.status_code == 200
    caps = {c["id"]: c for c in resp.json()["capabilities"]}
    assert len(caps) == 12
    assert caps["mantle-swap"]["requires_transaction"] is True
    assert caps["mantle-info"]["category"] == "conversational"


def test_chat_route_accepts_system_history(client):
    with patch("app.chat.router.complete_chat", return_value="ok"):
        resp = client.post(
            "/v1/chat/route",
            json={"message": "hello", "history": [{"role": "system", "content": "be brief"}]},
        )
    assert resp.status_code == 200
