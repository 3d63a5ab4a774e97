"""Tests for hederabot.agent.session: scoped reasoner + registry + agent."""

import json

import httpx
import pytest

from hederabot.agent.session import build_session, create_session


def nilai_transport(replies, seen):
    replies = list(replies)

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 0,
            "model": "m",
            "choices": [{
                "index": 0,
                "message": {"role": "assistant", "content": replies.pop(0)},
                "finish_reason": "stop",
            }],
        })

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def mirror_transport(seen):
    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json={"account": "0.0.5005", "balance": {"balance": 250_000_000}})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestBuildSession:
    def test_default_credentials(self, config):
        session = build_session(config)
        assert session.credentials.account_id == "0.0.1001"
        assert session.registry.frozen
        assert session.registry.list_names() == ["get_hbar_balance_query_tool", "get_account_query_tool"]
        assert session.agent.model == "meta-llama/Llama-3.1-8B-Instruct"

    def test_request_credentials_override(self, config):
        session = build_session(config, account_id="0.0.5005", private_key="other-key")
        assert session.credentials.account_id == "0.0.5005"
        assert session.credentials.private_key == "other-key"
        assert session.config.hedera.account_id == "0.0.5005"
        assert config.hedera.account_id == "0.0.1001"

    def test_sessions_share_nothing(self, config):
        first = build_session(config)
        second = build_session(config, account_id="0.0.5005")
        assert first.registry is not second.registry
        assert first.reasoner is not second.reasoner
        assert first.mirror is not second.mirror

    def test_transfer_tool_with_submitter(self, config):
        async def submitter(credentials, transfers, memo):
            return {"status": "SUCCESS"}

        session = build_session(config, transfer_submitter=submitter)
        assert "transfer_hbar_tool" in session.registry

    def test_private_key_not_in_repr(self, config):
        session = build_session(config)
        assert "302e0201" not in repr(session.credentials)


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_end_to_end_balance(self, config):
        reasoner_requests, mirror_paths = [], []
        replies = ['{"toolName": "get_hbar_balance_query_tool", "parameters": {}}', "You have 2.5 HBAR."]

        async with create_session(
            config,
            account_id="0.0.5005",
            reasoner_http_client=nilai_transport(replies, reasoner_requests),
            mirror_http_client=mirror_transport(mirror_paths),
        ) as session:
            result = await session.dispatch("What's my balance?")

        assert result.content == "You have 2.5 HBAR."
        assert mirror_paths == ["/api/v1/accounts/0.0.5005"]
        assert reasoner_requests[0]["messages"][1]["content"] == "What's my balance?\n\nAccount ID: 0.0.5005"
        assert '{"accountId": "0.0.5005", "hbars": "2.5"}' in reasoner_requests[1]["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_clients_closed_on_exit(self, config):
        mirror_client = mirror_transport([])
        async with create_session(config, mirror_http_client=mirror_client) as session:
            pass
        assert session.reasoner.openai.is_closed()
