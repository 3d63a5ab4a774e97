"""Tests for hederabot.agent.decision: parsing the reasoner's tool choice."""

from hederabot.agent.decision import ActionIntent, DirectAnswer, parse_decision


class TestToolCalls:
    def test_tool_call_with_parameters(self):
        raw = '{"toolName": "transfer_hbar_tool", "parameters": {"transfers": [{"accountId": "0.0.800", "amount": 10}]}}'
        decision = parse_decision(raw)
        assert decision == ActionIntent(
            "transfer_hbar_tool",
            {"transfers": [{"accountId": "0.0.800", "amount": 10}]},
        )

    def test_surrounding_whitespace_is_trimmed(self):
        decision = parse_decision('\n  {"toolName": "get_hbar_balance_query_tool", "parameters": {}}  \n')
        assert decision == ActionIntent("get_hbar_balance_query_tool", {})

    def test_missing_parameters_default_to_empty(self):
        decision = parse_decision('{"toolName": "get_hbar_balance_query_tool"}')
        assert decision == ActionIntent("get_hbar_balance_query_tool", {})

    def test_null_parameters_default_to_empty(self):
        decision = parse_decision('{"toolName": "get_hbar_balance_query_tool", "parameters": null}')
        assert decision.parameters == {}

    def test_parameters_are_not_coerced(self):
        decision = parse_decision('{"toolName": "t", "parameters": {"amount": "10.5", "flag": true}}')
        assert decision.parameters == {"amount": "10.5", "flag": True}


class TestDirectAnswers:
    def test_prose_is_a_direct_answer(self):
        raw = "Hello! I can help you check balances."
        assert parse_decision(raw) == DirectAnswer(raw)

    def test_raw_text_is_kept_untrimmed(self):
        raw = "  Sure, here you go.\n"
        assert parse_decision(raw).text == raw

    def test_json_embedded_in_prose_is_not_extracted(self):
        raw = 'I will use {"toolName": "get_hbar_balance_query_tool", "parameters": {}}'
        assert parse_decision(raw) == DirectAnswer(raw)

    def test_json_string_literal_is_a_direct_answer(self):
        raw = '"Hello! I can help you check HBAR balances and send transfers."'
        assert parse_decision(raw) == DirectAnswer(raw)

    def test_json_array_is_a_direct_answer(self):
        raw = '[{"toolName": "get_hbar_balance_query_tool"}]'
        assert isinstance(parse_decision(raw), DirectAnswer)

    def test_object_without_tool_name(self):
        raw = '{"answer": "42"}'
        assert parse_decision(raw) == DirectAnswer(raw)

    def test_empty_tool_name(self):
        assert isinstance(parse_decision('{"toolName": "", "parameters": {}}'), DirectAnswer)

    def test_non_object_parameters(self):
        raw = '{"toolName": "transfer_hbar_tool", "parameters": ["0.0.800", 10]}'
        assert parse_decision(raw) == DirectAnswer(raw)

    def test_empty_reply(self):
        assert parse_decision("") == DirectAnswer("")
