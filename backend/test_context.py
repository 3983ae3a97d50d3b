import json

from assistant.ir.architecture import Architecture
from assistant.pipeline.context import UNKNOWN, build_context
from assistant.pipeline.prompts import (
    build_code_prompt,
    build_edit_prompt,
    build_info_prompt,
    build_infra_code_prompt,
    connections_list,
    services_list,
)


def test_context_lists_counts_prompt_and_nodes(architecture):
    text = build_context(architecture)

    assert "- Contains 2 services" in text
    assert "- Has 1 connections between services" in text
    assert "- Original requirement: Serverless order processing" in text
    assert "Service: API Gateway\nName: Orders API\nDescription: Public REST entry point" in text
    assert "Estimated Cost: $10/month" in text
    # second node has no optional fields
    assert "Service: DynamoDB\nName: Orders Table\nDescription: N/A\nEstimated Cost: N/A\nFault Tolerance: N/A" in text


def test_context_describes_connections(architecture):
    text = build_context(architecture)

    assert "Connection from Orders API (API Gateway) to Orders Table (DynamoDB)" in text
    assert "Data flow: Order writes" in text
    assert "Protocol: HTTPS" in text


def test_context_embeds_json_with_wire_keys(architecture):
    text = build_context(architecture)
    nodes_line = next(line for line in text.splitlines() if line.startswith("Nodes: "))
    nodes = json.loads(nodes_line[len("Nodes: "):])

    assert nodes[0]["data"]["estCost"] == "$10/month"
    assert nodes[0]["type"] == "default"


def test_context_tolerates_dangling_edges():
    architecture = Architecture.model_validate({
        "nodes": [{"id": "a", "position": {"x": 0, "y": 0}, "data": {"label": "A", "service": "S3"}}],
        "edges": [{"id": "e1", "source": "a", "target": "ghost"}, {"id": "e2", "source": "nope", "target": "a"}],
    })

    text = build_context(architecture)

    assert f"Connection from A (S3) to {UNKNOWN} ({UNKNOWN})" in text
    assert f"Connection from {UNKNOWN} ({UNKNOWN}) to A (S3)" in text
    assert "Data flow: Not specified" in text
    assert "Protocol: Not specified" in text
    assert "Original requirement: Not specified" in text


def test_context_of_empty_architecture():
    text = build_context(Architecture())
    assert "- Contains 0 services" in text
    assert "Nodes: []" in text


def test_infra_code_prompt(architecture):
    prompt = build_infra_code_prompt(architecture, "cdk please", "python")

    assert "1. API Gateway (Orders API): Public REST entry point" in prompt
    assert "2. DynamoDB (Orders Table): No description" in prompt
    assert "- Orders API → Orders Table (HTTPS)" in prompt
    assert "AWS CDK code in Python" in prompt
    assert 'USER REQUEST: "cdk please"' in prompt


def test_infra_code_prompt_defaults_to_typescript(architecture):
    prompt = build_infra_code_prompt(architecture, "cdk", "typescript")
    assert "Use TypeScript CDK (AWS CDK v2)" in prompt


def test_connections_list_with_missing_protocol_and_node():
    architecture = Architecture.model_validate({
        "nodes": [{"id": "a", "position": {"x": 0, "y": 0}, "data": {"label": "A", "service": "S3"}}],
        "edges": [{"id": "e1", "source": "a", "target": "ghost"}],
    })
    assert connections_list(architecture) == f"- A → {UNKNOWN} (default protocol)"
    assert services_list(architecture) == "1. S3 (A): No description"


def test_edit_prompt_has_history_and_tag_contract(architecture):
    history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
    prompt = build_edit_prompt(architecture, "add a cache", history)

    assert json.dumps(history) in prompt
    assert "User Request: add a cache" in prompt
    assert prompt.count("</architecture>") == 1
    assert prompt.count("</explanation>") == 1
    assert "Conversation history: []" in build_edit_prompt(architecture, "x")


def test_code_and_info_prompts(architecture):
    code_prompt = build_code_prompt(architecture, "a script")
    info_prompt = build_info_prompt(architecture, "why?", [{"role": "user", "content": "q"}])

    assert "<architecture>" not in code_prompt
    assert "User Request: a script" in code_prompt
    assert "Conversation history:" not in code_prompt
    assert '"content": "q"' in info_prompt
