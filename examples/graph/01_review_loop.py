"""
Review Loop Example: write, score and revise until the draft passes.

This example demonstrates:
1. Declaring a graph as JSON-style data
2. LLM, transform and condition nodes working on shared state
3. An APPEND state key collecting every draft
4. A conditional edge looping back on the next_node key
5. Streaming node updates as they happen

Requires OPENAI_API_KEY. The loop has no step limit of its own, so the
attempt counter and the outer timeout bound it here.
"""

import asyncio

from relaygraph.core.agent import LLMAgent
from relaygraph.core.graph import GraphBuilder, GraphSpec
from relaygraph.core.logging import LogComponent, LogLevel, configure_logging, get_logger

logger = get_logger(LogComponent.WORKFLOW)

REVIEW_GRAPH = {
    "name": "review-loop",
    "description": "Draft a paragraph and revise it until a reviewer scores it 80 or more",
    "stateKeys": [{"key": "drafts", "append": True}],
    "initialState": {"attempts": 0},
    "nodes": [
        {
            "id": "write",
            "type": "LLM_NODE",
            "config": {
                "input_key": "request",
                "output_key": "draft",
                "system_prompt": "Write one clear paragraph. Apply any feedback you are given.",
                "temperature": 0.7,
            },
        },
        {
            "id": "keep",
            "type": "TRANSFORM_NODE",
            "config": {"transform_type": "EXTRACT", "input_keys": ["draft"], "output_key": "drafts"},
        },
        {
            "id": "review",
            "type": "LLM_NODE",
            "config": {
                "input_key": "draft",
                "output_key": "review",
                "system_prompt": "Score the paragraph from 0 to 100. Reply as 'score: N' and one line of feedback.",
                "temperature": 0,
            },
        },
        {
            "id": "score",
            "type": "TRANSFORM_NODE",
            "config": {"transform_type": "PARSE_NUMBER", "input_keys": ["review"], "output_key": "score"},
        },
        {
            "id": "count",
            "type": "TRANSFORM_NODE",
            "config": {"transform_type": "INCREMENT", "input_keys": ["attempts"], "output_key": "attempts"},
        },
        {
            "id": "verdict",
            "type": "TRANSFORM_NODE",
            "config": {"transform_type": "THRESHOLD_CHECK", "input_keys": ["score"], "output_key": "verdict"},
        },
        {
            "id": "route",
            "type": "CONDITION_NODE",
            "config": {
                "condition_field": "verdict",
                "routes": {"PASS": "END", "NEED_IMPROVEMENT": "feedback"},
            },
        },
        {
            "id": "feedback",
            "type": "TRANSFORM_NODE",
            "config": {
                "transform_type": "FORMAT",
                "input_keys": ["draft", "review"],
                "output_key": "request",
            },
        },
    ],
    "edges": [
        {"from": "START", "to": "write", "kind": "simple"},
        {"from": "write", "to": "keep", "kind": "simple"},
        {"from": "keep", "to": "review", "kind": "simple"},
        {"from": "review", "to": "score", "kind": "simple"},
        {"from": "score", "to": "count", "kind": "simple"},
        {"from": "count", "to": "verdict", "kind": "simple"},
        {"from": "verdict", "to": "route", "kind": "simple"},
        {"from": "route", "kind": "conditional", "routes": {"feedback": "feedback", "END": "END"}},
        {"from": "feedback", "to": "write", "kind": "simple"},
    ],
}


async def main():
    configure_logging(
        default_level=LogLevel.INFO,
        component_levels={LogComponent.NODES: LogLevel.WARNING},
    )

    graph = GraphBuilder(LLMAgent(name="writer")).build(GraphSpec.model_validate(REVIEW_GRAPH))

    async def run():
        async for node_id, update in graph.stream({"request": "Explain what a state graph is."}):
            if node_id == "score":
                logger.info(f"Reviewer score: {update['score']}")
            if update.get("attempts", 0) >= 3:
                logger.warning("Giving up after three attempts")
                break

    await asyncio.wait_for(run(), timeout=300)


if __name__ == "__main__":
    asyncio.run(main())
