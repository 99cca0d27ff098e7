"""Tests for the relaygraph graph engine.

1. State management (test_state.py)
   - Merge strategies
   - Snapshots and isolation between executions

2. Building (test_builder.py)
   - Structural validation
   - Node type registry and node configuration

3. Execution (test_base.py, test_runner.py)
   - Simple and conditional routing
   - Error continuation
   - Streaming and the JSON runner

4. Node types (nodes/)
   - LLM, condition and transform nodes
"""
