"""LLM integration layer.

This package is intentionally small and conservative:
- No prompt/output logging (questions and answers are user content).
- Configurable via environment variables.
- Treated as a pure/stateless function by callers.
"""
