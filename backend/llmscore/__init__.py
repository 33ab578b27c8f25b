"""LLMScore backend: AI search optimization scoring with a credit ledger."""

__version__ = "1.0.0"
