"""Multi-provider LLM client with side-by-side model comparison."""

__version__ = "0.1.0"
