"""Just One: a cooperative word-guessing game played by LLM agents."""

__version__ = "0.1.0"
