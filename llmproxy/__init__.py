"""Provider-normalization service exposing one request shape for several LLM APIs."""

__version__ = "0.1.0"
