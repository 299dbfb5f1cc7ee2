"""llmarena — small deterministic games for benchmarking language models."""

__version__ = "0.1.0"
