"""Generate React sites with an LLM, build them and publish them to Walrus Sites over HTTP."""

__version__ = "0.1.0"