"""Pipeline infrastructure for bucket-based bundle processing."""

from .plumbing import Filter, Pipe, Pipeline, Token, dump_token, load_token

__all__ = ["Token", "Pipe", "Filter", "Pipeline", "load_token", "dump_token"]
