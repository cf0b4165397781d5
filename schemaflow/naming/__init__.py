"""Identity-based name lookup and synthetic id generation."""

from .lib import IdGenerator, dedupe_dictionary, find_name

__all__ = ["IdGenerator", "dedupe_dictionary", "find_name"]
