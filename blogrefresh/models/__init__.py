"""Data models for blogrefresh."""

from .article import Article, decode_reference_links, encode_reference_links
from .base import DBModel

__all__ = ["Article", "DBModel", "decode_reference_links", "encode_reference_links"]
