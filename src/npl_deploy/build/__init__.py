"""Packaging of source trees for deployment."""

from .archive import Archive, ArchiveBuilder

__all__ = ["Archive", "ArchiveBuilder"]
