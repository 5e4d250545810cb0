"""Repository client shared by the CLI and the sync engine."""

from .client import StandardSiteClient, XrpcError

__all__ = ["StandardSiteClient", "XrpcError"]
