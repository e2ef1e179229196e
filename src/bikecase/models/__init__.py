"""Pydantic models for data bikecase exchanges with cargo and GitHub."""

from .gist import CreatedGist, Gist, GistFile, RemoteRecord
from .metadata import CargoMetadata, Package, Resolve, Target

__all__ = [
    "CargoMetadata",
    "CreatedGist",
    "Gist",
    "GistFile",
    "Package",
    "RemoteRecord",
    "Resolve",
    "Target",
]
