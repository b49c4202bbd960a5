"""Server tools package - elevation tools."""

from .elevation_tools import elevation_server

__all__ = ["elevation_server"]
