"""HTTP capability shared by benchmark actions and the report sink."""

from .client import HttpClient, Response

__all__ = ["HttpClient", "Response"]
