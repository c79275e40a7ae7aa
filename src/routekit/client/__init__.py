"""
Specification-driven API client.
"""

__all__ = ["APIClient", "RequestInit", "RequestResult"]

from .client import APIClient
from .request import RequestInit
from .result import RequestResult
