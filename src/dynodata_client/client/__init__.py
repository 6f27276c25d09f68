"""
OData Client module

HTTP client for OData v4 APIs.
"""

from .interface import IODataClient
from .odata_client import ODataClient

__all__ = [
    "IODataClient",
    "ODataClient",
]
