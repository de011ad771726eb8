"""
Azure Provider package.

This package provides the Azure implementation of the ResourceProvider protocol.
"""

from .naming import AzureNaming
from .provider import AzureProvider

__all__ = ["AzureNaming", "AzureProvider"]
