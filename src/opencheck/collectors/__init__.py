"""
Data collectors for fetching package data from external sources.

This module provides async clients for the npm registry and the OSV
vulnerability database.
"""

from opencheck.collectors.base import Collector
from opencheck.collectors.osv import VulnerabilityClient
from opencheck.collectors.registry import RegistryClient

__all__ = [
    "Collector",
    "RegistryClient",
    "VulnerabilityClient",
]
