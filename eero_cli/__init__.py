"""
Eero CLI - Three-layer architecture for the eero cloud API.

Layers:
- core: Raw types, HTTP client and session store
- sdk: High-level EeroClient with nice ergonomics
- cli: Opinionated command-line interface
"""

from eero_cli.sdk import EeroClient

__version__ = "0.1.0"
__all__ = ["EeroClient"]
