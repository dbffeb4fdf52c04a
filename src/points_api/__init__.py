"""
Points API
GraphQL access to daily point entries and per-user point summaries
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
