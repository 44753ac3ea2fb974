"""
Services package.
"""

from .output_service import OutputService

__all__ = ["OutputService"]
