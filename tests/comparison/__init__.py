"""
Export comparison test helpers.

Builds export trees and archives shared by unit and integration tests.
"""

__all__ = ["ExportFactory"]

from .export_factory import ExportFactory
