"""
Export Parity

Verifies that two data-export archives are semantically equivalent, as the
oracle for backup/export/import round-trip testing.
"""

__version__ = "1.0.0"
