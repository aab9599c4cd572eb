"""
SME Health Assessment

Business health scoring and risk correlation for small and medium
enterprises.
"""

__version__ = "0.1.0"
