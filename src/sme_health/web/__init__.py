"""
Web Module for SME Health Assessment
"""

from .app import create_app

__all__ = ['create_app']
