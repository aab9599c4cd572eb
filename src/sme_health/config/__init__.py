"""
Configuration for SME Health Assessment
"""

from .settings import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config, get_config

__all__ = ['Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config', 'get_config']
