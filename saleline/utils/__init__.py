"""
Utilities Package
"""

__all__ = ['logging_config']
