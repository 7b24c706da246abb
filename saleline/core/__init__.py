"""
Core Kernel Module

Foundations shared by every engine component.

Components:
- numbers: Exact decimal arithmetic and rounding division
- errors: Exception hierarchy
- enums: Coded enumerations with lenient parsing
- config: Engine settings (division precision, log level)

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['numbers', 'errors', 'enums', 'config']
