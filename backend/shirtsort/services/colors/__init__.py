"""
ShirtSort Colors Module

Provides region sampling, dominant color extraction, color naming and the
optional classifier override used to annotate each photo with one
representative garment color.
"""

__version__ = "1.0.0"
