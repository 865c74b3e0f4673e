"""
ShirtSort
Groups photos of a person by the color of the shirt they are wearing.
"""

__version__ = "1.0.0"
