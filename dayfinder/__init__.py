"""
dayfinder - find the dates a whole group is available.
"""

__version__ = "0.1.0"
