"""
Evaporative Cooling feature selection.
"""

__version__ = "0.1.0"
