"""
Data Manager Module
===================

Responsibility:
- Loading of raw attribute tables (CSV, text, Parquet, Excel).
- Validation of attribute names, types and missing values.
- The Dataset abstraction with its active-attribute mask.
"""

from .dataset import Dataset
from .data_manager import DataManager

__all__ = ['Dataset', 'DataManager']
