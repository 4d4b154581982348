"""
Data loaders for Datawise
"""

from .base import DataLoader
from .csv_loader import CSVLoader
from .excel_loader import ExcelLoader
from .factory import get_loader

__all__ = ['DataLoader', 'CSVLoader', 'ExcelLoader', 'get_loader']
