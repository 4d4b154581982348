"""
Abstract base class for data loaders
"""

from abc import ABC, abstractmethod
from typing import List, Tuple


class DataLoader(ABC):
    """
    Abstract base class for loading tabular data from files.

    All loaders must implement the load() method which returns:
    - records: List of dictionaries, one per row, all sharing the header keys
    - headers: List of column names in file order
    """

    @abstractmethod
    def load(self) -> Tuple[List[dict], List[str]]:
        """
        Load data from source.

        Returns:
            Tuple of (records, headers)
        """
        pass
