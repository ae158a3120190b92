"""
Base connector interface for all pharmacy sources.
"""

from abc import ABC, abstractmethod

from pharmaprice.schemas.search import ResultRecord


class BaseConnector(ABC):
    """Base class for all pharmacy search connectors."""

    def __init__(self, source_name: str):
        self.source_name = source_name

    @abstractmethod
    async def search(self, query: str) -> list[ResultRecord]:
        """
        Run one fetch-extract-match attempt for the query.

        Returns the relevant records (possibly empty).
        Raises FetchError when the page could not be fetched; retrying is
        the caller's job.
        """
        pass
