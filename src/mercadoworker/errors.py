"""Exceptions raised by the catalog import pipeline."""

from __future__ import annotations

from typing import Optional


class ConfigurationError(Exception):
    """Invalid worker configuration value."""


class FetchError(Exception):
    """Error from a Mercado Libre API call."""

    def __init__(
        self, endpoint: str, message: str, status_code: Optional[int] = None
    ) -> None:
        self.endpoint = endpoint
        self.message = message
        self.status_code = status_code
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.endpoint}: HTTP {self.status_code} {self.message}"
        return f"{self.endpoint}: {self.message}"


class PaginationError(Exception):
    """One or more search pages failed under the abort policy."""

    def __init__(self, failed_offsets: list[int]) -> None:
        self.failed_offsets = sorted(failed_offsets)
        super().__init__(
            f"{len(self.failed_offsets)} search page(s) failed at offsets "
            f"{self.failed_offsets}"
        )
