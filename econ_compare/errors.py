# econ_compare/errors.py
from __future__ import annotations

from typing import Optional


class EconCompareError(Exception):
    """Base class for errors raised by econ_compare."""


class UpstreamFetchError(EconCompareError):
    """
    One (country, indicator) call to the upstream data source failed.

    The message never contains the request URL (it carries the API key).
    """

    def __init__(
        self,
        country: str,
        indicator: str,
        reason: str,
        status_code: Optional[int] = None,
    ) -> None:
        self.country = country
        self.indicator = indicator
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"{country}/{indicator}: {reason}")
