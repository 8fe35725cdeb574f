"""
Helpers for the admin data provider's list contract.
"""

from fastapi import Response

TOTAL_COUNT_HEADER = "x-total-count"


def set_total_count(response: Response, total: int) -> None:
    """Expose the total match count so the client can compute page counts."""
    response.headers[TOTAL_COUNT_HEADER] = str(total)
    response.headers["Access-Control-Expose-Headers"] = TOTAL_COUNT_HEADER
