"""Common helpers for API responses."""
from __future__ import annotations

from typing import TypeVar

from fastapi import Query
from fastapi.exceptions import RequestValidationError

T = TypeVar("T")


def data_response(payload: T) -> dict[str, T]:
    """Wrap a payload in the standard data envelope."""

    return {"data": payload}


def parse_id_list(tag_ids: str | None = Query(None, description="Comma separated tag ids")) -> list[int]:
    """Read ``?tag_ids=1,2`` into a list of positive integers.

    Any token that is not a positive integer rejects the request with 422.
    """

    if not tag_ids:
        return []
    values: list[int] = []
    for chunk in tag_ids.split(","):
        chunk = chunk.strip()
        if not chunk.isdigit() or int(chunk) <= 0:
            raise RequestValidationError(
                [
                    {
                        "type": "int_parsing",
                        "loc": ("query", "tag_ids"),
                        "msg": "Input should be a comma separated list of positive integers",
                        "input": chunk,
                    }
                ]
            )
        values.append(int(chunk))
    return values
