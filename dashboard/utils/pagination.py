"""Page-size parsing and link arguments for the invoice listing."""

from __future__ import annotations

from typing import Dict, List, Tuple, Union

from flask import request

PAGINATION_SIZES: Tuple[int, ...] = (10, 25, 50, 100)

LinkArgs = Dict[str, Union[str, List[str]]]


def get_per_page(param: str = "per_page", default: int = 10) -> int:
    """Page size requested in the query string, limited to the offered sizes."""

    requested = request.args.get(param, type=int)
    for candidate in (requested, default):
        if candidate in PAGINATION_SIZES:
            return candidate
    return PAGINATION_SIZES[0]


def build_pagination_args(
    per_page: int,
    *,
    page_param: str = "page",
    per_page_param: str = "per_page",
) -> LinkArgs:
    """Carry the listing's search and status filters into page links.

    The page number is left out so each link can supply its own, and the
    validated page size replaces whatever was requested.
    """

    skipped = {page_param, per_page_param}
    args: LinkArgs = {
        key: values if len(values) > 1 else values[0]
        for key, values in request.args.lists()
        if key not in skipped and values
    }
    args[per_page_param] = str(per_page)
    return args
