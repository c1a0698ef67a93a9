# app/domain/services/labels.py
"""
Display labels for the dashboard: pagination page lists and the revenue
chart's Y axis. Pure functions, no I/O.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

from app.domain.models.dashboard import RevenuePoint

ELLIPSIS = "..."
AXIS_STEP = 1000

PageToken = Union[int, str]


def generate_pagination(current_page: int, total_pages: int) -> list[PageToken]:
    """
    Return the page tokens shown under a paginated table.

    Up to 7 pages are listed in full. Longer ranges keep the first and last
    pages, the neighbourhood of ``current_page``, and collapse the rest into
    ``ELLIPSIS`` markers.

    ``current_page`` is clamped into ``[1, total_pages]``; a non-positive
    ``total_pages`` yields an empty list.
    """
    if total_pages <= 0:
        return []

    current_page = min(max(current_page, 1), total_pages)

    if total_pages <= 7:
        return list(range(1, total_pages + 1))

    # Among the first 3 pages: first 3, ellipsis, last 2
    if current_page <= 3:
        return [1, 2, 3, ELLIPSIS, total_pages - 1, total_pages]

    # Among the last 3 pages: first 2, ellipsis, last 3
    if current_page >= total_pages - 2:
        return [1, 2, ELLIPSIS, total_pages - 2, total_pages - 1, total_pages]

    return [
        1,
        ELLIPSIS,
        current_page - 1,
        current_page,
        current_page + 1,
        ELLIPSIS,
        total_pages,
    ]


def generate_y_axis(revenue: Sequence[RevenuePoint]) -> tuple[list[str], int]:
    """
    Return ``(labels, top_label)`` for the revenue chart.

    ``top_label`` is the highest monthly revenue rounded up to the next
    thousand; labels run from it down to zero in steps of 1000, e.g. ``"5 K €"``.

    Raises ``ValueError`` when *revenue* is empty; callers render a
    "no data" state instead.
    """
    if not revenue:
        raise ValueError("generate_y_axis() needs at least one revenue point")

    highest_record = max(point.revenue for point in revenue)
    top_label = math.ceil(highest_record / AXIS_STEP) * AXIS_STEP

    labels = [f"{i // AXIS_STEP} K €" for i in range(top_label, -1, -AXIS_STEP)]
    return labels, top_label


def bar_height(value: int, top_label: int, chart_height: int) -> float:
    """Scale a revenue value to a bar height in pixels."""
    if top_label <= 0:
        return 0.0
    return (chart_height / top_label) * value
