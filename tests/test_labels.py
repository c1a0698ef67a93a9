# tests/test_labels.py
"""Tests for the pagination and revenue-axis label generators."""

import pytest

from app.domain.models.dashboard import RevenuePoint
from app.domain.services.labels import (
    ELLIPSIS,
    bar_height,
    generate_pagination,
    generate_y_axis,
)


# ---------------------------------------------------------------------------
# generate_pagination
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("total", range(1, 8))
def test_short_ranges_list_every_page(total):
    for current in range(1, total + 1):
        pages = generate_pagination(current, total)
        assert pages == list(range(1, total + 1))
        assert ELLIPSIS not in pages


def test_first_pages_show_head_and_tail():
    assert generate_pagination(1, 10) == [1, 2, 3, ELLIPSIS, 9, 10]
    assert generate_pagination(3, 10) == [1, 2, 3, ELLIPSIS, 9, 10]


def test_last_pages_show_head_and_last_three():
    assert generate_pagination(10, 10) == [1, 2, ELLIPSIS, 8, 9, 10]
    assert generate_pagination(8, 10) == [1, 2, ELLIPSIS, 8, 9, 10]


def test_middle_page_shows_neighbours_between_ellipses():
    assert generate_pagination(5, 10) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]


def test_boundary_between_head_and_middle():
    assert generate_pagination(4, 8) == [1, ELLIPSIS, 3, 4, 5, ELLIPSIS, 8]
    assert generate_pagination(6, 8) == [1, 2, ELLIPSIS, 6, 7, 8]


def test_out_of_range_current_page_is_clamped():
    assert generate_pagination(42, 10) == generate_pagination(10, 10)
    assert generate_pagination(0, 10) == generate_pagination(1, 10)
    assert generate_pagination(-3, 5) == [1, 2, 3, 4, 5]


def test_no_pages_yields_empty_list():
    assert generate_pagination(1, 0) == []
    assert generate_pagination(1, -2) == []


# ---------------------------------------------------------------------------
# generate_y_axis
# ---------------------------------------------------------------------------

def test_y_axis_rounds_up_to_next_thousand():
    labels, top = generate_y_axis([RevenuePoint(month="Jan", revenue=4300)])

    assert top == 5000
    assert labels == ["5 K €", "4 K €", "3 K €", "2 K €", "1 K €", "0 K €"]


def test_y_axis_uses_highest_month():
    revenue = [
        RevenuePoint(month="Jan", revenue=2000),
        RevenuePoint(month="Feb", revenue=4800),
        RevenuePoint(month="Mar", revenue=1800),
    ]
    labels, top = generate_y_axis(revenue)

    assert top == 5000
    assert labels[0] == "5 K €"
    assert labels[-1] == "0 K €"


def test_y_axis_exact_thousand_is_not_bumped():
    labels, top = generate_y_axis([RevenuePoint(month="Jan", revenue=3000)])
    assert top == 3000
    assert len(labels) == 4


def test_y_axis_all_zero_revenue():
    labels, top = generate_y_axis([RevenuePoint(month="Jan", revenue=0)])
    assert top == 0
    assert labels == ["0 K €"]


def test_y_axis_rejects_empty_input():
    with pytest.raises(ValueError):
        generate_y_axis([])


def test_bar_height_scales_to_chart():
    assert bar_height(2500, 5000, 350) == pytest.approx(175.0)
    assert bar_height(100, 0, 350) == 0.0
