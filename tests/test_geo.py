"""
Geo filter and aggregator tests.
"""
import pytest

from conftest import make_region, make_regions

from control_tower.analytics.geo import (
    apply_filters,
    default_filters,
    distinct_countries,
    filter_options,
    rank_by_sales,
    summarize_regions,
    with_fallback,
)
from control_tower.contracts.errors import DataUnavailable


# ============================================================
# Filtering
# ============================================================

@pytest.mark.parametrize("filters", [None, {}, default_filters(), {"continent": "all", "country": None}])
def test_wildcard_filters_are_identity(ten_regions, filters):
    result = apply_filters(ten_regions, filters)
    assert result.equals(ten_regions)


def test_single_dimension_filter(ten_regions):
    result = apply_filters(ten_regions, {"continent": "Africa"})
    assert result.height == 6
    assert set(result["continent"].to_list()) == {"Africa"}


def test_filters_are_anded(ten_regions):
    result = apply_filters(ten_regions, {"continent": "Africa", "country": "Nigeria"})
    assert result["name"].to_list() == ["Lagos", "Abuja"]

    result = apply_filters(ten_regions, {"continent": "Africa", "category": "electronics"})
    assert result["name"].to_list() == ["Lagos"]

    result = apply_filters(ten_regions, {"category": "fashion", "shipping_mode": "express"})
    assert result["name"].to_list() == ["Accra"]


def test_filter_matching_nothing_is_empty(ten_regions):
    result = apply_filters(ten_regions, {"continent": "Europe", "country": "Kenya"})
    assert result.height == 0


def test_unknown_filter_dimension_raises(ten_regions):
    with pytest.raises(ValueError):
        apply_filters(ten_regions, {"planet": "Mars"})


def test_with_fallback(ten_regions):
    empty = ten_regions.head(0)
    assert with_fallback(empty, ten_regions).equals(ten_regions)

    some = ten_regions.head(2)
    assert with_fallback(some, ten_regions).equals(some)


# ============================================================
# Aggregates
# ============================================================

def test_africa_scenario(ten_regions):
    summary = summarize_regions(ten_regions, {"continent": "Africa"})

    assert summary["active_region_count"] == 6
    assert summary["total_sales"] == 500 + 120 + 300 + 150 + 220 + 60
    assert summary["total_orders"] == 50 + 12 + 30 + 15 + 22 + 6
    assert summary["total_sellers"] == 5 + 2 + 4 + 3 + 2 + 1
    assert summary["total_buyers"] == 30 + 8 + 20 + 10 + 14 + 4
    assert summary["is_fallback"] is False
    assert summary["highest"]["name"] == "Lagos"
    assert summary["lowest"]["name"] == "Kigali"
    assert summary["average_growth_pct"] == pytest.approx((14 + 3 + 9 - 2 - 9 + 20) / 6)


def test_empty_filter_falls_back_to_everything(ten_regions):
    summary = summarize_regions(ten_regions, {"continent": "Antarctica"})

    assert summary["filtered"].height == 0
    assert summary["is_fallback"] is True
    assert summary["active_region_count"] == 10
    assert summary["total_sales"] == ten_regions["sales"].sum()
    assert summary["total_orders"] == ten_regions["orders"].sum()
    assert summary["highest"]["name"] == "London"
    assert summary["lowest"]["name"] == "Kigali"


def test_ranking_is_descending_by_sales(ten_regions):
    ranking = rank_by_sales(ten_regions)
    sales = ranking["sales"].to_list()

    assert all(sales[0] >= s for s in sales)
    assert sales == sorted(sales, reverse=True)


def test_single_region_is_highest_and_lowest(ten_regions):
    summary = summarize_regions(ten_regions, {"country": "Canada"})

    assert summary["active_region_count"] == 1
    assert summary["highest"] == summary["lowest"]
    assert summary["highest"]["name"] == "Toronto"
    assert summary["average_growth_pct"] == 0.0


def test_empty_collection():
    summary = summarize_regions(make_regions([]))

    assert summary["active_region_count"] == 0
    assert summary["total_sales"] == 0.0
    assert summary["total_orders"] == 0
    assert summary["highest"] is None
    assert summary["lowest"] is None
    assert summary["average_growth_pct"] == 0.0
    assert summary["countries"] == []


def test_summary_reports_effective_filters(ten_regions):
    summary = summarize_regions(ten_regions, {"continent": "Asia"})
    assert summary["filters"] == {**default_filters(), "continent": "Asia"}


def test_countries_ignore_current_filter(ten_regions):
    summary = summarize_regions(ten_regions, {"continent": "Europe"})

    assert summary["countries"] == [
        "Nigeria", "Kenya", "Ghana", "Egypt", "Rwanda",
        "United Kingdom", "Germany", "India", "Canada",
    ]


def test_distinct_countries_deduplicates():
    regions = make_regions([
        make_region("A", "Africa", 1, country="Kenya"),
        make_region("B", "Africa", 2, country="Kenya"),
        make_region("C", "Europe", 3, country="France"),
    ])
    assert distinct_countries(regions) == ["Kenya", "France"]


def test_filter_options(ten_regions):
    options = filter_options(ten_regions)

    assert set(options) == {"continent", "country", "category", "seller_type", "shipping_mode"}
    assert options["continent"] == ["all", "Africa", "Europe", "Asia", "North America"]
    assert options["shipping_mode"] == ["all", "standard", "express"]


def test_missing_collection_raises():
    with pytest.raises(DataUnavailable):
        summarize_regions(None)


def test_source_frame_is_not_mutated(ten_regions):
    before = ten_regions.clone()
    summarize_regions(ten_regions, {"continent": "Africa"})
    assert ten_regions.equals(before)
