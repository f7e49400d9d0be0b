from __future__ import annotations

import json

import pytest

from core.data import prepare_context
from core.filters import DashboardFilters
from core.metrics_country import compute_average_indicator, compute_country_trend
from core.metrics_debug import compute_debug
from core.metrics_table import compute_raw_table
from core.metrics_trends import compute_country_ranking, compute_global_trend, compute_insights, compute_top_trends


def _ctx(data, **raw):
    return prepare_context(raw, data)


def test_country_trend_payload(dashboard_data):
    ctx = _ctx(dashboard_data, country="Turkey")
    payload = compute_country_trend(ctx["filters"], ctx)
    assert payload["country"] == "Turkey"
    assert payload["rows"] == 2
    assert [p["year"] for p in payload["series"]] == [2000, 2005]
    assert payload["chart"]["title"] == "Turkey Obesity Trend"
    json.dumps(payload)


def test_average_indicator_gauge(dashboard_data):
    ctx = _ctx(dashboard_data, country="Turkey")
    payload = compute_average_indicator(ctx["filters"], ctx)
    assert payload["value"] == pytest.approx(24.75)
    assert payload["empty"] is False
    assert "layer" in payload["chart"]


def test_average_indicator_empty_selection(dashboard_data):
    ctx = _ctx(dashboard_data, country="Turkey", year_range=[2001, 2004])
    payload = compute_average_indicator(ctx["filters"], ctx)
    assert payload["value"] is None
    assert payload["empty"] is True
    json.dumps(payload)


def test_top_and_global_trends(dashboard_data):
    top = compute_top_trends(dashboard_data)
    assert top["countries"] == ["Egypt", "Turkey"]
    assert {row["country"] for row in top["series"]} <= set(top["countries"])

    glob = compute_global_trend(dashboard_data)
    assert [row["year"] for row in glob["series"]] == [2000, 2005]
    json.dumps(top)
    json.dumps(glob)


def test_ranking(dashboard_data):
    ranking = compute_country_ranking(dashboard_data, limit=3)
    assert [r["country"] for r in ranking["countries"]] == ["Egypt", "Turkey", "Brazil"]


def test_insights(dashboard_data):
    payload = compute_insights(dashboard_data)
    assert payload["global_average"] == pytest.approx((32.0 + 24.75 + 15.0 + 11.0) / 4)
    assert payload["lines"][0].startswith("Global average obesity (2000-2005)")


def test_raw_table_hidden_by_default(dashboard_data):
    ctx = _ctx(dashboard_data, country="Egypt")
    payload = compute_raw_table(ctx["filters"], ctx)
    assert payload["visible"] is False
    assert payload["rows"] == []
    assert payload["total_rows"] == 2


def test_raw_table_pagination(dashboard_data):
    ctx = _ctx(dashboard_data, country="Egypt")
    filt = DashboardFilters(country="Egypt", year_range=(2000, 2005), show_raw=True, page=5, page_size=1)
    payload = compute_raw_table(filt, ctx)
    assert payload["total_pages"] == 2
    assert payload["page"] == 2
    assert payload["rows"] == [{"country": "Egypt", "year": 2005, "sex": "Women", "obesity": 34.0}]


def test_debug(dashboard_data):
    payload = compute_debug(dashboard_data)
    assert payload["row_counts"]["observations"] == 7
    assert payload["load_report"]["dropped_rows"] == 0
    assert payload["top_countries"] == ["Egypt", "Turkey"]
