from __future__ import annotations

import pandas as pd
import pytest

from core.data import prepare_context
from core.errors import EmptyResultError, InvalidRangeError, InvalidSelectionError
from core.filters import DashboardFilters, filter_observations, mean_obesity, normalize_filters


def test_filter_example():
    obs = pd.DataFrame(
        {
            "country": ["Turkey", "Turkey", "Brazil"],
            "year": [2000, 2005, 2000],
            "sex": ["Men", "Women", "Men"],
            "obesity": [22.5, 27.0, 15.0],
        }
    )
    subset = filter_observations(obs, "Turkey", [2000, 2002])
    assert subset.to_dict(orient="records") == [{"country": "Turkey", "year": 2000, "sex": "Men", "obesity": 22.5}]


def test_filter_preserves_order_and_bounds(observations):
    subset = filter_observations(observations, "Egypt", (2000, 2005))
    assert subset["year"].tolist() == [2000, 2005]
    assert subset["obesity"].tolist() == [30.0, 34.0]


def test_filter_is_pure(observations):
    before = observations.copy()
    first = filter_observations(observations, "Chile", (2000, 2004))
    second = filter_observations(observations, "Chile", (2000, 2004))
    pd.testing.assert_frame_equal(first, second)
    pd.testing.assert_frame_equal(observations, before)


def test_unknown_country_raises(observations):
    with pytest.raises(InvalidSelectionError):
        filter_observations(observations, "Atlantis", (2000, 2005))


@pytest.mark.parametrize("year_range", [(2005, 2000), (2000,), "2000-2005", ("a", 2005), (2000.5, 2005)])
def test_bad_range_raises(observations, year_range):
    with pytest.raises(InvalidRangeError):
        filter_observations(observations, "Chile", year_range)


def test_mean_obesity(observations):
    subset = filter_observations(observations, "Egypt", (2000, 2005))
    assert mean_obesity(subset) == pytest.approx(32.0)


def test_mean_of_empty_subset_raises(observations):
    subset = filter_observations(observations, "Egypt", (1980, 1990))
    assert subset.empty
    with pytest.raises(EmptyResultError):
        mean_obesity(subset)


def test_normalize_filters_defaults(dashboard_data):
    filt = normalize_filters(
        {},
        countries=dashboard_data.countries,
        year_bounds=dashboard_data.year_bounds,
        default_country=dashboard_data.default_country,
    )
    assert filt == DashboardFilters(country="Egypt", year_range=(2000, 2005))


def test_normalize_filters_clamps_paging(dashboard_data):
    filt = normalize_filters(
        {"country": "Chile", "year_range": [2000, 2000], "show_raw": True, "page": 0, "page_size": "many"},
        countries=dashboard_data.countries,
        year_bounds=dashboard_data.year_bounds,
    )
    assert filt.page == 1
    assert filt.page_size == 10
    assert filt.show_raw is True


def test_normalize_filters_rejects_bad_input(dashboard_data):
    kwargs = dict(countries=dashboard_data.countries, year_bounds=dashboard_data.year_bounds)
    with pytest.raises(InvalidSelectionError):
        normalize_filters({"country": "Atlantis"}, **kwargs)
    with pytest.raises(InvalidRangeError):
        normalize_filters({"country": "Chile", "year_range": [2010, 2000]}, **kwargs)


def test_prepare_context_leaves_summaries_untouched(dashboard_data):
    before = dashboard_data.country_average.copy()
    ctx = prepare_context({"country": "Turkey", "year_range": [2000, 2002]}, dashboard_data)
    assert ctx["country_data"]["year"].tolist() == [2000]
    assert ctx["filters"].country == "Turkey"
    pd.testing.assert_frame_equal(dashboard_data.country_average, before)
