from __future__ import annotations

from typing import Any, Dict, List

from core.charts import line_chart, to_vega_spec
from core.metrics_country import records
from core.summaries import DashboardData


def compute_top_trends(data: DashboardData) -> Dict[str, Any]:
    trend = data.country_year_trend
    chart = line_chart(
        trend,
        x="year",
        y="mean_obesity",
        title=f"Top {data.top_n} Countries Obesity Trend",
        y_title="Avg Obesity (%)",
        color="country",
    )
    return {
        "top_n": data.top_n,
        "countries": list(data.top_countries),
        "series": records(trend),
        "chart": to_vega_spec(chart),
    }


def compute_global_trend(data: DashboardData) -> Dict[str, Any]:
    trend = data.global_year_trend
    chart = line_chart(
        trend,
        x="year",
        y="global_obesity",
        title="Global Average Obesity Over Time",
        y_title="Avg Obesity (%)",
        line_color="black",
    )
    return {
        "series": records(trend),
        "chart": to_vega_spec(chart),
    }


def compute_country_ranking(data: DashboardData, limit: int = 10) -> Dict[str, Any]:
    ranking = data.country_average.head(max(0, limit))
    return {"limit": limit, "countries": records(ranking)}


def compute_insights(data: DashboardData) -> Dict[str, Any]:
    avg = data.country_average
    global_avg = float(avg["avg_obesity"].mean()) if not avg.empty else None

    lines: List[str] = []
    if global_avg is not None and data.year_bounds is not None:
        lo, hi = data.year_bounds
        lines.append(f"Global average obesity ({lo}-{hi}) is {global_avg:.1f}%.")
    if data.top_countries:
        lines.append(
            f"Top {len(data.top_countries)} countries ({', '.join(data.top_countries)}) show the highest "
            "obesity prevalence, indicating geographic disparities."
        )
    lines.append("Use 'Country Trend' to analyze yearly changes within a specific country.")
    lines.append("Adjust the year range slider to focus on particular time periods.")

    return {
        "global_average": global_avg,
        "year_bounds": list(data.year_bounds) if data.year_bounds else None,
        "top_countries": list(data.top_countries),
        "lines": lines,
    }
