#!/usr/bin/env python3
"""Static obesity report: clean the dataset, rank countries, export results."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from core.charts import ranked_bar_chart
from core.config import REPORT_TOP_N, get_data_path
from core.data import export_cleaned_csv, load_observations
from core.summaries import compute_country_average, select_top_countries


logger = logging.getLogger("analysis")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clean the obesity dataset and rank countries by average obesity.")
    parser.add_argument("--input", type=Path, default=None, help="Source CSV (defaults to OBESITY_DATA_PATH or data/bmi.csv)")
    parser.add_argument("--output", type=Path, default=Path("bmi_cleaned.csv"), help="Cleaned CSV destination")
    parser.add_argument("--top", type=int, default=REPORT_TOP_N, help="Number of countries in the ranking chart")
    parser.add_argument("--min-year", type=int, default=None, help="Drop observations before this year")
    parser.add_argument("--max-year", type=int, default=None, help="Drop observations after this year")
    parser.add_argument("--scale", choices=["percent", "fraction"], default=None, help="Obesity encoding in the source")
    parser.add_argument("--chart", type=Path, default=None, help="Optional HTML path for the top-N bar chart")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    source = args.input or get_data_path()
    observations, report = load_observations(
        source,
        scale=args.scale,
        min_year=args.min_year,
        max_year=args.max_year,
    )

    logger.info("Missing values per column: %s", report.missing_by_column)
    logger.info("Kept %d of %d rows", report.kept_rows, report.source_rows)

    by_country = compute_country_average(observations)
    if not by_country.empty:
        logger.info("Top 10 countries by average obesity:\n%s", by_country.head(10).to_string(index=False))

    export_cleaned_csv(observations, args.output)

    if args.chart is not None:
        top = select_top_countries(by_country, args.top)
        chart = ranked_bar_chart(
            by_country[by_country["country"].isin(top)],
            category="country",
            value="avg_obesity",
            title=f"Top {len(top)} Countries by Average Obesity Rate",
            x_title="Average Obesity Rate (%)",
        )
        args.chart.parent.mkdir(parents=True, exist_ok=True)
        chart.save(str(args.chart))
        logger.info("Saved chart to %s", args.chart)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
