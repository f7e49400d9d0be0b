from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardFiltersModel, ErrorResponse, MetaCountriesResponse, MetaYearsResponse
from core.config import APP_NAME, APP_VERSION
from core.data import load_dashboard_data, prepare_context
from core.errors import InvalidRangeError, InvalidSelectionError
from core.metrics_country import compute_average_indicator, compute_country_trend
from core.metrics_debug import compute_debug
from core.metrics_table import compute_raw_table
from core.metrics_trends import compute_country_ranking, compute_global_trend, compute_insights, compute_top_trends
from core.summaries import OBSERVATION_COLUMNS


app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=str(exc), type=type(exc).__name__)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _context(filters: DashboardFiltersModel):
    data = load_dashboard_data()
    ctx = prepare_context(filters.model_dump(), data)
    return data, ctx


@app.get("/meta/countries")
def meta_countries():
    try:
        data = load_dashboard_data()
        return _json(MetaCountriesResponse(countries=list(data.countries), default_country=data.default_country).model_dump())
    except Exception as exc:
        logger.exception("meta_countries failed")
        return _error(exc, 500)


@app.get("/meta/years")
def meta_years():
    try:
        data = load_dashboard_data()
        lo, hi = data.year_bounds if data.year_bounds else (None, None)
        return _json(MetaYearsResponse(min_year=lo, max_year=hi).model_dump())
    except Exception as exc:
        logger.exception("meta_years failed")
        return _error(exc, 500)


@app.post("/country-trend")
def country_trend(filters: DashboardFiltersModel):
    try:
        _, ctx = _context(filters)
        return _json(compute_country_trend(ctx["filters"], ctx))
    except (InvalidSelectionError, InvalidRangeError) as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("country_trend failed")
        return _error(exc, 500)


@app.post("/country-average")
def country_average(filters: DashboardFiltersModel):
    try:
        _, ctx = _context(filters)
        return _json(compute_average_indicator(ctx["filters"], ctx))
    except (InvalidSelectionError, InvalidRangeError) as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("country_average failed")
        return _error(exc, 500)


@app.post("/raw-data")
def raw_data(filters: DashboardFiltersModel):
    try:
        _, ctx = _context(filters)
        return _json(compute_raw_table(ctx["filters"], ctx))
    except (InvalidSelectionError, InvalidRangeError) as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("raw_data failed")
        return _error(exc, 500)


@app.get("/top-trends")
def top_trends():
    try:
        return _json(compute_top_trends(load_dashboard_data()))
    except Exception as exc:
        logger.exception("top_trends failed")
        return _error(exc, 500)


@app.get("/global-trend")
def global_trend():
    try:
        return _json(compute_global_trend(load_dashboard_data()))
    except Exception as exc:
        logger.exception("global_trend failed")
        return _error(exc, 500)


@app.get("/ranking")
def ranking(limit: int = Query(default=10, ge=1, le=500)):
    try:
        return _json(compute_country_ranking(load_dashboard_data(), limit=limit))
    except Exception as exc:
        logger.exception("ranking failed")
        return _error(exc, 500)


@app.get("/insights")
def insights():
    try:
        return _json(compute_insights(load_dashboard_data()))
    except Exception as exc:
        logger.exception("insights failed")
        return _error(exc, 500)


@app.get("/debug")
def debug():
    try:
        return _json(compute_debug(load_dashboard_data()))
    except Exception as exc:
        logger.exception("debug failed")
        return _error(exc, 500)


@app.post("/export/raw")
def export_raw(filters: DashboardFiltersModel):
    try:
        _, ctx = _context(filters)
        export_df: pd.DataFrame = ctx["country_data"][OBSERVATION_COLUMNS]
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
        filename = f"{ctx['filters'].country.replace(' ', '_')}_obesity.csv"
    except (InvalidSelectionError, InvalidRangeError) as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("export_raw failed")
        return _error(exc, 500)
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
