"""Core (UI-agnostic) obesity dashboard logic.

This package contains:
- data loading and cleaning (CSV -> pandas)
- precomputed summaries held in an immutable context
- filter validation and the per-interaction country/year query
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
