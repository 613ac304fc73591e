"""Core (UI-agnostic) program dashboard logic.

This package contains:
- cell and accreditation normalization
- data loading (XLSX upload -> pandas, restricted to the target campus)
- filter state and filtering
- aggregation payloads (KPIs, cross-tabulations) and CSV export
- chart helpers (Altair -> Vega-Lite spec dict)
"""
