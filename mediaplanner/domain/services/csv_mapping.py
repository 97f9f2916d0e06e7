# mediaplanner/domain/services/csv_mapping.py
from io import StringIO
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from mediaplanner.core.errors import InvalidCsvError, InvalidInputError
from mediaplanner.domain.models import CsvMappingResult

PLATFORMS = ("facebook", "google", "tiktok")

TARGET_FIELDS: Tuple[str, ...] = (
    "campaign_name",
    "objective",
    "budget",
    "impressions",
    "clicks",
    "conversions",
    "spend",
    "start_date",
    "end_date",
)

COMMON_KEYWORDS: Dict[str, List[str]] = {
    "campaign_name": ["campaign name", "campaign"],
    "budget": ["budget", "daily budget", "amount"],
    "start_date": ["start", "start date", "starts"],
    "end_date": ["end", "end date", "ends"],
}

PLATFORM_KEYWORDS: Dict[str, Dict[str, List[str]]] = {
    "facebook": {
        "objective": ["objective", "campaign objective"],
        "impressions": ["impressions"],
        "clicks": ["link clicks", "clicks (all)", "clicks"],
        "conversions": ["results", "website purchases", "leads"],
        "spend": ["amount spent", "cost", "spend"],
    },
    "google": {
        "objective": ["campaign type", "opt score"],
        "impressions": ["impr.", "impressions"],
        "clicks": ["clicks"],
        "conversions": ["conversions", "conv."],
        "spend": ["cost", "total cost"],
    },
    "tiktok": {
        "objective": ["objective_type"],
        "impressions": ["impressions"],
        "clicks": ["clicks"],
        "conversions": ["conversions", "conversion"],
        "spend": ["cost", "total_cost"],
    },
}


def _norm(s: str) -> str:
    return s.strip().lower().replace("_", " ")


def read_csv_headers(csv_text: str) -> List[str]:
    """
    Column names of an exported report. The whole file is parsed so ragged
    rows are rejected, and an export needs at least one data row. pandas
    placeholder names for blank headers are dropped.
    """
    if not csv_text or not csv_text.strip():
        raise InvalidCsvError("CSV content is empty")
    try:
        df = pd.read_csv(StringIO(csv_text), skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise InvalidCsvError(f"Invalid CSV format: {e}") from e
    if df.empty:
        raise InvalidCsvError("CSV has no data rows")

    headers = [str(c).strip() for c in df.columns if not str(c).startswith("Unnamed:")]
    if not headers:
        raise InvalidCsvError("CSV has no header row")
    return headers


def keywords_for(field: str, platform: str) -> List[str]:
    """Platform-specific synonyms first, then platform-agnostic ones."""
    specific = PLATFORM_KEYWORDS[platform].get(field, [])
    return [_norm(k) for k in specific + COMMON_KEYWORDS.get(field, [])]


def best_header(headers: List[str], keywords: List[str]) -> Optional[Tuple[str, float]]:
    best: Optional[str] = None
    best_score = 0.0
    for header in headers:
        h = _norm(header)
        if not h:
            continue
        for kw in keywords:
            if h == kw:
                return header, 1.0
            if kw in h:
                score = 0.8 + (len(kw) / len(h)) * 0.1
                if score > best_score:
                    best, best_score = header, score
    return (best, best_score) if best is not None else None


def _insights(platform: str, missing: List[str], plan: Optional[Mapping[str, Any]]) -> List[str]:
    out: List[str] = []
    name = platform.capitalize()

    # without a plan the platform counts as outside the core plan
    channels = [str(a.get("channel", "")).lower() for a in (plan or {}).get("allocations") or []]
    if any(platform in c for c in channels):
        out.append(f"{name} is part of your recommended plan (Hero/Support channel).")
    else:
        out.append(f"{name} is not in the recommended core plan (treat it as a test channel).")

    if "conversions" in missing or "spend" in missing:
        out.append("Missing critical data: no cost or conversion column found, ROI cannot be measured.")
    else:
        out.append("Data readiness: key columns are present, ready for ROAS analysis.")

    summary = str((plan or {}).get("summary") or "")
    if platform == "facebook" and "volume" in summary.lower():
        out.append('Optimization tip: for a volume KPI focus on "Link Clicks" and "Results".')
    return out


def map_columns(headers: List[str], platform: str,
                plan: Optional[Mapping[str, Any]] = None) -> CsvMappingResult:
    if platform not in PLATFORMS:
        raise InvalidInputError(f"Unsupported platform '{platform}'")

    mapping: Dict[str, str] = {}
    confidence: Dict[str, float] = {}
    missing: List[str] = []

    for field in TARGET_FIELDS:
        match = best_header(headers, keywords_for(field, platform))
        if match is None:
            missing.append(field)
            continue
        mapping[field], score = match
        confidence[field] = round(score, 2)

    return CsvMappingResult(
        platform=platform,
        mapping=mapping,
        confidence=confidence,
        missing_fields=missing,
        insight=_insights(platform, missing, plan),
    )
