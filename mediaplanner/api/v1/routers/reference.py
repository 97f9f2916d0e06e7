# mediaplanner/api/v1/routers/reference.py
from typing import Any, Dict

from fastapi import APIRouter

from mediaplanner.domain.catalog import reference_data

router = APIRouter(prefix="/reference-data", tags=["reference"])


@router.get("", response_model=Dict[str, Any])
def get_reference_data():
    """Scored questionnaire, bucket models and the rule table, read-only."""
    return reference_data()
