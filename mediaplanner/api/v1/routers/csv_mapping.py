# mediaplanner/api/v1/routers/csv_mapping.py
from fastapi import APIRouter

from mediaplanner.api.v1.deps import SessionDep
from mediaplanner.api.v1.schemas import CsvMapReq, CsvMapResp
from mediaplanner.config import settings
from mediaplanner.core.errors import InvalidCsvError
from mediaplanner.core.logging import get_logger
from mediaplanner.core.observability import CSV_MAPPINGS
from mediaplanner.domain.services.csv_mapping import map_columns, read_csv_headers
from mediaplanner.repositories.sessions import get_session_by_id

log = get_logger("csv")

router = APIRouter(prefix="/csv", tags=["csv"])


@router.post("/map", response_model=CsvMapResp)
def map_csv(req: CsvMapReq, db: SessionDep):
    """
    POST /csv/map
    Maps exported report headers onto the standard performance schema.
    The plan for alignment insights comes from `plan_summary` or a stored session.
    """
    if len(req.csv_text.encode("utf-8")) > settings.max_csv_bytes:
        raise InvalidCsvError(f"CSV exceeds {settings.max_csv_bytes} bytes")

    plan = req.plan_summary
    if plan is None and req.session_id:
        plan = get_session_by_id(db, req.session_id).recommendation

    headers = read_csv_headers(req.csv_text)
    result = map_columns(headers, req.platform, plan)

    CSV_MAPPINGS.labels(platform=req.platform).inc()
    log.info("csv_mapped", extra={"platform": req.platform, "missing": len(result.missing_fields)})
    return result
