"""Bundle validation endpoint.

POST /api/validate/bundle
    - Accepts a FHIR Bundle as a JSON request body
    - Backfills minimal narratives, then runs every registered validator module
    - Returns an OperationOutcome (as JSON) with the issues found
"""

import json
import logging

from fastapi import APIRouter, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from src.api.dependencies import OrchestratorDep
from src.api.models.outcome import OperationOutcome
from src.main import NESTING_TOO_DEEP, validate_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/validate", tags=["validation"])


@router.post("/bundle", response_model=OperationOutcome, response_model_exclude_none=True)
async def validate_bundle(request: Request, orchestrator: OrchestratorDep) -> OperationOutcome:
    """Validate a FHIR Bundle.

    The raw body is parsed here rather than through a Pydantic model: the
    document is loosely typed and any JSON value is accepted (a non-Bundle
    root is itself a validation finding, not a request error).

    Validation blocks on terminology lookups, so it runs in the threadpool.

    Raises:
        HTTPException: 400 if the body is not valid JSON or is nested
            deeper than the JSON parser allows
    """
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Rejected malformed JSON body: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Malformed JSON document: {str(e)}")
    except RecursionError:
        # The JSON parser recurses per nesting level, so depth is bounded here
        logger.warning("Rejected JSON body nested beyond the parser limit")
        raise HTTPException(status_code=400, detail=NESTING_TOO_DEEP)

    report = await run_in_threadpool(validate_payload, payload, orchestrator)
    logger.info(f"Bundle validated: {report.error_count} error(s)")
    return OperationOutcome.from_report(report)
