import asyncio
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import structlog
import uvicorn
from fastapi import Body, Depends, FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from habilitation.config import Settings, get_settings
from habilitation.core.engine import ScoringEngine, build_engine
from habilitation.core.errors import ValidationError
from habilitation.core.models import ScoreResult
from habilitation.core.parsing import record_from_mapping
from habilitation.core.report import build_export_document, render_html_report, report_filename

logger = structlog.get_logger(__name__)

ENDPOINTS = ["/calculate", "/preview", "/export-html", "/export-json", "/points", "/test"]


def _configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
    )


def _now() -> datetime:
    return datetime.now(timezone.utc)


@lru_cache
def get_engine() -> ScoringEngine:
    # built once per process; the point table is read-only afterwards
    settings = get_settings()
    return build_engine(
        settings.GRID_DATA_DIR,
        settings.LANGUAGE,
        min_total_points=settings.MIN_TOTAL_POINTS,
        min_teaching_years=settings.MIN_TEACHING_YEARS,
    )


_settings = get_settings()
_configure_logging(_settings.LOG_LEVEL)

app = FastAPI(title=_settings.APP_NAME, version=_settings.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=86400,
)


# --------- Response models ----------
class AuthorshipDetail(BaseModel):
    first: int
    second: int
    thirdPlus: int


class BreakdownLine(BaseModel):
    key: str
    label: str
    points: int
    unitCount: int
    authorshipDetail: Optional[AuthorshipDetail] = None


class ScoreResultResponse(BaseModel):
    totalPoints: int
    eligible: bool
    eligibilityReason: str
    breakdown: List[BreakdownLine]
    teachingYears: int
    hasRequiredPublication: bool


class PointRuleResponse(BaseModel):
    key: str
    label: str
    pointsPerUnit: float
    cap: Optional[float] = None


# --------- Helpers ----------
async def _run_engine(fn: Callable[[Dict[str, Any]], ScoreResult], payload: Dict[str, Any],
                      timeout: float) -> ScoreResult:
    try:
        return await asyncio.wait_for(run_in_threadpool(fn, payload), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("computation_timed_out", timeout=timeout)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="Computation timed out")


def _rejected(e: ValidationError) -> JSONResponse:
    logger.info("application_rejected", code=e.code, field=e.field)
    return JSONResponse(
        status_code=422,
        content={"error": e.code, "field": e.field, "details": str(e)},
    )


def _failed(what: str, e: Exception) -> JSONResponse:
    logger.exception("request_failed", operation=what)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": f"{what} failed", "details": str(e)},
    )


# --------- Endpoints ----------
@app.get("/")
@app.get("/test")
def service_status(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {
        "status": "online",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "endpoints": ENDPOINTS,
        "timestamp": _now().isoformat(),
    }


@app.get("/points", response_model=List[PointRuleResponse])
def points(engine: ScoringEngine = Depends(get_engine)) -> List[Dict[str, Any]]:
    # same table the engine scores with, so client previews cannot drift
    out: List[Dict[str, Any]] = []
    for rule in engine.repo.list_rules():
        out.append({
            "key": rule.key,
            "label": rule.label,
            "pointsPerUnit": rule.point_rule.points_per_unit,
            "cap": rule.point_rule.cap,
        })
    return out


@app.post("/calculate", response_model=ScoreResultResponse)
async def calculate(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    engine: ScoringEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
):
    try:
        result = await _run_engine(engine.calculate, payload, settings.COMPUTE_TIMEOUT_SECONDS)
    except ValidationError as e:
        return _rejected(e)
    except HTTPException:
        raise
    except Exception as e:
        return _failed("Calculation", e)

    response.headers["X-Calculated-At"] = _now().isoformat()
    logger.info("application_scored", total_points=result.total_points, eligible=result.eligible)
    return result.to_dict()


@app.post("/preview", response_model=ScoreResultResponse)
async def preview(
    payload: Dict[str, Any] = Body(...),
    engine: ScoringEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
):
    try:
        result = await _run_engine(engine.preview, payload, settings.COMPUTE_TIMEOUT_SECONDS)
    except HTTPException:
        raise
    except Exception as e:
        return _failed("Preview", e)
    return result.to_dict()


@app.post("/export-html")
async def export_html(
    payload: Dict[str, Any] = Body(...),
    engine: ScoringEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
):
    try:
        result = await _run_engine(engine.preview, payload, settings.COMPUTE_TIMEOUT_SECONDS)
        record = record_from_mapping(payload)
        generated_at = _now()
        html = render_html_report(
            record,
            result,
            engine.policy,
            generated_at,
            language=settings.LANGUAGE,
            min_total_points=engine.min_total_points,
            min_teaching_years=engine.min_teaching_years,
        )
    except HTTPException:
        raise
    except Exception as e:
        return _failed("Report generation", e)

    return {
        "html": html,
        "filename": report_filename(record, generated_at),
        "generatedAt": generated_at.isoformat(),
    }


@app.post("/export-json")
async def export_json(
    payload: Dict[str, Any] = Body(...),
    engine: ScoringEngine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
):
    try:
        result = await _run_engine(engine.preview, payload, settings.COMPUTE_TIMEOUT_SECONDS)
        record = record_from_mapping(payload)
        document = build_export_document(
            payload,
            record,
            result,
            engine.policy,
            _now(),
            app_name=settings.APP_NAME,
            version=settings.APP_VERSION,
            language=settings.LANGUAGE,
        )
    except HTTPException:
        raise
    except Exception as e:
        return _failed("Export", e)

    filename = f"qualification_{record.first_name}_{record.last_name}.json"
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


if __name__ == "__main__":
    uvicorn.run("habilitation.app:app", host="0.0.0.0", port=8000, reload=True)
