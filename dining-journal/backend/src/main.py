from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from models import RestaurantSummary
from services.engine import StatsEngine, profile_view, public_view
from services.invalidation import RESTAURANTS_CHANGED, VISITS_CHANGED, InvalidationChannel
from services.period_filter import resolve_period
from services.ranking import SORT_RECENT
from services.report import build_report
from services.snapshot import load_visits


app = FastAPI(title="Dining Journal Statistics")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Host-owned channel; mutations announced here drop cached results.
channel = InvalidationChannel()
_engine: Optional[StatsEngine] = None


def get_engine() -> StatsEngine:
    global _engine
    if _engine is None:
        cfg = Configuration.from_env()
        logger.info("cfg: {}", cfg.log_summary())
        _engine = StatsEngine(cfg)
        if _engine.cache is not None:
            _engine.cache.bind(channel)
    return _engine


class SnapshotRequest(BaseModel):
    restaurants: List[Dict[str, Any]] = Field(default_factory=list, description="Restaurant rows of one user")
    visits: List[Dict[str, Any]] = Field(default_factory=list, description="Visit rows of the same user")


class StatsRequest(SnapshotRequest):
    period: Union[int, str] = Field("all", description='"all" or a calendar year')
    reset_missing_year: bool = Field(True, description="Fall back to all time when the year has no visits")
    compare: bool = Field(False, description="Include year-over-year deltas for a specific year")
    include_report: bool = Field(False, description="Render a Markdown summary")


class CompareRequest(SnapshotRequest):
    year: int


class RestaurantListRequest(SnapshotRequest):
    query: str = ""
    sort: str = SORT_RECENT


class CommunityPreviewRequest(BaseModel):
    users: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict, description="user id -> restaurant rows")


class InvalidateRequest(BaseModel):
    topic: str


class StatsResponse(BaseModel):
    period: Union[int, str]
    stats: Dict[str, Any]
    comparison: Optional[Dict[str, Any]] = None
    report_markdown: Optional[str] = None


def _summary_payload(summary: RestaurantSummary) -> Dict[str, Any]:
    payload = asdict(summary.restaurant)
    payload.update(
        visit_count=summary.visit_count,
        total_spent_eur=summary.total_spent,
        last_visit_at=summary.last_visit_at.isoformat() if summary.last_visit_at else None,
    )
    return payload


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok"}


@app.post("/stats", response_model=StatsResponse)
def stats(req: StatsRequest) -> StatsResponse:
    engine = get_engine()
    try:
        period: Union[int, str] = req.period
        if req.reset_missing_year:
            period = resolve_period(req.period, load_visits(req.visits), engine.tz)

        result = engine.compute(req.restaurants, req.visits, period)
        comparison = None
        if req.compare and result.period != "all":
            comparison = engine.compare(result.period, req.restaurants, req.visits)

        logger.info(
            "stats period={} restaurants={} visits={} spent={} badge={}",
            result.period,
            result.total_restaurants,
            result.visit_count,
            result.total_spent,
            result.badge.label if result.badge else None,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("stats failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")

    return StatsResponse(
        period=result.period,
        stats=asdict(result),
        comparison=asdict(comparison) if comparison else None,
        report_markdown=build_report(result, comparison, engine.tz) if req.include_report else None,
    )


@app.post("/stats/compare")
def stats_compare(req: CompareRequest) -> dict:
    try:
        comparison = get_engine().compare(req.year, req.restaurants, req.visits)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("stats compare failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")
    return asdict(comparison)


@app.post("/profile")
def profile(req: StatsRequest) -> dict:
    engine = get_engine()
    try:
        period = resolve_period(req.period, load_visits(req.visits), engine.tz) if req.reset_missing_year else req.period
        result = engine.compute(req.restaurants, req.visits, period)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("profile failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")
    return asdict(profile_view(result, engine.cfg.profile_country_limit))


@app.post("/profile/public")
def profile_public(req: StatsRequest) -> dict:
    engine = get_engine()
    try:
        result = engine.compute(req.restaurants, req.visits, req.period)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("profile public failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")
    return asdict(public_view(result))


@app.post("/restaurants")
def restaurants(req: RestaurantListRequest) -> dict:
    try:
        rows = get_engine().restaurant_list(req.restaurants, req.visits, req.query, req.sort)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("restaurants failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")
    return {"restaurants": [_summary_payload(s) for s in rows]}


@app.post("/community/preview")
def community_preview(req: CommunityPreviewRequest) -> dict:
    engine = get_engine()
    previews: Dict[str, Any] = {}
    try:
        for user_id, rows in req.users.items():
            previews[user_id] = asdict(engine.community_preview(rows))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("community preview failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")
    return {"users": previews}


@app.post("/invalidate")
def invalidate(req: InvalidateRequest) -> dict:
    if req.topic not in (VISITS_CHANGED, RESTAURANTS_CHANGED):
        raise HTTPException(status_code=400, detail=f"unknown topic: {req.topic}")
    return {"topic": req.topic, "notified": channel.publish(req.topic)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
