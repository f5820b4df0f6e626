"""Main FastAPI application."""

import logging
import random
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..coverage import coverage_map, find_removable_screws, hit_test, is_covered
from ..errors import ItemUnavailableError
from ..generator import StageGenerator, calculate_difficulty_params, get_wood_color
from ..models import HitRequest, ItemRequest, NewStageRequest
from ..session import GameSession, ItemType, RemovalOutcome

logger = logging.getLogger(__name__)

# Initialize app
app = FastAPI(title="Screw Puzzle")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global state
session: Optional[GameSession] = None


def get_session() -> GameSession:
    if session is None:
        raise HTTPException(status_code=409, detail="No stage loaded")
    return session


def reset_session():
    """Drop the current session."""
    global session
    session = None


def _hit_radius(request: HitRequest) -> float:
    return request.hit_radius if request.hit_radius is not None else get_settings().hit_radius


@app.get("/api/health")
async def health():
    return {"status": "ok", "stage_loaded": session is not None}


@app.post("/api/stage")
async def new_stage(request: NewStageRequest):
    """Start a session on a freshly generated stage."""
    global session
    settings = get_settings()

    if request.stage_number < 1:
        raise HTTPException(status_code=400, detail="Stage number must be at least 1")

    width = request.width if request.width is not None else settings.stage_width
    height = request.height if request.height is not None else settings.stage_height
    if width <= 0 or height <= 0:
        raise HTTPException(status_code=400, detail="Bounds must be positive")

    rng = random.Random(request.seed) if request.seed is not None else None
    generator = StageGenerator(
        rng=rng,
        max_attempts=settings.max_generation_attempts,
        margin=settings.plate_margin
    )
    session = GameSession(request.stage_number, width, height, generator=generator)
    logger.info("New session at stage %d (%gx%g)", request.stage_number, width, height)

    return JSONResponse(content=session.stage.to_dict())


@app.get("/api/stage")
async def get_stage():
    """Get the current stage."""
    return JSONResponse(content=get_session().stage.to_dict())


@app.get("/api/state")
async def get_state():
    """Get current session summary."""
    return JSONResponse(content=get_session().get_summary())


@app.post("/api/stage/shuffle")
async def shuffle():
    """Regenerate the current stage number."""
    current = get_session()
    current.shuffle()
    return JSONResponse(content=current.stage.to_dict())


@app.post("/api/stage/next")
async def next_stage():
    """Advance to the next stage."""
    current = get_session()
    current.next_stage()
    return JSONResponse(content=current.stage.to_dict())


@app.get("/api/stage/removable")
async def removable_screws():
    """List screws that can be removed right now."""
    stage = get_session().stage
    data = [
        {'screw_id': screw.id, 'plate_id': plate.id, 'x': screw.x, 'y': screw.y}
        for screw, plate in find_removable_screws(stage)
    ]
    return JSONResponse(content={'screws': data, 'count': len(data)})


@app.get("/api/stage/coverage")
async def stage_coverage():
    """Covering plate ids for every screw still in place."""
    mapping = coverage_map(get_session().stage)
    return JSONResponse(content={str(screw_id): ids for screw_id, ids in mapping.items()})


@app.get("/api/screws/{screw_id}/coverage")
async def screw_coverage(screw_id: int):
    """Get the plates covering a screw."""
    stage = get_session().stage
    found = stage.find_screw(screw_id)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Screw {screw_id} not found")

    screw, plate = found
    result = is_covered(screw, plate, stage.plates)
    return JSONResponse(content={'screw_id': screw_id, **result.to_dict()})


@app.post("/api/screws/{screw_id}/remove")
async def remove(screw_id: int):
    """Try to remove a screw under the coverage rule."""
    result = get_session().try_remove(screw_id)
    if result.outcome == RemovalOutcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail=f"Screw {screw_id} not found")
    return JSONResponse(content=result.to_dict())


@app.post("/api/hit")
async def hit(request: HitRequest):
    """Find the screw under a pointer position."""
    current = get_session()
    found = hit_test((request.x, request.y), current.stage, _hit_radius(request))
    if found is None:
        return JSONResponse(content={'hit': None})

    screw, plate = found
    return JSONResponse(content={'hit': {'screw': screw.to_dict(), 'plate_id': plate.id}})


@app.post("/api/click")
async def click(request: HitRequest):
    """Press at a position: apply the active item or try a normal removal."""
    current = get_session()

    try:
        result = current.click((request.x, request.y), _hit_radius(request))
    except (ItemUnavailableError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return JSONResponse(content={
        'result': result.to_dict() if result is not None else None,
        'active_item': current.get_summary()['active_item']
    })


@app.post("/api/items/{item}")
async def use_item(item: ItemType, request: Optional[ItemRequest] = None):
    """Use an item from the inventory."""
    current = get_session()
    screw_id = request.screw_id if request is not None else None

    try:
        result = current.use_item(item, screw_id)
    except (ItemUnavailableError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return JSONResponse(content={**result.to_dict(), 'items': current.get_summary()['items']})


@app.post("/api/items/{item}/activate")
async def activate_item(item: ItemType):
    """Select an item. Hint and shuffle apply at once; selecting the active item cancels it."""
    current = get_session()

    try:
        result = current.activate_item(item)
    except ItemUnavailableError as e:
        raise HTTPException(status_code=400, detail=str(e))

    summary = current.get_summary()
    return JSONResponse(content={
        'result': result.to_dict() if result is not None else None,
        'active_item': summary['active_item'],
        'items': summary['items']
    })


@app.get("/api/difficulty/{stage_number}")
async def difficulty(stage_number: int):
    """Difficulty parameters and wood color for a stage number."""
    if stage_number < 1:
        raise HTTPException(status_code=400, detail="Stage number must be at least 1")

    return JSONResponse(content={
        'stage_number': stage_number,
        'params': calculate_difficulty_params(stage_number).to_dict(),
        'wood_color': get_wood_color(stage_number)
    })
