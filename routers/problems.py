# routers/problems.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from deps.services import ClientController, get_controller, get_store, peek_controller
from errors import StorageError
from schemas.problems import SessionOut
from schemas.state import StateOut, SubmitRequest
from store import ProblemStore

router = APIRouter(prefix="/api", tags=["problems"])


@router.get("/state", response_model=StateOut)
def get_state(response: Response, handle: ClientController = Depends(peek_controller)):
    handle.attach_cookie(response)
    return StateOut.from_state(handle.controller.state)


@router.post("/generate", response_model=StateOut)
async def generate_problem(response: Response, handle: ClientController = Depends(get_controller)):
    await handle.controller.generate_problem()
    handle.attach_cookie(response)
    return StateOut.from_state(handle.controller.state)


@router.post("/submit", response_model=StateOut)
async def submit_answer(
    req: SubmitRequest,
    response: Response,
    handle: ClientController = Depends(get_controller),
):
    await handle.controller.submit_answer(req.answer)
    handle.attach_cookie(response)
    return StateOut.from_state(handle.controller.state)


@router.get("/sessions/recent")
def recent_sessions(
    limit: int = Query(default=20, ge=1, le=100),
    store: ProblemStore = Depends(get_store),
):
    try:
        rows = store.recent_sessions(limit)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"db_error: {e}")
    items: List[dict] = [r.model_dump(exclude={"submissions"}) for r in rows]
    return {"ok": True, "items": items, "count": len(items)}


@router.get("/sessions/{session_id}", response_model=SessionOut)
def get_session(session_id: str, store: ProblemStore = Depends(get_store)):
    try:
        s = store.get_session(session_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"db_error: {e}")
    if s is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return s
