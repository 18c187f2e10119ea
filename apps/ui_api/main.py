from __future__ import annotations
from contextlib import asynccontextmanager
from typing import Callable, Dict, Optional
import asyncio

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from core.timing.stopwatch import StopwatchEngine

_engine: Optional[StopwatchEngine] = None

def get_engine() -> StopwatchEngine:
    global _engine
    if _engine is None or _engine.closed:
        _engine = StopwatchEngine.from_config()
    return _engine

def set_engine(engine: Optional[StopwatchEngine]) -> None:
    """Swap the served engine (tests inject one with a fake clock)."""
    global _engine
    _engine = engine

@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    if _engine is not None:
        _engine.close()

app = FastAPI(title="Lapwatch UI API", lifespan=lifespan)

def _command(engine: StopwatchEngine, name: str) -> Callable[[], bool]:
    table: Dict[str, Callable[[], bool]] = {
        "start": engine.start,
        "lap": engine.lap,
        "stop": engine.stop,
        "resume": engine.resume,
        "reset": engine.reset,
        "press_start": engine.press_start,
    }
    if name not in table:
        raise HTTPException(status_code=404, detail=f"unknown command {name!r}")
    return table[name]

@app.get("/snapshot")
def get_snapshot():
    return get_engine().snapshot().model_dump()

@app.post("/commands/{name}")
def post_command(name: str):
    engine = get_engine()
    applied = _command(engine, name)()
    return {"applied": applied, "snapshot": engine.snapshot().model_dump()}

@app.websocket("/ws/snapshot")
async def ws_snapshot(ws: WebSocket):
    await ws.accept()
    engine = get_engine()
    interval = engine.tick_interval_ms / 1000.0
    try:
        while True:
            await ws.send_json(engine.snapshot().model_dump())
            # clients may send command names between frames
            try:
                name = await asyncio.wait_for(ws.receive_text(), timeout=interval)
            except asyncio.TimeoutError:
                continue
            try:
                action = _command(engine, name.strip())
                # stop/reset join the tick thread; keep that off the event loop
                await asyncio.to_thread(action)
            except HTTPException as exc:
                await ws.send_json({"type": "error", "msg": exc.detail})
    except WebSocketDisconnect:
        return
