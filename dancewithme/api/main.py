"""
Dance With Me API
Handles: events, anonymous users, per-event chat messages
Port: 4000

All routes live under /api. Errors are rendered as {"error": "..."}:
400 for validation failures, 404 for unknown routes or events, 500 when the
store fails. Nothing is retried.
"""

import os
from contextlib import asynccontextmanager
from typing import List

from dotenv import load_dotenv
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from dancewithme.api import crud
from dancewithme.api.database import init_db, get_db
from dancewithme.api.dependencies import undated_position, unknown_event_policy
from dancewithme.api.models import (
    EventCreate,
    EventItem,
    HealthResponse,
    MessageCreate,
    MessageItem,
    UserCreate,
    UserItem,
)
from dancewithme.log import get_logger

load_dotenv()

PORT = int(os.getenv("PORT", "4000"))

logger = get_logger("api")


# ── App ───────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Started on port %s", PORT)
    yield


app = FastAPI(title="Dance With Me API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix="/api")


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors and errors[0].get("type") == "json_invalid":
        message = "Invalid JSON body"
    elif errors:
        field = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid {field}: {errors[0].get('msg')}" if field else errors[0].get("msg")
    else:
        message = "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


# ── Endpoints ─────────────────────────────────────────────────────────────────

@router.get("/events", response_model=List[EventItem])
def list_events(
    db: Session = Depends(get_db),
    undated: str = Depends(undated_position),
):
    return crud.list_events(db, undated=undated)


@router.post("/events", response_model=EventItem)
def create_event(event: EventCreate, db: Session = Depends(get_db)):
    return crud.create_event(db, event.name, event.description, event.date)


@router.get("/users", response_model=List[UserItem])
def list_users(db: Session = Depends(get_db)):
    return crud.list_users(db)


@router.post("/users", response_model=UserItem)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    return crud.create_user(db, user.name, user.bio)


@router.get("/messages/{event_id}", response_model=List[MessageItem])
def list_messages(
    event_id: str,
    db: Session = Depends(get_db),
    unknown_event: str = Depends(unknown_event_policy),
):
    return crud.list_messages(db, event_id, unknown_event=unknown_event)


@router.post("/messages", response_model=MessageItem)
def post_message(message: MessageCreate, db: Session = Depends(get_db)):
    return crud.post_message(db, message.event_id, message.user_id, message.text)


app.include_router(router)


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": "api"}


def run(reload: bool = False):
    import uvicorn
    uvicorn.run("dancewithme.api.main:app", host="0.0.0.0", port=PORT, reload=reload)


if __name__ == "__main__":
    run(reload=True)
