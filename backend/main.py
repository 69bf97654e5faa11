import logging
from datetime import datetime, timedelta, timezone
from typing import FrozenSet, Iterable, Optional, Union
from uuid import UUID

from dotenv import load_dotenv
from fastapi import Cookie, FastAPI, HTTPException, status
from jose import JWTError, jwt

from backend import app_context
from backend.app.routes.sponsors import router as sponsors_router
from backend.app.services.sponsors import reset_sponsor_services
from backend.app.sponsors import ActorContext, AdminFlag
from backend.app.sponsors.config import load_sponsor_config
from backend.app.sponsors.repository import create_sponsor_pool


load_dotenv()

SPONSOR_CONFIG = load_sponsor_config()

JWT_SECRET_KEY = SPONSOR_CONFIG.jwt_secret_key
JWT_ALGORITHM = "HS256"
JWT_EXP_MINUTES = SPONSOR_CONFIG.jwt_exp_minutes
SESSION_COOKIE_NAME = SPONSOR_CONFIG.session_cookie_name

logger = logging.getLogger("sponsors.api")


def create_access_token(
    *,
    subject: str,
    flags: Iterable[Union[AdminFlag, str]] = (),
    expires_delta: Optional[timedelta] = None,
) -> str:
    payload = {
        "sub": subject,
        "flags": [flag.value if isinstance(flag, AdminFlag) else str(flag) for flag in flags],
    }
    if expires_delta is None:
        expires_delta = timedelta(minutes=JWT_EXP_MINUTES)
    payload["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def _parse_flags(raw_flags: object) -> FrozenSet[AdminFlag]:
    if not isinstance(raw_flags, (list, tuple)):
        return frozenset()
    flags = set()
    for raw in raw_flags:
        try:
            flags.add(AdminFlag(raw))
        except ValueError:
            logger.debug("Ignoring unknown admin flag %r in session token", raw)
    return frozenset(flags)


def resolve_actor_from_session_token(session_token: str) -> Optional[ActorContext]:
    try:
        payload = jwt.decode(session_token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
        subject = payload.get("sub")
        if subject is None:
            return None
        session_id = UUID(str(subject))
    except (JWTError, ValueError):
        return None

    return ActorContext(session_id=session_id, flags=_parse_flags(payload.get("flags")))


def get_current_actor(session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME)) -> ActorContext:
    if not session_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    actor = resolve_actor_from_session_token(session_token)
    if actor is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return actor


def get_optional_current_actor(
    session_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
) -> Optional[ActorContext]:
    if not session_token:
        return None
    return resolve_actor_from_session_token(session_token)


app = FastAPI(title="Sponsor Ledger API")
app.state.sponsor_pool = None


def _get_sponsor_pool():
    pool = app.state.sponsor_pool
    if pool is None:
        raise RuntimeError("Sponsor database pool is not available")
    return pool


app_context.configure(
    get_pool=_get_sponsor_pool,
    get_current_actor=get_current_actor,
    sponsor_config=SPONSOR_CONFIG,
)
app.include_router(sponsors_router)


@app.on_event("startup")
async def setup_sponsor_pool() -> None:
    if SPONSOR_CONFIG.store_backend != "postgres":
        logger.info("Sponsor ledger running with the %s store", SPONSOR_CONFIG.store_backend)
        return
    app.state.sponsor_pool = await create_sponsor_pool(
        SPONSOR_CONFIG.db_config,
        min_size=SPONSOR_CONFIG.pool_min_size,
        max_size=SPONSOR_CONFIG.pool_max_size,
        command_timeout=SPONSOR_CONFIG.command_timeout,
        connect_timeout=SPONSOR_CONFIG.db_connect_timeout,
    )
    logger.info(
        "Sponsor ledger connected to %s:%s/%s",
        SPONSOR_CONFIG.db_host,
        SPONSOR_CONFIG.db_port,
        SPONSOR_CONFIG.db_name,
    )


@app.on_event("shutdown")
async def teardown_sponsor_pool() -> None:
    pool = app.state.sponsor_pool
    app.state.sponsor_pool = None
    reset_sponsor_services()
    if pool is not None:
        await pool.close()
