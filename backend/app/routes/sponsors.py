"""API routes exposing sponsor administration."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ... import app_context
from ..schemas.sponsors import (
    GrantSponsorRequest,
    GrantSponsorResponse,
    SponsorListResponse,
    SponsorStatusResponse,
    TierListResponse,
)
from ..services.sponsors import get_account_resolver, get_sponsor_service
from ..sponsors import ActorContext, AdminFlag, SponsorError


def _get_current_actor(request: Request) -> ActorContext:
    cookie_name = app_context.get_sponsor_config().session_cookie_name
    return app_context.get_current_actor(session_token=request.cookies.get(cookie_name))


router = APIRouter(prefix="/api/admin/sponsors", tags=["sponsors"])


@router.get("/tiers", response_model=TierListResponse)
async def list_tiers(*, actor: ActorContext = Depends(_get_current_actor)) -> TierListResponse:
    try:
        actor.require_flag(AdminFlag.ADMIN)
    except SponsorError as exc:
        raise exc.to_http_exception() from exc
    return TierListResponse.from_catalog(get_sponsor_service().catalog)


@router.get("", response_model=SponsorListResponse)
async def list_sponsors(*, actor: ActorContext = Depends(_get_current_actor)) -> SponsorListResponse:
    try:
        actor.require_flag(AdminFlag.ADMIN)
        sponsors = await get_sponsor_service().enumerate()
    except SponsorError as exc:
        raise exc.to_http_exception() from exc
    return SponsorListResponse.from_snapshots(sponsors)


@router.post("", response_model=GrantSponsorResponse)
async def grant_sponsor(
    payload: GrantSponsorRequest,
    *,
    actor: ActorContext = Depends(_get_current_actor),
) -> GrantSponsorResponse:
    try:
        actor.require_flag(AdminFlag.SPONSOR)
        account_id = await get_account_resolver().resolve(payload.account)
        result = await get_sponsor_service().grant(
            account_id,
            payload.tier,
            payload.duration_days,
            actor=actor,
        )
    except SponsorError as exc:
        raise exc.to_http_exception() from exc
    return GrantSponsorResponse.from_result(result)


@router.get("/{account}", response_model=SponsorStatusResponse)
async def get_sponsor_status(
    account: str,
    *,
    actor: ActorContext = Depends(_get_current_actor),
) -> SponsorStatusResponse:
    try:
        actor.require_flag(AdminFlag.ADMIN)
        account_id = await get_account_resolver().resolve(account)
        result = await get_sponsor_service().query(account_id)
    except SponsorError as exc:
        raise exc.to_http_exception() from exc
    return SponsorStatusResponse.from_result(result)


@router.delete("/{account}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_sponsor(
    account: str,
    *,
    actor: ActorContext = Depends(_get_current_actor),
) -> Response:
    try:
        actor.require_flag(AdminFlag.SPONSOR)
        account_id = await get_account_resolver().resolve(account)
        await get_sponsor_service().revoke(account_id, actor=actor)
    except SponsorError as exc:
        raise exc.to_http_exception() from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
