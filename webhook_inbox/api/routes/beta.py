"""Beta entry point: sends browsers to the main app with beta mode on."""

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

router = APIRouter(tags=["Beta"])

BETA_TARGET = "/?beta=true"


@router.get("/beta", include_in_schema=False)
async def beta_redirect() -> RedirectResponse:
    return RedirectResponse(url=BETA_TARGET, status_code=307)
