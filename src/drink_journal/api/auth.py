"""Token auth for the journal API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from drink_journal.containers import AppContainer


def _get_api_token(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str | None = Depends(_get_api_token),
) -> None:
    """Ensure requests carry the configured token, when one is configured."""
    if api_token is None:
        return
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
