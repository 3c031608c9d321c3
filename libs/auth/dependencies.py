from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from libs.auth.bridge import RequestBridge
from libs.common.service_client import BackendClient


async def get_init_data(
    x_telegram_init_data: Annotated[Optional[str], Header()] = None,
) -> str:
    """
    Return the caller's raw Telegram ``initData``.

    The staff service does not verify it; it is forwarded to the backend,
    which authenticates the caller on each request.
    """
    if not x_telegram_init_data:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Telegram init data is required",
        )
    return x_telegram_init_data


async def get_bridge(
    init_data: Annotated[str, Depends(get_init_data)],
) -> RequestBridge:
    return RequestBridge(init_data)


async def get_backend_client(
    init_data: Annotated[str, Depends(get_init_data)],
) -> BackendClient:
    return BackendClient(init_data)
