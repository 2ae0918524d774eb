"""Request-scoped access to the caller's dashboard controller."""

from __future__ import annotations

import asyncio
import logging
import re
from collections import OrderedDict
from dataclasses import dataclass
from typing import List

from fastapi import Depends, Header, HTTPException, Request, status

from app.config import AppSettings
from app.db.session import Database
from app.services.store import SqlStore
from eventdesk.controller import DashboardController
from eventdesk.store import DataStore, LocalJsonStore

logger = logging.getLogger(__name__)

_OWNER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.@-]{0,127}$")


@dataclass
class RequestContext:
    user_id: str


def get_request_context(x_user_id: str | None = Header(default=None)) -> RequestContext:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user context")
    if not _OWNER_RE.match(x_user_id) or ".." in x_user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed user id")
    return RequestContext(user_id=x_user_id)


class ControllerRegistry:
    """One started :class:`DashboardController` per account, created on first use.

    At most ``settings.max_loaded_accounts`` controllers stay loaded; the
    least recently requested one is stopped to make room. Its account is
    reloaded from the store on the next request.
    """

    def __init__(self, settings: AppSettings, database: Database | None = None):
        self.settings = settings
        self.database = database
        self._controllers: OrderedDict[str, DashboardController] = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, owner_id: object) -> bool:
        return owner_id in self._controllers

    def _store_for(self, owner_id: str) -> DataStore:
        if self.settings.storage_backend == "sql":
            if self.database is None:
                raise RuntimeError("SQL storage selected but no database is configured")
            return SqlStore(self.database, owner_id)
        return LocalJsonStore(self.settings.local_data_dir, owner_id)

    async def get(self, owner_id: str) -> DashboardController:
        evicted: List[DashboardController] = []
        async with self._lock:
            controller = self._controllers.get(owner_id)
            if controller is None:
                controller = DashboardController(
                    self._store_for(owner_id),
                    default_monthly_goal=self.settings.default_monthly_goal,
                )
                await controller.start()
                self._controllers[owner_id] = controller
                logger.info("Loaded dashboard for %s (%s store)", owner_id, self.settings.storage_backend)
                while len(self._controllers) > self.settings.max_loaded_accounts:
                    stale_id, stale = self._controllers.popitem(last=False)
                    logger.info("Unloading idle dashboard for %s", stale_id)
                    evicted.append(stale)
            else:
                self._controllers.move_to_end(owner_id)
        for stale in evicted:
            await stale.stop()
        return controller

    async def close(self) -> None:
        async with self._lock:
            controllers = list(self._controllers.values())
            self._controllers.clear()
        for controller in controllers:
            await controller.stop()


def get_registry(request: Request) -> ControllerRegistry:
    return request.app.state.controllers


async def get_controller(
    context: RequestContext = Depends(get_request_context),
    registry: ControllerRegistry = Depends(get_registry),
) -> DashboardController:
    return await registry.get(context.user_id)


__all__ = [
    "ControllerRegistry",
    "RequestContext",
    "get_controller",
    "get_registry",
    "get_request_context",
]
