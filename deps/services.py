from __future__ import annotations

import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request, Response

from ai_client import GeminiClient
from config import settings
from controller import InteractionController
from store import ProblemStore

# One controller per browser, keyed by cookie; process memory only, least recently used evicted
_controllers: "OrderedDict[str, InteractionController]" = OrderedDict()


def get_ai_client(request: Request) -> GeminiClient:
    return request.app.state.ai_client


def get_store(request: Request) -> ProblemStore:
    return request.app.state.store


@dataclass
class ClientController:
    key: str
    controller: InteractionController
    is_new: bool = False

    def attach_cookie(self, response: Response) -> None:
        if self.is_new:
            response.set_cookie(
                key=settings.SESSION_COOKIE_NAME,
                value=self.key,
                httponly=True,
                samesite="lax",
            )


def _lookup(request: Request) -> Optional[ClientController]:
    key: Optional[str] = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if key and key in _controllers:
        _controllers.move_to_end(key)
        return ClientController(key=key, controller=_controllers[key])
    return None


def get_controller(
    request: Request,
    ai: GeminiClient = Depends(get_ai_client),
    store: ProblemStore = Depends(get_store),
) -> ClientController:
    """For the two workflow actions: registers a controller if the browser has none."""
    found = _lookup(request)
    if found is not None:
        return found

    key = str(uuid.uuid4())
    controller = InteractionController(ai=ai, store=store)
    _controllers[key] = controller
    while len(_controllers) > settings.MAX_CONTROLLERS:
        _controllers.popitem(last=False)
    return ClientController(key=key, controller=controller, is_new=True)


def peek_controller(
    request: Request,
    ai: GeminiClient = Depends(get_ai_client),
    store: ProblemStore = Depends(get_store),
) -> ClientController:
    """For read-only views: an unknown browser sees a blank state that is not kept."""
    found = _lookup(request)
    if found is not None:
        return found
    return ClientController(key="", controller=InteractionController(ai=ai, store=store))


def controller_count() -> int:
    return len(_controllers)


def reset_controllers() -> None:
    _controllers.clear()
