# routers/page.py
from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from deps.services import ClientController, get_controller, peek_controller
from presentation import page_context

router = APIRouter(tags=["page"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/", response_class=HTMLResponse)
def index(request: Request, handle: ClientController = Depends(peek_controller)):
    response = templates.TemplateResponse(
        request, "index.html", page_context(handle.controller.state)
    )
    handle.attach_cookie(response)
    return response


def _back_to_page(request: Request, handle: ClientController) -> RedirectResponse:
    redirect = RedirectResponse(url=str(request.url_for("index")), status_code=303)
    handle.attach_cookie(redirect)
    return redirect


@router.post("/generate")
async def generate(request: Request, handle: ClientController = Depends(get_controller)):
    await handle.controller.generate_problem()
    return _back_to_page(request, handle)


@router.post("/submit")
async def submit(
    request: Request,
    answer: str = Form(""),
    handle: ClientController = Depends(get_controller),
):
    await handle.controller.submit_answer(answer)
    return _back_to_page(request, handle)
