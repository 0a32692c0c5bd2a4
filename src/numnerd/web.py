"""
HTTP front end: one page per number, plus a redirect to a random one.

    GET /{n}       facts about n (400 for anything but an unsigned integer)
    GET /random    307 → /<random digits>
    GET /          same as /random

The app loads its profile and discovers analyzers (workspace first, then
packaged) once, at startup or on the first request. Every request then runs
with that profile installed in its own context.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from numnerd import config as CONFIG
from numnerd import runtime
from numnerd.collector import collect
from numnerd.dataio import load_trivia
from numnerd.display import render_html
from numnerd.randnum import random_number_text
from numnerd.registry import Index, discover
from numnerd.utility import UserInputError, apply_digit_limit, parse_nonnegative
from numnerd.workspace import workspace_dir

BASE_DIR = Path(__file__).parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _prepare(app: FastAPI) -> Index:
    """Load profile and analyzers on first use; install the profile for this request."""
    state = app.state
    if state.settings is None:
        state.settings = CONFIG.load_settings(state.profile)
        runtime.reset(state.settings)
        apply_digit_limit()
        if state.index is None:
            state.index = discover(workspace_dir())
    runtime.reset(state.settings)
    return state.index


def create_app(index: Index | None = None, profile: str | None = None) -> FastAPI:
    """
    Build the app. `index` replaces discovery (tests); `profile` defaults to
    'default', looked up in the workspace before the package.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _prepare(app)
        yield

    app = FastAPI(title="numnerd", lifespan=lifespan)
    app.state.profile = profile
    app.state.settings = None
    app.state.index = index

    @app.get("/", include_in_schema=False)
    @app.get("/random")
    async def random_number() -> RedirectResponse:
        _prepare(app)
        return RedirectResponse(url=f"/{random_number_text()}", status_code=307)

    @app.get("/{param}", response_class=HTMLResponse)
    async def number_page(request: Request, param: str):
        index = _prepare(app)
        try:
            n = parse_nonnegative(param)
        except UserInputError as e:
            return PlainTextResponse(f"Error: {e}", status_code=400)

        facts = await collect(n, index)
        rendered = render_html(facts)
        return templates.TemplateResponse(
            request,
            "number.html",
            {
                "n": str(n),
                "basic": rendered["basic"],
                "forms": rendered["forms"],
                "trivia": load_trivia(n),
            },
        )

    return app


app = create_app()
