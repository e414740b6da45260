"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from photo_gallery.app_logging import configure_logging
from photo_gallery.containers import AppContainer
from photo_gallery.domain.photos import SelectedFile, UploadForm
from photo_gallery.domain.results import Failure, Result
from photo_gallery.rendering import (
    Notice,
    Refresh,
    render_gallery_page,
    render_login_page,
    render_redirect_page,
    render_upload_page,
)
from photo_gallery.services.auth import GALLERY_PAGE, AuthOutcome
from photo_gallery.services.gallery import GalleryStatus, OverlayTrigger
from photo_gallery.services.upload import ERROR_HIDE_AFTER_SECONDS, ProgressStep


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    if not container.settings.is_configured:
        logger.error(
            "Supabase is not configured: set SUPABASE_URL and SUPABASE_ANON_KEY"
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/login", response_class=HTMLResponse)
    async def login_page(request: Request, tab: str = "login") -> Response:
        """Show the sign-in page unless a usable session already exists."""
        state_container: AppContainer = request.app.state.container
        if await state_container.auth_service.check_session():
            return RedirectResponse(GALLERY_PAGE, status_code=303)
        return HTMLResponse(render_login_page(tab=tab))

    @app.post("/login", response_class=HTMLResponse)
    async def login(
        request: Request,
        email: str = Form(default=""),
        password: str = Form(default=""),
    ) -> HTMLResponse:
        """Handle the sign-in form."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.auth_service.login(email, password)
        return _auth_response(result, tab="login", email=email)

    @app.post("/register", response_class=HTMLResponse)
    async def register(
        request: Request,
        email: str = Form(default=""),
        password: str = Form(default=""),
        password_confirm: str = Form(default=""),
    ) -> HTMLResponse:
        """Handle the registration form."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.auth_service.register(
            email, password, password_confirm
        )
        return _auth_response(result, tab="register", email=email)

    @app.post("/logout")
    async def logout(request: Request) -> RedirectResponse:
        state_container: AppContainer = request.app.state.container
        target = await state_container.auth_service.logout()
        return RedirectResponse(target, status_code=303)

    @app.get("/", response_class=HTMLResponse)
    async def gallery(
        request: Request,
        tag: str | None = None,
        photo: str | None = None,
    ) -> HTMLResponse:
        """Show the gallery, optionally filtered and with a photo opened."""
        state_container: AppContainer = request.app.state.container
        controller = state_container.gallery_controller
        needs_load = controller.status in {GalleryStatus.LOADING, GalleryStatus.ERROR}
        if needs_load or (tag is None and photo is None):
            controller.load()
        if tag is not None and controller.status is not GalleryStatus.ERROR:
            controller.filter_by_tag(tag)
        if photo is not None:
            controller.open_detail(photo)
        else:
            controller.close_detail(OverlayTrigger.CLOSE_BUTTON)
        eager_count = state_container.settings.eager_image_count
        controller.reveal(controller.cards[:eager_count])
        return HTMLResponse(
            render_gallery_page(
                controller,
                authenticated=state_container.auth_service.is_authenticated(),
            )
        )

    @app.get("/upload", response_class=HTMLResponse)
    async def upload_page(request: Request) -> HTMLResponse:
        state_container: AppContainer = request.app.state.container
        state_container.upload_controller.reset()
        return HTMLResponse(render_upload_page())

    @app.post("/upload", response_class=HTMLResponse)
    async def upload(
        request: Request,
        title: str = Form(default=""),
        description: str = Form(default=""),
        tags: str = Form(default=""),
        image: UploadFile | None = File(default=None),
    ) -> HTMLResponse:
        """Validate the chosen image, upload it and record its details."""
        state_container: AppContainer = request.app.state.container
        controller = state_container.upload_controller
        form = UploadForm(title=title, description=description, tags=tags)
        selected = None
        if image is not None and image.filename:
            selected = SelectedFile(
                filename=image.filename,
                content_type=image.content_type or "",
                content=await image.read(),
            )
        selection = controller.select_file(selected)
        if isinstance(selection, Failure):
            return HTMLResponse(
                render_upload_page(notice=_error_notice(selection.message), form=form)
            )
        preview_url = selection.value
        steps: list[ProgressStep] = []
        result = await controller.submit(form, steps.append)
        if isinstance(result, Failure):
            return HTMLResponse(
                render_upload_page(
                    notice=_error_notice(result.message),
                    form=form,
                    preview_url=preview_url,
                )
            )
        outcome = result.value
        return HTMLResponse(
            render_upload_page(
                notice=Notice(
                    outcome.message, hide_after_seconds=outcome.hide_after_seconds
                ),
                progress=steps[-1] if steps else None,
                preview_url=preview_url,
                form=form,
                submitting=controller.submitting,
                refresh=Refresh("/upload", outcome.reset_after_seconds),
            )
        )

    return app


def _auth_response(result: Result[AuthOutcome], tab: str, email: str) -> HTMLResponse:
    if isinstance(result, Failure):
        return HTMLResponse(
            render_login_page(
                tab=tab, notice=Notice(result.message, level="error"), email=email
            )
        )
    outcome = result.value
    notice = Notice(outcome.message)
    if outcome.redirect_to is None:
        return HTMLResponse(
            render_login_page(
                tab=tab, notice=notice, email="" if outcome.reset_form else email
            )
        )
    return HTMLResponse(
        render_redirect_page(
            notice, Refresh(outcome.redirect_to, outcome.redirect_delay_seconds)
        )
    )


def _error_notice(message: str) -> Notice:
    return Notice(message, level="error", hide_after_seconds=ERROR_HIDE_AFTER_SECONDS)
