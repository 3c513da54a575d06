# api/post_controller.py
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from core.deps import get_post_service
from schemas.posts import PostSaveRequest, PostUpdateRequest
from services.post_service import PostService

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

posts_router = APIRouter(prefix="/posts", tags=["Posts"])

Service = Annotated[PostService, Depends(get_post_service)]


def _redirect(url: str) -> RedirectResponse:
    # 303 turns the follow-up request into a GET regardless of the original method
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


@posts_router.get(
    "/save",
    response_class=HTMLResponse,
    summary="Post creation form",
)
async def posts_save_form(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "posts/posts-save.html")


@posts_router.get(
    "",
    response_class=HTMLResponse,
    summary="List posts",
    description="Render every post ordered by ID.",
)
async def posts_list(request: Request, service: Service) -> HTMLResponse:
    posts = await service.find_all()
    return templates.TemplateResponse(request, "posts/posts-list.html", {"posts": posts})


@posts_router.get(
    "/update/{post_id}",
    response_class=HTMLResponse,
    summary="Post edit form",
)
async def posts_update_form(post_id: int, request: Request, service: Service) -> HTMLResponse:
    post = await service.find_by_id(post_id)
    return templates.TemplateResponse(request, "posts/posts-update.html", {"post": post})


@posts_router.get(
    "/{post_id}",
    response_class=HTMLResponse,
    summary="Post detail",
)
async def posts_detail(post_id: int, request: Request, service: Service) -> HTMLResponse:
    post = await service.find_by_id(post_id)
    return templates.TemplateResponse(request, "posts/posts-detail.html", {"post": post})


@posts_router.post(
    "/save",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Create post",
)
async def save(form: Annotated[PostSaveRequest, Form()], service: Service) -> RedirectResponse:
    await service.save(form)
    return _redirect("/posts")


@posts_router.post(
    "/update/{post_id}",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Update post",
    description="Replace title, content and author. The path ID wins over any `id` form field.",
)
async def update(
    post_id: int,
    form: Annotated[PostSaveRequest, Form()],
    service: Service,
) -> RedirectResponse:
    payload = PostUpdateRequest(id=post_id, **form.model_dump())
    updated_id = await service.update(payload)
    return _redirect(f"/posts/{updated_id}")


@posts_router.post(
    "/delete/{post_id}",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Delete post",
)
async def delete(post_id: int, service: Service) -> RedirectResponse:
    await service.delete(post_id)
    return _redirect("/posts")
