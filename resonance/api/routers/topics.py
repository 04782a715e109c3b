import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from resonance.api.deps import get_controller
from resonance.categories import CATEGORIES, Category
from resonance.controller import AppController, StateView
from resonance.formatting import split_sections
from resonance.models import ExportResponse, Section

router = APIRouter(tags=["topics"])


@router.get("/categories", response_model=List[Category])
async def list_categories():
    """Ordered category list, as shown on the home screen."""
    return list(CATEGORIES)


@router.get("/state", response_model=StateView)
async def get_state(controller: AppController = Depends(get_controller)):
    return controller.view()


@router.post("/welcome", response_model=StateView)
async def acknowledge_welcome(controller: AppController = Depends(get_controller)):
    controller.acknowledge_welcome()
    return controller.view()


@router.post("/categories/{category_id}", response_model=StateView)
async def select_category(
    category_id: str = Path(..., title="The category to activate"),
    controller: AppController = Depends(get_controller),
):
    try:
        controller.select_category(category_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category {category_id} not found.")
    return controller.view()


@router.post("/back", response_model=StateView)
async def back(controller: AppController = Depends(get_controller)):
    controller.back()
    return controller.view()


@router.post("/topic", response_model=StateView)
async def generate_topic(controller: AppController = Depends(get_controller)):
    """Generates a topic for the active category, replacing the current one if any.

    A failed generation is not an HTTP error: the returned state is in the
    ``error`` phase and carries the message to display.
    """
    await controller.generate()
    return controller.view()


@router.post("/topic/retry", response_model=StateView)
async def retry_topic(controller: AppController = Depends(get_controller)):
    await controller.retry()
    return controller.view()


@router.delete("/topic/error", response_model=StateView)
async def dismiss_error(controller: AppController = Depends(get_controller)):
    controller.dismiss_error()
    return controller.view()


@router.get("/topic/sections", response_model=List[Section])
async def topic_sections(controller: AppController = Depends(get_controller)):
    topic = controller.current_topic
    if topic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No topic generated yet.")
    return split_sections(topic.content)


@router.post("/topic/export", response_model=ExportResponse)
async def export_topic(controller: AppController = Depends(get_controller)):
    """Hands the raw topic text back so the client can put it on its clipboard."""
    copied: List[str] = []
    notice = controller.export_topic(copied.append)
    if not notice.ok:
        logging.info("Export skipped: %s", notice.message)
    return ExportResponse(notice=notice, text=copied[0] if copied else None)
