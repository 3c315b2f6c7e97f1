import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from roadmap_api.dependencies import get_roadmap_generator
from roadmap_api.errors import (
    RoadmapError,
    ValidationError,
    unexpected_error,
)
from roadmap_api.models import ErrorResponse, RoadmapDocument, RoadmapRequest
from roadmap_api.services.gemini_service import RoadmapGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_goal(request: Request) -> str:
    """Pulls a non-empty `goal` out of the JSON body or raises a 400."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        raise ValidationError()
    try:
        body = RoadmapRequest.model_validate(payload)
    except PydanticValidationError:
        raise ValidationError()
    if not body.goal:
        raise ValidationError()
    return body.goal


@router.post(
    "/roadmap",
    responses={
        200: {"model": RoadmapDocument},
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def generate_roadmap(
    goal: str = Depends(read_goal),
    generator: RoadmapGenerator = Depends(get_roadmap_generator),
):
    """
    Generates a learning roadmap for the goal in the request body.
    The model's JSON is returned as-is, without schema validation.
    """
    try:
        roadmap = await generator.generate(goal)
        return JSONResponse(status_code=200, content=roadmap)
    except RoadmapError:
        raise
    except Exception as e:
        logger.exception("Unexpected error in /roadmap endpoint")
        raise unexpected_error(e) from e

