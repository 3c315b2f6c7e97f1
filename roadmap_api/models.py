from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class RoadmapRequest(BaseModel):
    goal: Optional[str] = None


class Resource(BaseModel):
    title: str = ""
    type: Literal["youtube", "documentation", "course", "article", "book"]
    url: str = ""


class RoadmapNode(BaseModel):
    id: str
    label: str = ""
    level: int = Field(ge=0, le=4)
    description: str = ""
    category: Literal[
        "basics", "practice", "advanced", "goal", "foundation", "intermediate"
    ]
    time_estimate: str = Field(alias="timeEstimate", default="")
    children: List[str] = []
    resources: List[Resource] = []

    model_config = ConfigDict(populate_by_name=True)


class RoadmapDocument(BaseModel):
    """
    Shape the prompt asks the model for. Used for API docs only:
    responses are returned exactly as the model produced them.
    """

    title: str = ""
    nodes: List[RoadmapNode] = []


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    type: Optional[str] = None
