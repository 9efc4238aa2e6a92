from __future__ import annotations
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict
from .schemas import PipelineStageId


class PipelineStageConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: PipelineStageId
    label: str
    description: str
    color: str
    bg_color: str
    border_color: str


# Fixed order: harvest -> sync -> ingest -> index
PIPELINE_STAGES: Tuple[PipelineStageConfig, ...] = (
    PipelineStageConfig(
        id=PipelineStageId.HARVEST,
        label="Harvest",
        description="Download CSV files",
        color="hsl(217, 91%, 60%)",
        bg_color="hsl(217, 91%, 97%)",
        border_color="hsl(217, 91%, 85%)",
    ),
    PipelineStageConfig(
        id=PipelineStageId.SYNC,
        label="Sync",
        description="PostgreSQL sync",
        color="hsl(262, 83%, 58%)",
        bg_color="hsl(262, 83%, 97%)",
        border_color="hsl(262, 83%, 85%)",
    ),
    PipelineStageConfig(
        id=PipelineStageId.INGEST,
        label="Ingest",
        description="Process & parse",
        color="hsl(142, 76%, 36%)",
        bg_color="hsl(142, 76%, 97%)",
        border_color="hsl(142, 76%, 85%)",
    ),
    PipelineStageConfig(
        id=PipelineStageId.INDEX,
        label="Index",
        description="Elasticsearch",
        color="hsl(45, 93%, 47%)",
        bg_color="hsl(45, 93%, 97%)",
        border_color="hsl(45, 93%, 80%)",
    ),
)

_STAGE_ORDER = tuple(stage.id for stage in PIPELINE_STAGES)


def get_stage_config(stage_id: PipelineStageId) -> PipelineStageConfig:
    """Config for a stage, falling back to the first stage."""
    for stage in PIPELINE_STAGES:
        if stage.id == stage_id:
            return stage
    return PIPELINE_STAGES[0]


def get_stage_index(stage_id: PipelineStageId) -> int:
    return _STAGE_ORDER.index(stage_id)


def get_next_stage(stage_id: PipelineStageId) -> Optional[PipelineStageId]:
    """Stage after ``stage_id`` in pipeline order, None past the last one."""
    idx = get_stage_index(stage_id)
    if idx < len(_STAGE_ORDER) - 1:
        return _STAGE_ORDER[idx + 1]
    return None
