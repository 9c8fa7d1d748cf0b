"""Release and publish pipelines."""

from release_tasks.workflows.base import Pipeline, PipelineResult, Step
from release_tasks.workflows.publish import PublishPipeline, run_publish
from release_tasks.workflows.release import ReleasePipeline, run_release

__all__ = [
    "Pipeline",
    "PipelineResult",
    "Step",
    "ReleasePipeline",
    "PublishPipeline",
    "run_release",
    "run_publish",
]
