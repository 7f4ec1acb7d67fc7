"""Repositories package."""
from studio_planner.repositories.base import Repository
from studio_planner.repositories.allocation_repository import AllocationRepository
from studio_planner.repositories.execution_repository import ExecutionRepository
from studio_planner.repositories.exercise_repository import ExerciseRepository
from studio_planner.repositories.plan_template_repository import PlanTemplateRepository

__all__ = [
    "Repository",
    "AllocationRepository",
    "ExecutionRepository",
    "ExerciseRepository",
    "PlanTemplateRepository",
]
