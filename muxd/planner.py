"""Splitting an orchestration task into worker assignments."""

from __future__ import annotations

from dataclasses import dataclass

from .types import Payload


@dataclass
class OrchestrationCommand(Payload):
    """A task handed to the orchestrator."""

    task: str
    timestamp: int


@dataclass
class WorkerPlan(Payload):
    """One worker to spawn: its display name, kind and task."""

    name: str
    worker_type: str
    task: str


def plan_workers(task: str) -> list[WorkerPlan]:
    """Choose workers for a task from keywords found in it."""
    lowered = task.lower()
    workers: list[WorkerPlan] = []

    if "api" in lowered or "rest" in lowered:
        workers.append(WorkerPlan("API-Designer", "sparc", f"Design REST API architecture for: {task}"))
        workers.append(WorkerPlan("API-Builder", "task", f"Implement REST API endpoints for: {task}"))

    if "auth" in lowered or "user" in lowered:
        workers.append(
            WorkerPlan("Auth-System", "swarm", f"Build complete authentication system for: {task}")
        )

    if "frontend" in lowered or "ui" in lowered:
        workers.append(WorkerPlan("Frontend-Dev", "sparc", f"Create frontend interface for: {task}"))

    if "database" in lowered or "data" in lowered:
        workers.append(
            WorkerPlan("DB-Specialist", "task", f"Design and implement database schema for: {task}")
        )

    if workers:
        workers.append(WorkerPlan("Test-Engineer", "sparc", f"Write comprehensive tests for: {task}"))
    else:
        workers.append(WorkerPlan("General-Dev", "task", task))

    return workers