import pytest

from muxd.errors import JsonError
from muxd.planner import OrchestrationCommand, WorkerPlan, plan_workers


def test_api_task_plans_designer_builder_and_tester():
    workers = plan_workers("create api")
    assert [w.name for w in workers] == ["API-Designer", "API-Builder", "Test-Engineer"]
    assert [w.worker_type for w in workers] == ["sparc", "task", "sparc"]
    assert workers[0].task == "Design REST API architecture for: create api"
    assert workers[1].task == "Implement REST API endpoints for: create api"


def test_user_task_plans_auth_system():
    workers = plan_workers("add login for user")
    assert [w.name for w in workers] == ["Auth-System", "Test-Engineer"]
    assert workers[0].worker_type == "swarm"


def test_keywords_are_case_insensitive():
    workers = plan_workers("DATABASE")
    assert [w.name for w in workers] == ["DB-Specialist", "Test-Engineer"]
    assert workers[0].task == "Design and implement database schema for: DATABASE"


def test_unmatched_task_gets_general_worker():
    assert plan_workers("hello") == [WorkerPlan("General-Dev", "task", "hello")]


def test_tester_is_always_last_when_specialists_planned():
    for task in ("rest service", "frontend", "user data", "api auth frontend database"):
        workers = plan_workers(task)
        assert workers[-1].name == "Test-Engineer"
        assert workers[-1].task == f"Write comprehensive tests for: {task}"
        assert all(w.name != "General-Dev" for w in workers)


def test_command_round_trip():
    command = OrchestrationCommand("build things", 1700000000)
    assert OrchestrationCommand.from_dict(command.to_dict()) == command


def test_command_missing_task_is_rejected():
    with pytest.raises(JsonError):
        OrchestrationCommand.from_dict({"timestamp": 1})