"""Orchestration module for task lifecycle management."""

from src.orchestration.state_machine import (
    TaskStateMachine,
    TransitionNotAllowed,
    create_state_machine,
)

__all__ = [
    "TaskStateMachine",
    "TransitionNotAllowed",
    "create_state_machine",
]
