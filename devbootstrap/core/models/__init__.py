"""
Domain models — pydantic types and step dataclasses.

All models are re-exported here for convenient access:

    from devbootstrap.core.models import Action, Receipt, RunConfig, Step
"""

from devbootstrap.core.models.action import Action, Receipt
from devbootstrap.core.models.config import BootstrapSettings, RunConfig
from devbootstrap.core.models.environment import EnvironmentFacts, OsKind
from devbootstrap.core.models.step import (
    FailurePolicy,
    Step,
    StepOutcome,
    StepResult,
)

__all__ = [
    # action.py
    "Action",
    "Receipt",
    # config.py
    "BootstrapSettings",
    "RunConfig",
    # environment.py
    "EnvironmentFacts",
    "OsKind",
    # step.py
    "FailurePolicy",
    "Step",
    "StepOutcome",
    "StepResult",
]
