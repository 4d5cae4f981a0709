"""Automation Engine.

Embeddable event-driven automation:
- events fire workflows registered on a `Manager`
- workflows run their action steps strictly in order
- later steps reference earlier outputs with `<<stepId.field>>`
"""

__version__ = "0.1.0"

from automation_engine.config import EngineSettings
from automation_engine.engine import Manager, Workflow

__all__ = ["__version__", "EngineSettings", "Manager", "Workflow"]
