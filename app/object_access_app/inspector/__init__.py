from object_access_app.inspector.events import (
    FieldSelected,
    InspectorEvent,
    ObjectSelected,
    SubmitClicked,
    UserSelected,
)
from object_access_app.inspector.registry import InspectorRegistry
from object_access_app.inspector.state_machine import AccessInspector, InspectorState

__all__ = [
    "AccessInspector",
    "FieldSelected",
    "InspectorEvent",
    "InspectorRegistry",
    "InspectorState",
    "ObjectSelected",
    "SubmitClicked",
    "UserSelected",
]
