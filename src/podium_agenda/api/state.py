from __future__ import annotations

from dataclasses import dataclass, field

from ..services import AttendanceTracker, EventQueryService, ServiceContext


@dataclass(slots=True)
class ApiState:
    context: ServiceContext = field(default_factory=ServiceContext)
    events: EventQueryService = field(init=False)
    attendance: AttendanceTracker = field(init=False)

    def __post_init__(self) -> None:
        self.bind(self.context)

    def bind(self, context: ServiceContext) -> None:
        """Point every service at ``context``."""

        self.context = context
        self.events = EventQueryService(context)
        self.attendance = AttendanceTracker(context)


api_state = ApiState()
