"""Domain errors raised by the prospect services."""


class NotFoundError(Exception):
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class StatusTransitionError(Exception):
    """A follow-up left Pending and cannot change status again."""

    def __init__(self, follow_up_id: str, current: str, requested: str):
        self.follow_up_id = follow_up_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Follow-up {follow_up_id} is {current}; cannot change status to {requested}"
        )


class GenerationFailure(Exception):
    """Text generation was unavailable, timed out, or returned unusable output."""

    def __init__(self, reason: str, task_type: str | None = None):
        self.reason = reason
        self.task_type = task_type
        super().__init__(reason)
