class CapacityExceededError(Exception):
    """Raised when joining would push an event past its max_capacity."""

    def __init__(self, event_id: object, max_capacity: int) -> None:
        """Store the event and its capacity."""
        self.event_id = event_id
        self.max_capacity = max_capacity
        super().__init__(f"Event {event_id} is full ({max_capacity} participants).")
