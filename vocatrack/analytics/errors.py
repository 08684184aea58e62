"""Analytics error types.

Only strict single-entity lookups raise. Aggregate operations drop
unreadable records instead, and programming errors (unknown metric,
bad limit) surface as plain ValueError.
"""


class RecordNotFoundError(LookupError):
    """A record required by a single-entity operation could not be read.

    Covers "absent", "read failed" and "read timed out" alike, the caller
    only needs to know there is nothing to show.

    Attributes:
        record_type: ``"student"`` or ``"class"``.
        record_id: The id that was looked up.
    """

    def __init__(self, record_type: str, record_id: str) -> None:
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(f"{record_type.capitalize()} '{record_id}' not found.")
