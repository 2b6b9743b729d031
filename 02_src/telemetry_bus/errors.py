"""Error taxonomy for the telemetry bus."""


class TelemetryBusError(Exception):
    """Base class for all telemetry bus errors."""


class ClosedChannelError(TelemetryBusError):
    """Publish or subscribe attempted on a closed channel."""

    def __init__(self, channel_name: str):
        self.channel_name = channel_name
        super().__init__(f"Channel '{channel_name}' is closed")


class MalformedRecordError(TelemetryBusError):
    """A record was constructed with a missing or mistyped required field."""

    def __init__(self, record_type: str, field: str, reason: str):
        self.record_type = record_type
        self.field = field
        self.reason = reason
        super().__init__(f"{record_type}.{field}: {reason}")
