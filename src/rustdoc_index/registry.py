"""
Deferred registration sinks.

Every generated index file ends with the same handoff:

    if (window.register_implementors) {
        window.register_implementors(implementors);
    } else {
        window.pending_implementors = implementors;
    }

DeferredRegistrationSink reproduces it. Producers call register() in any
order; if the consumer is already installed it receives the payload
synchronously, otherwise the payload waits in a single pending slot until
install() replays it.

The pending slot holds one payload. A second register() before a consumer
exists replaces the first (last writer wins) and the replaced payload is
counted in `dropped`.

Two process-wide sinks exist, one per payload kind, together with the hook
functions the generated files call.
"""

from collections.abc import Callable

from rustdoc_index.payload import PAYLOAD_KINDS, IndexPayload


Consumer = Callable[[IndexPayload], object]


class SinkAlreadyInstalledError(RuntimeError):
    """Raised when a consumer is installed on a sink that already has one."""


class DeferredRegistrationSink:
    """Single-consumer sink with a one-slot pending buffer."""

    def __init__(self, name: str):
        self.name = name
        self._consumer: Consumer | None = None
        self._pending: IndexPayload | None = None
        self._dropped = 0
        self._delivered = 0

    def __repr__(self) -> str:
        state = "installed" if self.installed else "waiting"
        return f"DeferredRegistrationSink({self.name!r}, {state})"

    @property
    def installed(self) -> bool:
        return self._consumer is not None

    @property
    def pending(self) -> IndexPayload | None:
        return self._pending

    @property
    def dropped(self) -> int:
        """Pending payloads replaced before a consumer arrived."""
        return self._dropped

    @property
    def delivered(self) -> int:
        """Payloads handed to the consumer, replays included."""
        return self._delivered

    def register(self, payload: IndexPayload) -> bool:
        """
        Hand a payload to the consumer, or park it until one is installed.

        Returns True if the consumer was invoked, False if the payload was
        stored in the pending slot.
        """
        if self._consumer is not None:
            self._deliver(payload)
            return True

        if self._pending is not None:
            self._dropped += 1
        self._pending = payload
        return False

    def install(self, consumer: Consumer, replay: bool = True) -> IndexPayload | None:
        """
        Install the consumer. Installation is permanent.

        With replay=True a pending payload is delivered immediately and the
        slot cleared. Returns the replayed payload, if any.

        If the consumer raises during replay, the sink is left as it was:
        no consumer installed and the payload still pending.
        """
        if self._consumer is not None:
            raise SinkAlreadyInstalledError(
                f"Sink '{self.name}' already has a consumer installed"
            )
        self._consumer = consumer

        if replay and self._pending is not None:
            payload = self._pending
            try:
                self._deliver(payload)
            except Exception:
                self._consumer = None
                raise
            self._pending = None
            return payload
        return None

    def take_pending(self) -> IndexPayload | None:
        """Return and clear the pending payload."""
        payload = self._pending
        self._pending = None
        return payload

    def reset(self) -> None:
        """Drop the consumer, the pending payload and the counters."""
        self._consumer = None
        self._pending = None
        self._dropped = 0
        self._delivered = 0

    def _deliver(self, payload: IndexPayload) -> None:
        self._consumer(payload)
        self._delivered += 1


# =============================================================================
# Process-wide sinks
# =============================================================================

SIDEBAR_SINK = DeferredRegistrationSink("sidebar")
IMPLEMENTORS_SINK = DeferredRegistrationSink("implementors")

_SINKS = {
    "sidebar": SIDEBAR_SINK,
    "implementors": IMPLEMENTORS_SINK,
}


def get_sink(kind: str) -> DeferredRegistrationSink:
    """Get the process-wide sink for a payload kind."""
    if kind not in _SINKS:
        raise KeyError(f"No sink for payload kind '{kind}'. Expected one of {', '.join(PAYLOAD_KINDS)}")
    return _SINKS[kind]


def new_sinks() -> dict[str, DeferredRegistrationSink]:
    """Create a private set of sinks, one per payload kind."""
    return {kind: DeferredRegistrationSink(kind) for kind in PAYLOAD_KINDS}


def init_sidebar_items(payload: IndexPayload) -> bool:
    """Hook called by sidebar-items.js."""
    return SIDEBAR_SINK.register(payload)


def register_implementors(payload: IndexPayload) -> bool:
    """Hook called by implementors/**/trait.*.js."""
    return IMPLEMENTORS_SINK.register(payload)
