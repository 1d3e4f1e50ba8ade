"""State machine for the lifecycle of one logical request."""

from enum import Enum

import structlog

from src.network.constants import COMPONENT_NETWORK


logger = structlog.get_logger()


class RequestState(str, Enum):
    """State of a logical request across its attempts.

    - START: Not yet attempted
    - ATTEMPT: HTTP request in flight
    - WAIT: Sleeping before the next attempt
    - DONE_SUCCESS: Decoded body returned
    - DONE_FAILED: Structured error raised
    """

    START = "START"
    ATTEMPT = "ATTEMPT"
    WAIT = "WAIT"
    DONE_SUCCESS = "DONE_SUCCESS"
    DONE_FAILED = "DONE_FAILED"


_VALID_TRANSITIONS: dict[RequestState, set[RequestState]] = {
    RequestState.START: {RequestState.ATTEMPT},
    RequestState.ATTEMPT: {
        RequestState.DONE_SUCCESS,
        RequestState.DONE_FAILED,
        RequestState.WAIT,
    },
    RequestState.WAIT: {RequestState.ATTEMPT},
    RequestState.DONE_SUCCESS: set(),  # Terminal state
    RequestState.DONE_FAILED: set(),  # Terminal state
}


class RequestStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        url: str,
        from_state: RequestState,
        to_state: RequestState,
    ) -> None:
        """Initialize the transition error.

        Args:
            url: Redacted URL of the request.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.url = url
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for request to '{url}': "
            f"{from_state.value} -> {to_state.value}"
        )


class RequestStateMachine:
    """Tracks one logical request from START to a terminal state.

    Enforces valid transitions, counts attempts and logs all state changes.
    """

    def __init__(self, url: str) -> None:
        """Initialize the state machine.

        Args:
            url: Redacted URL of the request, used for logging.
        """
        self._url = url
        self._state = RequestState.START
        self._attempts = 0
        self._log = logger.bind(component=COMPONENT_NETWORK, url=url)

    @property
    def state(self) -> RequestState:
        """Get the current state."""
        return self._state

    @property
    def attempts(self) -> int:
        """Number of times ATTEMPT has been entered."""
        return self._attempts

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (RequestState.DONE_SUCCESS, RequestState.DONE_FAILED)

    def can_transition_to(self, target: RequestState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: RequestState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            RequestStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise RequestStateTransitionError(self._url, self._state, target)

        old_state = self._state
        self._state = target
        if target == RequestState.ATTEMPT:
            self._attempts += 1

        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
            attempt=self._attempts,
        )

    def to_attempt(self) -> None:
        """Transition to ATTEMPT state."""
        self.transition_to(RequestState.ATTEMPT)

    def to_wait(self) -> None:
        """Transition to WAIT state."""
        self.transition_to(RequestState.WAIT)

    def to_success(self) -> None:
        """Transition to DONE_SUCCESS state."""
        self.transition_to(RequestState.DONE_SUCCESS)

    def to_failed(self) -> None:
        """Transition to DONE_FAILED state."""
        self.transition_to(RequestState.DONE_FAILED)
