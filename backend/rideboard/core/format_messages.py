"""In-app message text for ride events.

Invariants:
    - Pure string formatting, no IO
    - Only accepted and cancelled events produce a message to the rider
"""

from rideboard.core.events import RequestAccepted, RideCancelled


def format_acceptance_message(event: RequestAccepted) -> str:
    return (
        f"Your ride request from {event.origin} to {event.destination} "
        f"has been accepted! Feel free to message me to coordinate."
    )


def format_cancellation_message(event: RideCancelled) -> str:
    return (
        f"Unfortunately, the ride from {event.origin} to {event.destination} "
        f"has been cancelled."
    )
