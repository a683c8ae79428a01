import json

from game.messaging.events import Event


def parse_event(raw_body: bytes) -> Event:
    """Decode a request body into an Event.

    Raises ValueError (json.JSONDecodeError, UnicodeDecodeError or
    pydantic.ValidationError) when the body is not a well-formed event.
    Nesting too deep for the decoder is reported as ValueError as well.
    """
    try:
        body = json.loads(raw_body)
    except RecursionError as exc:
        raise ValueError("event JSON is nested too deeply") from exc
    if not isinstance(body, dict):
        raise ValueError("event must be a JSON object")
    return Event.model_validate(body)
