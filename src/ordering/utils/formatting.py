"""User-facing error messages."""

import pydantic

from ordering.errors import CheckoutError

GENERIC_MESSAGE = "Something went wrong"


def format_error(exc: Exception) -> str:
    """Turn an exception into a short message that is safe to show a customer.

    Only checkout errors and input validation errors carry their own text.
    Everything else collapses to a generic message; the details belong in the
    log, not in a response.
    """
    if isinstance(exc, CheckoutError):
        return exc.message
    if isinstance(exc, pydantic.ValidationError):
        messages = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            messages.append(f"{field}: {error['msg']}" if field else error["msg"])
        return ". ".join(messages)
    return GENERIC_MESSAGE
