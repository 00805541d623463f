"""Tagged success/failure results returned to the presentation layer."""

from dataclasses import dataclass
from typing import Any

from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.shared.errors import InvalidInput, NotFound, StorefrontError, StoreUnavailable


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    error: str | None = None
    reason: str | None = None
    removed: bool = False

    @classmethod
    def success(cls, value=None, removed=False) -> "Outcome":
        return cls(ok=True, value=value, removed=removed)

    @classmethod
    def failure(cls, exc: StorefrontError) -> "Outcome":
        return cls(ok=False, error=exc.code, reason=exc.reason)


def validation_reason(exc: ValidationError) -> str:
    """Flatten Protean's ``{field: [messages]}`` payload into one sentence."""
    messages = getattr(exc, "messages", None)
    if not isinstance(messages, dict) or not messages:
        return str(exc) or InvalidInput.default_reason

    parts = []
    for field, errors in messages.items():
        if isinstance(errors, (list, tuple)):
            errors = ", ".join(str(e) for e in errors)
        parts.append(f"{field}: {errors}")
    return "; ".join(parts)


def attempt(fn, *args, **kwargs) -> Outcome:
    """Run ``fn`` and fold expected business failures into an ``Outcome``.

    ``StoreUnavailable`` and anything unexpected propagate to the caller.
    """
    try:
        value = fn(*args, **kwargs)
    except StoreUnavailable:
        raise
    except StorefrontError as exc:
        return Outcome.failure(exc)
    except ObjectNotFoundError:
        return Outcome.failure(NotFound())
    except ValidationError as exc:
        return Outcome.failure(InvalidInput(validation_reason(exc)))

    if isinstance(value, Outcome):
        return value
    return Outcome.success(value)
