"""Apply a batch of store mutations with continue-on-error or abort-on-error semantics."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from ..shopify import StoreAPIError


LOGGER = logging.getLogger(__name__)


class MutationError(Exception):
    """A mutation in an abort-on-error batch returned store-side user errors."""

    def __init__(self, label: str, messages: list[str]):
        super().__init__(f"{label} failed: {', '.join(messages)}")
        self.label = label
        self.messages = messages


@dataclass
class Mutation:
    """A labelled store write.

    ``run`` returns ``(value, user_errors)``; a None value with no user errors
    means the store answered without the object we asked for.
    """
    label: str
    run: Callable[[], tuple[Any, list[str]]]


@dataclass
class ApplyOutcome:
    results: list[tuple[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def apply_mutations(mutations: list[Mutation], continue_on_error: bool) -> ApplyOutcome:
    """Run ``mutations`` in order.

    With ``continue_on_error`` every mutation is attempted and failures are
    collected in ``errors``. Without it the first failure raises.

    Raises:
        MutationError: user errors in abort mode
        StoreAPIError: transport/API failure in abort mode (other errors propagate as raised)
    """
    outcome = ApplyOutcome()

    for mutation in mutations:
        try:
            value, user_errors = mutation.run()
        except StoreAPIError as e:
            if not continue_on_error:
                raise
            LOGGER.warning("Store call for %s failed: %s", mutation.label, e)
            outcome.errors.append(f"Shopify API Integration Error for {mutation.label}: {e}")
            continue
        except Exception as e:
            if not continue_on_error:
                raise
            LOGGER.exception("Store call for %s failed unexpectedly", mutation.label)
            outcome.errors.append(f"Shopify API Integration Error for {mutation.label}: {e}")
            continue

        if user_errors:
            if not continue_on_error:
                raise MutationError(mutation.label, user_errors)
            LOGGER.warning("Store rejected %s: %s", mutation.label, user_errors)
            outcome.errors.extend(f"Shopify Error for {mutation.label}: {m}" for m in user_errors)
        elif value is None:
            if not continue_on_error:
                raise MutationError(mutation.label, ["no result returned"])
            outcome.errors.append(f"Unknown Shopify Error when creating {mutation.label}.")
        else:
            outcome.results.append((mutation.label, value))

    return outcome
