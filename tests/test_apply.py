import pytest

from shop_audit.remediation.apply import Mutation, MutationError, apply_mutations
from shop_audit.shopify import StoreAPIError


def returning(value, errors=()):
    calls = []

    def run():
        calls.append(1)
        return value, list(errors)

    run.calls = calls
    return run


def raising(error):
    def run():
        raise error
    return run


def test_continue_on_error_attempts_every_mutation():
    first, second, third = returning("a"), returning(None, ["taken"]), returning("c")

    outcome = apply_mutations(
        [Mutation("A", first), Mutation("B", second), Mutation("C", third)],
        continue_on_error=True,
    )

    assert [len(f.calls) for f in (first, second, third)] == [1, 1, 1]
    assert outcome.results == [("A", "a"), ("C", "c")]
    assert outcome.errors == ["Shopify Error for B: taken"]
    assert not outcome.ok


def test_continue_on_error_records_store_failures():
    outcome = apply_mutations(
        [Mutation("A", raising(StoreAPIError("timeout"))), Mutation("B", returning("b"))],
        continue_on_error=True,
    )

    assert outcome.results == [("B", "b")]
    assert outcome.errors == ["Shopify API Integration Error for A: timeout"]


def test_missing_result_without_errors_is_unknown_error():
    outcome = apply_mutations([Mutation("Refund Policy", returning(None))], continue_on_error=True)

    assert outcome.errors == ["Unknown Shopify Error when creating Refund Policy."]


def test_abort_on_error_stops_at_first_failure():
    later = returning("b")

    with pytest.raises(MutationError) as excinfo:
        apply_mutations(
            [Mutation("Shopify Product Update", returning(None, ["Title can't be blank", "Bad"])),
             Mutation("B", later)],
            continue_on_error=False,
        )

    assert str(excinfo.value) == "Shopify Product Update failed: Title can't be blank, Bad"
    assert later.calls == []


def test_abort_on_error_propagates_store_failures():
    with pytest.raises(StoreAPIError):
        apply_mutations([Mutation("A", raising(StoreAPIError("down")))], continue_on_error=False)


def test_all_successful():
    outcome = apply_mutations([Mutation("A", returning(1))], continue_on_error=False)

    assert outcome.ok
    assert outcome.results == [("A", 1)]


def test_continue_on_error_survives_unexpected_failures():
    later = returning("b")

    outcome = apply_mutations(
        [Mutation("A", raising(RuntimeError("socket closed"))), Mutation("B", later)],
        continue_on_error=True,
    )

    assert later.calls == [1]
    assert outcome.results == [("B", "b")]
    assert outcome.errors == ["Shopify API Integration Error for A: socket closed"]


def test_abort_on_error_propagates_unexpected_failures():
    with pytest.raises(RuntimeError):
        apply_mutations([Mutation("A", raising(RuntimeError("boom")))], continue_on_error=False)
