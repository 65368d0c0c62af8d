from __future__ import annotations

from typing import Any

import pytest

from payment_bridge.payments.exceptions import IdentityRecoveryError
from payment_bridge.payments.identity import (
    BillingIdentity,
    DescriptionIdentityStrategy,
    IdentityRecoverer,
    MetadataIdentityStrategy,
    parse_amount,
)

from tests.factories import provider_payment


def test_metadata_takes_precedence_over_description() -> None:
    record = provider_payment(
        namespace="from-meta", billing="plan", description="Payment for other/thing"
    )

    recovered = IdentityRecoverer().recover(record)

    assert recovered.identity == BillingIdentity("from-meta", "plan")
    assert recovered.source == "metadata"
    assert recovered.amount == 100.0


@pytest.mark.parametrize(
    ("namespace", "billing"),
    [(None, "plan"), ("team-a", None), ("", "plan"), ("team-a", "  ")],
)
def test_falls_back_to_description_when_metadata_incomplete(
    namespace: str | None, billing: str | None
) -> None:
    record = provider_payment(
        namespace=namespace, billing=billing, description="Payment for team-b/basic"
    )

    recovered = IdentityRecoverer().recover(record)

    assert recovered.identity == BillingIdentity("team-b", "basic")
    assert recovered.source == "description"


def test_description_splits_at_first_separator() -> None:
    record = provider_payment(
        namespace=None, billing=None, description="Payment for ns/a/b"
    )

    identity, source = IdentityRecoverer().recover_identity(record)

    assert identity == BillingIdentity("ns", "a/b")
    assert source == "description"


@pytest.mark.parametrize(
    "description",
    [
        None,
        "Payment for team-a",
        "Payment for /basic",
        "Payment for team-a/",
        "Invoice for team-a/basic",
    ],
)
def test_unrecoverable_identity_raises(description: str | None) -> None:
    record = provider_payment(namespace=None, billing=None, description=description)

    with pytest.raises(IdentityRecoveryError):
        IdentityRecoverer().recover(record)


def test_non_mapping_metadata_is_ignored() -> None:
    record: dict[str, Any] = dict(provider_payment(description="Payment for a/b"))
    record["metadata"] = ["team-a", "basic"]

    assert MetadataIdentityStrategy().extract(record) is None
    assert IdentityRecoverer().recover(record).identity == BillingIdentity("a", "b")


def test_description_strategy_honours_custom_prefix() -> None:
    strategy = DescriptionIdentityStrategy(prefix="Оплата ")

    assert strategy.extract({"description": "Оплата ns/plan"}) == BillingIdentity(
        "ns", "plan"
    )
    assert strategy.extract({"description": "Payment for ns/plan"}) is None


def test_custom_strategy_order() -> None:
    record = provider_payment(
        namespace="from-meta", billing="plan", description="Payment for desc/plan"
    )
    recoverer = IdentityRecoverer(
        [DescriptionIdentityStrategy(), MetadataIdentityStrategy()]
    )

    assert recoverer.recover(record).identity == BillingIdentity("desc", "plan")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("100.00", 100.0), ("0.5", 0.5), (12, 12.0), (7.25, 7.25)],
)
def test_parse_amount(raw: object, expected: float) -> None:
    assert parse_amount({"amount": {"value": raw}}) == expected


@pytest.mark.parametrize("raw", ["abc", "", "nan", "inf", None, True, ["1"]])
def test_parse_amount_fails_closed(raw: object) -> None:
    with pytest.raises(IdentityRecoveryError):
        parse_amount({"amount": {"value": raw}})


def test_parse_amount_requires_amount_object() -> None:
    with pytest.raises(IdentityRecoveryError):
        parse_amount({"amount": "100.00"})


def test_bad_amount_aborts_recovery() -> None:
    record = provider_payment(amount="not-a-number")

    with pytest.raises(IdentityRecoveryError):
        IdentityRecoverer().recover(record)


def test_parse_amount_rejects_integer_beyond_float_range() -> None:
    with pytest.raises(IdentityRecoveryError):
        parse_amount({"amount": {"value": 10**400}})
