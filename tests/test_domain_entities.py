"""Regression tests for the static entity registry and its validation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from app.domain import (
    ENTITY_REGISTRY,
    EntityRegistryError,
    FieldSpec,
    UnsupportedEntityKindError,
    domain_entity_kinds,
    domain_entity_resolve,
    domain_entity_validate_registry,
)


def test_domain_entity_registry_declares_ten_kinds_in_sync_order() -> None:
    """Keep the declaration order that drives rotation and tie-breaks."""

    assert domain_entity_kinds() == (
        "invoice",
        "bill",
        "customer",
        "vendor",
        "payment",
        "credit_memo",
        "estimate",
        "purchase_order",
        "deposit",
        "journal_entry",
    )


def test_domain_entity_registry_passes_validation() -> None:
    domain_entity_validate_registry(ENTITY_REGISTRY)


def test_domain_entity_derived_tags_follow_qb_naming() -> None:
    """Derive request, response, and record tags from the QuickBooks object name.

    Returns:
        None: Assertions validate derived tag names.

    Raises:
        AssertionError: Raised when derived names drift.
    """

    credit_memo = domain_entity_resolve("credit_memo")

    assert credit_memo.query_request == "CreditMemoQueryRq"
    assert credit_memo.response_key == "CreditMemoQueryRs"
    assert credit_memo.record_tag == "CreditMemoRet"
    assert credit_memo.add_request == "CreditMemoAddRq"
    assert credit_memo.is_transaction is True


def test_domain_entity_payment_writes_use_receive_payment() -> None:
    payment = domain_entity_resolve("payment")

    assert payment.response_key == "PaymentQueryRs"
    assert payment.add_request == "ReceivePaymentAddRq"
    assert payment.add_element == "ReceivePaymentAdd"
    assert payment.flag_events == (("is_voided", "payment_voided"),)


@pytest.mark.parametrize("alias", ["purchase_order", "purchaseorders", "Purchase-Order", "  PURCHASEORDERS "])
def test_domain_entity_resolve_accepts_kind_and_archive_alias(alias: str) -> None:
    assert domain_entity_resolve(alias).kind == "purchase_order"


def test_domain_entity_resolve_rejects_unknown_kind() -> None:
    with pytest.raises(UnsupportedEntityKindError, match="unsupported entity kind"):
        domain_entity_resolve("timesheet")


def test_domain_entity_list_kinds_use_list_identifiers() -> None:
    assert domain_entity_resolve("customer").identifier_kind == "ListID"
    assert domain_entity_resolve("vendors").is_transaction is False


def test_domain_entity_validation_rejects_empty_registry() -> None:
    with pytest.raises(EntityRegistryError, match="must not be empty"):
        domain_entity_validate_registry(())


def test_domain_entity_validation_rejects_duplicate_response_keys() -> None:
    """Reject two entries that would compete for the same response key."""

    invoice = ENTITY_REGISTRY[0]
    duplicate = replace(invoice, kind="invoice_copy", archive_area="invoice_copies")

    with pytest.raises(EntityRegistryError, match="duplicate response key"):
        domain_entity_validate_registry((invoice, duplicate))


def test_domain_entity_validation_rejects_duplicate_aliases() -> None:
    invoice = ENTITY_REGISTRY[0]
    clashing = replace(ENTITY_REGISTRY[1], archive_area="invoices")

    with pytest.raises(EntityRegistryError, match="duplicate entity name or alias"):
        domain_entity_validate_registry((invoice, clashing))


def test_domain_entity_validation_rejects_flag_event_on_text_field() -> None:
    payment = domain_entity_resolve("payment")
    broken = replace(payment, flag_events=(("amount", "payment_big"),))

    with pytest.raises(EntityRegistryError, match="non-boolean field amount"):
        domain_entity_validate_registry((broken,))


def test_domain_entity_validation_rejects_blank_source_path() -> None:
    invoice = ENTITY_REGISTRY[0]
    broken = replace(invoice, fields=(FieldSpec(name="invoice_id", source_path=" "),))

    with pytest.raises(EntityRegistryError, match="blank source path"):
        domain_entity_validate_registry((broken,))
