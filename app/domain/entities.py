"""Static registry of supported QuickBooks entity kinds.

Every entity-specific decision in the adapter (default query, response
classification, field extraction, archive area, webhook event names, and
write templates) is a lookup into this table. The declaration order is
significant: it is the default sync rotation order and the classification
tie-break order (the last matching entry wins).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

TXN_ID: Final[str] = "TxnID"
LIST_ID: Final[str] = "ListID"


class UnsupportedEntityKindError(ValueError):
    """Raised when a caller names an entity kind the registry does not know."""


class EntityRegistryError(RuntimeError):
    """Raised when the static registry violates its structural contract."""


@dataclass(frozen=True)
class FieldSpec:
    """One canonical field extracted from a raw answer record.

    Attributes:
        name: Canonical output field name.
        source_path: Element path relative to the record element.
        default: Source text used when the path is absent.
        boolean: Whether the field is derived from a literal `"true"` string.
    """

    name: str
    source_path: str
    default: str = ""
    boolean: bool = False


@dataclass(frozen=True)
class CreateTemplate:
    """Creation request metadata for one entity kind.

    Attributes:
        counterpart_ref: Reference element naming the counterpart (`CustomerRef`), if any.
        account_ref: Reference element naming a target account, if any.
        line_element: Line item element name, if the kind carries line items.
        credit_line_element: Line element used for credit-side lines, if the kind balances debits and credits.
        line_item_ref: Reference element inside each line (`ItemRef` or `AccountRef`).
        amount_element: Header amount element, if the kind carries one.
        required_fields: Creation payload fields that must be present.
    """

    counterpart_ref: str | None = None
    account_ref: str | None = None
    line_element: str | None = None
    credit_line_element: str | None = None
    line_item_ref: str = "ItemRef"
    amount_element: str | None = None
    required_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class EntityDefinition:
    """Registry entry describing one supported entity kind.

    Attributes:
        kind: Canonical entity kind name.
        qb_name: QuickBooks object name used to derive request and response tags.
        archive_area: Archive area name (also accepted as kind alias).
        identifier_kind: `TxnID` for transactions, `ListID` for list objects.
        event_type: Webhook event type for normalized records.
        fields: Ordered field-extraction schema.
        flag_events: Boolean field to extra event type pairs dispatched with flagged records only.
        delete_type: `TxnDelType` or `ListDelType` value for deletion requests.
        create: Creation request template metadata.
    """

    kind: str
    qb_name: str
    archive_area: str
    identifier_kind: str
    event_type: str
    fields: tuple[FieldSpec, ...]
    delete_type: str
    create: CreateTemplate = field(default_factory=CreateTemplate)
    flag_events: tuple[tuple[str, str], ...] = ()

    @property
    def query_request(self) -> str:
        return f"{self.qb_name}QueryRq"

    @property
    def response_key(self) -> str:
        return f"{self.qb_name}QueryRs"

    @property
    def record_tag(self) -> str:
        return f"{self.qb_name}Ret"

    @property
    def add_request(self) -> str:
        return f"{self.create_name}AddRq"

    @property
    def add_element(self) -> str:
        return f"{self.create_name}Add"

    @property
    def create_name(self) -> str:
        # payments are received payments on the write side
        if self.qb_name == "Payment":
            return "ReceivePayment"
        return self.qb_name

    @property
    def is_transaction(self) -> bool:
        return self.identifier_kind == TXN_ID


def _timestamps() -> tuple[FieldSpec, ...]:
    return (
        FieldSpec(name="created_at", source_path="TimeCreated"),
        FieldSpec(name="updated_at", source_path="TimeModified"),
    )


ENTITY_REGISTRY: Final[tuple[EntityDefinition, ...]] = (
    EntityDefinition(
        kind="invoice",
        qb_name="Invoice",
        archive_area="invoices",
        identifier_kind=TXN_ID,
        event_type="invoice_updated",
        fields=(
            FieldSpec(name="invoice_id", source_path="RefNumber"),
            FieldSpec(name="customer", source_path="CustomerRef/FullName"),
            FieldSpec(name="balance_remaining", source_path="BalanceRemaining"),
            FieldSpec(name="is_paid", source_path="IsPaid", default="false", boolean=True),
            *_timestamps(),
        ),
        delete_type="Invoice",
        create=CreateTemplate(
            counterpart_ref="CustomerRef",
            line_element="InvoiceLineAdd",
            required_fields=("counterpart", "txn_date", "lines"),
        ),
    ),
    EntityDefinition(
        kind="bill",
        qb_name="Bill",
        archive_area="bills",
        identifier_kind=TXN_ID,
        event_type="bill_updated",
        fields=(
            FieldSpec(name="bill_id", source_path="TxnID"),
            FieldSpec(name="vendor", source_path="VendorRef/FullName"),
            FieldSpec(name="amount", source_path="AmountDue"),
            *_timestamps(),
        ),
        delete_type="Bill",
        create=CreateTemplate(
            counterpart_ref="VendorRef",
            line_element="ExpenseLineAdd",
            line_item_ref="AccountRef",
            required_fields=("counterpart", "txn_date", "lines"),
        ),
    ),
    EntityDefinition(
        kind="customer",
        qb_name="Customer",
        archive_area="customers",
        identifier_kind=LIST_ID,
        event_type="customer_updated",
        fields=(
            FieldSpec(name="customer_id", source_path="ListID"),
            FieldSpec(name="name", source_path="Name"),
            FieldSpec(name="company_name", source_path="CompanyName"),
            FieldSpec(name="email", source_path="Email"),
            *_timestamps(),
        ),
        delete_type="Customer",
        create=CreateTemplate(required_fields=("name",)),
    ),
    EntityDefinition(
        kind="vendor",
        qb_name="Vendor",
        archive_area="vendors",
        identifier_kind=LIST_ID,
        event_type="vendor_updated",
        fields=(
            FieldSpec(name="vendor_id", source_path="ListID"),
            FieldSpec(name="name", source_path="Name"),
            FieldSpec(name="company_name", source_path="CompanyName"),
            FieldSpec(name="email", source_path="Email"),
            *_timestamps(),
        ),
        delete_type="Vendor",
        create=CreateTemplate(required_fields=("name",)),
    ),
    EntityDefinition(
        kind="payment",
        qb_name="Payment",
        archive_area="payments",
        identifier_kind=TXN_ID,
        event_type="payment_updated",
        fields=(
            FieldSpec(name="payment_id", source_path="TxnID"),
            FieldSpec(name="customer", source_path="CustomerRef/FullName"),
            FieldSpec(name="amount", source_path="TotalAmount"),
            FieldSpec(name="is_voided", source_path="IsVoided", default="false", boolean=True),
            *_timestamps(),
        ),
        delete_type="ReceivePayment",
        create=CreateTemplate(
            counterpart_ref="CustomerRef",
            amount_element="TotalAmount",
            required_fields=("counterpart", "txn_date", "amount"),
        ),
        flag_events=(("is_voided", "payment_voided"),),
    ),
    EntityDefinition(
        kind="credit_memo",
        qb_name="CreditMemo",
        archive_area="creditmemos",
        identifier_kind=TXN_ID,
        event_type="credit_memo_updated",
        fields=(
            FieldSpec(name="credit_memo_id", source_path="TxnID"),
            FieldSpec(name="customer", source_path="CustomerRef/FullName"),
            FieldSpec(name="amount", source_path="TotalAmount"),
            *_timestamps(),
        ),
        delete_type="CreditMemo",
        create=CreateTemplate(
            counterpart_ref="CustomerRef",
            line_element="CreditMemoLineAdd",
            required_fields=("counterpart", "txn_date", "lines"),
        ),
    ),
    EntityDefinition(
        kind="estimate",
        qb_name="Estimate",
        archive_area="estimates",
        identifier_kind=TXN_ID,
        event_type="estimate_updated",
        fields=(
            FieldSpec(name="estimate_id", source_path="TxnID"),
            FieldSpec(name="customer", source_path="CustomerRef/FullName"),
            FieldSpec(name="amount", source_path="TotalAmount"),
            *_timestamps(),
        ),
        delete_type="Estimate",
        create=CreateTemplate(
            counterpart_ref="CustomerRef",
            line_element="EstimateLineAdd",
            required_fields=("counterpart", "txn_date", "lines"),
        ),
    ),
    EntityDefinition(
        kind="purchase_order",
        qb_name="PurchaseOrder",
        archive_area="purchaseorders",
        identifier_kind=TXN_ID,
        event_type="purchase_order_updated",
        fields=(
            FieldSpec(name="purchase_order_id", source_path="TxnID"),
            FieldSpec(name="vendor", source_path="VendorRef/FullName"),
            FieldSpec(name="amount", source_path="TotalAmount"),
            *_timestamps(),
        ),
        delete_type="PurchaseOrder",
        create=CreateTemplate(
            counterpart_ref="VendorRef",
            line_element="PurchaseOrderLineAdd",
            required_fields=("counterpart", "txn_date", "lines"),
        ),
    ),
    EntityDefinition(
        kind="deposit",
        qb_name="Deposit",
        archive_area="deposits",
        identifier_kind=TXN_ID,
        event_type="deposit_updated",
        fields=(
            FieldSpec(name="deposit_id", source_path="TxnID"),
            FieldSpec(name="account", source_path="DepositToAccountRef/FullName"),
            FieldSpec(name="amount", source_path="TotalAmount"),
            *_timestamps(),
        ),
        delete_type="Deposit",
        create=CreateTemplate(
            account_ref="DepositToAccountRef",
            line_element="DepositLineAdd",
            line_item_ref="AccountRef",
            required_fields=("account", "txn_date", "lines"),
        ),
    ),
    EntityDefinition(
        kind="journal_entry",
        qb_name="JournalEntry",
        archive_area="journalentries",
        identifier_kind=TXN_ID,
        event_type="journal_entry_updated",
        fields=(
            FieldSpec(name="journal_entry_id", source_path="TxnID"),
            FieldSpec(name="memo", source_path="Memo"),
            FieldSpec(name="total_amount", source_path="TotalAmount"),
            *_timestamps(),
        ),
        delete_type="JournalEntry",
        create=CreateTemplate(
            line_element="JournalDebitLine",
            credit_line_element="JournalCreditLine",
            line_item_ref="AccountRef",
            required_fields=("txn_date", "lines"),
        ),
    ),
)


def domain_entity_resolve(name: str) -> EntityDefinition:
    """Resolve one entity kind name or archive area alias to its definition.

    Args:
        name: Entity kind (`credit_memo`) or archive area alias (`creditmemos`).

    Returns:
        EntityDefinition: Matching registry entry.

    Raises:
        UnsupportedEntityKindError: Raised when no registry entry matches.
    """

    normalized_name = (name or "").strip().lower().replace("-", "_")
    for definition in ENTITY_REGISTRY:
        if normalized_name in (definition.kind, definition.archive_area):
            return definition
    raise UnsupportedEntityKindError(f"unsupported entity kind: {name}")


def domain_entity_kinds() -> tuple[str, ...]:
    """Return registry entity kinds in declaration order."""

    return tuple(definition.kind for definition in ENTITY_REGISTRY)


def domain_entity_validate_registry(
    registry: tuple[EntityDefinition, ...] = ENTITY_REGISTRY,
) -> None:
    """Validate the static registry contract completely.

    Args:
        registry: Registry entries to validate.

    Returns:
        None: Validation succeeds silently.

    Raises:
        EntityRegistryError: Raised on empty registry, duplicate names or keys,
            unknown identifier kinds, or malformed field schemas.
    """

    if not registry:
        raise EntityRegistryError("entity registry must not be empty")

    seen_names: set[str] = set()
    seen_response_keys: set[str] = set()
    for definition in registry:
        for name in (definition.kind, definition.archive_area):
            if name in seen_names:
                raise EntityRegistryError(f"duplicate entity name or alias: {name}")
            seen_names.add(name)

        if definition.response_key in seen_response_keys:
            raise EntityRegistryError(f"duplicate response key: {definition.response_key}")
        seen_response_keys.add(definition.response_key)

        if definition.identifier_kind not in (TXN_ID, LIST_ID):
            raise EntityRegistryError(
                f"entity {definition.kind} has unknown identifier kind {definition.identifier_kind}"
            )
        if not definition.fields:
            raise EntityRegistryError(f"entity {definition.kind} has an empty field schema")

        field_names = [field_spec.name for field_spec in definition.fields]
        if len(field_names) != len(set(field_names)):
            raise EntityRegistryError(f"entity {definition.kind} declares duplicate canonical fields")
        for field_spec in definition.fields:
            if not field_spec.source_path.strip():
                raise EntityRegistryError(f"entity {definition.kind} field {field_spec.name} has blank source path")

        boolean_fields = {field_spec.name for field_spec in definition.fields if field_spec.boolean}
        for flag_field, flag_event_type in definition.flag_events:
            if flag_field not in boolean_fields:
                raise EntityRegistryError(
                    f"entity {definition.kind} flag event {flag_event_type} references non-boolean field {flag_field}"
                )
