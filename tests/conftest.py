"""Shared fixtures for adapter tests.

Database fixtures run the real Alembic migration against a temporary SQLite
file so db-layer tests exercise the same schema the service runs on.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import Engine

from app.db import db_create_engine, db_migrate_to_head


@pytest.fixture
def database_url(tmp_path) -> str:
    """Return a migrated temporary SQLite database URL."""

    url = f"sqlite:///{tmp_path / 'adapter.db'}"
    db_migrate_to_head(url)
    return url


@pytest.fixture
def migrated_engine(database_url: str) -> Iterator[Engine]:
    """Yield an engine bound to a freshly migrated database."""

    engine = db_create_engine(database_url)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def invoice_answer_xml() -> str:
    return """<?xml version="1.0" ?>
<QBXML>
  <QBXMLMsgsRs>
    <InvoiceQueryRs requestID="1" statusCode="0" statusSeverity="Info" statusMessage="Status OK">
      <InvoiceRet>
        <TxnID>11-1700000000</TxnID>
        <TimeCreated>2026-10-01T09:00:00-05:00</TimeCreated>
        <TimeModified>2026-10-02T10:30:00-05:00</TimeModified>
        <RefNumber>INV-1001</RefNumber>
        <CustomerRef><FullName>Acme Corp</FullName></CustomerRef>
        <BalanceRemaining>125.50</BalanceRemaining>
        <IsPaid>false</IsPaid>
      </InvoiceRet>
      <InvoiceRet>
        <TxnID>12-1700000000</TxnID>
        <RefNumber>INV-1002</RefNumber>
        <CustomerRef><FullName>Globex</FullName></CustomerRef>
        <BalanceRemaining>0.00</BalanceRemaining>
        <IsPaid>true</IsPaid>
      </InvoiceRet>
    </InvoiceQueryRs>
  </QBXMLMsgsRs>
</QBXML>"""


@pytest.fixture
def payment_answer_xml() -> str:
    return """<?xml version="1.0" ?>
<QBXML>
  <QBXMLMsgsRs>
    <PaymentQueryRs requestID="1" statusCode="0">
      <PaymentRet>
        <TxnID>P-1</TxnID>
        <CustomerRef><FullName>Acme Corp</FullName></CustomerRef>
        <TotalAmount>50.00</TotalAmount>
        <IsVoided>true</IsVoided>
      </PaymentRet>
      <PaymentRet>
        <TxnID>P-2</TxnID>
        <CustomerRef><FullName>Globex</FullName></CustomerRef>
        <TotalAmount>75.00</TotalAmount>
      </PaymentRet>
    </PaymentQueryRs>
  </QBXMLMsgsRs>
</QBXML>"""


@pytest.fixture
def empty_customer_answer_xml() -> str:
    return """<?xml version="1.0" ?>
<QBXML>
  <QBXMLMsgsRs>
    <CustomerQueryRs requestID="1" statusCode="1" statusSeverity="Info" statusMessage="A query request did not find a matching object"/>
  </QBXMLMsgsRs>
</QBXML>"""
