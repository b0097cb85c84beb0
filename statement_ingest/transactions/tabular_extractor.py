"""Builds transactions from CSV and spreadsheet rows by mapping header columns."""

import re
from dataclasses import dataclass
from decimal import Decimal

from statement_ingest.extraction.tabular import Table
from statement_ingest.logging.logger import Log
from statement_ingest.transactions.categorizer import categorize, extract_payee, match_merchant
from statement_ingest.transactions.models import Transaction
from statement_ingest.transactions.normalizers import normalize_amount, normalize_date

HEADER_ALIASES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "date",
        ("date", "data", "transaction date", "posting date", "value date", "data valuta"),
    ),
    (
        "description",
        (
            "description",
            "descrizione",
            "details",
            "dettagli",
            "merchant",
            "payee",
            "beneficiary",
            "causale",
        ),
    ),
    ("debit", ("debit", "dare", "uscite", "addebiti", "withdrawal", "paid out")),
    ("credit", ("credit", "avere", "entrate", "accrediti", "deposit", "paid in")),
    ("amount", ("amount", "importo", "value", "valore", "transaction amount")),
)
_HEADER_SCAN_ROWS = 10


@dataclass(frozen=True)
class ColumnMapping:
    header_row: int
    date: int
    description: int
    amount: int | None = None
    debit: int | None = None
    credit: int | None = None


class TabularTransactionExtractor:
    """Maps a statement table's columns and reads one transaction per row."""

    def extract(self, table: Table) -> list[Transaction] | None:
        """Return candidates, or None when no usable header row exists."""
        mapping = find_column_mapping(table)
        if mapping is None:
            Log.info("No usable header row in tabular statement")
            return None
        transactions = []
        for row in table[mapping.header_row + 1 :]:
            transaction = self._parse_row(row, mapping)
            if transaction is not None:
                transactions.append(transaction)
        Log.info(f"Tabular extraction found {len(transactions)} transactions")
        return transactions

    def _parse_row(self, row: tuple[str, ...], mapping: ColumnMapping) -> Transaction | None:
        try:
            iso_date = normalize_date(_cell(row, mapping.date))
        except ValueError:
            return None
        description = _cell(row, mapping.description)
        try:
            amount = self._read_amount(row, mapping, description)
        except ValueError:
            return None
        if amount is None:
            return None

        categorization = categorize(description, amount)
        return Transaction(
            date=iso_date,
            description=description,
            amount=amount,
            category=categorization.category,
            payee=extract_payee(description),
            merchant=match_merchant(description),
            confidence=categorization.confidence,
            raw_source_line=" | ".join(row),
        )

    @staticmethod
    def _read_amount(
        row: tuple[str, ...], mapping: ColumnMapping, description: str
    ) -> Decimal | None:
        if mapping.amount is not None:
            value = _cell(row, mapping.amount)
            return normalize_amount(value, description) if value else None
        debit = normalize_amount(_cell(row, mapping.debit) or "0")
        if debit:
            return -abs(debit)
        credit = normalize_amount(_cell(row, mapping.credit) or "0")
        if credit:
            return abs(credit)
        return None


def find_column_mapping(table: Table) -> ColumnMapping | None:
    """Locate the header row among the first rows and map its columns to roles."""
    for index, row in enumerate(table[:_HEADER_SCAN_ROWS]):
        roles = _map_header(row)
        has_amount = any(role in roles for role in ("amount", "debit", "credit"))
        if "date" in roles and "description" in roles and has_amount:
            return ColumnMapping(
                header_row=index,
                date=roles["date"],
                description=roles["description"],
                amount=roles.get("amount"),
                debit=roles.get("debit"),
                credit=roles.get("credit"),
            )
    return None


def _map_header(row: tuple[str, ...]) -> dict[str, int]:
    roles: dict[str, int] = {}
    for column, header in enumerate(row):
        normalized = header.strip().lower()
        if not normalized:
            continue
        role = _role_for(normalized)
        if role is not None and role not in roles:
            roles[role] = column
    return roles


def _role_for(header: str) -> str | None:
    for role, aliases in HEADER_ALIASES:
        if any(_contains_word(header, alias) for alias in aliases):
            return role
    return None


def _contains_word(header: str, alias: str) -> bool:
    return re.search(rf"\b{re.escape(alias)}\b", header) is not None


def _cell(row: tuple[str, ...], column: int | None) -> str:
    if column is None or column >= len(row):
        return ""
    return row[column].strip()
