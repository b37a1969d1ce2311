"""
CSV export of transactions in the spreadsheet-friendly Saldus layout.

Layout: UTF-8 BOM, ``sep=;`` hint, header, one row per transaction,
a blank line, the summary block and a generated-at line.
"""

import logging

from django.utils import timezone

from ..exceptions import NothingToExport
from ..models import Transaction
from ..utils.formatting import format_date

logger = logging.getLogger(__name__)

BOM = "\ufeff"
HEADER = ["Data", "Descricao", "Categoria", "Cliente", "Tipo", "Valor (R$)", "Status"]
NO_CLIENT = "Nao informado"


def _cell(value):
    """Quote a cell only when it would break the row."""
    text = str(value)
    if any(char in text for char in ';"\n\r'):
        return '"' + text.replace('"', '""') + '"'
    return text


def _quoted(value):
    return '"' + str(value or "").replace('"', '""') + '"'


def _amount(value):
    return f"{float(value):.2f}"


class ExportService:
    """Builds CSV exports."""

    @staticmethod
    def filename(now=None):
        now = now or timezone.localtime()
        return f"Relatorio_Movimentacoes_{now:%d-%m-%Y}.csv"

    @staticmethod
    def export_csv(transactions, now=None):
        """
        Render transactions as CSV text.

        Args:
            transactions: Iterable of Transaction instances (client preloaded)
            now (datetime): Generation timestamp, defaults to local now

        Returns:
            str: CSV document including the BOM

        Raises:
            NothingToExport: The list is empty
        """
        transactions = list(transactions)
        if not transactions:
            raise NothingToExport("There are no transactions to export")

        now = now or timezone.localtime()
        lines = ["sep=;", ";".join(HEADER)]
        total_income = 0.0
        total_expense = 0.0

        for item in transactions:
            is_income = item.type == Transaction.INCOME
            if is_income:
                total_income += float(item.amount)
            else:
                total_expense += float(item.amount)

            lines.append(
                ";".join(
                    [
                        format_date(item.date),
                        _quoted(item.description),
                        _cell(item.category),
                        _cell(item.client.name if item.client else NO_CLIENT),
                        "RECEITA" if is_income else "DESPESA",
                        _amount(item.amount),
                        "ENTRADA" if is_income else "SAIDA",
                    ]
                )
            )

        lines.extend(
            [
                "",
                ";;;;RESUMO;;",
                f";;;;Total de Receitas;{_amount(total_income)};",
                f";;;;Total de Despesas;{_amount(total_expense)};",
                f";;;;Saldo Liquido;{_amount(total_income - total_expense)};",
                "",
                f";;;;Relatorio gerado em;{now:%d/%m/%Y %H:%M:%S};",
            ]
        )

        logger.info(
            "Transactions exported",
            extra={
                "row_count": len(transactions),
                "action": "transactions_exported",
                "component": "ExportService",
            },
        )
        return BOM + "\n".join(lines) + "\n"
