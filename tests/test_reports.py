import io
from dataclasses import replace

import pytest
from openpyxl import load_workbook

from toms.models import ProposalStatus
from toms.reports import dashboard_stats, export_sales_report, sales_by_person


@pytest.fixture
def proposals(proposal):
    return [
        replace(proposal, id="p-1", reference="PRO-1", status=ProposalStatus.CONFIRMED,
                created_at="2024-01-10T09:30:00Z"),
        replace(proposal, id="p-2", reference="PRO-2", status=ProposalStatus.NEW,
                created_at="2024-02-01T10:00:00Z"),
        replace(proposal, id="p-3", reference="PRO-3", sales_person_id="u-2", status=ProposalStatus.CONFIRMED,
                created_at="2024-01-20T10:00:00Z"),
        replace(proposal, id="p-4", reference="PRO-4", sales_person_id="u-2", status=ProposalStatus.CANCELLED,
                created_at=""),
    ]


def test_dashboard_stats(proposals, voucher):
    stats = dashboard_stats(proposals, [voucher])
    assert stats.total_proposals == 4
    assert stats.new_proposals == 1
    assert stats.confirmed_proposals == 2
    assert stats.total_vouchers == 1
    # two confirmed proposals of 690 each
    assert stats.total_revenue == pytest.approx(1380.0)
    assert stats.as_dict()["recent_proposals"] == ["PRO-2", "PRO-3", "PRO-1", "PRO-4"]


def test_sales_by_person(proposals, references):
    rows = sales_by_person(proposals, references.users)
    assert {row.name for row in rows} == {"John Doe", "Jane Smith"}
    by_name = {row.name: row for row in rows}
    assert by_name["John Doe"].proposals == 2
    assert by_name["John Doe"].confirmed == 1
    assert by_name["John Doe"].sales == pytest.approx(690.0)
    assert by_name["Jane Smith"].commission == pytest.approx(30.0)


def test_unknown_sales_person(proposal, caplog):
    rows = sales_by_person([replace(proposal, sales_person_id="u-404")], {})
    assert rows[0].name == "N/A"
    assert "Unknown sales person 'u-404'" in caplog.text


def test_export_sales_report(proposals, references, voucher):
    rows = sales_by_person(proposals, references.users)
    content = export_sales_report(rows, dashboard_stats(proposals, [voucher]))

    wb = load_workbook(io.BytesIO(content))
    assert wb.sheetnames == ["Sales", "Summary"]

    sales = wb["Sales"]
    assert [c.value for c in sales[1]] == ["Sales Person", "Proposals", "Confirmed", "Conversion %", "Sales", "Commission"]
    assert sales["A1"].font.bold
    values = {sales.cell(row=r, column=1).value: r for r in range(2, sales.max_row + 1)}
    john = values["John Doe"]
    assert sales.cell(row=john, column=4).value == 50.0
    assert sales.cell(row=john, column=5).value == 690.0
    assert sales.cell(row=john, column=5).number_format == "#,##0.00"

    summary = {row[0].value: row[1].value for row in wb["Summary"].iter_rows(min_row=2)}
    assert summary["Total proposals"] == 4
    assert summary["Total revenue"] == 1380.0
    assert summary["Sales persons"] == 2
