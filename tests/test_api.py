import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from toms import main


@pytest.fixture
def client(monkeypatch, tmp_path):
    monkeypatch.setattr(main.settings, "output_dir", str(tmp_path))
    return TestClient(main.app)


@pytest.fixture
def snapshot(references_record, company_record):
    return {"references": references_record, "companyInfo": company_record}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": main.VERSION}


def test_proposal_totals(client, proposal_record):
    response = client.post("/proposals/totals", json={"proposal": proposal_record})
    assert response.status_code == 200
    totals = response.json()
    assert totals["subtotal"] == 600.0
    assert f"{totals['final_total']:.2f}" == "690.00"


def test_proposal_pdf(client, proposal_record, snapshot, tmp_path):
    response = client.post("/proposals/pdf", json={"proposal": proposal_record, "showPricing": False, **snapshot})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="proposal-PRO-2024-001.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")
    assert (tmp_path / "proposal-PRO-2024-001.pdf").exists()


def test_unknown_service_type_is_a_bad_request(client, voucher_record, snapshot):
    voucher_record["serviceType"] = "cruise"
    response = client.post("/vouchers/pdf", json={"voucher": voucher_record, **snapshot})
    assert response.status_code == 400
    assert "Unknown service type" in response.json()["detail"]


def test_voucher_pdf_and_docx(client, voucher_record, snapshot):
    pdf = client.post("/vouchers/pdf", json={"voucher": voucher_record, **snapshot})
    assert pdf.status_code == 200
    assert 'filename="voucher-V-1.pdf"' in pdf.headers["content-disposition"]

    docx = client.post("/vouchers/docx", json={"voucher": voucher_record, **snapshot})
    assert docx.status_code == 200
    assert docx.headers["content-type"].startswith("application/vnd.openxmlformats")
    assert docx.content[:2] == b"PK"


def test_bundle_and_colorful(client, voucher_record, proposal_record, snapshot):
    flight = dict(voucher_record, id="V-2", serviceType="flight",
                  serviceData={"id": 1, "date": "2024-01-04", "departure": "IST", "arrival": "NAV"})
    vouchers = [voucher_record, flight]

    bundle = client.post("/vouchers/bundle", json={"vouchers": vouchers, **snapshot})
    assert bundle.status_code == 200
    assert 'filename="vouchers-PRO-2024-001.pdf"' in bundle.headers["content-disposition"]

    colorful = client.post("/vouchers/colorful-pdf",
                           json={"vouchers": vouchers, "proposal": proposal_record, **snapshot})
    assert colorful.status_code == 200
    assert "vouchers-PRO-2024-001-" in colorful.headers["content-disposition"]


def test_empty_colorful_batch_is_a_bad_request(client, snapshot):
    response = client.post("/vouchers/colorful-pdf", json={"vouchers": [], **snapshot})
    assert response.status_code == 400


def test_bulk_status_conflict_lists_invalid_ids(client, voucher_record):
    paid = dict(voucher_record, id="A", status="PAID")
    pending = dict(voucher_record, id="B", status="PENDING_PAYMENT")
    response = client.post("/vouchers/status", json={"vouchers": [paid, pending], "action": "mark_completed"})

    assert response.status_code == 409
    assert response.json() == {"detail": "Cannot mark as completed: B", "invalid_ids": ["B"]}


def test_bulk_status_success(client, voucher_record):
    response = client.post("/vouchers/status", json={"vouchers": [voucher_record], "action": "mark_paid"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Marked as paid: 1 voucher."
    assert body["vouchers"] == [{"id": "V-1", "status": "PAID"}]


def test_bulk_status_unknown_action(client, voucher_record):
    response = client.post("/vouchers/status", json={"vouchers": [voucher_record], "action": "archive"})
    assert response.status_code == 400


def test_confirm_proposal(client, full_proposal_record):
    response = client.post("/proposals/confirm", json={
        "proposal": full_proposal_record,
        "selectedServices": {"hotels": [1], "rentACar": [1]},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["proposal"]["status"] == "CONFIRMED"
    assert [v["serviceType"] for v in body["vouchers"]] == ["hotel", "rentacar"]
    assert body["vouchers"][0]["status"] == "PENDING_PAYMENT"
    assert body["vouchers"][0]["serviceData"]["totalPrice"] == 600.0


def test_confirming_twice_is_rejected(client, full_proposal_record):
    record = dict(full_proposal_record, status="CONFIRMED")
    response = client.post("/proposals/confirm", json={"proposal": record, "selectedServices": {"hotels": [1]}})
    assert response.status_code == 400


def test_cancel_proposal(client, proposal_record):
    response = client.post("/proposals/cancel", json={"proposal": proposal_record})
    assert response.status_code == 200
    assert response.json() == {"id": proposal_record["id"], "reference": "PRO-2024-001", "status": "CANCELLED"}


def test_cancelling_a_confirmed_proposal_is_rejected(client, proposal_record):
    record = dict(proposal_record, status="CONFIRMED")
    response = client.post("/proposals/cancel", json={"proposal": record})
    assert response.status_code == 400
    assert "only NEW proposals can be cancelled" in response.json()["detail"]


def test_dashboard_stats(client, proposal_record, voucher_record):
    confirmed = dict(proposal_record, id="p-2", reference="PRO-2", status="CONFIRMED")
    response = client.post("/reports/dashboard", json={
        "proposals": [proposal_record, confirmed],
        "vouchers": [voucher_record],
    })
    assert response.status_code == 200
    stats = response.json()
    assert stats["total_proposals"] == 2
    assert stats["new_proposals"] == 1
    assert stats["confirmed_proposals"] == 1
    assert stats["total_vouchers"] == 1
    assert f"{stats['total_revenue']:.2f}" == "690.00"
    assert set(stats["recent_proposals"]) == {"PRO-2024-001", "PRO-2"}


def test_sales_report(client, proposal_record, references_record):
    confirmed = dict(proposal_record, id="p-2", reference="PRO-2", status="CONFIRMED")
    response = client.post("/reports/sales", json={
        "proposals": [proposal_record, confirmed],
        "references": references_record,
    })
    assert response.status_code == 200
    assert 'filename="sales-report.xlsx"' in response.headers["content-disposition"]

    wb = load_workbook(io.BytesIO(response.content))
    assert wb["Sales"]["A2"].value == "John Doe"
    assert wb["Sales"]["B2"].value == 2
