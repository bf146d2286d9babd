"""HTTP surface: routes, status codes and the ledger error mapping."""
from decimal import Decimal


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_customer_crud(client):
    created = client.post("/customers", json={"name": "  Asha ", "phone": "9998887771"})
    assert created.status_code == 201
    body = created.json()
    assert body["id"] == 1
    assert body["name"] == "Asha"
    assert Decimal(body["balance"]) == 0

    assert client.get("/customers/1").json()["phone"] == "9998887771"

    patched = client.patch("/customers/1", json={"phone": "9000000000"})
    assert patched.status_code == 200
    assert patched.json()["name"] == "Asha"
    assert patched.json()["phone"] == "9000000000"

    deleted = client.delete("/customers/1")
    assert deleted.status_code == 200
    assert deleted.json()["id"] == 1
    assert client.get("/customers/1").status_code == 404
    assert client.get("/customers").json() == []


def test_validation_errors_are_400(client):
    missing = client.post("/customers", json={"phone": "1"})
    assert missing.status_code == 400
    assert "name" in missing.json()["detail"]

    balance = client.post("/customers", json={"name": "A", "phone": "1", "balance": 500})
    assert balance.status_code == 400

    client.post("/customers", json={"name": "A", "phone": "1"})
    assert client.patch("/customers/1", json={"balance": 10}).status_code == 400
    assert client.post("/transactions", json={"customer_id": 1, "type": "credit", "amount": -5}).status_code == 400
    assert client.get("/transactions/recent", params={"limit": -1}).status_code == 400


def test_unknown_ids_are_404(client):
    assert client.get("/customers/42").status_code == 404
    assert client.patch("/customers/42", json={"name": "x"}).status_code == 404
    assert client.delete("/customers/42").status_code == 404
    assert client.get("/customers/42/transactions").status_code == 404
    assert client.get("/transactions/42").status_code == 404
    assert client.delete("/transactions/42").status_code == 404

    response = client.post("/transactions", json={"customer_id": 42, "type": "credit", "amount": 10})
    assert response.status_code == 404
    assert response.json()["detail"] == "Customer 42 not found"


def test_recording_transactions_moves_balance(client):
    client.post("/customers", json={"name": "Asha", "phone": "9998887771"})

    credit = client.post("/transactions", json={"customer_id": 1, "type": "credit", "amount": 500})
    assert credit.status_code == 201
    assert Decimal(credit.json()["running_balance"]) == Decimal("500")

    debit = client.post("/transactions", json={"customer_id": 1, "type": "debit", "amount": "200.50"})
    assert Decimal(debit.json()["running_balance"]) == Decimal("299.50")

    assert Decimal(client.get("/customers/1").json()["balance"]) == Decimal("299.50")
    history = client.get("/customers/1/transactions").json()
    assert len(history) == 2


def test_transaction_edit_is_reported_by_reconcile(client):
    client.post("/customers", json={"name": "Asha", "phone": "9998887771"})
    client.post("/transactions", json={"customer_id": 1, "type": "credit", "amount": 100})
    assert client.get("/business/reconcile").json() == {"consistent": True, "discrepancies": []}

    edited = client.patch("/transactions/1", json={"amount": 250})
    assert edited.status_code == 200
    assert Decimal(edited.json()["running_balance"]) == Decimal("100")

    report = client.get("/business/reconcile").json()
    assert report["consistent"] is False
    assert {d["transaction_id"] for d in report["discrepancies"]} == {1, None}


def test_search(seeded_client):
    names = [c["name"] for c in seeded_client.get("/customers", params={"search": "sharma"}).json()]
    assert names == ["Priya Sharma"]
    by_phone = seeded_client.get("/customers", params={"search": "98989"}).json()
    assert [c["id"] for c in by_phone] == [4]


def test_recent_transactions_are_newest_first(seeded_client):
    recent = seeded_client.get("/transactions/recent", params={"limit": 3}).json()
    assert len(recent) == 3
    dates = [t["date"] for t in recent]
    assert dates == sorted(dates, reverse=True)


def test_business_totals(seeded_client):
    totals = seeded_client.get("/business/totals").json()
    assert Decimal(totals["total_to_receive"]) == Decimal("1350.50")
    assert Decimal(totals["total_to_pay"]) == Decimal("800")
    assert Decimal(totals["net_balance"]) == Decimal("550.50")
    assert totals["customer_count"] == 4
    assert totals["outstanding_count"] == 3

    data = seeded_client.get("/business").json()
    assert data["name"] == "LedgerFlow"
    assert Decimal(data["net_balance"]) == Decimal("550.50")


def test_business_profile_update(client):
    response = client.put("/business", json={"owner": "Ravi", "phone": "9000011111"})
    assert response.status_code == 200
    assert response.json()["owner"] == "Ravi"
    assert client.get("/business").json()["phone"] == "9000011111"
    assert client.put("/business", json={"total_to_pay": 1}).status_code == 400


def test_report_download(seeded_client):
    response = seeded_client.post("/reports", json={
        "kind": "outstanding", "start_date": "2024-01-01", "end_date": "2024-01-31",
    })
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
    assert "ledgerflow-outstanding-report-" in response.headers["content-disposition"]

    listed = seeded_client.get("/reports").json()
    assert len(listed) == 1
    assert seeded_client.get(f"/reports/{listed[0]}").content.startswith(b"%PDF")
    assert seeded_client.get("/reports/missing.pdf").status_code == 404


def test_report_errors(seeded_client):
    window = {"start_date": "2024-01-01", "end_date": "2024-01-31"}

    assert seeded_client.post("/reports", json={"kind": "summary", "format": "csv", **window}).status_code == 415
    assert seeded_client.post("/reports", json={"kind": "ageing", **window}).status_code == 400
    inverted = {"kind": "summary", "start_date": "2024-02-01", "end_date": "2024-01-01"}
    assert seeded_client.post("/reports", json=inverted).status_code == 400
    assert seeded_client.get("/reports").json() == []
