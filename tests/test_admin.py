"""
Tests for admin moderation: ticket review, advertisement cap, roles and fraud.
"""

from ticketbari.models.ticket import Ticket, TicketStatus
from ticketbari.models.user import UserRole
from tests.conftest import make_ticket, make_user


def test_admin_routes_require_admin(client, buyer_headers, vendor_headers):
    assert client.get("/admin/tickets").status_code == 401
    assert client.get("/admin/tickets", headers=buyer_headers).status_code == 403
    response = client.get("/admin/users", headers=vendor_headers)
    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Admin access required"}


def test_approve_ticket(client, db_session, vendor, admin_headers):
    ticket = make_ticket(db_session, vendor, status=TicketStatus.PENDING)

    response = client.put(
        f"/admin/tickets/{ticket.id}/status", json={"status": "approved"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "approved"
    assert response.json()["message"] == "Ticket approved successfully"


def test_ticket_cannot_go_back_to_pending(client, approved_ticket, admin_headers):
    response = client.put(
        f"/admin/tickets/{approved_ticket.id}/status", json={"status": "pending"}, headers=admin_headers
    )
    assert response.status_code == 400


def test_review_unknown_ticket(client, admin_headers):
    response = client.put("/admin/tickets/missing/status", json={"status": "approved"}, headers=admin_headers)
    assert response.status_code == 404


def test_list_all_tickets(client, db_session, vendor, admin_headers):
    make_ticket(db_session, vendor, status=TicketStatus.PENDING)
    make_ticket(db_session, vendor, status=TicketStatus.REJECTED)
    make_ticket(db_session, vendor)

    response = client.get("/admin/tickets", headers=admin_headers)
    assert len(response.json()["data"]) == 3


def test_advertise_cap(client, db_session, vendor, admin_headers):
    tickets = [make_ticket(db_session, vendor, title=f"Ticket {i}") for i in range(7)]

    for ticket in tickets[:6]:
        response = client.put(
            f"/admin/tickets/{ticket.id}/advertise", json={"isAdvertised": True}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Ticket advertised"

    response = client.put(
        f"/admin/tickets/{tickets[6].id}/advertise", json={"isAdvertised": True}, headers=admin_headers
    )
    assert response.status_code == 400
    assert "Maximum 6 tickets" in response.json()["message"]

    # Re-advertising an already advertised ticket does not count against itself
    response = client.put(
        f"/admin/tickets/{tickets[0].id}/advertise", json={"isAdvertised": True}, headers=admin_headers
    )
    assert response.status_code == 200

    response = client.put(
        f"/admin/tickets/{tickets[0].id}/advertise", json={"isAdvertised": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Advertisement removed"

    response = client.put(
        f"/admin/tickets/{tickets[6].id}/advertise", json={"isAdvertised": True}, headers=admin_headers
    )
    assert response.status_code == 200
    assert db_session.query(Ticket).filter(Ticket.is_advertised.is_(True)).count() == 6


def test_only_approved_tickets_advertised(client, db_session, vendor, admin_headers):
    ticket = make_ticket(db_session, vendor, status=TicketStatus.PENDING)

    response = client.put(
        f"/admin/tickets/{ticket.id}/advertise", json={"isAdvertised": True}, headers=admin_headers
    )
    assert response.status_code == 400


def test_mark_vendor_fraud_rejects_all_listings(client, db_session, vendor, admin_headers):
    make_ticket(db_session, vendor, status=TicketStatus.PENDING)
    make_ticket(db_session, vendor, status=TicketStatus.APPROVED)
    make_ticket(db_session, vendor, status=TicketStatus.REJECTED)
    other_vendor = make_user(db_session, "other@mail.com", "Other Vendor", role=UserRole.VENDOR)
    untouched = make_ticket(db_session, other_vendor)

    response = client.put(f"/admin/users/{vendor.id}/fraud", json={"isFraud": True}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["isFraud"] is True
    assert response.json()["message"] == "Vendor marked as fraud"

    statuses = [
        t.status for t in db_session.query(Ticket).filter(Ticket.vendor_id == vendor.id).all()
    ]
    assert statuses == [TicketStatus.REJECTED] * 3

    db_session.refresh(untouched)
    assert untouched.status == TicketStatus.APPROVED


def test_clear_fraud_flag(client, db_session, vendor, admin_headers):
    client.put(f"/admin/users/{vendor.id}/fraud", json={"isFraud": True}, headers=admin_headers)

    response = client.put(f"/admin/users/{vendor.id}/fraud", json={"isFraud": False}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Fraud status removed"


def test_only_vendors_marked_fraud(client, buyer, admin_headers):
    response = client.put(f"/admin/users/{buyer.id}/fraud", json={"isFraud": True}, headers=admin_headers)
    assert response.status_code == 400


def test_change_role(client, buyer, admin_headers):
    response = client.put(f"/admin/users/{buyer.id}/role", json={"role": "vendor"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "vendor"
    assert response.json()["message"] == "User role updated to vendor"


def test_admin_cannot_change_own_role(client, admin, admin_headers):
    response = client.put(f"/admin/users/{admin.id}/role", json={"role": "user"}, headers=admin_headers)
    assert response.status_code == 400


def test_change_role_unknown_user(client, admin_headers):
    response = client.put("/admin/users/missing/role", json={"role": "vendor"}, headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_list_users_hides_passwords(client, buyer, vendor, admin_headers):
    response = client.get("/admin/users", headers=admin_headers)
    users = response.json()["data"]
    assert len(users) == 3
    assert all("hashedPassword" not in u for u in users)


def test_stats_and_transactions(client, db_session, gateway, approved_ticket, buyer_headers, vendor_headers, admin_headers):
    booking_id = client.post(
        "/bookings", json={"ticketId": approved_ticket.id, "quantity": 2}, headers=buyer_headers
    ).json()["data"]["id"]
    client.put(f"/bookings/{booking_id}/status", json={"status": "accepted"}, headers=vendor_headers)
    session_id = client.post(
        "/payment/create-session", json={"bookingId": booking_id}, headers=buyer_headers
    ).json()["data"]["sessionId"]
    gateway.complete(session_id)
    client.post("/payment/verify", json={"sessionId": session_id}, headers=buyer_headers)

    stats = client.get("/admin/stats", headers=admin_headers).json()["data"]
    assert stats["totalBookings"] == 1
    assert stats["completedTransactions"] == 1
    assert stats["failedTransactions"] == 0
    assert stats["revenue"] == 1000

    response = client.get("/admin/transactions", params={"status": "completed"}, headers=admin_headers)
    body = response.json()
    assert body["pagination"]["total"] == 1
    assert body["data"][0]["bookingId"] == booking_id

    response = client.get("/admin/transactions", params={"status": "failed"}, headers=admin_headers)
    assert response.json()["data"] == []
