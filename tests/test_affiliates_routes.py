from laundry_affiliate.domain.scheduling.schemas import AvailabilitySchedule
from laundry_affiliate.models import Affiliate, User

PAYLOAD = {
    "firstName": "Dana",
    "lastName": "Reyes",
    "email": "Dana@Example.com",
    "phone": "(555) 123-4567",
    "businessName": "Fresh Folds",
    "serviceArea": "Austin",
}


def test_register_affiliate_with_default_schedule(client, login, customer, db):
    login(customer)

    response = client.post("/affiliates", json=PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["affiliateId"].startswith("AFF")
    assert body["email"] == "dana@example.com"
    assert body["phone"] == "+15551234567"
    assert body["isActive"] is True
    assert body["scheduleSettings"] == {
        "advanceBookingDays": 1,
        "maxBookingDays": 30,
        "timezone": "America/Chicago",
    }

    db.expire_all()
    affiliate = db.query(Affiliate).filter(Affiliate.affiliate_id == body["affiliateId"]).one()
    schedule = AvailabilitySchedule.from_document(affiliate.availability_schedule)
    assert schedule.weeklyTemplate.sunday.enabled is False
    assert schedule.weeklyTemplate.saturday.enabled is True

    user = db.get(User, customer.id)
    assert user.role == "affiliate"
    assert user.affiliate_id == body["affiliateId"]


def test_register_with_timezone(client, login, customer):
    login(customer)

    response = client.post("/affiliates", json={**PAYLOAD, "timezone": "America/Denver"})

    assert response.json()["scheduleSettings"]["timezone"] == "America/Denver"


def test_register_rejects_bad_input(client, login, customer, affiliate):
    login(customer)

    unknown_zone = client.post("/affiliates", json={**PAYLOAD, "timezone": "Nowhere/Else"})
    taken_email = client.post("/affiliates", json={**PAYLOAD, "email": "affiliate@example.com"})
    bad_phone = client.post("/affiliates", json={**PAYLOAD, "phone": "123"})

    assert unknown_zone.status_code == 400
    assert taken_email.status_code == 409
    assert bad_phone.status_code == 422


def test_user_cannot_register_twice(client, login, owner):
    login(owner)

    response = client.post("/affiliates", json=PAYLOAD)

    assert response.status_code == 409


def test_get_affiliate_access(client, login, owner, customer, admin):
    login(owner)
    assert client.get("/affiliates/AFF100001").json()["affiliateId"] == "AFF100001"

    login(admin)
    assert client.get("/affiliates/AFF100001").status_code == 200
    assert client.get("/affiliates/AFF999999").status_code == 404

    login(customer)
    forbidden = client.get("/affiliates/AFF100001")
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Not authorized to view this affiliate"
