def test_contact_needs_login(client):
    r = client.post("/api/contactus", json={"subject": "Hi", "message": "Help"})
    assert r.status_code == 401


def test_contact_sends_with_reply_to(client, register, notifier):
    register()
    r = client.post("/api/contactus", json={"subject": "Broken lamp", "message": "It flickers"})
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Email sent"}
    mail = notifier.sent[-1]
    assert mail["subject"] == "Broken lamp"
    assert mail["reply_to"] == "ada@example.com"


def test_contact_requires_subject_and_message(client, register):
    register()
    r = client.post("/api/contactus", json={"subject": "Only subject"})
    assert r.status_code == 400


def test_contact_email_failure(client, register, notifier):
    register()
    notifier.fail = True
    r = client.post("/api/contactus", json={"subject": "Hi", "message": "Help"})
    assert r.status_code == 500


def test_health_and_homepage(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["database"] == "ok"
    assert client.get("/").text == "Pinvent Homepage"
