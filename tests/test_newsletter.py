from app.models.newsletter import NewsletterSubscription


def _subscription(db, email):
    return db.query(NewsletterSubscription).filter(NewsletterSubscription.email == email).one()


class TestSubscribe:
    def test_subscribe_lowercases_email(self, client, db):
        response = client.post("/newsletter/subscribe", json={"email": "Reader@Example.com"})
        assert response.status_code == 200
        assert _subscription(db, "reader@example.com").is_active is True

    def test_subscribe_twice(self, client, db):
        client.post("/newsletter/subscribe", json={"email": "reader@example.com"})
        response = client.post("/newsletter/subscribe", json={"email": "reader@example.com"})
        assert response.status_code == 200
        assert db.query(NewsletterSubscription).count() == 1

    def test_resubscribe_reactivates(self, client, db):
        client.post("/newsletter/subscribe", json={"email": "reader@example.com"})
        client.post("/newsletter/unsubscribe", json={"email": "reader@example.com"})
        db.expire_all()
        assert _subscription(db, "reader@example.com").is_active is False

        client.post("/newsletter/subscribe", json={"email": "reader@example.com"})
        db.expire_all()
        assert _subscription(db, "reader@example.com").is_active is True

    def test_unsubscribe_unknown_email(self, client):
        response = client.post("/newsletter/unsubscribe", json={"email": "nobody@example.com"})
        assert response.status_code == 200

    def test_invalid_email(self, client):
        assert client.post("/newsletter/subscribe", json={"email": "not-an-email"}).status_code == 422
