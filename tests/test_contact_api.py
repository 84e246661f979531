from portfolio_api.crud import contact as crud_contact
from portfolio_api.schemas.contact import ContactCreate

from helpers import APITestCase

VALID = {
    "name": "Grace",
    "email": "grace@example.com",
    "subject": "Hello",
    "message": "I would like a quote for a small web app.",
}


class ContactFormTests(APITestCase):
    def test_anonymous_submission_is_stored_unread(self):
        response = self.client.post("/api/contact", json=VALID)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertFalse(body["contactMessage"]["read"])
        self.assertIsNone(body["contactMessage"]["userId"])

        stored = crud_contact.get_contact_messages(self.db)
        self.assertEqual(len(stored), 1)
        self.assertEqual(stored[0].email, "grace@example.com")

    def test_subject_is_optional(self):
        payload = {k: v for k, v in VALID.items() if k != "subject"}
        self.assertEqual(self.client.post("/api/contact", json=payload).status_code, 200)

    def test_blank_message_is_rejected(self):
        response = self.client.post("/api/contact", json={**VALID, "message": "   "})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual([e["field"] for e in body["errors"]], ["message"])
        self.assertEqual(crud_contact.get_contact_messages(self.db), [])

    def test_invalid_email_is_rejected(self):
        response = self.client.post("/api/contact", json={**VALID, "email": "not-an-email"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", [e["field"] for e in response.json()["errors"]])


class ContactInboxTests(APITestCase):
    def setUp(self):
        super().setUp()
        self.first_id = crud_contact.create_contact_message(self.db, ContactCreate(**VALID)).id
        self.second_id = crud_contact.create_contact_message(
            self.db, ContactCreate(**{**VALID, "name": "Linus", "email": "linus@example.com"})
        ).id

    def test_list_needs_admin(self):
        self.assertEqual(self.client.get("/api/cms/contact").status_code, 401)

    def test_list_is_newest_first_with_unread_count(self):
        response = self.client.get("/api/cms/contact", headers=self.admin_headers())
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual([m["id"] for m in body["messages"]], [self.second_id, self.first_id])
        self.assertEqual(body["unread"], 2)

    def test_mark_read(self):
        headers = self.admin_headers()
        response = self.client.patch(f"/api/cms/contact/{self.first_id}/read", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["contactMessage"]["read"])

        # Marking twice is harmless
        again = self.client.patch(f"/api/cms/contact/{self.first_id}/read", headers=headers)
        self.assertTrue(again.json()["contactMessage"]["read"])
        self.assertEqual(self.client.get("/api/cms/contact", headers=headers).json()["unread"], 1)

    def test_mark_read_unknown_is_404(self):
        response = self.client.patch("/api/cms/contact/9999/read", headers=self.admin_headers())
        self.assertEqual(response.status_code, 404)

    def test_delete(self):
        headers = self.admin_headers()
        response = self.client.delete(f"/api/cms/contact/{self.first_id}", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(crud_contact.get_contact_message(self.db, self.first_id))

        again = self.client.delete(f"/api/cms/contact/{self.first_id}", headers=headers)
        self.assertEqual(again.status_code, 404)
