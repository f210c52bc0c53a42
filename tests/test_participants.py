"""
Participant routes: coworker picker, CSV import and removal.
"""

from giftpool.core.config import settings
from giftpool.models.participant import CampaignParticipant
from giftpool.models.user import User
from giftpool.services.participant_service import parse_participant_csv


def upload(client, campaign_id, content, headers, filename="people.csv"):
    return client.post(
        f"/api/v1/campaigns/{campaign_id}/participants/import",
        files={"file": (filename, content, "text/csv")},
        headers=headers,
    )


class TestListParticipants:

    def test_excludes_caller(self, client, open_campaign, giver, auth_headers):
        res = client.get(f"/api/v1/campaigns/{open_campaign.id}/participants", headers=auth_headers(giver))
        assert res.status_code == 200
        emails = sorted(p["email"] for p in res.json())
        assert emails == ["recipient2@test.com", "recipient@test.com"]
        assert set(res.json()[0]) == {"id", "email", "displayName", "avatarUrl"}


class TestImport:

    def test_creates_users_and_participants(self, client, db, make_campaign, admin, auth_headers):
        campaign = make_campaign()
        csv_bytes = b"email,display_name\nalice@test.com,Alice\nbob@test.com,\n"

        res = upload(client, campaign.id, csv_bytes, auth_headers(admin))
        assert res.status_code == 200
        assert res.json() == {"usersProcessed": 2, "participantsAdded": 2, "errors": []}

        bob = db.query(User).filter(User.email == "bob@test.com").one()
        assert bob.display_name == "bob@test.com"
        assert db.query(CampaignParticipant).filter_by(campaign_id=campaign.id).count() == 2

    def test_existing_user_and_participant(self, client, db, open_campaign, giver, admin, auth_headers):
        csv_bytes = b"email,display_name\ngiver@test.com,Renamed Giver\n"

        res = upload(client, open_campaign.id, csv_bytes, auth_headers(admin))
        assert res.json() == {"usersProcessed": 1, "participantsAdded": 0, "errors": []}

        db.refresh(giver)
        assert giver.display_name == "Renamed Giver"

    def test_rows_without_email_are_reported(self, client, make_campaign, admin, auth_headers):
        campaign = make_campaign()
        csv_bytes = b"email,display_name\n,Nameless\ncarol@test.com,Carol\n"

        body = upload(client, campaign.id, csv_bytes, auth_headers(admin)).json()
        assert body["usersProcessed"] == 1
        assert body["participantsAdded"] == 1
        assert len(body["errors"]) == 1
        assert body["errors"][0].startswith("Row missing email")

    def test_no_file(self, client, make_campaign, admin, auth_headers):
        campaign = make_campaign()
        res = client.post(f"/api/v1/campaigns/{campaign.id}/participants/import", headers=auth_headers(admin))
        assert res.status_code == 400
        assert res.json() == {"error": "No CSV file uploaded"}

    def test_file_too_large(self, client, make_campaign, admin, auth_headers):
        campaign = make_campaign()
        content = b"email,display_name\n" + b"x" * settings.CSV_MAX_BYTES
        res = upload(client, campaign.id, content, auth_headers(admin))
        assert res.status_code == 400

    def test_missing_campaign(self, client, admin, auth_headers):
        res = upload(client, "nope", b"email\na@test.com\n", auth_headers(admin))
        assert res.status_code == 404

    def test_admin_only(self, client, open_campaign, giver, auth_headers):
        res = upload(client, open_campaign.id, b"email\na@test.com\n", auth_headers(giver))
        assert res.status_code == 403


class TestParseCsv:

    def test_trims_and_skips_blank_lines(self):
        content = b"\xef\xbb\xbf email , display_name \n  a@test.com ,  A  \n\n,\n"
        assert parse_participant_csv(content) == [{"email": "a@test.com", "display_name": "A"}]

    def test_empty_file(self):
        assert parse_participant_csv(b"") == []


class TestRemoveParticipant:

    def test_remove(self, client, db, open_campaign, recipient2, admin, auth_headers):
        res = client.delete(
            f"/api/v1/campaigns/{open_campaign.id}/participants/{recipient2.id}", headers=auth_headers(admin)
        )
        assert res.status_code == 204
        assert db.get(CampaignParticipant, (open_campaign.id, recipient2.id)) is None

    def test_remove_unknown(self, client, open_campaign, make_user, admin, auth_headers):
        outsider = make_user("outsider@test.com")
        res = client.delete(
            f"/api/v1/campaigns/{open_campaign.id}/participants/{outsider.id}", headers=auth_headers(admin)
        )
        assert res.status_code == 404
