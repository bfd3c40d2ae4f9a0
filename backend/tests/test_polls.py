"""Tests for polls, vote leaders and promoting winners into events.

Covers:
- Opening a poll closes the previous one
- Leaders come from the same ranking as the option lists
- Closing with create_event produces exactly one upcoming event
- Winners must belong to the poll's event and not be in the past
"""
import pytest

from meatup.exceptions import ConflictError
from meatup.models.event import Event
from meatup.models.poll import Poll
from meatup.services import poll_service
from meatup.services.ranking import SuggestionKind, leader
from tests.conftest import auth_headers, create_test_event, create_test_user


def _suggest_restaurant(client, email, name, event_id=None):
    body = {"name": name}
    if event_id is not None:
        body["event_id"] = event_id
    resp = client.post("/api/restaurants/", headers=auth_headers(email), json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _suggest_date(client, email, day, event_id=None):
    body = {"suggested_date": day}
    if event_id is not None:
        body["event_id"] = event_id
    resp = client.post("/api/dates/", headers=auth_headers(email), json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _votes(client, voters, kind, suggestion_id):
    for voter in voters:
        resp = client.post(f"/api/{kind}/vote", headers=auth_headers(voter.email), json={"suggestion_id": suggestion_id})
        assert resp.status_code == 201, resp.text


def _close(client, admin, **body):
    return client.post("/api/polls/close", headers=auth_headers(admin.email), json=body)


def _voters(db, count):
    return [create_test_user(db, f"voter{i}@meatup.club", name=f"Voter {i}") for i in range(count)]


class TestOpenPoll:
    """Opening and reading the active poll."""

    def test_open_poll(self, client, admin, member):
        event = create_test_event(client, admin.email)
        resp = client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Spring dinner"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "open"
        assert data["event_id"] == event["id"]

        active = client.get("/api/polls/active", headers=auth_headers(member.email))
        assert active.json()["id"] == data["id"]

    def test_no_active_poll(self, client, member):
        resp = client.get("/api/polls/active", headers=auth_headers(member.email))
        assert resp.status_code == 200
        assert resp.json() is None

    def test_opening_closes_previous(self, client, db, admin):
        create_test_event(client, admin.email)
        headers = auth_headers(admin.email)
        first = client.post("/api/polls/", headers=headers, json={"title": "First"}).json()
        second = client.post("/api/polls/", headers=headers, json={"title": "Second"}).json()

        assert db.query(Poll).filter(Poll.status == "open").count() == 1
        assert db.get(Poll, first["id"]).status == "closed"
        assert db.get(Poll, second["id"]).status == "open"

    def test_title_required(self, client, admin):
        create_test_event(client, admin.email)
        resp = client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": " "})
        assert resp.status_code == 400

    def test_open_without_event(self, client, admin):
        resp = client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Spring"})
        assert resp.status_code == 400

    def test_member_cannot_open(self, client, admin, member):
        create_test_event(client, admin.email)
        resp = client.post("/api/polls/", headers=auth_headers(member.email), json={"title": "Mine"})
        assert resp.status_code == 403


class TestLeaders:
    """Leaders are the top of the ranked option lists."""

    def test_five_beats_three(self, client, db, admin, member):
        create_test_event(client, admin.email)
        voters = _voters(db, 5)
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        berns = _suggest_restaurant(client, member.email, "Bern's")
        _votes(client, voters, "restaurants", kevins["id"])
        _votes(client, voters[:3], "restaurants", berns["id"])

        resp = client.get("/api/polls/leaders", headers=auth_headers(member.email))
        assert resp.status_code == 200
        data = resp.json()
        assert data["restaurant_leader"]["id"] == kevins["id"]
        assert data["restaurant_leader"]["vote_count"] == 5
        assert [r["id"] for r in data["restaurants"]] == [kevins["id"], berns["id"]]

    def test_leader_is_listed(self, client, db, admin, member):
        create_test_event(client, admin.email)
        voters = _voters(db, 2)
        days = [_suggest_date(client, member.email, d) for d in ("2099-05-03", "2099-05-01", "2099-05-02")]
        # Tie on votes, earliest date leads
        _votes(client, voters[:1], "dates", days[0]["id"])
        _votes(client, voters[1:], "dates", days[2]["id"])

        data = client.get("/api/polls/leaders", headers=auth_headers(member.email)).json()
        listed = [d["id"] for d in data["dates"]]
        assert data["date_leader"]["id"] in listed
        assert data["date_leader"]["id"] == listed[0] == days[2]["id"]

    def test_no_votes_no_leader(self, client, admin, member):
        create_test_event(client, admin.email)
        _suggest_restaurant(client, member.email, "Kevin's")
        data = client.get("/api/polls/leaders", headers=auth_headers(member.email)).json()
        assert data["restaurant_leader"] is None
        assert data["date_leader"] is None
        assert len(data["restaurants"]) == 1

    def test_leader_scoped_to_event(self, client, db, admin, member):
        first = create_test_event(client, admin.email, event_date="2099-03-01")
        second = create_test_event(client, admin.email, event_date="2099-09-01")
        voters = _voters(db, 3)
        popular = _suggest_date(client, member.email, "2099-05-01", event_id=first["id"])
        _votes(client, voters, "dates", popular["id"])

        assert leader(db, SuggestionKind.date, second["id"]) is None
        assert leader(db, SuggestionKind.date, first["id"])["id"] == popular["id"]

        quiet = _suggest_date(client, member.email, "2099-06-01", event_id=second["id"])
        _votes(client, voters[:1], "dates", quiet["id"])
        assert leader(db, SuggestionKind.date, second["id"])["id"] == quiet["id"]


class TestCloseAndPromote:
    """Closing a poll and creating the winning event."""

    def test_close_creates_event(self, client, db, admin, member):
        target = create_test_event(client, admin.email)
        client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Spring"})
        voters = _voters(db, 5)
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        berns = _suggest_restaurant(client, member.email, "Bern's")
        day = _suggest_date(client, member.email, "2099-05-01")
        _votes(client, voters, "restaurants", kevins["id"])
        _votes(client, voters[:3], "restaurants", berns["id"])
        _votes(client, voters[:2], "dates", day["id"])

        resp = _close(client, admin, create_event=True)
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["poll"]["status"] == "closed"
        assert data["poll"]["winning_restaurant_id"] == kevins["id"]
        assert data["poll"]["winning_date_id"] == day["id"]
        assert data["event"]["restaurant_name"] == "Kevin's"
        assert data["event"]["event_date"] == "2099-05-01"
        assert data["event"]["status"] == "upcoming"
        assert data["poll"]["created_event_id"] == data["event"]["id"]

        created = db.query(Event).filter(Event.restaurant_name == "Kevin's").all()
        assert len(created) == 1
        assert db.query(Event).count() == 2
        assert client.get("/api/polls/active", headers=auth_headers(admin.email)).json() is None
        assert data["poll"]["event_id"] == target["id"]

    def test_admin_override(self, client, db, admin, member):
        create_test_event(client, admin.email)
        voters = _voters(db, 2)
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        berns = _suggest_restaurant(client, member.email, "Bern's")
        day = _suggest_date(client, member.email, "2099-05-01")
        _votes(client, voters, "restaurants", kevins["id"])

        resp = _close(client, admin, winning_restaurant_id=berns["id"], winning_date_id=day["id"], create_event=True)
        assert resp.status_code == 200
        assert resp.json()["event"]["restaurant_name"] == "Bern's"

    def test_close_without_event(self, client, db, admin, member):
        create_test_event(client, admin.email)
        client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Spring"})
        resp = _close(client, admin)
        assert resp.status_code == 200
        assert resp.json()["event"] is None
        assert db.query(Event).count() == 1

    def test_winner_from_other_event(self, client, admin, member):
        first = create_test_event(client, admin.email, event_date="2099-03-01")
        second = create_test_event(client, admin.email, event_date="2099-09-01")
        elsewhere = _suggest_restaurant(client, member.email, "Elsewhere", event_id=second["id"])

        resp = _close(client, admin, event_id=first["id"], winning_restaurant_id=elsewhere["id"])
        assert resp.status_code == 400
        assert resp.json() == {"error": "Winning restaurant must belong to the poll being closed"}

    def test_create_event_needs_date(self, client, db, admin, member):
        create_test_event(client, admin.email)
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        resp = _close(client, admin, winning_restaurant_id=kevins["id"], create_event=True)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Winning restaurant and date are required to create an event"}
        assert db.query(Event).count() == 1

    def test_past_date_rejected(self, client, db, admin, member):
        create_test_event(client, admin.email)
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        past = _suggest_date(client, member.email, "2001-01-01")
        resp = _close(client, admin, winning_restaurant_id=kevins["id"], winning_date_id=past["id"], create_event=True)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Cannot create event for a date in the past"}
        assert db.query(Poll).count() == 0

    def test_member_cannot_close(self, client, admin, member):
        create_test_event(client, admin.email)
        assert _close(client, member).status_code == 403

    def test_close_and_promote_service(self, client, db, admin, member):
        create_test_event(client, admin.email)
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        day = _suggest_date(client, member.email, "2099-05-01")

        poll, event = poll_service.close_and_promote(
            db, admin, winning_restaurant_id=kevins["id"], winning_date_id=day["id"], create_event=True
        )
        assert poll.status == "closed"
        assert event.restaurant_name == "Kevin's"
        assert poll.created_event_id == event.id


class TestClosedPolls:
    """History of closed polls."""

    def test_list_closed(self, client, db, admin, member):
        create_test_event(client, admin.email)
        client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Spring"})
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        day = _suggest_date(client, member.email, "2099-05-01")
        _votes(client, _voters(db, 1), "restaurants", kevins["id"])
        _close(client, admin, winning_date_id=day["id"])

        resp = client.get("/api/polls/closed", headers=auth_headers(member.email))
        assert resp.status_code == 200
        [closed] = resp.json()
        assert closed["title"] == "Spring"
        assert closed["winning_restaurant_name"] == "Kevin's"
        assert closed["winning_date"] == "2099-05-01"

    def test_empty_history(self, client, member):
        assert client.get("/api/polls/closed", headers=auth_headers(member.email)).json() == []


class TestConcurrentPolls:
    """Races on the single open poll surface as conflicts, never partial writes."""

    def test_second_open_poll_conflicts(self, client, db, admin, monkeypatch):
        create_test_event(client, admin.email)
        first = client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "First"}).json()
        # Another request opened its poll after our close-open-polls step ran
        monkeypatch.setattr(poll_service, "_close_open_polls", lambda db, admin: 0)

        resp = client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Second"})
        assert resp.status_code == 409

        open_polls = db.query(Poll).filter(Poll.status == "open").all()
        assert [p.id for p in open_polls] == [first["id"]]

    def test_lost_close_commits_nothing(self, client, db, admin, member, monkeypatch):
        create_test_event(client, admin.email)
        poll = client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Spring"}).json()
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        day = _suggest_date(client, member.email, "2099-05-01")
        # Another admin closed the poll between our read and our update
        monkeypatch.setattr(poll_service, "_close_poll_row", lambda *args: False)

        with pytest.raises(ConflictError):
            poll_service.close_and_promote(
                db, admin, winning_restaurant_id=kevins["id"], winning_date_id=day["id"], create_event=True
            )

        db.expire_all()
        assert db.query(Event).count() == 1
        assert db.query(Event).filter(Event.restaurant_name == "Kevin's").count() == 0
        assert db.get(Poll, poll["id"]).status == "open"
        assert db.get(Poll, poll["id"]).created_event_id is None


class TestPollExclusions:
    """Restaurants taken out of the open poll drop out of every ranking."""

    def _setup(self, client, db, admin, member):
        create_test_event(client, admin.email)
        poll = client.post("/api/polls/", headers=auth_headers(admin.email), json={"title": "Spring"}).json()
        voters = _voters(db, 3)
        kevins = _suggest_restaurant(client, member.email, "Kevin's")
        berns = _suggest_restaurant(client, member.email, "Bern's")
        _votes(client, voters, "restaurants", kevins["id"])
        _votes(client, voters[:1], "restaurants", berns["id"])
        return poll, kevins, berns

    def _exclude(self, client, email, poll_id, restaurant_id):
        return client.post(f"/api/polls/{poll_id}/exclusions", headers=auth_headers(email),
                           json={"restaurant_id": restaurant_id})

    def test_excluded_restaurant_leaves_listing_and_leaders(self, client, db, admin, member):
        poll, kevins, berns = self._setup(client, db, admin, member)
        resp = self._exclude(client, admin.email, poll["id"], kevins["id"])
        assert resp.status_code == 201
        assert [e["restaurant_name"] for e in resp.json()] == ["Kevin's"]

        listed = client.get("/api/restaurants/", headers=auth_headers(member.email)).json()
        assert [r["id"] for r in listed] == [berns["id"]]
        leaders = client.get("/api/polls/leaders", headers=auth_headers(member.email)).json()
        assert leaders["restaurant_leader"]["id"] == berns["id"]

    def test_excluded_restaurant_cannot_win(self, client, db, admin, member):
        poll, kevins, berns = self._setup(client, db, admin, member)
        self._exclude(client, admin.email, poll["id"], kevins["id"])

        resp = _close(client, admin, winning_restaurant_id=kevins["id"])
        assert resp.status_code == 400
        resp = _close(client, admin)
        assert resp.json()["poll"]["winning_restaurant_id"] == berns["id"]

    def test_exclude_twice(self, client, db, admin, member):
        poll, kevins, _ = self._setup(client, db, admin, member)
        self._exclude(client, admin.email, poll["id"], kevins["id"])
        resp = self._exclude(client, admin.email, poll["id"], kevins["id"])
        assert resp.status_code == 200
        assert len(resp.json()) == 1

    def test_include_restores(self, client, db, admin, member):
        poll, kevins, _ = self._setup(client, db, admin, member)
        self._exclude(client, admin.email, poll["id"], kevins["id"])

        resp = client.delete(f"/api/polls/{poll['id']}/exclusions/{kevins['id']}", headers=auth_headers(admin.email))
        assert resp.status_code == 200
        assert resp.json() == []
        leaders = client.get("/api/polls/leaders", headers=auth_headers(member.email)).json()
        assert leaders["restaurant_leader"]["id"] == kevins["id"]

    def test_include_not_excluded(self, client, db, admin, member):
        poll, kevins, _ = self._setup(client, db, admin, member)
        resp = client.delete(f"/api/polls/{poll['id']}/exclusions/{kevins['id']}", headers=auth_headers(admin.email))
        assert resp.status_code == 404

    def test_restaurant_from_other_event(self, client, db, admin, member):
        poll, _, _ = self._setup(client, db, admin, member)
        other = create_test_event(client, admin.email, event_date="2099-09-01")
        elsewhere = _suggest_restaurant(client, member.email, "Elsewhere", event_id=other["id"])
        assert self._exclude(client, admin.email, poll["id"], elsewhere["id"]).status_code == 400

    def test_closed_poll_exclusions_frozen(self, client, db, admin, member):
        poll, kevins, _ = self._setup(client, db, admin, member)
        _close(client, admin)
        assert self._exclude(client, admin.email, poll["id"], kevins["id"]).status_code == 400

    def test_exclusions_lapse_with_closed_poll(self, client, db, admin, member):
        poll, kevins, berns = self._setup(client, db, admin, member)
        self._exclude(client, admin.email, poll["id"], kevins["id"])
        _close(client, admin)

        listed = client.get("/api/restaurants/", headers=auth_headers(member.email)).json()
        assert {r["id"] for r in listed} == {kevins["id"], berns["id"]}

    def test_member_cannot_exclude(self, client, db, admin, member):
        poll, kevins, _ = self._setup(client, db, admin, member)
        assert self._exclude(client, member.email, poll["id"], kevins["id"]).status_code == 403

    def test_unknown_poll(self, client, db, admin, member):
        _, kevins, _ = self._setup(client, db, admin, member)
        assert self._exclude(client, admin.email, 999, kevins["id"]).status_code == 404
