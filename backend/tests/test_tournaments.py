from datetime import date, timedelta

from fastapi.testclient import TestClient

from tests.conftest import tournament_payload
from tourney_admin.models import Participant, Tournament


def _detail_mentions(response, text: str) -> bool:
    detail = response.json()["detail"]
    if isinstance(detail, str):
        return text in detail
    return any(text in str(err) for err in detail)


def test_create_tournament_computes_prize_amounts(client: TestClient):
    """Test that a new tournament reports its pool and per-place amounts"""
    response = client.post("/api/tournaments", json=tournament_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Winter Chess Open"
    assert data["status"] == "draft"
    assert data["startDate"] == "2026-01-15"
    assert data["prizeBreakdown"] == {"first": 50, "second": 30, "third": 20}
    assert data["prizePool"] == 160.0
    assert data["prizeAmounts"] == {"first": 80.0, "second": 48.0, "third": 32.0}
    assert data["currentParticipants"] == 0
    assert data["bracketConfig"] == {"useAdvancedSeeding": False, "seedingOptions": None}


def test_end_date_must_follow_start_date(client: TestClient):
    """Test that end date on or before the start date is rejected"""
    response = client.post("/api/tournaments", json=tournament_payload(endDate="2026-01-15"))

    assert response.status_code == 422
    assert _detail_mentions(response, "End date must be after start date")


def test_prize_breakdown_over_100_rejected(client: TestClient):
    """Test that the server re-validates the prize breakdown"""
    response = client.post(
        "/api/tournaments",
        json=tournament_payload(prizeBreakdown={"first": 60, "second": 30, "third": 20}),
    )

    assert response.status_code == 422
    assert _detail_mentions(response, "Total prize breakdown cannot exceed 100% (got 110%)")


def test_prize_breakdown_under_100_accepted(client: TestClient):
    """Test that a breakdown leaving part of the pool unallocated is allowed"""
    response = client.post(
        "/api/tournaments",
        json=tournament_payload(prizeBreakdown={"first": 50, "second": 25, "third": 15}),
    )

    assert response.status_code == 201
    assert response.json()["prizeAmounts"]["third"] == 24.0


def test_field_limits(client: TestClient):
    """Test title, description, player count and fee limits"""
    assert client.post("/api/tournaments", json=tournament_payload(title="ab")).status_code == 422
    assert client.post("/api/tournaments", json=tournament_payload(description="short")).status_code == 422
    assert client.post("/api/tournaments", json=tournament_payload(maxPlayers=3)).status_code == 422
    assert client.post("/api/tournaments", json=tournament_payload(maxPlayers=257)).status_code == 422
    assert client.post("/api/tournaments", json=tournament_payload(entryFee=-1)).status_code == 422
    assert client.post("/api/tournaments", json=tournament_payload(gameType="poker")).status_code == 422


def test_unbalanced_advanced_seeding_rejected(client: TestClient):
    """Test that advanced seeding weights must total 100%"""
    response = client.post(
        "/api/tournaments",
        json=tournament_payload(
            bracketConfig={"useAdvancedSeeding": True, "seedingOptions": {"ratingWeight": 0.6}},
        ),
    )

    assert response.status_code == 422
    assert _detail_mentions(response, "Seeding factor weights must sum to 100%")


def test_unbalanced_weights_ignored_without_advanced_seeding(client: TestClient):
    """Test that seeding weights are only checked when advanced seeding is on"""
    response = client.post(
        "/api/tournaments",
        json=tournament_payload(
            bracketConfig={"useAdvancedSeeding": False, "seedingOptions": {"ratingWeight": 0.6}},
        ),
    )

    assert response.status_code == 201


def test_create_with_advanced_seeding(client: TestClient):
    """Test that seeding options are stored with the tournament"""
    response = client.post(
        "/api/tournaments",
        json=tournament_payload(
            bracketConfig={
                "useAdvancedSeeding": True,
                "seedingOptions": {"includeRegional": False, "ratingWeight": 0.5, "regionalWeight": 0},
            },
        ),
    )

    assert response.status_code == 201
    config = response.json()["bracketConfig"]
    assert config["useAdvancedSeeding"] is True
    assert config["seedingOptions"]["includeRegional"] is False
    assert config["seedingOptions"]["ratingWeight"] == 0.5
    assert config["seedingOptions"]["recentTournaments"] == 10


def test_get_and_list_tournaments(client: TestClient, tournament):
    """Test getting a tournament by ID and listing"""
    response = client.get(f"/api/tournaments/{tournament['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == tournament["id"]

    client.post("/api/tournaments", json=tournament_payload(title="Spring Checkers Cup", gameType="checkers"))
    listing = client.get("/api/tournaments").json()
    assert [t["title"] for t in listing] == ["Winter Chess Open", "Spring Checkers Cup"]


def test_get_missing_tournament(client: TestClient):
    response = client.get("/api/tournaments/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Tournament not found"


def test_update_tournament(client: TestClient, tournament):
    """Test partial update recomputes prize amounts"""
    response = client.put(
        f"/api/tournaments/{tournament['id']}",
        json={"entryFee": 20, "status": "registration"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "registration"
    assert data["title"] == "Winter Chess Open"
    assert data["prizePool"] == 320.0
    assert data["prizeAmounts"]["first"] == 160.0


def test_update_validates_merged_dates(client: TestClient, tournament):
    """Test that a new end date is checked against the stored start date"""
    response = client.put(f"/api/tournaments/{tournament['id']}", json={"endDate": "2026-01-10"})

    assert response.status_code == 422
    assert response.json()["detail"] == "End date must be after start date"


def test_update_rejects_invalid_prize_breakdown(client: TestClient, tournament):
    response = client.put(
        f"/api/tournaments/{tournament['id']}",
        json={"prizeBreakdown": {"first": 70, "second": 30, "third": 20}},
    )

    assert response.status_code == 422
    assert "cannot exceed 100%" in response.json()["detail"]

    # Nothing was stored
    stored = client.get(f"/api/tournaments/{tournament['id']}").json()
    assert stored["prizeBreakdown"]["first"] == 50


def test_max_players_cannot_drop_below_active_roster(client: TestClient, tournament):
    """Test that shrinking the roster cap below the active count is a conflict"""
    tid = tournament["id"]
    for name in ["Alice", "Bob", "Carol", "Dave", "Erin"]:
        client.post(f"/api/tournaments/{tid}/participants", json={"displayName": name})

    response = client.put(f"/api/tournaments/{tid}", json={"maxPlayers": 4})
    assert response.status_code == 409

    response = client.put(f"/api/tournaments/{tid}", json={"maxPlayers": 8})
    assert response.status_code == 200
    assert response.json()["currentParticipants"] == 5


def test_delete_tournament_cascades(client: TestClient, tournament):
    """Test that deleting a tournament removes its roster"""
    tid = tournament["id"]
    client.post(f"/api/tournaments/{tid}/participants", json={"displayName": "Alice"})

    response = client.delete(f"/api/tournaments/{tid}")
    assert response.status_code == 204

    assert client.get(f"/api/tournaments/{tid}").status_code == 404
    assert client.get(f"/api/tournaments/{tid}/participants").status_code == 404


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_non_finite_prize_percentage_rejected(client: TestClient):
    """Test that NaN and Infinity never reach the stored breakdown"""
    for value in ["NaN", "Infinity"]:
        response = client.post(
            "/api/tournaments",
            json=tournament_payload(prizeBreakdown={"first": value, "second": 30, "third": 20}),
        )
        assert response.status_code == 422

    assert client.get("/api/tournaments").json() == []


def test_non_finite_entry_fee_rejected(client: TestClient, tournament):
    """Test that an infinite fee is refused on create and update and listing keeps working"""
    assert client.post("/api/tournaments", json=tournament_payload(entryFee="Infinity")).status_code == 422
    assert client.put(f"/api/tournaments/{tournament['id']}", json={"entryFee": "Infinity"}).status_code == 422

    response = client.get("/api/tournaments")
    assert response.status_code == 200
    assert [t["entryFee"] for t in response.json()] == [10.0]


def test_update_with_null_fields_leaves_them_unchanged(client: TestClient, tournament):
    """Test that explicit nulls in a partial update are ignored"""
    response = client.put(
        f"/api/tournaments/{tournament['id']}",
        json={"title": None, "maxPlayers": None, "description": "Updated sixteen-player event"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Winter Chess Open"
    assert data["maxPlayers"] == 16
    assert data["description"] == "Updated sixteen-player event"


def test_default_timestamps_are_timezone_aware():
    """Test that row timestamps carry UTC so strict datetime columns accept them"""
    tournament = Tournament(
        title="Winter Chess Open",
        description="Sixteen-player single elimination event",
        start_date=date(2026, 1, 15),
        end_date=date(2026, 1, 17),
    )
    participant = Participant(tournament_id=1, display_name="Alice", seed=1)

    assert tournament.created_at.tzinfo is not None
    assert tournament.updated_at.tzinfo is not None
    assert participant.registered_at.utcoffset() == timedelta(0)


def test_unrelated_update_after_clamped_seeding_edit(client: TestClient):
    """Test that a title change is not blocked by stored weights a clamp left unbalanced"""
    tid = client.post(
        "/api/tournaments",
        json=tournament_payload(bracketConfig={"useAdvancedSeeding": True, "seedingOptions": {}}),
    ).json()["id"]

    client.put(f"/api/tournaments/{tid}/seeding/weight", json={"factor": "performance", "weight": 0.5})
    clamped = client.put(f"/api/tournaments/{tid}/seeding/weight", json={"factor": "rating", "weight": 0.1})
    assert clamped.json()["balanced"] is False

    response = client.put(f"/api/tournaments/{tid}", json={"title": "Renamed Chess Open"})
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed Chess Open"

    # Resubmitting the unbalanced configuration is still refused
    stored = client.get(f"/api/tournaments/{tid}/seeding").json()["options"]
    response = client.put(
        f"/api/tournaments/{tid}",
        json={"bracketConfig": {"useAdvancedSeeding": True, "seedingOptions": stored}},
    )
    assert response.status_code == 422
