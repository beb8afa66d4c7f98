"""Tests for taste profile endpoints."""
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import TasteValidationError
from app.core.security import FirebaseUser
from app.models.app_user import AppUser
from app.models.user_taste_profile import UserTasteProfile
from app.schemas.profile import TasteProfileUpdate
from app.services.taste_profile_service import TasteProfileService


@pytest.mark.asyncio
async def test_get_profile_without_preferences(
    client: AsyncClient,
    firebase_user: FirebaseUser,
):
    """Test GET /profile before the taste quiz was saved."""
    response = await client.get("/api/v1/profile")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == firebase_user.uid
    assert data["email"] == firebase_user.email
    assert data["name"] == "coffee.fan"
    assert data["coffee_preferences"] is None


@pytest.mark.asyncio
async def test_put_profile_normalizes_mixed_inputs(
    client: AsyncClient,
    test_session: AsyncSession,
    firebase_user: FirebaseUser,
):
    """Test PUT /profile with numbers, numeric strings and words."""
    response = await client.put(
        "/api/v1/profile",
        json={
            "sweetness": 12,
            "acidity": "little",
            "bitterness": " 6.5 ",
            "body": "Medium-High",
            "preferred_strength": "strong",
        },
    )

    assert response.status_code == 200
    prefs = response.json()["coffee_preferences"]
    assert prefs["sweetness"] == 10
    assert prefs["acidity"] == 3
    assert prefs["bitterness"] == 6.5
    assert prefs["body"] == 7
    assert prefs["preferred_strength"] == "strong"
    assert prefs["caffeine_sensitivity"] == "medium"

    stored = await test_session.get(UserTasteProfile, firebase_user.uid)
    assert stored.sweetness == 10
    assert stored.preference_confidence == 0.35


@pytest.mark.asyncio
async def test_put_profile_uses_stored_preferences_as_fallback(client: AsyncClient):
    """Test unusable values fall back to coffee_preferences, then to 5."""
    response = await client.put(
        "/api/v1/profile",
        json={
            "sweetness": "unknown",
            "coffee_preferences": {"sweetness": "high", "acidity": 2},
        },
    )

    assert response.status_code == 200
    prefs = response.json()["coffee_preferences"]
    assert prefs["sweetness"] == 8
    assert prefs["acidity"] == 2
    assert prefs["bitterness"] == 5
    assert prefs["body"] == 5


@pytest.mark.asyncio
async def test_put_profile_scales_taste_vector(client: AsyncClient):
    """Test the 0-1 quiz vector is used when no explicit tastes are sent."""
    response = await client.put(
        "/api/v1/profile",
        json={"taste_vector": {"sweetness": 0.7, "acidity": 0.2, "bitterness": 1.4}},
    )

    assert response.status_code == 200
    prefs = response.json()["coffee_preferences"]
    assert prefs["sweetness"] == pytest.approx(7)
    assert prefs["acidity"] == pytest.approx(2)
    assert prefs["bitterness"] == 10
    assert prefs["body"] == 5


@pytest.mark.asyncio
async def test_put_profile_ignores_vector_when_explicit_values_sent(client: AsyncClient):
    response = await client.put(
        "/api/v1/profile",
        json={"sweetness": 1, "taste_vector": {"sweetness": 0.9, "acidity": 0.9}},
    )

    assert response.status_code == 200
    prefs = response.json()["coffee_preferences"]
    assert prefs["sweetness"] == 1
    assert prefs["acidity"] == 5


@pytest.mark.asyncio
async def test_put_profile_invalid_taste_value(client: AsyncClient):
    """Test PUT /profile when neither value nor fallback resolves (400)."""
    response = await client.put(
        "/api/v1/profile",
        json={
            "acidity": "extreme",
            "coffee_preferences": {"acidity": "off the charts"},
        },
    )

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "validation_error"
    assert data["details"]["field"] == "acidity"


@pytest.mark.asyncio
async def test_put_profile_twice_updates_in_place(
    client: AsyncClient,
    firebase_user: FirebaseUser,
):
    await client.put("/api/v1/profile", json={"sweetness": 2, "manual_input": "fruity"})
    response = await client.put("/api/v1/profile", json={"sweetness": "very_high"})
    assert response.status_code == 200

    profile = (await client.get("/api/v1/profile")).json()
    assert profile["coffee_preferences"]["sweetness"] == 10
    assert profile["manual_input"] is None


@pytest.mark.asyncio
async def test_get_profile_after_update(client: AsyncClient):
    await client.put(
        "/api/v1/profile",
        json={
            "sweetness": 4,
            "ai_recommendation": "Try a washed Kenyan",
            "coffee_preferences": {"quiz_version": "v2", "quiz_answers": {"q1": "b"}},
        },
    )

    response = await client.get("/api/v1/profile")

    assert response.status_code == 200
    data = response.json()
    assert data["ai_recommendation"] == "Try a washed Kenyan"
    assert data["coffee_preferences"]["sweetness"] == 4
    assert data["coffee_preferences"]["quiz_version"] == "v2"
    assert data["coffee_preferences"]["quiz_answers"] == {"q1": "b"}


def test_normalize_dimensions_reports_failing_field():
    payload = TasteProfileUpdate(body="bottomless", coffee_preferences={"body": "??"})

    with pytest.raises(TasteValidationError) as exc_info:
        TasteProfileService.normalize_dimensions(payload)

    assert exc_info.value.field_name == "body"


@pytest.mark.asyncio
async def test_put_profile_boolean_taste_uses_fallback(client: AsyncClient):
    """Test JSON booleans are not read as numbers."""
    response = await client.put(
        "/api/v1/profile",
        json={"sweetness": True, "coffee_preferences": {"acidity": False}},
    )

    assert response.status_code == 200
    prefs = response.json()["coffee_preferences"]
    assert prefs["sweetness"] == 5
    assert prefs["acidity"] == 5


def test_update_schema_keeps_boolean_taste_as_is():
    payload = TasteProfileUpdate.model_validate({"sweetness": True, "body": "7"})

    assert payload.sweetness is True
    assert payload.body == "7"


@pytest.mark.asyncio
async def test_get_profile_reflects_current_token_identity(
    client: AsyncClient,
    test_session: AsyncSession,
    firebase_user: FirebaseUser,
):
    """Test a display name changed after provisioning is returned."""
    await client.get("/api/v1/profile")

    firebase_user.name = "Barista Jo"
    firebase_user.email = "jo@example.com"
    response = await client.get("/api/v1/profile")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Barista Jo"
    assert data["email"] == "jo@example.com"

    stored = await test_session.get(AppUser, firebase_user.uid)
    assert stored.name == "coffee.fan"


@pytest.mark.asyncio
async def test_get_profile_without_name_or_email(
    client: AsyncClient,
    firebase_user: FirebaseUser,
):
    firebase_user.email = None

    response = await client.get("/api/v1/profile")

    assert response.status_code == 200
    assert response.json()["name"] == "Coffee lover"
