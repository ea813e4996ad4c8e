"""Unit tests for AccountService profile, goals, search, and deletion cascade."""

from datetime import date, datetime, timezone

import pytest
import pytest_asyncio
from bson import ObjectId

from common.utils.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from fittrack.services.user.account_service import clean_goals, serialize_account
from fittrack.services.workout.workout_service import WorkoutService


@pytest_asyncio.fixture
async def stored_user(account_service, password_hasher):
    return await account_service.create_account(
        email="  Alice@Example.com ",
        password_hash=password_hasher.hash("pw123456"),
        first_name="Alice",
        last_name="Smith",
    )


# ─────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────


class TestHelpers:
    def test_serialize_strips_hash(self, make_user_doc):
        data = serialize_account(make_user_doc(password_hash="$2b$12$secret"))

        assert "passwordHash" not in data
        assert "_id" not in data
        assert data["fullName"] == "Alice Smith"

    def test_clean_goals(self):
        goals = ["  run a 10k ", "", "   ", 42, None] + [f"goal {i}" for i in range(12)]

        cleaned = clean_goals(goals)

        assert cleaned[0] == "run a 10k"
        assert len(cleaned) == 10
        assert all(isinstance(g, str) and g for g in cleaned)


# ─────────────────────────────────────────────────────────────────
# Profile
# ─────────────────────────────────────────────────────────────────


class TestProfile:
    @pytest.mark.asyncio
    async def test_email_is_normalized(self, stored_user):
        assert stored_user["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_update_ignores_email_and_unknown_fields(self, account_service, stored_user):
        profile = await account_service.update_profile(
            str(stored_user["_id"]),
            {
                "firstName": "Alicia",
                "email": "evil@example.com",
                "role": "admin",
                "fitnessLevel": "advanced",
                "dateOfBirth": date(1990, 5, 17),
                "gender": "Female",
            },
        )

        assert profile["firstName"] == "Alicia"
        assert profile["email"] == "alice@example.com"
        assert profile["role"] == "user"
        assert profile["fitnessLevel"] == "advanced"
        assert profile["gender"] == "female"
        assert profile["dateOfBirth"] == datetime(1990, 5, 17, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value,code", [
        ("fitnessLevel", "elite", "INVALID_FITNESS_LEVEL"),
        ("units", "stones", "INVALID_UNITS"),
        ("privacy", "friends", "INVALID_PRIVACY"),
        ("gender", "robot", "INVALID_GENDER"),
        ("goals", "not a list", "INVALID_GOALS_FORMAT"),
    ])
    async def test_rejects_invalid_values(self, account_service, stored_user, field, value, code):
        with pytest.raises(BadRequestException) as exc_info:
            await account_service.update_profile(str(stored_user["_id"]), {field: value})
        assert exc_info.value.code == code

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["firstName", "fitnessLevel", "units", "goals"])
    async def test_null_for_required_field_is_rejected(
        self, account_service, stored_user, fake_db, field
    ):
        with pytest.raises(BadRequestException) as exc_info:
            await account_service.update_profile(str(stored_user["_id"]), {field: None})

        stored = fake_db["users"].docs[0]
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert stored[field] is not None

    @pytest.mark.asyncio
    async def test_empty_enum_value_is_rejected(self, account_service, stored_user):
        with pytest.raises(BadRequestException) as exc_info:
            await account_service.update_profile(str(stored_user["_id"]), {"fitnessLevel": ""})
        assert exc_info.value.code == "INVALID_FITNESS_LEVEL"

    @pytest.mark.asyncio
    async def test_null_clears_optional_field(self, account_service, stored_user, fake_db):
        user_id = str(stored_user["_id"])
        await account_service.update_profile(user_id, {"gender": "other", "avatar": "a.png"})

        profile = await account_service.update_profile(user_id, {"gender": None})

        assert "gender" not in profile
        assert profile["avatar"] == "a.png"
        assert "gender" not in fake_db["users"].docs[0]

    @pytest.mark.asyncio
    async def test_missing_user(self, account_service):
        with pytest.raises(NotFoundException) as exc_info:
            await account_service.get_profile(str(ObjectId()))
        assert exc_info.value.code == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_update_goals(self, account_service, stored_user):
        goals = await account_service.update_goals(
            str(stored_user["_id"]), ["  lose 5kg ", "", "bench 100kg"]
        )
        assert goals == ["lose 5kg", "bench 100kg"]

    @pytest.mark.asyncio
    async def test_update_goals_requires_list(self, account_service, stored_user):
        with pytest.raises(BadRequestException) as exc_info:
            await account_service.update_goals(str(stored_user["_id"]), "run")
        assert exc_info.value.code == "INVALID_GOALS_FORMAT"


# ─────────────────────────────────────────────────────────────────
# Search
# ─────────────────────────────────────────────────────────────────


class TestSearchUsers:
    @pytest.mark.asyncio
    async def test_only_public_active_others(self, account_service, stored_user, fake_db, make_user_doc):
        users = fake_db["users"]
        users.docs.append(make_user_doc(email="bob@example.com", firstName="Alina", privacy="public"))
        users.docs.append(make_user_doc(email="carl@example.com", firstName="Alibek", privacy="private"))
        users.docs.append(make_user_doc(email="dan@example.com", lastName="Alito", privacy="public", isActive=False))
        await account_service.update_profile(str(stored_user["_id"]), {"privacy": "public"})

        results = await account_service.search_users("ali", str(stored_user["_id"]))

        assert [r["firstName"] for r in results] == ["Alina"]
        assert set(results[0]) == {"id", "firstName", "lastName", "fitnessLevel", "createdAt"}

    @pytest.mark.asyncio
    async def test_query_is_regex_escaped(self, account_service, fake_db, make_user_doc, sample_user_id):
        fake_db["users"].docs.append(make_user_doc(firstName="Al.ce", privacy="public"))
        fake_db["users"].docs.append(make_user_doc(email="x@example.com", firstName="Alice", privacy="public"))

        results = await account_service.search_users("al.", sample_user_id)

        assert [r["firstName"] for r in results] == ["Al.ce"]


# ─────────────────────────────────────────────────────────────────
# Deletion
# ─────────────────────────────────────────────────────────────────


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_requires_password(self, account_service, stored_user):
        with pytest.raises(BadRequestException) as exc_info:
            await account_service.delete_account(str(stored_user["_id"]), None)
        assert exc_info.value.code == "PASSWORD_REQUIRED"

    @pytest.mark.asyncio
    async def test_rejects_wrong_password(self, account_service, stored_user, fake_db):
        with pytest.raises(UnauthorizedException) as exc_info:
            await account_service.delete_account(str(stored_user["_id"]), "wrong123")

        assert exc_info.value.code == "INVALID_PASSWORD"
        assert len(fake_db["users"].docs) == 1

    @pytest.mark.asyncio
    async def test_cascades_workouts_then_measurements_then_account(
        self, account_service, stored_user, fake_db,
    ):
        user_id = str(stored_user["_id"])
        workouts = WorkoutService(fake_db)
        await workouts.create_workout(
            user_id, {"name": "Leg Day", "exercises": [{"name": "Squat", "sets": [{"reps": 5, "weight": 100}]}]}
        )
        fake_db["measurements"].docs.append({"_id": ObjectId(), "userId": stored_user["_id"], "weight": 70})
        other = await workouts.create_workout(str(ObjectId()), {"name": "Not mine", "exercises": []})
        fake_db.log.clear()

        result = await account_service.delete_account(user_id, "pw123456")

        assert result == {"workoutsDeleted": 1, "measurementsDeleted": 1, "usersDeleted": 1}
        assert fake_db.log == [
            ("workouts", "delete_many"),
            ("measurements", "delete_many"),
            ("users", "delete_one"),
        ]
        assert await workouts.list_workouts(user_id) == []
        remaining = await workouts.list_workouts(other["userId"])
        assert [w["id"] for w in remaining] == [other["id"]]
        assert await account_service.get_by_id(user_id) is None
