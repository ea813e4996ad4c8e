"""Unit tests for WorkoutService and total volume derivation."""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from common.utils.exceptions import NotFoundException
from fittrack.services.workout.workout_service import WorkoutService, compute_total_volume


@pytest.fixture
def workout_service(fake_db):
    return WorkoutService(fake_db)


@pytest.fixture
def bench_press():
    return {
        "name": "Bench Press",
        "category": "chest",
        "sets": [{"reps": 10, "weight": 50}, {"reps": 8, "weight": 55}],
    }


# ─────────────────────────────────────────────────────────────────
# compute_total_volume
# ─────────────────────────────────────────────────────────────────


class TestComputeTotalVolume:
    def test_sums_weight_times_reps(self, bench_press):
        assert compute_total_volume([bench_press]) == 940

    def test_missing_values_count_as_zero(self):
        exercises = [
            {"name": "Plank", "sets": [{"duration": 60}]},
            {"name": "Push Up", "sets": [{"reps": 20}, {"reps": 15, "weight": None}]},
            {"name": "Squat", "sets": [{"reps": 5, "weight": 100}]},
        ]
        assert compute_total_volume(exercises) == 500

    @pytest.mark.parametrize("exercises", [None, [], [{"name": "Empty", "sets": []}]])
    def test_nothing_to_sum(self, exercises):
        assert compute_total_volume(exercises) == 0


# ─────────────────────────────────────────────────────────────────
# CRUD
# ─────────────────────────────────────────────────────────────────


class TestCreateWorkout:
    @pytest.mark.asyncio
    async def test_stores_computed_volume(self, workout_service, fake_db, sample_user_id, bench_press):
        workout = await workout_service.create_workout(
            sample_user_id, {"name": "Push Day", "exercises": [bench_press]}
        )

        assert workout["totalVolume"] == 940
        assert workout["userId"] == sample_user_id
        assert fake_db["workouts"].docs[0]["totalVolume"] == 940
        assert fake_db["workouts"].docs[0]["userId"] == ObjectId(sample_user_id)

    @pytest.mark.asyncio
    async def test_ignores_client_total_volume(self, workout_service, sample_user_id, bench_press):
        workout = await workout_service.create_workout(
            sample_user_id,
            {"name": "Push Day", "exercises": [bench_press], "totalVolume": 99999},
        )
        assert workout["totalVolume"] == 940


class TestReadAndUpdate:
    @pytest.mark.asyncio
    async def test_update_recomputes_volume(self, workout_service, sample_user_id, bench_press):
        created = await workout_service.create_workout(
            sample_user_id, {"name": "Push Day", "exercises": [bench_press]}
        )

        updated = await workout_service.update_workout(
            sample_user_id,
            created["id"],
            {
                "name": "Heavier Push Day",
                "exercises": [{"name": "Bench Press", "sets": [{"reps": 5, "weight": 80}]}],
                "totalVolume": 1,
            },
        )

        assert updated["name"] == "Heavier Push Day"
        assert updated["totalVolume"] == 400

    @pytest.mark.asyncio
    async def test_list_is_newest_first_and_owned(self, workout_service, sample_user_id, bench_press):
        await workout_service.create_workout(
            sample_user_id,
            {"name": "Old", "date": datetime(2024, 1, 1, tzinfo=timezone.utc), "exercises": [bench_press]},
        )
        await workout_service.create_workout(
            sample_user_id,
            {"name": "New", "date": datetime(2024, 2, 1, tzinfo=timezone.utc), "exercises": [bench_press]},
        )
        await workout_service.create_workout(str(ObjectId()), {"name": "Theirs", "exercises": [bench_press]})

        workouts = await workout_service.list_workouts(sample_user_id)

        assert [w["name"] for w in workouts] == ["New", "Old"]

    @pytest.mark.asyncio
    async def test_other_users_workout_is_not_found(self, workout_service, sample_user_id, bench_press):
        created = await workout_service.create_workout(
            sample_user_id, {"name": "Push Day", "exercises": [bench_press]}
        )
        intruder = str(ObjectId())

        for call in (
            workout_service.get_workout(intruder, created["id"]),
            workout_service.update_workout(intruder, created["id"], {"name": "x", "exercises": []}),
            workout_service.delete_workout(intruder, created["id"]),
        ):
            with pytest.raises(NotFoundException) as exc_info:
                await call
            assert exc_info.value.code == "WORKOUT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_invalid_id_is_not_found(self, workout_service, sample_user_id):
        with pytest.raises(NotFoundException) as exc_info:
            await workout_service.get_workout(sample_user_id, "not-an-id")
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, workout_service, fake_db, sample_user_id, bench_press):
        created = await workout_service.create_workout(
            sample_user_id, {"name": "Push Day", "exercises": [bench_press]}
        )

        await workout_service.delete_workout(sample_user_id, created["id"])

        assert fake_db["workouts"].docs == []
