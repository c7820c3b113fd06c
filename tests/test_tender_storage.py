import json
import uuid

import pytest

from database.connection import get_db_context
from database.models import User
from schemas.tender import CategoryScore
from services.evaluation import evaluate_category, finalize_bidder
from services.tender_storage import get_tender_storage, project_ref_no, tender_ref_no
from workers.evaluation import run_category_evaluation_job

from factories import FakeEvaluator


async def create_owner(email="owner@example.com") -> str:
    async with get_db_context() as db:
        user = User(email=email, password_hash="x")
        db.add(user)
        await db.commit()
        return str(user.id)


async def create_tender(storage, weights=(("Technical", 60), ("Commercial", 40))):
    project = await storage.create_project(name="Tower")
    tender = await storage.create_tender(project.id, name="Main Works")
    for name, weight in weights:
        await storage.add_category(tender.id, name=name, weight=weight)
    return await storage.get_tender_by_id(tender.id)


class FakeRedis:
    def __init__(self):
        self.hashes = {}

    async def hset(self, key, mapping):
        self.hashes.setdefault(key, {}).update(mapping)

    async def expire(self, key, seconds):
        pass


def test_reference_numbers():
    project_id = uuid.UUID("abcdef12-0000-0000-0000-000000000000")
    tender_id = uuid.UUID("9f8e7d6c-0000-0000-0000-000000000000")

    assert project_ref_no(project_id, 2026) == "PRJ-2026-ABCD"
    assert tender_ref_no("PRJ-2026-ABCD", tender_id) == "PRJ-2026-ABCD-TND-9F8"


@pytest.mark.asyncio
async def test_tender_lookups_are_indexed(db):
    storage = get_tender_storage(await create_owner())
    tender = await create_tender(storage)
    bidder = await storage.add_bidder(tender.id, name="Atlas")
    tender = await storage.get_tender_by_id(tender.id)

    technical = tender.categories[0]
    assert tender.get_category(technical.id) == technical
    assert tender.get_bidder(bidder.id).name == "Atlas"
    assert tender.get_bidder("missing") is None


@pytest.mark.asyncio
async def test_storage_is_owner_scoped(db):
    owner = get_tender_storage(await create_owner())
    stranger = get_tender_storage(await create_owner("stranger@example.com"))
    tender = await create_tender(owner)
    bidder = await owner.add_bidder(tender.id, name="Atlas")

    assert await stranger.get_tender_by_id(tender.id) is None
    assert await stranger.get_bidder_by_id(bidder.id) is None
    assert await stranger.list_projects() == []
    assert await stranger.create_tender(tender.project_id, name="Sneaky") is None


@pytest.mark.asyncio
async def test_invalid_ids_resolve_to_none(db):
    storage = get_tender_storage(await create_owner())

    assert await storage.get_tender_by_id("not-a-uuid") is None
    assert await storage.get_project_by_id("not-a-uuid") is None


@pytest.mark.asyncio
async def test_category_scores_are_upserted(db):
    storage = get_tender_storage(await create_owner())
    tender = await create_tender(storage)
    bidder = await storage.add_bidder(tender.id, name="Atlas")
    technical = tender.categories[0].id

    await storage.save_category_score(bidder.id, technical, CategoryScore(score=50))
    await storage.save_category_score(bidder.id, technical, CategoryScore(score=75, risks=["late"]))

    stored = (await storage.get_bidder_by_id(bidder.id)).category_scores
    assert list(stored) == [technical]
    assert stored[technical].score == 75
    assert stored[technical].risks == ["late"]


@pytest.mark.asyncio
async def test_evaluation_replaces_previous_one(db):
    storage = get_tender_storage(await create_owner())
    tender = await create_tender(storage)
    bidder = await storage.add_bidder(tender.id, name="Atlas")
    technical, commercial = (category.id for category in tender.categories)

    await storage.save_category_scores(technical, {bidder.id: CategoryScore(score=80)})
    await storage.save_category_scores(commercial, {bidder.id: CategoryScore(score=60)})
    first = await finalize_bidder(storage, await storage.get_tender_by_id(tender.id), bidder.id)

    await storage.save_category_scores(commercial, {bidder.id: CategoryScore(score=100)})
    second = await finalize_bidder(storage, await storage.get_tender_by_id(tender.id), bidder.id)

    assert first.overall_score == 72
    assert second.overall_score == 88
    stored = await storage.get_bidder_evaluation(bidder.id)
    assert stored.overall_score == 88
    assert stored.category_scores[commercial].score == 100


@pytest.mark.asyncio
async def test_finalize_unknown_bidder(db):
    storage = get_tender_storage(await create_owner())
    tender = await create_tender(storage)

    with pytest.raises(KeyError):
        await finalize_bidder(storage, tender, "missing")


@pytest.mark.asyncio
async def test_evaluate_category_without_submissions(db):
    storage = get_tender_storage(await create_owner())
    tender = await create_tender(storage)
    bidder = await storage.add_bidder(tender.id, name="Atlas")
    tender = await storage.get_tender_by_id(tender.id)
    evaluator = FakeEvaluator()

    outcome = await evaluate_category(storage, evaluator, tender, tender.categories[0])

    assert outcome.scores == {}
    assert outcome.skipped == [bidder.id]
    assert evaluator.calls == []


@pytest.mark.asyncio
async def test_category_evaluation_job(db, monkeypatch):
    import services.evaluator

    owner_id = await create_owner()
    storage = get_tender_storage(owner_id)
    tender = await create_tender(storage)
    bidder = await storage.add_bidder(tender.id, name="Atlas")
    technical = tender.categories[0]
    await storage.add_bidder_document(bidder.id, technical.id, "plan.pdf", "http://files/plan.pdf")

    evaluator = FakeEvaluator()
    evaluator.set_scores("Technical", {bidder.id: 77})
    monkeypatch.setattr(services.evaluator, "get_evaluator", lambda: evaluator)
    redis = FakeRedis()

    result = await run_category_evaluation_job(
        {"redis": redis}, "job-1", tender.id, technical.id, owner_id
    )

    assert result["status"] == "completed"
    job = redis.hashes["job:job-1"]
    assert job["status"] == "completed"
    assert json.loads(job["result"])["scores"][bidder.id]["score"] == 77
    stored = await storage.get_bidder_by_id(bidder.id)
    assert stored.category_scores[technical.id].score == 77


@pytest.mark.asyncio
async def test_category_evaluation_job_unknown_category(db):
    owner_id = await create_owner()
    tender = await create_tender(get_tender_storage(owner_id))
    redis = FakeRedis()

    result = await run_category_evaluation_job(
        {"redis": redis}, "job-2", tender.id, str(uuid.uuid4()), owner_id
    )

    assert result["status"] == "failed"
    assert redis.hashes["job:job-2"]["error"] == "Category not found"


@pytest.mark.asyncio
async def test_category_evaluation_job_records_unexpected_errors(db, monkeypatch):
    import services.evaluator

    owner_id = await create_owner()
    storage = get_tender_storage(owner_id)
    tender = await create_tender(storage)
    bidder = await storage.add_bidder(tender.id, name="Atlas")
    technical = tender.categories[0]
    await storage.add_bidder_document(bidder.id, technical.id, "plan.pdf", "http://files/plan.pdf")

    evaluator = FakeEvaluator()
    evaluator.error = RuntimeError("connection reset")
    monkeypatch.setattr(services.evaluator, "get_evaluator", lambda: evaluator)
    redis = FakeRedis()

    result = await run_category_evaluation_job(
        {"redis": redis}, "job-3", tender.id, technical.id, owner_id
    )

    assert result == {"status": "failed", "error": "connection reset"}
    job = redis.hashes["job:job-3"]
    assert job["status"] == "failed"
    assert "connection reset" in job["error"]
    stored = await storage.get_bidder_by_id(bidder.id)
    assert stored.category_scores == {}
