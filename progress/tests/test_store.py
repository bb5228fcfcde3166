import pytest

from coursetrack.exceptions import AuthError, StorageError, ValidationError
from learners.models import Learner
from learners.services import IdentityIssuer
from progress.models import Draft, TaskProgress
from progress.services import ProgressStore, validate_task_id


@pytest.fixture
def store():
    return ProgressStore()


@pytest.fixture
def learner_id(db):
    return IdentityIssuer().register("carol").learner_id


def test_validate_task_id_bounds(settings):
    settings.COURSE_TASK_COUNT = 19
    assert validate_task_id(1) == 1
    assert validate_task_id(19) == 19
    for bad in (0, 20, True, "3"):
        with pytest.raises(ValidationError):
            validate_task_id(bad)


def test_drafts_are_per_task(store, learner_id):
    store.save_draft(learner_id, 1, "one")
    store.save_draft(learner_id, 2, "two")
    assert store.load_draft(learner_id, 1) == "one"
    assert store.load_draft(learner_id, 2) == "two"
    assert store.load_draft(learner_id, 3) == ""


def test_completion_is_never_reverted(store, learner_id):
    store.complete_task(learner_id, 4)
    store.save_draft(learner_id, 4, "edited after completion")
    store.complete_task(learner_id, 4)
    assert TaskProgress.objects.get(learner_id=learner_id, task_id=4).completed is True
    assert store.get_progress(learner_id).entries == [{"task_id": 4, "completed": True}]


def test_snapshot_response_shape(store, learner_id):
    store.set_last_task(learner_id, 3)
    store.complete_task(learner_id, 2)
    assert store.get_progress(learner_id).as_response() == {
        "username": "carol",
        "lastTask": 3,
        "progress": [{"task_id": 2, "completed": True}],
    }


@pytest.mark.django_db
def test_unknown_or_malformed_learner_id(store):
    with pytest.raises(AuthError):
        store.load_draft("7d2f2c6e-55a8-4c1e-9a55-8a3c1f0e9b11", 1)
    with pytest.raises(AuthError):
        store.get_progress("not-a-uuid")


@pytest.mark.django_db(transaction=True)
def test_write_for_learner_deleted_mid_request_is_storage_error(store, monkeypatch):
    learner = Learner.objects.create(username="dave")
    Learner.objects.filter(pk=learner.pk).delete()
    monkeypatch.setattr(store, "_learner", lambda learner_id: learner)

    with pytest.raises(StorageError):
        store.save_draft(learner.pk, 1, "orphan")
    with pytest.raises(StorageError):
        store.complete_task(learner.pk, 1)
    assert not Draft.objects.exists()
    assert not TaskProgress.objects.exists()
