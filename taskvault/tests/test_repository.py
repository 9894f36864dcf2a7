# tests/test_repository.py
from datetime import date

def test_owner_ids_are_distinct(repo):
    repo.create("owner-a", "one")
    repo.create("owner-a", "two")
    repo.create("owner-b", "three")
    assert sorted(repo.iter_owner_ids()) == ["owner-a", "owner-b"]

def test_empty_store_has_no_owners(repo):
    assert list(repo.iter_owner_ids()) == []

def test_create_defaults(repo):
    t = repo.create("owner-a", "Write report", due_date=date(2026, 11, 1), tags=["work"])
    assert t.id is not None
    assert t.priority == "medium"
    assert t.completed is False
    assert t.completed_at is None
    assert t.created_at is not None
    assert t.tags == ["work"]

def test_find_is_scoped_and_ordered(repo):
    repo.create("owner-a", "low one", priority="low")
    repo.create("owner-a", "high one", priority="high")
    done = repo.create("owner-a", "done high", priority="high")
    repo.complete("owner-a", task_id=done.id)
    repo.create("owner-b", "someone else", priority="high")
    titles = [t.title for t in repo.find("owner-a")]
    assert titles == ["high one", "low one", "done high"]

def test_find_filters(repo):
    repo.create("owner-a", "a", priority="low", tags=["home"])
    b = repo.create("owner-a", "b", priority="high", tags=["work", "urgent"])
    repo.complete("owner-a", task_id=b.id)
    assert [t.title for t in repo.find("owner-a", status="pending")] == ["a"]
    assert [t.title for t in repo.find("owner-a", status="completed")] == ["b"]
    assert [t.title for t in repo.find("owner-a", priority="low")] == ["a"]
    assert [t.title for t in repo.find("owner-a", tag="urgent")] == ["b"]
    assert repo.find("owner-a", tag="missing") == []

def test_counts(repo):
    repo.create("owner-a", "a")
    b = repo.create("owner-a", "b")
    repo.complete("owner-a", task_id=b.id)
    assert repo.counts("owner-a") == {"total": 2, "pending": 1, "completed": 1}
    assert repo.counts("nobody") == {"total": 0, "pending": 0, "completed": 0}

def test_complete_by_partial_title(repo):
    repo.create("owner-a", "Buy Milk")
    t = repo.complete("owner-a", title="milk")
    assert t.completed is True
    assert t.completed_at is not None
    # already completed tasks are not matched again
    assert repo.complete("owner-a", title="milk") is None

def test_title_match_is_literal(repo):
    repo.create("owner-a", "100% done")
    repo.create("owner-a", "plain")
    assert repo.find_one("owner-a", title="%").title == "100% done"
    assert repo.find_one("owner-a", title="_lain") is None

def test_cannot_touch_other_owner(repo):
    t = repo.create("owner-a", "private")
    assert repo.complete("owner-b", task_id=t.id) is None
    assert repo.delete("owner-b", title="private") is None
    assert repo.counts("owner-a")["pending"] == 1

def test_delete(repo):
    t = repo.create("owner-a", "remove me")
    assert repo.delete("owner-a", task_id=t.id).title == "remove me"
    assert repo.find("owner-a") == []

def test_clear_completed(repo):
    repo.create("owner-a", "keep")
    for title in ("x", "y"):
        repo.complete("owner-a", task_id=repo.create("owner-a", title).id)
    done_b = repo.create("owner-b", "other")
    repo.complete("owner-b", task_id=done_b.id)
    assert repo.clear_completed("owner-a") == 2
    assert [t.title for t in repo.find("owner-a")] == ["keep"]
    assert repo.counts("owner-b")["completed"] == 1

def test_lookup_needs_id_or_title(repo):
    repo.create("owner-a", "anything")
    assert repo.find_one("owner-a") is None
