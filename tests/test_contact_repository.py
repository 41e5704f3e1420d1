from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError

from conftest import SteppingClock
from contact_api.core.exceptions import (
    ContactNotFoundError,
    InvalidStatusError,
    PersistenceError,
    RecordValidationError,
)
from contact_api.models.contact import ContactStatus, ContactSubmission
from contact_api.services.database.contact_repository import ContactRepository


@pytest.fixture
def repository(db_session):
    return ContactRepository(db_session, clock=SteppingClock())


def make_contact(repository, index=0, **overrides):
    fields = {
        "name": f"Person {index}",
        "email": f"person{index}@example.com",
        "message": f"Message {index}",
        "ip_address": "127.0.0.1",
        "user_agent": "pytest",
    }
    fields.update(overrides)
    return repository.create(**fields)


def test_create_assigns_id_timestamp_and_unread(repository):
    contact = make_contact(repository)
    assert contact.id
    assert contact.created_at is not None
    assert contact.status == ContactStatus.UNREAD
    assert contact.user_agent == "pytest"


def test_ids_are_unique(repository):
    ids = {make_contact(repository, i).id for i in range(10)}
    assert len(ids) == 10


def test_missing_user_agent_defaults_to_unknown(repository):
    contact = make_contact(repository, user_agent=None)
    assert contact.user_agent == "Unknown"


def test_create_rechecks_constraints(repository, db_session):
    with pytest.raises(RecordValidationError) as exc_info:
        make_contact(repository, name="x" * 101, email="not-an-email", ip_address="")
    assert exc_info.value.errors == [
        "Name cannot exceed 100 characters",
        "Please enter a valid email",
        "Client address is required",
    ]
    assert db_session.query(ContactSubmission).count() == 0


def test_storage_failure_becomes_persistence_error(repository, db_session):
    with mock.patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
        with pytest.raises(PersistenceError):
            make_contact(repository)
    assert db_session.query(ContactSubmission).count() == 0


def test_list_pages_newest_first(repository):
    created = [make_contact(repository, i) for i in range(25)]

    page = repository.list(page=2, page_size=10)

    newest_first = list(reversed(created))
    assert [c.id for c in page.items] == [c.id for c in newest_first[10:20]]
    assert page.total == 25
    assert page.pages == 3


def test_list_defaults(repository):
    for i in range(12):
        make_contact(repository, i)
    page = repository.list()
    assert page.page == 1
    assert page.page_size == 10
    assert len(page.items) == 10


def test_list_filters_by_status(repository):
    first = make_contact(repository, 1)
    make_contact(repository, 2)
    repository.update_status(first.id, "read")

    assert [c.id for c in repository.list(status="read").items] == [first.id]
    assert len(repository.list(status="unread").items) == 1
    assert repository.list(status="all").total == 2


def test_list_rejects_unknown_status_filter(repository):
    with pytest.raises(InvalidStatusError):
        repository.list(status="archived")


def test_list_of_empty_store(repository):
    page = repository.list()
    assert page.items == []
    assert page.total == 0
    assert page.pages == 0


def test_status_transitions_are_unconstrained(repository):
    contact = make_contact(repository)
    for status in ("replied", "unread", "read", "read"):
        assert repository.update_status(contact.id, status).status == ContactStatus(status)


def test_update_status_errors(repository):
    contact = make_contact(repository)
    with pytest.raises(ContactNotFoundError):
        repository.update_status("missing-id", "read")
    with pytest.raises(InvalidStatusError):
        repository.update_status(contact.id, "bogus")
    assert repository.get(contact.id).status == ContactStatus.UNREAD


def test_delete_is_irrevocable(repository):
    contact = make_contact(repository)
    repository.delete(contact.id)

    with pytest.raises(ContactNotFoundError):
        repository.get(contact.id)
    with pytest.raises(ContactNotFoundError):
        repository.delete(contact.id)
    with pytest.raises(ContactNotFoundError):
        repository.update_status(contact.id, "read")
    assert repository.list().total == 0


def test_created_at_comes_back_as_utc(repository, db_session):
    contact = make_contact(repository)
    db_session.expire_all()
    reloaded = repository.get(contact.id)
    assert reloaded.created_at.utcoffset() == timedelta(0)
    assert reloaded.created_at == datetime(2026, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
