import pytest
from sqlalchemy.exc import IntegrityError

from solidaria.core.enums import CollaboratorRole, CollaboratorStatus
from solidaria.core.exceptions import (
    Conflict,
    DuplicateRequest,
    Forbidden,
    KermesseNotFound,
    RequestAlreadyResolved,
    RequestNotFound,
    ValidationError,
)
from solidaria.models import Collaborator
from solidaria.services.collaboration import (
    list_collaborators,
    list_pending_requests,
    request_collaboration,
    resolve_request,
)


@pytest.fixture
def volunteer(make_user):
    return make_user("volunteer", full_name="Vera Volunteer", phone="71234567")


def test_request_starts_pending_without_role(db, kermesse, volunteer):
    collaborator = request_collaboration(db, kermesse.id, volunteer.id, CollaboratorRole.KITCHEN)

    assert collaborator.status == CollaboratorStatus.PENDING
    assert collaborator.role == ""
    assert collaborator.proposed_role == "KITCHEN"


def test_request_for_unknown_kermesse(db, volunteer):
    with pytest.raises(KermesseNotFound):
        request_collaboration(db, 404, volunteer.id, "SELLER")


def test_unknown_role_is_rejected(db, kermesse, volunteer):
    with pytest.raises(ValidationError):
        request_collaboration(db, kermesse.id, volunteer.id, "JUGGLER")


def test_duplicate_request_while_pending(db, kermesse, volunteer):
    request_collaboration(db, kermesse.id, volunteer.id, "SELLER")

    with pytest.raises(DuplicateRequest) as exc_info:
        request_collaboration(db, kermesse.id, volunteer.id, "KITCHEN")

    assert isinstance(exc_info.value, Conflict)
    assert db.query(Collaborator).count() == 1


def test_duplicate_request_after_acceptance(db, kermesse, organizer, volunteer):
    pending = request_collaboration(db, kermesse.id, volunteer.id, "SELLER")
    resolve_request(db, kermesse.id, pending.id, organizer.id, approve=True)

    with pytest.raises(DuplicateRequest):
        request_collaboration(db, kermesse.id, volunteer.id, "DELIVERY")


def test_rejected_user_may_ask_again(db, kermesse, organizer, volunteer):
    pending = request_collaboration(db, kermesse.id, volunteer.id, "SELLER")
    resolve_request(db, kermesse.id, pending.id, organizer.id, approve=False)

    again = request_collaboration(db, kermesse.id, volunteer.id, "KITCHEN")

    assert again.id != pending.id
    assert again.status == CollaboratorStatus.PENDING


def test_store_rejects_second_active_row(db, kermesse, volunteer):
    request_collaboration(db, kermesse.id, volunteer.id, "SELLER")

    # Simulates a concurrent request that skipped the existence check
    db.add(
        Collaborator(
            kermesse_id=kermesse.id,
            user_id=volunteer.id,
            status=CollaboratorStatus.PENDING.value,
            proposed_role="KITCHEN",
            role="",
        )
    )

    with pytest.raises(IntegrityError):
        db.commit()

    db.rollback()


def test_list_pending_requests(db, kermesse, organizer, volunteer, make_user):
    other = make_user("cook", full_name="Carla Cook")
    request_collaboration(db, kermesse.id, volunteer.id, "SELLER")
    accepted = request_collaboration(db, kermesse.id, other.id, "KITCHEN")
    resolve_request(db, kermesse.id, accepted.id, organizer.id, approve=True)

    pending = list_pending_requests(db, kermesse.id, organizer.id)

    assert len(pending) == 1
    assert pending[0].username == "volunteer"
    assert pending[0].full_name == "Vera Volunteer"
    assert pending[0].proposed_role == "SELLER"
    assert pending[0].status == "PENDING"


def test_only_organizer_lists_requests(db, kermesse, volunteer):
    with pytest.raises(Forbidden):
        list_pending_requests(db, kermesse.id, volunteer.id)


def test_organizer_approves_with_role(db, kermesse, organizer, volunteer):
    pending = request_collaboration(db, kermesse.id, volunteer.id, "KITCHEN")

    resolved = resolve_request(
        db,
        kermesse.id,
        pending.id,
        organizer.id,
        approve=True,
        assigned_role=CollaboratorRole.SELLER,
    )

    assert resolved.status == CollaboratorStatus.ACCEPTED
    assert resolved.role == "SELLER"


def test_non_organizer_cannot_resolve(db, kermesse, volunteer, make_user):
    intruder = make_user("intruder")
    pending = request_collaboration(db, kermesse.id, volunteer.id, "KITCHEN")

    with pytest.raises(Forbidden):
        resolve_request(db, kermesse.id, pending.id, intruder.id, approve=True, assigned_role="SELLER")

    db.expire_all()
    assert db.get(Collaborator, pending.id).status == CollaboratorStatus.PENDING


def test_approve_defaults_to_collaborator_role(db, kermesse, organizer, volunteer):
    pending = request_collaboration(db, kermesse.id, volunteer.id, "DELIVERY")

    resolved = resolve_request(db, kermesse.id, pending.id, organizer.id, approve=True)

    assert resolved.role == "COLLABORATOR"


def test_reject_keeps_role_empty(db, kermesse, organizer, volunteer):
    pending = request_collaboration(db, kermesse.id, volunteer.id, "DELIVERY")

    resolved = resolve_request(
        db, kermesse.id, pending.id, organizer.id, approve=False, assigned_role="SELLER"
    )

    assert resolved.status == CollaboratorStatus.REJECTED
    assert resolved.role == ""


@pytest.mark.parametrize("first_decision", [True, False])
def test_resolved_requests_are_terminal(db, kermesse, organizer, volunteer, first_decision):
    pending = request_collaboration(db, kermesse.id, volunteer.id, "SELLER")
    first = resolve_request(
        db, kermesse.id, pending.id, organizer.id, approve=first_decision, assigned_role="SELLER"
    )
    first_state = (first.status, first.role)

    with pytest.raises(RequestAlreadyResolved):
        resolve_request(
            db, kermesse.id, pending.id, organizer.id, approve=not first_decision, assigned_role="KITCHEN"
        )

    db.expire_all()
    row = db.get(Collaborator, pending.id)
    assert (row.status, row.role) == first_state


def test_request_from_another_kermesse_is_not_found(db, kermesse, organizer, volunteer, make_kermesse):
    other = make_kermesse(organizer, name="Second Event")
    pending = request_collaboration(db, other.id, volunteer.id, "SELLER")

    with pytest.raises(RequestNotFound):
        resolve_request(db, kermesse.id, pending.id, organizer.id, approve=True)

    with pytest.raises(RequestNotFound):
        resolve_request(db, kermesse.id, 9999, organizer.id, approve=True)


def test_assigned_role_cannot_be_overwritten(db, kermesse, organizer, volunteer):
    pending = request_collaboration(db, kermesse.id, volunteer.id, "SELLER")
    accepted = resolve_request(db, kermesse.id, pending.id, organizer.id, approve=True, assigned_role="SELLER")

    with pytest.raises(ValueError):
        accepted.role = "KITCHEN"


def test_list_collaborators_shows_accepted_only(db, kermesse, organizer, volunteer, make_user):
    waiting = make_user("waiting")
    accepted = request_collaboration(db, kermesse.id, volunteer.id, "SELLER")
    resolve_request(db, kermesse.id, accepted.id, organizer.id, approve=True, assigned_role="SELLER")
    request_collaboration(db, kermesse.id, waiting.id, "KITCHEN")

    collaborators = list_collaborators(db, kermesse.id)

    assert [(c.username, c.role, c.phone) for c in collaborators] == [
        ("volunteer", "SELLER", "71234567")
    ]
