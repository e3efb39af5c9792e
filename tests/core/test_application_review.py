"""Application Review Rules — tests for the pure CA state machine."""

import pytest

from campus_api.core.application_review import (
    check_transition, normalize_statement, role_after_review,
)
from campus_api.core.domain_types import ApplicationStatus, Role
from campus_api.core.errors import ConflictError, RequestValidationFailed


# ─── normalize_statement ─────────────────────────────────────────

def test_normalize_statement_trims():
    assert normalize_statement("  I organise events  ") == "I organise events"


@pytest.mark.parametrize("statement", [None, "", "   \n\t"])
def test_normalize_statement_rejects_blank(statement):
    with pytest.raises(RequestValidationFailed) as exc:
        normalize_statement(statement)
    assert exc.value.message == "Application statement is required"
    assert exc.value.http_status == 400


# ─── check_transition ────────────────────────────────────────────

@pytest.mark.parametrize(
    "target", [ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED],
)
def test_pending_can_be_reviewed(target):
    check_transition("pending", target)


@pytest.mark.parametrize("current", ["accepted", "rejected"])
@pytest.mark.parametrize(
    "target", [ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED],
)
def test_terminal_states_name_current_status(current, target):
    with pytest.raises(ConflictError) as exc:
        check_transition(current, target)
    assert exc.value.message == f"Application already {current}"


def test_cannot_move_back_to_pending():
    with pytest.raises(ConflictError):
        check_transition("pending", ApplicationStatus.PENDING)


# ─── role_after_review ───────────────────────────────────────────

def test_acceptance_promotes_to_ca():
    assert role_after_review(ApplicationStatus.ACCEPTED, "user") is Role.CA


def test_rejection_keeps_role():
    assert role_after_review(ApplicationStatus.REJECTED, "user") is None


def test_acceptance_of_existing_ca_is_not_a_role_change():
    assert role_after_review(ApplicationStatus.ACCEPTED, "ca") is None
