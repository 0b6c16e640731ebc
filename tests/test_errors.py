import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError

from spotrate.core.deadline import Deadline, DeadlineExceeded
from spotrate.core.errors import (
    AggregationError,
    ConflictError,
    ErrorKind,
    NotFoundError,
    TransientError,
    UnknownRepositoryError,
    classify_error,
    error_kind,
)
from spotrate.services.retry import is_retryable, run_with_retry


def test_classify_maps_sqlalchemy_errors_by_type():
    assert isinstance(classify_error(NoResultFound(), operation="x"), NotFoundError)
    assert isinstance(classify_error(IntegrityError("INSERT", {}, Exception("dup"))), ConflictError)
    assert isinstance(classify_error(OperationalError("SELECT", {}, Exception("gone"))), TransientError)
    assert isinstance(classify_error(RuntimeError("boom")), UnknownRepositoryError)


def test_classify_ignores_message_text():
    # Wording that used to be string-matched must not decide the kind.
    assert classify_error(RuntimeError("record not found")).kind is ErrorKind.unknown


def test_classified_errors_pass_through_and_keep_operation():
    err = NotFoundError("missing", operation="spots.get_by_id")
    assert classify_error(err) is err
    assert classify_error(OperationalError("x", {}, Exception()), operation="reviews.create").operation == "reviews.create"


def test_error_kind_follows_cause_chain():
    try:
        try:
            raise TransientError("lost connection")
        except TransientError as e:
            raise AggregationError("read", "spot-1", "reviews") from e
    except AggregationError as agg:
        assert agg.kind is ErrorKind.transient
        assert error_kind(agg) is ErrorKind.transient
        assert agg.step == "read"

    assert error_kind(ValueError("plain")) is ErrorKind.unknown


def test_deadline_check_raises_transient():
    deadline = Deadline(0)
    assert deadline.expired
    with pytest.raises(DeadlineExceeded) as exc_info:
        deadline.check("reviews.create")
    assert exc_info.value.kind is ErrorKind.transient


def test_retry_repeats_only_transient_failures():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise TransientError("try again")
        return "done"

    assert run_with_retry(flaky, attempts=3) == "done"
    assert len(calls) == 3


def test_retry_does_not_repeat_conflicts_or_expired_deadlines():
    calls = []

    def conflict():
        calls.append(1)
        raise ConflictError("dup")

    with pytest.raises(ConflictError):
        run_with_retry(conflict, attempts=5)
    assert len(calls) == 1

    assert not is_retryable(DeadlineExceeded("late"))
    assert is_retryable(TransientError("blip"))
