"""
Tests for LeaveRequestRepository / LeaveBalanceRepository queries.
"""

from datetime import date

from sqlalchemy.orm import sessionmaker

from vacation.models import ACTIVE_STATUSES, LeaveBalance, LeaveRequest, LeaveRequestStatus, LeaveType
from vacation.repositories import LeaveBalanceRepository, LeaveRequestRepository


def _request(db_session, start, end, status=LeaveRequestStatus.SUBMITTED, employee_id=1, synced=False):
    leave = LeaveRequest(
        employee_id=employee_id,
        leave_type=LeaveType.ANNUAL,
        start_date=start,
        end_date=end,
        days=1.0,
        status=status,
        payroll_synced=synced,
    )
    db_session.add(leave)
    db_session.commit()
    return leave


class TestFindOverlapping:
    def test_adjacent_periods_do_not_overlap(self, db_session):
        _request(db_session, date(2030, 3, 4), date(2030, 3, 6))
        repo = LeaveRequestRepository(db_session)
        assert repo.find_overlapping(1, date(2030, 3, 7), date(2030, 3, 8), ACTIVE_STATUSES) is None

    def test_shared_boundary_day_overlaps(self, db_session):
        existing = _request(db_session, date(2030, 3, 4), date(2030, 3, 6))
        repo = LeaveRequestRepository(db_session)
        found = repo.find_overlapping(1, date(2030, 3, 6), date(2030, 3, 8), ACTIVE_STATUSES)
        assert found.id == existing.id

    def test_enclosing_period_overlaps(self, db_session):
        _request(db_session, date(2030, 3, 5), date(2030, 3, 5))
        repo = LeaveRequestRepository(db_session)
        assert repo.find_overlapping(1, date(2030, 3, 1), date(2030, 3, 31), ACTIVE_STATUSES) is not None

    def test_inactive_statuses_are_ignored(self, db_session):
        _request(db_session, date(2030, 3, 4), date(2030, 3, 6), status=LeaveRequestStatus.REJECTED)
        _request(db_session, date(2030, 3, 4), date(2030, 3, 6), status=LeaveRequestStatus.CANCELLED)
        repo = LeaveRequestRepository(db_session)
        assert repo.find_overlapping(1, date(2030, 3, 4), date(2030, 3, 6), ACTIVE_STATUSES) is None


class TestConsumptionQueries:
    def test_approved_ended_before(self, db_session):
        done = _request(db_session, date(2030, 3, 4), date(2030, 3, 5), status=LeaveRequestStatus.APPROVED)
        _request(db_session, date(2030, 3, 6), date(2030, 3, 8), status=LeaveRequestStatus.APPROVED)
        repo = LeaveRequestRepository(db_session)
        assert [r.id for r in repo.find_approved_ended_before(date(2030, 3, 6))] == [done.id]

    def test_unsynced_consumed(self, db_session):
        pending = _request(db_session, date(2030, 3, 4), date(2030, 3, 4), status=LeaveRequestStatus.CONSUMED)
        _request(db_session, date(2030, 3, 5), date(2030, 3, 5), status=LeaveRequestStatus.CONSUMED, synced=True)
        repo = LeaveRequestRepository(db_session)
        assert [r.id for r in repo.find_unsynced_consumed()] == [pending.id]


class TestBalanceRepository:
    def test_find_one_and_for_employee(self, db_session):
        repo = LeaveBalanceRepository(db_session)
        repo.save_all([
            LeaveBalance(employee_id=1, year=2029, leave_type=LeaveType.ANNUAL, granted_days=15.0,
                         used_days=0.0, pending_days=0.0, carried_over_days=0.0),
            LeaveBalance(employee_id=1, year=2030, leave_type=LeaveType.SICK, granted_days=10.0,
                         used_days=0.0, pending_days=0.0, carried_over_days=0.0),
        ])
        repo.commit()

        assert repo.find_one(1, 2030, LeaveType.SICK).granted_days == 10.0
        assert repo.find_one(1, 2030, LeaveType.ANNUAL) is None
        assert len(repo.find_for_employee(1)) == 2
        assert len(repo.find_for_employee(1, 2030)) == 1
        assert repo.count() == 2


def _annual(db_session, granted=5.0, used=0.0, pending=0.0, carried=0.0):
    balance = LeaveBalance(
        employee_id=1, year=2030, leave_type=LeaveType.ANNUAL,
        granted_days=granted, used_days=used, pending_days=pending, carried_over_days=carried,
    )
    db_session.add(balance)
    db_session.commit()
    return balance


class TestBalanceUpdates:
    def test_reserve_within_available(self, db_session):
        balance = _annual(db_session, granted=5.0, used=1.0)
        repo = LeaveBalanceRepository(db_session)

        assert repo.reserve(balance, 4.0) is True
        assert repo.reserve(balance, 0.5) is False
        repo.commit()

        assert balance.pending_days == 4.0
        assert balance.available_days == 0.0

    def test_reserve_sees_changes_made_elsewhere(self, db_engine, db_session):
        balance = _annual(db_session, granted=5.0)
        assert balance.available_days == 5.0

        with sessionmaker(bind=db_engine)() as other:
            LeaveBalanceRepository(other).reserve(other.get(LeaveBalance, balance.id), 3.0)
            other.commit()

        # the in-memory copy still says 5 available
        assert LeaveBalanceRepository(db_session).reserve(balance, 3.0) is False
        assert balance.pending_days == 3.0

    def test_adjust_adds_to_stored_values(self, db_session):
        balance = _annual(db_session, granted=10.0, pending=4.0)
        repo = LeaveBalanceRepository(db_session)

        repo.adjust(balance, pending=-4.0, used=4.0)
        repo.commit()

        assert balance.pending_days == 0.0
        assert balance.used_days == 4.0

    def test_regrant_respects_committed_days(self, db_session):
        balance = _annual(db_session, granted=10.0, used=2.0, pending=3.0, carried=4.0)
        repo = LeaveBalanceRepository(db_session)

        assert repo.regrant(balance, 4.0) is False
        assert balance.granted_days == 10.0

        assert repo.regrant(balance, 5.0) is True
        assert balance.granted_days == 5.0
        assert balance.carried_over_days == 4.0

    def test_regrant_caps_carried_over(self, db_session):
        balance = _annual(db_session, granted=10.0, carried=5.0)
        LeaveBalanceRepository(db_session).regrant(balance, 2.0)
        assert balance.carried_over_days == 2.0


class TestTransition:
    def test_moves_from_loaded_status(self, db_session):
        leave = _request(db_session, date(2030, 3, 4), date(2030, 3, 4))
        repo = LeaveRequestRepository(db_session)

        assert repo.transition(leave, LeaveRequestStatus.APPROVED, approver_id=10) is True
        assert leave.status == LeaveRequestStatus.APPROVED
        assert leave.approver_id == 10

    def test_stale_status_is_not_overwritten(self, db_engine, db_session):
        leave = _request(db_session, date(2030, 3, 4), date(2030, 3, 4))
        assert leave.status == LeaveRequestStatus.SUBMITTED

        with sessionmaker(bind=db_engine)() as other:
            other_repo = LeaveRequestRepository(other)
            assert other_repo.transition(other.get(LeaveRequest, leave.id), LeaveRequestStatus.CANCELLED)
            other.commit()

        assert LeaveRequestRepository(db_session).transition(leave, LeaveRequestStatus.APPROVED) is False
        assert leave.status == LeaveRequestStatus.CANCELLED
