"""Tests for HireSelector: the hire-data view and the contractor universe."""

from datetime import date, datetime

from compliance_kernel.domain.types import ContractorKey
from compliance_kernel.selectors.hire_selector import HireSelector, day_bounds

REVIEWED = date(2025, 11, 16)
PRIOR_REVIEWED = date(2025, 11, 9)


def test_day_bounds_is_half_open():
    start, end = day_bounds(REVIEWED)
    assert start == datetime(2025, 11, 16, 0, 0)
    assert end == datetime(2025, 11, 17, 0, 0)


class TestContractorUniverse:
    def test_hires_on_or_after_the_review_date(self, db_session, add_hires):
        add_hires(
            {"contractor_id": 100, "contractor_name": "Acme Electric"},
            {"contractor_id": 100, "contractor_name": "Acme Electric"},
            {
                "contractor_id": 200,
                "contractor_name": "Bolt Builders",
                "reviewed_date": datetime(2025, 11, 18, 8, 0),
            },
            {
                "contractor_id": 300,
                "contractor_name": "Old Timers",
                "reviewed_date": datetime(2025, 11, 15, 8, 0),
            },
        )

        universe = HireSelector(db_session).get_contractor_universe(REVIEWED)

        assert universe == [
            ContractorKey("E100", 100, "Acme Electric"),
            ContractorKey("E100", 200, "Bolt Builders"),
        ]

    def test_union_with_previous_run(self, db_session, modes, add_hires, add_prior_run):
        prior = add_prior_run(
            modes["2To1"].id,
            PRIOR_REVIEWED,
            {"contractor_id": 100, "contractor_name": "Acme Electric"},
            {"contractor_id": 900, "contractor_name": "Carry Forward Co"},
        )
        add_hires({"contractor_id": 100, "contractor_name": "Acme Electric"})

        universe = HireSelector(db_session).get_contractor_universe(REVIEWED, prior.id)

        assert universe == [
            ContractorKey("E100", 100, "Acme Electric"),
            ContractorKey("E100", 900, "Carry Forward Co"),
        ]

    def test_renamed_contractor_listed_once(
        self, db_session, modes, add_hires, add_prior_run
    ):
        prior = add_prior_run(
            modes["2To1"].id,
            PRIOR_REVIEWED,
            {"contractor_id": 100, "contractor_name": "Acme Electric Inc"},
            {"contractor_id": 900, "contractor_name": "Carry Forward Co"},
        )
        add_hires(
            {"contractor_id": 100, "contractor_name": "Acme Electrical", "ia_number": 1},
            {"contractor_id": 100, "contractor_name": "Acme Electric", "ia_number": 2},
        )

        universe = HireSelector(db_session).get_contractor_universe(REVIEWED, prior.id)

        assert universe == [
            ContractorKey("E100", 100, "Acme Electric"),
            ContractorKey("E100", 900, "Carry Forward Co"),
        ]

    def test_same_contractor_under_two_employers(self, db_session, add_hires):
        add_hires({"employer_id": "E200"}, {"employer_id": "E100"})

        universe = HireSelector(db_session).get_contractor_universe(REVIEWED)

        assert [k.employer_id for k in universe] == ["E100", "E200"]

    def test_hidden_rows_are_excluded(self, db_session, add_hires):
        add_hires(
            {"contractor_id": 100, "is_inactive": True},
            {"contractor_id": 200, "excluded_compliance_rules": "3To1"},
        )
        assert HireSelector(db_session).get_contractor_universe(REVIEWED) == []


class TestHiresForContractor:
    def test_fold_order(self, db_session, add_hires):
        add_hires(
            {"ia_number": 30, "start_date": date(2025, 11, 12)},
            {"ia_number": 20, "start_date": date(2025, 11, 10),
             "reviewed_date": datetime(2025, 11, 16, 14, 0)},
            {"ia_number": 10, "start_date": date(2025, 11, 10),
             "reviewed_date": datetime(2025, 11, 16, 14, 0)},
            {"ia_number": 40, "start_date": date(2025, 11, 10),
             "reviewed_date": datetime(2025, 11, 16, 9, 0)},
        )

        events = HireSelector(db_session).get_hires_for_contractor(100, REVIEWED)

        assert [e.ia_number for e in events] == [40, 10, 20, 30]

    def test_only_the_review_day(self, db_session, add_hires):
        add_hires(
            {"ia_number": 1, "reviewed_date": datetime(2025, 11, 16, 0, 0)},
            {"ia_number": 2, "reviewed_date": datetime(2025, 11, 16, 23, 59, 59)},
            {"ia_number": 3, "reviewed_date": datetime(2025, 11, 17, 0, 0)},
            {"ia_number": 4, "reviewed_date": datetime(2025, 11, 15, 23, 59, 59)},
        )

        events = HireSelector(db_session).get_hires_for_contractor(100, REVIEWED)

        assert sorted(e.ia_number for e in events) == [1, 2]

    def test_matches_contractor_across_employers(self, db_session, add_hires):
        add_hires({"employer_id": "E100"}, {"employer_id": "E200"})
        events = HireSelector(db_session).get_hires_for_contractor(100, REVIEWED)
        assert {e.employer_id for e in events} == {"E100", "E200"}


class TestHireDataQueries:
    def test_recent_hires_for_run(self, db_session, modes, add_hires, add_prior_run):
        run = add_prior_run(modes["2To1"].id, REVIEWED)
        add_hires(
            {"contractor_id": 200, "contractor_name": "Bolt Builders"},
            {"contractor_id": 100, "contractor_name": "Acme Electric"},
            {"reviewed_date": datetime(2025, 11, 17, 9, 0)},
        )

        recent = HireSelector(db_session).get_recent_hires(run.id)

        assert [h.contractor_name for h in recent] == ["Acme Electric", "Bolt Builders"]

    def test_recent_hires_unknown_run(self, db_session):
        assert HireSelector(db_session).get_recent_hires(9999) == []

    def test_hire_data_newest_first(self, db_session, add_hires):
        add_hires(
            {"ia_number": 1, "reviewed_date": datetime(2025, 11, 9, 9, 0)},
            {"ia_number": 2, "reviewed_date": datetime(2025, 11, 16, 9, 0)},
            {"ia_number": 3, "is_inactive": True},
        )
        selector = HireSelector(db_session)

        assert [h.ia_number for h in selector.get_hire_data()] == [2, 1]
        assert [h.ia_number for h in selector.get_hire_data(PRIOR_REVIEWED)] == [1]
        assert len(selector.get_hire_data(limit=1)) == 1

    def test_hire_exists_ignores_visibility(self, db_session, add_hires):
        add_hires({"ia_number": 77, "is_inactive": True})
        selector = HireSelector(db_session)

        assert selector.hire_exists("E100", 77, date(2025, 11, 10))
        assert not selector.hire_exists("E100", 77, date(2025, 11, 11))
        assert not selector.hire_exists("E200", 77, date(2025, 11, 10))
