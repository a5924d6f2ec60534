from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import text

from conftest import FAR_FUTURE, project_answers
from poisedms.Models import Architect, Project
from poisedms.Services.ProjectService import (
    NO_SEARCH_RESULTS,
    PROJECT_NOT_FOUND,
    add_project,
    delete_project,
    finalise_project,
    generate_project_name,
    search_projects,
    update_project,
    view_all_projects,
    view_incomplete_projects,
    view_overdue_projects,
)
from poisedms.utils.table_formatter import format_cell


# ---------- add ----------

def test_add_project_scenario(db, entities, terminal):
    terminal.feed(*project_answers(name="Smith Residence"))

    project = add_project(db, terminal)

    assert project is not None
    stored = db.query(Project).one()
    assert stored.project_number == "1234"
    assert stored.project_name == "Smith Residence"
    assert stored.deadline == date(2099, 12, 31)
    assert stored.erf_number == "ERF5678"
    assert stored.total_fee == Decimal("150000.50")
    assert stored.total_paid == Decimal("50000.75")
    assert (stored.architect_id, stored.contractor_id, stored.customer_id) == ("ARC101", "CON101", "CUS101")
    assert stored.finalised is False
    assert stored.completion_date is None
    assert format_cell("Finalised", stored.as_row()["Finalised"]) == "No"
    assert "Project added successfully." in terminal.text


def test_add_duplicate_project_number_is_rejected(db, entities, terminal):
    terminal.feed(*project_answers())
    add_project(db, terminal)

    terminal.feed("1234")
    assert add_project(db, terminal) is None

    assert "Project with this number already exists." in terminal.text
    assert db.query(Project).count() == 1
    # Nothing after the project number was asked the second time
    assert not terminal.answers


def test_add_reprompts_invalid_project_number(db, entities, terminal):
    terminal.feed("12a", "abc", *project_answers())
    assert add_project(db, terminal) is not None
    assert terminal.text.count("Invalid project number") == 2


def test_add_reprompts_project_number_longer_than_column(db, entities, terminal):
    terminal.feed("9" * 21, *project_answers())

    project = add_project(db, terminal)

    assert project.project_number == "1234"
    assert "Project number is too long! Please use at most 20 characters." in terminal.text
    assert "Error adding project" not in terminal.text


def test_add_reprompts_overlong_name_and_building_type(db, entities, terminal):
    answers = project_answers(name="Smith Residence")
    answers[1:2] = ["x" * 201, "Smith Residence"]
    answers[4:5] = ["y" * 101, "House"]
    terminal.feed(*answers)

    project = add_project(db, terminal)

    assert project.project_name == "Smith Residence"
    assert project.building_type == "House"
    assert "Project name is too long" in terminal.text
    assert "Building type is too long" in terminal.text


def test_add_rejects_today_and_past_deadlines(db, entities, terminal):
    answers = project_answers()
    answers[2:3] = [date.today().isoformat(), "2001-01-01", "31/12/2099", FAR_FUTURE]
    terminal.feed(*answers)

    project = add_project(db, terminal)

    assert project.deadline == date(2099, 12, 31)
    assert terminal.text.count("The date must be in the future") == 2
    assert "YYYY-MM-DD format" in terminal.text


def test_add_reprompts_both_amounts_when_paid_exceeds_fee(db, entities, terminal):
    answers = project_answers()
    answers[6:8] = ["100", "200", "-5", "abc", "300", "200"]
    terminal.feed(*answers)

    project = add_project(db, terminal)

    assert project.total_fee == Decimal("300")
    assert project.total_paid == Decimal("200")
    assert "Total paid cannot exceed the total fee" in terminal.text
    assert "Amount cannot be negative" in terminal.text
    assert "valid numeric value" in terminal.text


def test_add_reprompts_erf_and_address(db, entities, terminal):
    answers = project_answers()
    answers[4:6] = ["Pretoria", "9 Oak Ave, Pretoria", "erf5678", "ERF5678"]
    terminal.feed(*answers)

    project = add_project(db, terminal)

    assert project.physical_address == "9 Oak Ave, Pretoria"
    assert "Invalid address format" in terminal.text
    assert "It must start with 'ERF'" in terminal.text


def test_add_generates_name_from_customer_surname(db, entities, terminal):
    terminal.feed(*project_answers(name="", building_type="apartment"))
    project = add_project(db, terminal)
    assert project.project_name == "Apartment Smith"
    assert "Project name automatically set to: Apartment Smith" in terminal.text


def test_add_creates_missing_architect(db, entities, terminal):
    answers = project_answers(architect="ARC202")
    answers[10:10] = ["y", "Jane", "Doe", "0821234567", "jane@example.com", "1 Main Rd, Durban, South Africa"]
    terminal.feed(*answers)

    project = add_project(db, terminal)

    assert project.architect_id == "ARC202"
    assert db.query(Architect).count() == 2
    assert db.query(Architect).filter(Architect.id == "ARC202").one().surname == "Doe"


def test_add_aborts_when_entity_cannot_be_created(db, entities, terminal, monkeypatch):
    from sqlalchemy.exc import OperationalError

    def fail_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", fail_commit)
    answers = project_answers(architect="ARC202")
    answers[10:] = ["y", "Jane", "Doe", "0821234567", "jane@example.com", "1 Main Rd, Durban, South Africa"]
    terminal.feed(*answers)

    assert add_project(db, terminal) is None
    monkeypatch.undo()

    assert "Project cannot be added without a valid architect." in terminal.text
    assert db.query(Project).count() == 0
    # Contractor and customer were never asked for
    assert "Contractor ID" not in terminal.text


# ---------- naming ----------

def test_generate_project_name(db, entities):
    assert generate_project_name(db, "CUS101", "House") == "House Smith"
    assert generate_project_name(db, "CUS101", "HOUSE") == "House Smith"
    assert generate_project_name(db, "CUS101", "Apartment") == "Apartment Smith"
    assert generate_project_name(db, "CUS101", "Commercial") == "Project Smith"
    assert generate_project_name(db, "CUS101", "") == "Project Smith"
    assert generate_project_name(db, "CUS999", "House") == "House Unknown"


# ---------- views and search ----------

def test_view_all_projects(db, make_project, terminal):
    make_project("1234")
    make_project("5678", project_name="Apartment Botha", finalised=True, completion_date=date(2026, 1, 2))

    view_all_projects(db, terminal)

    assert "All Projects" in terminal.text
    assert "House Smith" in terminal.text
    assert "Apartment Botha" in terminal.text
    assert "Yes" in terminal.text
    assert "N/A" in terminal.text


def test_view_all_projects_empty(db, terminal):
    view_all_projects(db, terminal)
    assert "No data found for All Projects." in terminal.text


def test_view_incomplete_projects(db, make_project, terminal):
    make_project("1234", project_name="Open Job")
    make_project("5678", project_name="Closed Job", finalised=True, completion_date=date(2026, 1, 2))

    view_incomplete_projects(db, terminal)

    assert "Incomplete Projects" in terminal.text
    assert "Open Job" in terminal.text
    assert "Closed Job" not in terminal.text


def test_view_overdue_projects(db, make_project, terminal):
    make_project("1234", project_name="Late Job", deadline=date(2020, 1, 1))
    make_project("5678", project_name="On Time Job", deadline=date(2099, 1, 1))

    view_overdue_projects(db, terminal, today=date(2026, 10, 18))

    assert "Overdue Projects" in terminal.text
    assert "Late Job" in terminal.text
    assert "On Time Job" not in terminal.text


def test_search_by_number_or_name(db, make_project, terminal):
    make_project("1234", project_name="House Smith")
    make_project("5678", project_name="Apartment Botha")

    terminal.feed("Botha")
    search_projects(db, terminal)
    assert "Projects Found by Number or Name" in terminal.text
    assert "5678" in terminal.text
    assert "House Smith" not in terminal.text

    terminal.feed("23")
    search_projects(db, terminal)
    assert "House Smith" in terminal.text


def test_search_treats_wildcards_literally(db, make_project, terminal):
    make_project("1234", project_name="House Smith")
    make_project("5678", project_name="50% Deposit Job")

    terminal.feed("12_4")
    search_projects(db, terminal)
    assert NO_SEARCH_RESULTS in terminal.text

    terminal.feed("50%")
    search_projects(db, terminal)
    assert "50% Deposit Job" in terminal.text
    assert "House Smith" not in terminal.text


def test_search_without_match_skips_table(db, make_project, terminal):
    make_project("1234")
    terminal.feed("Nope")

    search_projects(db, terminal)

    assert NO_SEARCH_RESULTS in terminal.text
    assert "Projects Found by Number or Name" not in terminal.text
    assert "+--" not in terminal.text


# ---------- update ----------

def test_update_keeps_blank_fields(db, make_project, terminal):
    make_project("1234")
    terminal.feed("9999", "1234", "", "", "")

    project = update_project(db, terminal)

    assert f"{PROJECT_NOT_FOUND} Please try again." in terminal.text
    assert project.project_name == "House Smith"
    assert project.deadline == date(2099, 12, 31)
    assert project.total_paid == Decimal("50000.75")
    assert "Project updated successfully." in terminal.text


def test_update_changes_all_three_fields(db, make_project, terminal):
    make_project("1234")
    new_deadline = (date.today() + timedelta(days=90)).isoformat()
    terminal.feed("1234", "Smith Villa", "not a date", new_deadline, "abc", "200000", "75000")

    update_project(db, terminal)

    db.expire_all()
    stored = db.query(Project).filter(Project.project_number == "1234").one()
    assert stored.project_name == "Smith Villa"
    assert stored.deadline.isoformat() == new_deadline
    assert stored.total_paid == Decimal("75000")
    assert "YYYY-MM-DD format" in terminal.text
    assert "valid numeric value" in terminal.text
    assert "cannot exceed the total fee" in terminal.text


def test_update_menu_sentinel_returns(db, make_project, terminal):
    make_project("1234")
    terminal.feed("menu")

    assert update_project(db, terminal) is None
    assert "Project updated successfully." not in terminal.text


# ---------- delete ----------

def test_delete_project(db, make_project, terminal):
    make_project("1234")
    terminal.feed("1234")

    assert delete_project(db, terminal) is True
    assert db.query(Project).count() == 0
    assert "Project deleted successfully." in terminal.text


def test_delete_unknown_project(db, make_project, terminal):
    make_project("1234")
    terminal.feed("4321")

    assert delete_project(db, terminal) is False
    assert PROJECT_NOT_FOUND in terminal.text
    assert db.query(Project).count() == 1


# ---------- finalise ----------

def test_finalise_project(db, make_project, terminal):
    make_project("1234")
    terminal.feed("1234")

    project = finalise_project(db, terminal, today=date(2026, 10, 18))

    assert project.finalised is True
    assert project.completion_date == date(2026, 10, 18)
    assert format_cell("Finalised", project.as_row()["Finalised"]) == "Yes"


def test_finalise_again_declined_keeps_completion_date(db, make_project, terminal):
    make_project("1234", finalised=True, completion_date=date(2026, 1, 2))
    terminal.feed("1234", "n")

    project = finalise_project(db, terminal, today=date(2026, 10, 18))

    db.expire_all()
    assert db.query(Project).one().completion_date == date(2026, 1, 2)
    assert project.finalised is True
    assert "already finalized with a completion date of 2026-01-02" in terminal.text
    assert "Project finalization unchanged." in terminal.text


def test_finalise_again_confirmed_restamps_date(db, make_project, terminal):
    make_project("1234", finalised=True, completion_date=date(2026, 1, 2))
    terminal.feed("1234", "y")

    finalise_project(db, terminal, today=date(2026, 10, 18))

    db.expire_all()
    assert db.query(Project).one().completion_date == date(2026, 10, 18)


def test_finalise_unknown_project(db, make_project, terminal):
    make_project("1234")
    terminal.feed("0000")

    assert finalise_project(db, terminal) is None
    assert PROJECT_NOT_FOUND in terminal.text
    assert db.query(Project).one().finalised is False


def test_finalised_defaults_to_no_in_the_database(db):
    # Rows written outside the ORM still start unfinalised
    db.execute(text(
        "INSERT INTO project (ProjectNumber, Deadline, TotalFee, TotalPaid) "
        "VALUES ('4321', '2099-12-31', 0, 0)"
    ))
    db.commit()

    stored = db.query(Project).one()
    assert stored.finalised is False
    assert format_cell("Finalised", stored.as_row()["Finalised"]) == "No"
