"""
Project Service

The project workflows behind the main menu:

- View all / incomplete / overdue projects
- Search by project number or name
- Add a project (field validation, entity resolution, automatic naming)
- Update name, deadline and amount paid
- Delete a project
- Finalise a project (stamp the completion date)

Every public function takes the database session and the terminal, handles its
own store errors (rollback, log, report) and returns to the caller, so the menu
loop always regains control.
"""

import logging
from datetime import date
from functools import partial
from decimal import Decimal
from typing import List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poisedms.Models.Entity import Architect, Contractor, Customer
from poisedms.Models.Project import Project
from poisedms.Schemas.ProjectSchema import ProjectCreate, ProjectUpdate, validation_message
from poisedms.Services.EntityService import get_customer_surname, resolve_entity
from poisedms.Services.terminal import Terminal
from poisedms.utils.field_validators import (
    BUILDING_TYPE_MAX_LENGTH,
    PROJECT_NAME_MAX_LENGTH,
    parse_amount,
    parse_erf_number,
    parse_future_date,
    parse_iso_date,
    parse_physical_address,
    parse_project_number,
    parse_text,
)
from poisedms.utils.table_formatter import display_table

logger = logging.getLogger(__name__)

MENU_SENTINEL = "menu"
PROJECT_NOT_FOUND = "Project not found."
NO_SEARCH_RESULTS = "No data found for project name or number entered."
LIKE_ESCAPE = "\\"

parse_project_name = partial(parse_text, label="Project name", max_length=PROJECT_NAME_MAX_LENGTH)


def get_project(db: Session, project_number: str) -> Optional[Project]:
    return db.query(Project).filter(Project.project_number == project_number).first()


def project_exists(db: Session, project_number: str) -> bool:
    return db.query(Project.project_number).filter(
        Project.project_number == project_number
    ).first() is not None


def generate_project_name(db: Session, customer_id: str, building_type: str) -> str:
    """
    Build a project name from the customer's surname and the building type.

    Example:
        "house" + Smith      -> "House Smith"
        "Apartment" + Smith  -> "Apartment Smith"
        "Commercial" + Smith -> "Project Smith"
    """
    surname = get_customer_surname(db, customer_id)
    kind = (building_type or "").strip().lower()
    if kind == "house":
        return f"House {surname}"
    if kind == "apartment":
        return f"Apartment {surname}"
    return f"Project {surname}"


def _show_projects(terminal: Terminal, title: str, projects: List[Project]) -> None:
    display_table(terminal, title, Project.column_labels(), [project.as_row() for project in projects])


def view_all_projects(db: Session, terminal: Terminal) -> None:
    try:
        projects = db.query(Project).order_by(Project.project_number).all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error loading projects")
        terminal.error(f"Error loading projects: {e}")
        return
    _show_projects(terminal, "All Projects", projects)


def view_incomplete_projects(db: Session, terminal: Terminal) -> None:
    try:
        projects = (
            db.query(Project)
            .filter(Project.finalised.is_(False))
            .order_by(Project.project_number)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error loading incomplete projects")
        terminal.error(f"Error loading incomplete projects: {e}")
        return
    _show_projects(terminal, "Incomplete Projects", projects)


def view_overdue_projects(db: Session, terminal: Terminal, today: Optional[date] = None) -> None:
    today = today or date.today()
    try:
        projects = (
            db.query(Project)
            .filter(Project.deadline < today)
            .order_by(Project.deadline)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error loading overdue projects")
        terminal.error(f"Error loading overdue projects: {e}")
        return
    _show_projects(terminal, "Overdue Projects", projects)


def escape_like(term: str) -> str:
    """Make % and _ in a search term match literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def search_projects(db: Session, terminal: Terminal) -> None:
    term = terminal.ask("Enter project number or name to search: ")
    pattern = f"%{escape_like(term)}%"
    try:
        projects = (
            db.query(Project)
            .filter(or_(
                Project.project_number.like(pattern, escape=LIKE_ESCAPE),
                Project.project_name.like(pattern, escape=LIKE_ESCAPE),
            ))
            .order_by(Project.project_number)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error searching for projects with %r", term)
        terminal.error(f"Error searching for projects: {e}")
        return

    if not projects:
        terminal.say(NO_SEARCH_RESULTS)
        return
    _show_projects(terminal, "Projects Found by Number or Name", projects)


def _ask_fee_and_paid(terminal: Terminal) -> Tuple[Decimal, Decimal]:
    """Ask for both amounts until the amount paid does not exceed the fee."""
    while True:
        total_fee = terminal.ask_valid("Enter total fee (R, e.g., 150000.50): ", parse_amount)
        total_paid = terminal.ask_valid("Enter total paid (R, e.g., 50000.75): ", parse_amount)
        if total_paid <= total_fee:
            return total_fee, total_paid
        terminal.error("Error: Total paid cannot exceed the total fee. Please enter both amounts again.")


def add_project(db: Session, terminal: Terminal) -> Optional[Project]:
    """
    Interactive creation of one project.

    Steps:
    1. Project number, rejected if it already exists
    2. Name (blank = generate), deadline, building type, address, ERF number
    3. Fee and amount paid
    4. Architect, Contractor and Customer IDs, creating missing ones on request
    5. Insert with Finalised = No

    Entities created in step 4 are committed on their own and stay in place if
    the project insert fails afterwards.

    Returns:
        Optional[Project]: The stored project, or None if the add was aborted
    """
    try:
        project_number = terminal.ask_valid("Enter project number (e.g., 1234): ", parse_project_number)
        if project_exists(db, project_number):
            terminal.error("Project with this number already exists.")
            return None

        project_name = terminal.ask_valid(
            "Enter project name (press Enter to generate automatically): ", parse_project_name
        )
        deadline = terminal.ask_valid(
            "Enter project due date (YYYY-MM-DD, e.g., 2030-12-31): ", parse_future_date
        )
        building_type = terminal.ask_valid(
            "Enter building type (e.g., Residential, Commercial, House, Apartment): ",
            partial(parse_text, label="Building type", max_length=BUILDING_TYPE_MAX_LENGTH),
        )
        physical_address = terminal.ask_valid(
            "Enter physical address (e.g., 123 Main St, City, Country): ", parse_physical_address
        )
        erf_number = terminal.ask_valid("Enter ERF number (e.g., ERF5678): ", parse_erf_number)
        total_fee, total_paid = _ask_fee_and_paid(terminal)

        architect_id = resolve_entity(db, terminal, Architect)
        if architect_id is None:
            terminal.error("Error: Project cannot be added without a valid architect.")
            return None
        contractor_id = resolve_entity(db, terminal, Contractor)
        if contractor_id is None:
            terminal.error("Error: Project cannot be added without a valid contractor.")
            return None
        customer_id = resolve_entity(db, terminal, Customer)
        if customer_id is None:
            terminal.error("Error: Project cannot be added without a valid customer.")
            return None

        if not project_name:
            project_name = generate_project_name(db, customer_id, building_type)
            terminal.say(f"Project name automatically set to: {project_name}")

        try:
            project_data = ProjectCreate(
                project_number=project_number,
                project_name=project_name,
                deadline=deadline,
                building_type=building_type,
                physical_address=physical_address,
                erf_number=erf_number,
                total_fee=total_fee,
                total_paid=total_paid,
                architect_id=architect_id,
                contractor_id=contractor_id,
                customer_id=customer_id,
            )
        except ValidationError as e:
            terminal.error(f"Error adding project: {validation_message(e)}")
            return None

        new_project = Project(**project_data.model_dump(), finalised=False, completion_date=None)
        db.add(new_project)
        db.commit()
        db.refresh(new_project)

    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error adding project to the database")
        terminal.error(f"Error adding project to the database: {e}")
        return None

    logger.info("Project %s added", new_project.project_number)
    terminal.success("Project added successfully.")
    return new_project


def _locate_for_update(db: Session, terminal: Terminal) -> Optional[Project]:
    """Ask for a project number until it matches a project or the user types "menu"."""
    while True:
        answer = terminal.ask(
            "Enter project number to update (or 'menu' to return to the main menu): "
        )
        if answer.lower() == MENU_SENTINEL:
            return None
        project = get_project(db, answer)
        if project is not None:
            return project
        terminal.error(f"{PROJECT_NOT_FOUND} Please try again.")


def update_project(db: Session, terminal: Terminal) -> Optional[Project]:
    """
    Update the name, deadline and amount paid of a project.

    Blank answers keep the current value. The three fields are written in one
    UPDATE even when none of them changed.
    """
    try:
        project = _locate_for_update(db, terminal)
        if project is None:
            return None

        new_name = terminal.ask_valid(
            "Enter new project name (Leave blank to keep current): ", parse_project_name
        )
        if not new_name:
            new_name = project.project_name

        current_deadline = project.deadline
        new_deadline = terminal.ask_valid(
            f"Enter new deadline date (YYYY-MM-DD, blank keeps {current_deadline}): ",
            lambda raw: parse_iso_date(raw) if raw.strip() else current_deadline,
        )

        total_fee = project.total_fee
        current_paid = project.total_paid

        def parse_paid(raw: str) -> Decimal:
            if not raw.strip():
                return current_paid
            amount = parse_amount(raw)
            if total_fee is not None and amount > total_fee:
                raise ValueError(f"Error: Total paid cannot exceed the total fee of R{total_fee}.")
            return amount

        new_paid = terminal.ask_valid(
            f"Enter new total paid (R, blank keeps R{current_paid}): ", parse_paid
        )

        try:
            changes = ProjectUpdate(project_name=new_name, deadline=new_deadline, total_paid=new_paid)
        except ValidationError as e:
            terminal.error(f"Error updating project: {validation_message(e)}")
            return None

        db.query(Project).filter(Project.project_number == project.project_number).update(
            {
                Project.project_name: changes.project_name,
                Project.deadline: changes.deadline,
                Project.total_paid: changes.total_paid,
            },
            synchronize_session="fetch",
        )
        db.commit()
        db.refresh(project)

    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating project")
        terminal.error(f"Error updating project: {e}")
        return None

    logger.info("Project %s updated", project.project_number)
    terminal.success("Project updated successfully.")
    return project


def delete_project(db: Session, terminal: Terminal) -> bool:
    project_number = terminal.ask("Enter project number to delete: ")
    try:
        project = get_project(db, project_number)
        if project is None:
            terminal.error(PROJECT_NOT_FOUND)
            return False

        db.delete(project)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error deleting project %s", project_number)
        terminal.error(f"Error deleting project: {e}")
        return False

    logger.info("Project %s deleted", project_number)
    terminal.success("Project deleted successfully.")
    return True


def finalise_project(db: Session, terminal: Terminal, today: Optional[date] = None) -> Optional[Project]:
    """
    Mark a project as finalised and stamp today's date as its completion date.

    A project that is already finalised keeps its completion date unless the
    user confirms the overwrite.
    """
    project_number = terminal.ask("Enter project number to finalize: ")
    try:
        project = get_project(db, project_number)
        if project is None:
            terminal.error(PROJECT_NOT_FOUND)
            return None

        if project.finalised and project.completion_date is not None:
            if not terminal.ask_yes_no(
                f"This project is already finalized with a completion date of "
                f"{project.completion_date}. Do you want to update the completion date? (y/n): "
            ):
                terminal.say("Project finalization unchanged.")
                return project

        project.finalised = True
        project.completion_date = today or date.today()
        db.commit()
        db.refresh(project)

    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error finalizing project %s", project_number)
        terminal.error(f"Error finalizing project: {e}")
        return None

    logger.info("Project %s finalised on %s", project.project_number, project.completion_date)
    terminal.success("Project finalized successfully with updated completion date.")
    return project
