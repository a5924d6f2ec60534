"""
Entity Service

Lookup, creation and interactive resolution of the Architect, Contractor and
Customer records a Project refers to.

Resolution flow (used while adding a project):
1. Show the existing entities of the role
2. Ask for an ID (bare number or prefix + 3 digits)
3. Existing ID -> done
4. Unknown ID -> offer to create it on the spot, or ask for another ID

Every lookup goes through the entity model class, so no SQL is built from
table or column names.
"""

import logging
from functools import partial
from typing import List, Optional, Type

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poisedms.Models.Entity import ContactMixin, Customer
from poisedms.Schemas.EntitySchema import EntityCreate
from poisedms.Schemas.ProjectSchema import validation_message
from poisedms.Services.terminal import Terminal
from poisedms.utils.field_validators import (
    NAME_MAX_LENGTH,
    parse_email,
    parse_entity_id,
    parse_physical_address,
    parse_telephone,
    parse_text,
)
from poisedms.utils.table_formatter import display_table

logger = logging.getLogger(__name__)

UNKNOWN_SURNAME = "Unknown"


def entity_exists(db: Session, model: Type[ContactMixin], entity_id: str) -> bool:
    """Exact match on the role's ID column."""
    return db.query(model.id).filter(model.id == entity_id).first() is not None


def list_entities(db: Session, model: Type[ContactMixin]) -> List[ContactMixin]:
    return db.query(model).order_by(model.id).all()


def display_entities(db: Session, terminal: Terminal, model: Type[ContactMixin]) -> None:
    columns = [model.id_column_name(), "FirstName", "Surname"]
    rows = [
        {columns[0]: entity.id, "FirstName": entity.first_name, "Surname": entity.surname}
        for entity in list_entities(db, model)
    ]
    display_table(terminal, f"Existing {model.ROLE}s", columns, rows)


def get_customer_surname(db: Session, customer_id: str) -> str:
    """Surname of the customer, or "Unknown" when it cannot be found."""
    try:
        customer = db.query(Customer).filter(Customer.id == customer_id).first()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error fetching surname for customer %s", customer_id)
        return UNKNOWN_SURNAME

    if customer is None or not (customer.surname or "").strip():
        return UNKNOWN_SURNAME
    return customer.surname.strip()


def create_entity(db: Session, terminal: Terminal, model: Type[ContactMixin], entity_id: str):
    """
    Collect contact details for ``entity_id`` and insert one row.

    Args:
        db (Session): Database session
        terminal (Terminal): Prompt/print target
        model: Architect, Contractor or Customer
        entity_id (str): ID chosen by the user

    Returns:
        The created entity, or None if it could not be stored. Failures are
        reported on the terminal only.
    """
    role = model.ROLE
    first_name = terminal.ask_valid(
        f"Enter {role}'s First Name: ", partial(parse_text, label="First name", max_length=NAME_MAX_LENGTH)
    )
    surname = terminal.ask_valid(
        f"Enter {role}'s Surname: ", partial(parse_text, label="Surname", max_length=NAME_MAX_LENGTH)
    )
    telephone = terminal.ask_valid(
        f"Enter {role}'s Telephone Number (10-15 digits, numbers only): ", parse_telephone
    )
    email = terminal.ask_valid(f"Enter {role}'s Email: ", parse_email)
    physical_address = terminal.ask_valid(
        "Enter physical address (e.g., 123 Main St, City, Country): ", parse_physical_address
    )

    try:
        entity_data = EntityCreate(
            id=entity_id,
            first_name=first_name,
            surname=surname,
            telephone=telephone,
            email=email,
            physical_address=physical_address,
        )
    except ValidationError as e:
        terminal.error(f"Error adding {role}: {validation_message(e)}")
        return None

    try:
        entity = model(**entity_data.model_dump())
        db.add(entity)
        db.commit()
        db.refresh(entity)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error adding %s %s", role, entity_id)
        terminal.error(f"Error adding {role}: {e}")
        return None

    logger.info("Created %s %s", role, entity.id)
    terminal.success(f"{role} added successfully.")
    return entity


def resolve_entity(db: Session, terminal: Terminal, model: Type[ContactMixin]) -> Optional[str]:
    """
    Ask for an existing entity ID, creating the entity if the user wants to.

    Returns:
        Optional[str]: A stored ID, or None when the user asked for a new
        entity and it could not be created.
    """
    role, prefix = model.ROLE, model.PREFIX
    parse_id = partial(parse_entity_id, role=role, prefix=prefix)

    while True:
        display_entities(db, terminal, model)
        entity_id = terminal.ask_valid(f"Enter {role} ID (e.g., {prefix}101): ", parse_id)

        if entity_exists(db, model, entity_id):
            return entity_id

        terminal.error(f"{role} ID {entity_id} does not exist.")
        if not terminal.ask_yes_no(f"Do you want to add this {role}? (y to add, n to enter another ID): "):
            continue

        create_entity(db, terminal, model, entity_id)
        if entity_exists(db, model, entity_id):
            return entity_id

        terminal.error(f"{role} {entity_id} was not created.")
        return None


def register_entity(db: Session, terminal: Terminal, model: Type[ContactMixin]):
    """Standalone creation of one entity, outside the add-project flow."""
    role, prefix = model.ROLE, model.PREFIX
    try:
        entity_id = terminal.ask_valid(
            f"Enter new {role} ID (e.g., {prefix}101): ",
            partial(parse_entity_id, role=role, prefix=prefix),
        )
        if entity_exists(db, model, entity_id):
            terminal.error(f"{role} with this ID already exists.")
            return None
        return create_entity(db, terminal, model, entity_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error registering %s", role)
        terminal.error(f"Error adding {role}: {e}")
        return None
