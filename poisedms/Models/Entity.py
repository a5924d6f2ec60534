"""
Project Entity Models

This module defines the three people a Project refers to: the Architect who
designs the building, the Contractor who builds it and the Customer who pays
for it. The three tables are structurally identical, only the table name, the
primary key column and the ID prefix differ.

Database Tables: architect, contractor, customer

ID Format:
    <PREFIX><3 digits> e.g. "ARC101", "CON204", "CUS310"
    A bare numeric ID (e.g. "101") is accepted as well.

Usage Example:
    architect = Architect(
        id="ARC101",
        first_name="Lerato",
        surname="Mokoena",
        telephone="0821234567",
        email="lerato@example.com",
        physical_address="12 Long St, Cape Town, South Africa"
    )
"""

from sqlalchemy import Column, String

from poisedms.Database.session import Base


class ContactMixin:
    """Contact details shared by every entity table."""

    first_name = Column('FirstName', String(100), nullable=False)
    surname = Column('Surname', String(100), nullable=False, index=True)
    telephone = Column('Telephone', String(15), nullable=False)
    email = Column('Email', String(255), nullable=False)
    physical_address = Column('PhysicalAddress', String(255), nullable=False)

    # Human readable role name, also used in prompts ("Enter Architect ID")
    ROLE = None
    # Three letter ID prefix
    PREFIX = None

    @classmethod
    def id_column_name(cls) -> str:
        return f"{cls.ROLE}ID"

    def __repr__(self):
        return f"<{self.ROLE} {self.id} {self.first_name} {self.surname}>"


class Architect(ContactMixin, Base):
    __tablename__ = 'architect'
    ROLE = 'Architect'
    PREFIX = 'ARC'

    id = Column('ArchitectID', String(20), primary_key=True, index=True)


class Contractor(ContactMixin, Base):
    __tablename__ = 'contractor'
    ROLE = 'Contractor'
    PREFIX = 'CON'

    id = Column('ContractorID', String(20), primary_key=True, index=True)


class Customer(ContactMixin, Base):
    __tablename__ = 'customer'
    ROLE = 'Customer'
    PREFIX = 'CUS'

    id = Column('CustomerID', String(20), primary_key=True, index=True)


# Lookup used by the command line ("--add-entity architect")
ENTITY_MODELS = {
    'architect': Architect,
    'contractor': Contractor,
    'customer': Customer,
}
