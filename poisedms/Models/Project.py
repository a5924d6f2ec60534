"""
Construction Project Model

This module defines the Project model for the PoiseDMS system. A Project is a
single building job with a deadline, a fee, the plot it is built on (ERF
number) and the three entities involved in it.

Database Table: project

Attributes:
    project_number (str): Primary key - numeric string, e.g. "1234"
    project_name (str): Name, generated from the customer surname when blank
    deadline (date): Due date, strictly in the future when the project is added
    building_type (str): Free text, e.g. "House", "Apartment", "Commercial"
    physical_address (str): Street address, must contain a comma
    erf_number (str): Plot registration number, always starts with "ERF"
    total_fee (Decimal): Agreed fee, never negative
    total_paid (Decimal): Amount paid so far, never more than total_fee
    architect_id / contractor_id / customer_id (str): Foreign keys
    finalised (bool): Stored as 0/1, displayed as No/Yes
    completion_date (date): Set only when the project is finalised

Column names in the database keep the PascalCase labels (ProjectNumber,
ProjectName, ...) used by the table output.
"""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Numeric, String, false, inspect
from sqlalchemy.orm import relationship

from poisedms.Database.session import Base


class Project(Base):
    __tablename__ = 'project'

    # Primary key: project number
    project_number = Column('ProjectNumber', String(20), primary_key=True, index=True)

    project_name = Column('ProjectName', String(200), index=True)
    deadline = Column('Deadline', Date, nullable=False, index=True)
    building_type = Column('BuildingType', String(100))
    physical_address = Column('PhysicalAddress', String(255))
    erf_number = Column('ERFNumber', String(50))

    # Money: rand amounts with cents
    total_fee = Column('TotalFee', Numeric(12, 2), nullable=False, default=0)
    total_paid = Column('TotalPaid', Numeric(12, 2), nullable=False, default=0)

    architect_id = Column('ArchitectID', String(20), ForeignKey('architect.ArchitectID'), index=True)
    contractor_id = Column('ContractorID', String(20), ForeignKey('contractor.ContractorID'), index=True)
    customer_id = Column('CustomerID', String(20), ForeignKey('customer.CustomerID'), index=True)

    finalised = Column('Finalised', Boolean, nullable=False, default=False, server_default=false(), index=True)
    completion_date = Column('CompletionDate', Date, nullable=True)

    architect = relationship("Architect")
    contractor = relationship("Contractor")
    customer = relationship("Customer")

    @classmethod
    def column_labels(cls) -> list:
        """Database column names in table order, used as table headers."""
        return [column.name for column in cls.__table__.columns]

    def as_row(self) -> dict:
        """Map every column label to this project's raw value."""
        mapper = inspect(type(self))
        return {
            column.name: getattr(self, mapper.get_property_by_column(column).key)
            for column in self.__table__.columns
        }

    def __repr__(self):
        return f"<Project {self.project_number} {self.project_name!r}>"
