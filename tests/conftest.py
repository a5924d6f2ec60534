"""
Pytest configuration and fixtures.
"""

import io
from collections import deque
from datetime import date
from decimal import Decimal

import pytest
from rich.console import Console
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from poisedms.Database.session import Base
from poisedms.Models import Architect, Contractor, Customer, Project
from poisedms.Services.terminal import Terminal

FAR_FUTURE = "2099-12-31"


class ScriptedInput:
    """Line source for Console.input: one queued answer per readline(), EOFError when empty."""

    def __init__(self, answers, echo):
        self.answers = deque(answers)
        self.echo = echo

    def readline(self):
        if not self.answers:
            raise EOFError("No scripted answer left")
        answer = self.answers.popleft()
        # Echo like a real terminal so the transcript reads prompt, answer, output
        self.echo.write(answer + "\n")
        return answer + "\n"


class ScriptedTerminal(Terminal):
    """Terminal that reads answers from a queue and records everything printed."""

    def __init__(self, answers=()):
        self.output = io.StringIO()
        self.input = ScriptedInput(answers, echo=self.output)
        super().__init__(
            console=Console(file=self.output, width=400, color_system=None),
            stream=self.input,
        )

    def feed(self, *answers):
        self.input.answers.extend(answers)

    @property
    def answers(self):
        return self.input.answers

    @property
    def text(self) -> str:
        return self.output.getvalue()


@pytest.fixture
def engine():
    """In-memory SQLite database with the full schema."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autoflush=False, autocommit=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def terminal():
    return ScriptedTerminal()


@pytest.fixture
def entities(db):
    """One architect, contractor and customer (surname Smith)."""
    architect = Architect(
        id="ARC101", first_name="Lerato", surname="Mokoena", telephone="0821234567",
        email="lerato@example.com", physical_address="12 Long St, Cape Town, South Africa",
    )
    contractor = Contractor(
        id="CON101", first_name="Pieter", surname="Botha", telephone="0837654321",
        email="pieter@buildco.co.za", physical_address="4 Main Rd, Durban, South Africa",
    )
    customer = Customer(
        id="CUS101", first_name="John", surname="Smith", telephone="0845550000",
        email="john.smith@example.com", physical_address="9 Oak Ave, Pretoria, South Africa",
    )
    db.add_all([architect, contractor, customer])
    db.commit()
    return {"architect": architect, "contractor": contractor, "customer": customer}


@pytest.fixture
def make_project(db, entities):
    """Insert a project directly, bypassing the interactive validation."""

    def _make(project_number="1234", **overrides):
        values = dict(
            project_number=project_number,
            project_name="House Smith",
            deadline=date(2099, 12, 31),
            building_type="House",
            physical_address="9 Oak Ave, Pretoria, South Africa",
            erf_number="ERF5678",
            total_fee=Decimal("150000.50"),
            total_paid=Decimal("50000.75"),
            architect_id="ARC101",
            contractor_id="CON101",
            customer_id="CUS101",
            finalised=False,
            completion_date=None,
        )
        values.update(overrides)
        project = Project(**values)
        db.add(project)
        db.commit()
        return project

    return _make


def project_answers(project_number="1234", name="", deadline=FAR_FUTURE, building_type="House",
                    address="9 Oak Ave, Pretoria, South Africa", erf="ERF5678",
                    fee="150000.50", paid="50000.75",
                    architect="ARC101", contractor="CON101", customer="CUS101"):
    """Answers to the add-project prompts, in prompt order."""
    return [project_number, name, deadline, building_type, address, erf, fee, paid,
            architect, contractor, customer]
