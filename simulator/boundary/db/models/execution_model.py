"""
Scenario execution ORM model.

Tracks each scenario run from start to success or failure, with the
parameters it was launched with.

Dependencies: sqlalchemy, simulator.boundary.db.base
System role: Execution history for the admin API
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from simulator.boundary.db.base import Base, TimestampMixin, UUIDMixin, utc_now


class ExecutionStatus(str, enum.Enum):
    """
    Scenario execution states.

    ACTIVE: Scenario is running
    SUCCESS: All steps completed
    FAILED: A step failed; error_message holds the reason
    """

    ACTIVE = "active"
    SUCCESS = "success"
    FAILED = "failed"


class ScenarioExecutionModel(Base, UUIDMixin, TimestampMixin):
    """
    One run of a scenario.

    Attributes:
        id: UUID primary key (auto-generated)
        scenario_name: Name the scenario was registered under
        status: ACTIVE, SUCCESS or FAILED
        parameters: Launch parameters or empty dict
        error_message: Failure reason, None unless FAILED
        start_date: Execution start (UTC)
        end_date: Execution end (UTC), None while ACTIVE
        messages: Messages received and sent during the run
    """

    __tablename__ = "scenario_executions"

    scenario_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    status: Mapped[ExecutionStatus] = mapped_column(
        Enum(ExecutionStatus, native_enum=False),
        nullable=False,
        default=ExecutionStatus.ACTIVE,
    )

    parameters: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    messages: Mapped[list["ScenarioMessageModel"]] = relationship(
        back_populates="execution",
        cascade="all, delete-orphan",
        order_by="ScenarioMessageModel.created_at",
        lazy="selectin",
    )
