"""
Scenario message ORM model.

Stores every message a scenario received or sent.

Dependencies: sqlalchemy, simulator.boundary.db.base
System role: Message log of scenario executions
"""

import enum
import uuid

from sqlalchemy import JSON, Enum, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from simulator.boundary.db.base import Base, TimestampMixin, UUIDMixin


class MessageDirection(str, enum.Enum):
    """INBOUND: received by the scenario. OUTBOUND: generated by the scenario."""

    INBOUND = "inbound"
    OUTBOUND = "outbound"


class ScenarioMessageModel(Base, UUIDMixin, TimestampMixin):
    """Message exchanged during a scenario execution."""

    __tablename__ = "scenario_messages"

    execution_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("scenario_executions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    direction: Mapped[MessageDirection] = mapped_column(
        Enum(MessageDirection, native_enum=False),
        nullable=False,
    )

    payload: Mapped[str] = mapped_column(Text, nullable=False, default="")

    headers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    status_code: Mapped[int | None] = mapped_column(Integer, nullable=True)

    execution: Mapped["ScenarioExecutionModel"] = relationship(back_populates="messages")
