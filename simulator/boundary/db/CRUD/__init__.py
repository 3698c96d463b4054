"""CRUD operations for execution history models."""

from simulator.boundary.db.CRUD.base_crud import BaseCRUD
from simulator.boundary.db.CRUD.execution_crud import ExecutionCRUD, execution_crud
from simulator.boundary.db.CRUD.message_crud import MessageCRUD, message_crud

__all__ = [
    "BaseCRUD",
    "ExecutionCRUD",
    "MessageCRUD",
    "execution_crud",
    "message_crud",
]
