"""Weekly task owned by a user's task list."""

from typing import Literal

from pydantic import BaseModel

TaskStatus = Literal["Todo", "In Progress", "Done"]


class Task(BaseModel):
    id: str = ""
    title: str
    type: Literal["Learning", "Practice", "Building", "Reading"] = "Learning"
    duration: str = ""  # free text, e.g. "2 hours"; see services.duration_parser
    status: TaskStatus = "Todo"
    difficulty: Literal["Easy", "Medium", "Hard"] = "Medium"
    description: str = ""
