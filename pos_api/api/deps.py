# pos_api/api/deps.py

from typing import Annotated

from fastapi import Path, Request

from pos_api.config import Settings
from pos_api.db.engine import Database
from pos_api.db.schema import MAX_ID, MIN_ID

RowId = Annotated[int, Path(ge=MIN_ID, le=MAX_ID)]


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
