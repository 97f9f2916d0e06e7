# mediaplanner/api/v1/deps.py
from typing import Annotated, Optional

from fastapi import Depends, Query
from sqlmodel import Session

from mediaplanner.config import settings
from mediaplanner.db.core import get_session

SessionDep = Annotated[Session, Depends(get_session)]


def strategy_name(strategy: Optional[str] = Query(default=None, pattern="^(rules|scored)$")) -> str:
    """`?strategy=` query param, falling back to DEFAULT_STRATEGY."""
    return strategy or settings.default_strategy


StrategyNameDep = Annotated[str, Depends(strategy_name)]
