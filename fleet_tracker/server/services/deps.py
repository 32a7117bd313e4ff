"""
Request-scoped dependencies.

Provides the database session, the authenticated user's id, the user's
repository bundle and the invoice extractor as ``Annotated`` dependencies for
API endpoints.
"""

import uuid
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.core.database import get_session
from fleet_tracker.core.database.repositories import SqlRepoBundle, build_sql_repos
from fleet_tracker.server.core.security import get_current_user_id
from fleet_tracker.server.services.invoice_extraction import InvoiceExtractor, get_invoice_extractor

SessionDep = Annotated[AsyncSession, Depends(get_session)]
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]


async def get_repos(session: SessionDep, user_id: CurrentUserId) -> SqlRepoBundle:
    return build_sql_repos(session=session, user_id=user_id)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]
ExtractorDep = Annotated[InvoiceExtractor, Depends(get_invoice_extractor)]
