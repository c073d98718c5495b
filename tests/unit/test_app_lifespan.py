"""
Unit tests for application startup and shutdown.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import main


@pytest.mark.asyncio
async def test_lifespan_creates_tables_and_disposes_engine():
    engine = MagicMock()
    engine.dispose = AsyncMock()

    with patch.object(main, "setup_logging") as setup_logging, \
            patch.object(main, "init_db", new=AsyncMock()) as init_db, \
            patch.object(main, "engine", engine):
        async with main.lifespan(main.app):
            init_db.assert_awaited_once()
            engine.dispose.assert_not_awaited()

    setup_logging.assert_called_once()
    engine.dispose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_survives_unreachable_database():
    engine = MagicMock()
    engine.dispose = AsyncMock()
    init_db = AsyncMock(side_effect=ConnectionRefusedError("database down"))

    with patch.object(main, "setup_logging"), \
            patch.object(main, "init_db", new=init_db), \
            patch.object(main, "engine", engine):
        async with main.lifespan(main.app):
            pass

    init_db.assert_awaited_once()
