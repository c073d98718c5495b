"""
Unit tests for LeadService - ledger/scoring hooks fired by lead creation and status changes.
"""
import pytest
from datetime import datetime, UTC
from unittest.mock import AsyncMock, MagicMock, call

from sqlalchemy.exc import OperationalError

from prm.models.lead import Lead, LeadStatus
from prm.models.partner import Partner
from prm.schemas.lead import LeadCreate, LeadUpdate
from prm.services.lead_service import LeadService, StatusHistoryWriteError
from prm.services.partner_service import PartnerNotFoundError

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=UTC)


def _make_service(partner_exists=True):
    """LeadService whose ledger and scoring calls are recorded on one parent mock, in order."""
    calls = MagicMock()

    repo = MagicMock()
    repo.db = MagicMock()
    # Savepoint context manager must not swallow exceptions
    repo.db.begin_nested.return_value.__aexit__ = AsyncMock(return_value=False)

    async def _create(lead):
        lead.id = 42
        return lead

    repo.create = AsyncMock(side_effect=_create)
    repo.save = AsyncMock(side_effect=lambda x: x)

    partner_repo = MagicMock()
    partner_repo.get_by_id = AsyncMock(
        return_value=Partner(id=7, name="P", contact_email="p@test") if partner_exists else None
    )

    ledger = MagicMock()
    ledger.append = AsyncMock()
    scoring = MagicMock()
    scoring.update_partner_performance = AsyncMock()
    calls.attach_mock(ledger.append, "append")
    calls.attach_mock(scoring.update_partner_performance, "update_partner_performance")

    svc = LeadService(repo, partner_repo, ledger, scoring, clock=lambda: NOW)
    return svc, calls


def _lead(status=LeadStatus.NEW, partner_id=7):
    return Lead(id=42, lead_name="L", partner_id=partner_id, status=status, created_date=NOW)


class TestCreateLead:

    @pytest.mark.asyncio
    async def test_create_with_partner_records_then_scores(self):
        svc, calls = _make_service()

        lead = await svc.create_lead(LeadCreate(lead_name="Globex", partner_id=7, changed_by="user-1"))

        assert lead.id == 42
        assert lead.created_date == NOW
        assert calls.mock_calls == [
            call.append(42, None, LeadStatus.NEW, "user-1", NOW),
            call.update_partner_performance(7, 42, None, LeadStatus.NEW),
        ]

    @pytest.mark.asyncio
    async def test_create_with_initial_status(self):
        svc, calls = _make_service()

        await svc.create_lead(LeadCreate(lead_name="Globex", partner_id=7, status="qualified"))

        assert calls.mock_calls[1] == call.update_partner_performance(7, 42, None, LeadStatus.QUALIFIED)

    @pytest.mark.asyncio
    async def test_create_without_partner_is_not_recorded(self):
        svc, calls = _make_service()

        await svc.create_lead(LeadCreate(lead_name="Initech"))

        assert calls.mock_calls == []

    @pytest.mark.asyncio
    async def test_create_with_unknown_partner_raises(self):
        svc, calls = _make_service(partner_exists=False)

        with pytest.raises(PartnerNotFoundError):
            await svc.create_lead(LeadCreate(lead_name="Initech", partner_id=999))

        svc.repo.create.assert_not_awaited()


class TestChangeStatus:

    @pytest.mark.asyncio
    async def test_status_change_records_then_scores(self):
        svc, calls = _make_service()
        lead = _lead()

        result = await svc.change_status(lead, LeadStatus.CONTACTED, changed_by="user-2")

        assert result.status == LeadStatus.CONTACTED
        assert calls.mock_calls == [
            call.append(42, LeadStatus.NEW, LeadStatus.CONTACTED, "user-2", NOW),
            call.update_partner_performance(7, 42, LeadStatus.NEW, LeadStatus.CONTACTED),
        ]

    @pytest.mark.asyncio
    async def test_same_status_is_ignored(self):
        svc, calls = _make_service()

        await svc.change_status(_lead(LeadStatus.QUALIFIED), LeadStatus.QUALIFIED)

        assert calls.mock_calls == []
        svc.repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_status_change_without_partner_only_records(self):
        svc, calls = _make_service()

        await svc.change_status(_lead(partner_id=None), LeadStatus.LOST)

        assert calls.mock_calls == [call.append(42, LeadStatus.NEW, LeadStatus.LOST, None, NOW)]

    @pytest.mark.asyncio
    async def test_ledger_failure_still_scores_then_raises(self):
        svc, calls = _make_service()
        ledger_error = OperationalError("INSERT", {}, Exception("disk I/O error"))
        svc.ledger.append.side_effect = ledger_error

        with pytest.raises(StatusHistoryWriteError) as exc_info:
            await svc.change_status(_lead(), LeadStatus.CONTACTED)

        assert exc_info.value.lead_id == 42
        assert exc_info.value.__cause__ is ledger_error

        svc.scoring.update_partner_performance.assert_awaited_once_with(
            7, 42, LeadStatus.NEW, LeadStatus.CONTACTED
        )

    @pytest.mark.asyncio
    async def test_scoring_failure_propagates(self):
        svc, _ = _make_service()
        svc.scoring.update_partner_performance.side_effect = OperationalError("UPDATE", {}, Exception("locked"))

        with pytest.raises(OperationalError):
            await svc.change_status(_lead(), LeadStatus.CONTACTED)

        svc.ledger.append.assert_awaited_once()


class TestUpdateLead:

    @pytest.mark.asyncio
    async def test_update_without_status_change_skips_hooks(self):
        svc, calls = _make_service()
        lead = _lead()

        await svc.update_lead(lead, LeadUpdate(lead_name="Renamed"))

        assert lead.lead_name == "Renamed"
        assert calls.mock_calls == []

    @pytest.mark.asyncio
    async def test_status_change_is_scored_for_previous_partner(self):
        svc, calls = _make_service()
        lead = _lead(partner_id=7)

        await svc.update_lead(lead, LeadUpdate(partner_id=8, status="converted"))

        assert lead.partner_id == 8
        assert calls.mock_calls[1] == call.update_partner_performance(
            7, 42, LeadStatus.NEW, LeadStatus.CONVERTED
        )

    @pytest.mark.asyncio
    async def test_assigning_partner_with_status_change_is_not_scored(self):
        svc, calls = _make_service()
        lead = _lead(partner_id=None)

        await svc.update_lead(lead, LeadUpdate(partner_id=7, status="Contacted"))

        assert calls.mock_calls == [call.append(42, LeadStatus.NEW, LeadStatus.CONTACTED, None, NOW)]

    @pytest.mark.asyncio
    async def test_explicit_null_partner_unassigns(self):
        svc, calls = _make_service()
        lead = _lead(partner_id=7)

        await svc.update_lead(lead, LeadUpdate.model_validate({"partner_id": None}))

        assert lead.partner_id is None
        svc.partner_repo.get_by_id.assert_not_awaited()
        assert calls.mock_calls == []

    @pytest.mark.asyncio
    async def test_omitted_partner_is_kept(self):
        svc, _ = _make_service()
        lead = _lead(partner_id=7)

        await svc.update_lead(lead, LeadUpdate.model_validate({"value": "10.50"}))

        assert lead.partner_id == 7
