"""Tests for the leads, pipeline and payroll services."""

import pytest
from pydantic import ValidationError

from core.backend_client import BackendError
from models.crm import Deal, Lead, LeadCreate, PayrollRecord
from services.leads import create_lead, filter_leads, list_leads
from services.payroll import calculate_net_salary, fetch_payroll, net_salary, summarize_payroll
from services.pipeline import group_deals_by_stage, list_deals, summarize_pipeline


# ─────────────────────────────────────────────────────────────────────────────
# Leads
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def leads_backend(fake_backend):
    fake_backend.tables["leads"] = [
        {"id": 1, "title": "Acme renewal", "value": 1200, "status": "new", "created_at": "2024-03-01T10:00:00Z"},
        {"id": 2, "title": "Globex expansion", "value": None, "status": "qualified", "created_at": "2024-03-05T10:00:00Z"},
        {"id": 3, "title": "ACME add-on", "value": 300, "status": "won", "created_at": "2024-02-20T10:00:00Z"},
    ]
    return fake_backend


class TestLeads:
    @pytest.mark.asyncio
    async def test_list_newest_first(self, leads_backend, backend_client):
        leads, skipped = await list_leads(backend_client)

        assert [lead.id for lead in leads] == [2, 1, 3]
        assert skipped == []
        assert leads[0].value == 0.0
        (params,) = leads_backend.selects("leads")
        assert ("order", "created_at.desc") in params

    @pytest.mark.asyncio
    async def test_list_skips_invalid_rows(self, leads_backend, backend_client, capsys):
        leads_backend.tables["leads"].append({"id": 4, "value": 10, "created_at": "2024-03-09T10:00:00Z"})

        leads, skipped = await list_leads(backend_client)

        assert [lead.id for lead in leads] == [2, 1, 3]
        assert len(skipped) == 1
        assert skipped[0].startswith("Skipped lead 4: title")
        assert "Warning: Skipped lead 4" in capsys.readouterr().out

    def test_filter_case_insensitive(self):
        leads = [Lead(id=1, title="Acme renewal"), Lead(id=2, title="Globex"), Lead(id=3, title="ACME add-on")]

        assert [lead.id for lead in filter_leads(leads, "acme")] == [1, 3]
        assert [lead.id for lead in filter_leads(leads, "")] == [1, 2, 3]
        assert [lead.id for lead in filter_leads(leads, None)] == [1, 2, 3]
        assert filter_leads(leads, "initech") == []

    @pytest.mark.asyncio
    async def test_create_lead(self, leads_backend, backend_client):
        lead = await create_lead(
            backend_client,
            LeadCreate(title="  Initech  ", value=500, source="Referral"),
            created_by="user-1",
        )

        assert lead.title == "Initech"
        assert lead.status == "new"
        stored = leads_backend.tables["leads"][-1]
        assert stored["created_by"] == "user-1"
        assert stored["value"] == 500

    @pytest.mark.asyncio
    async def test_create_rejects_invalid_stored_row(self, backend_client, monkeypatch):
        async def insert(table, row):
            return {"title": row["title"]}  # no id

        monkeypatch.setattr(backend_client, "insert", insert)

        with pytest.raises(BackendError, match="Invalid row returned"):
            await create_lead(backend_client, LeadCreate(title="Initech"))

    def test_lead_create_requires_title(self):
        with pytest.raises(ValidationError):
            LeadCreate(title="   ")

    def test_lead_create_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            LeadCreate(title="x", status="dormant")


# ─────────────────────────────────────────────────────────────────────────────
# Pipeline
# ─────────────────────────────────────────────────────────────────────────────


def make_deals():
    return [
        Deal(id=1, title="A", value=1000, stage="proposal"),
        Deal(id=2, title="B", value=500, stage="prospecting"),
        Deal(id=3, title="C", value=250, stage="proposal"),
        Deal(id=4, title="D", value=4000, stage="closed_won"),
        Deal(id=5, title="E", value=100, stage="on_hold"),
        Deal(id=6, title="F", value=900, stage="closed_lost"),
    ]


class TestPipeline:
    def test_groups_in_stage_order(self):
        groups = group_deals_by_stage(make_deals())

        assert list(groups) == [
            "prospecting",
            "qualification",
            "proposal",
            "negotiation",
            "closed_won",
            "closed_lost",
            "on_hold",
        ]
        assert [d.id for d in groups["proposal"]] == [1, 3]
        assert groups["qualification"] == []

    def test_summary_totals(self):
        summary = summarize_pipeline(make_deals())
        by_stage = {s["stage"]: s for s in summary["stages"]}

        assert summary["deal_count"] == 6
        assert summary["total_value"] == 6750
        assert summary["open_value"] == 1850
        assert by_stage["proposal"]["count"] == 2
        assert by_stage["proposal"]["total_value"] == 1250

    @pytest.mark.asyncio
    async def test_list_deals_skips_invalid_rows(self, fake_backend, backend_client):
        fake_backend.tables["deals"] = [
            {"id": 1, "title": "Acme", "value": 1000, "stage": "proposal", "created_at": "2024-03-01"},
            {"id": 2, "value": 500, "stage": "proposal", "created_at": "2024-03-02"},
        ]

        deals, skipped = await list_deals(backend_client)

        assert [d.id for d in deals] == [1]
        assert skipped[0].startswith("Skipped deal 2")

    def test_empty_pipeline(self):
        summary = summarize_pipeline([])
        assert summary["total_value"] == 0
        assert all(s["count"] == 0 for s in summary["stages"])


# ─────────────────────────────────────────────────────────────────────────────
# Payroll
# ─────────────────────────────────────────────────────────────────────────────


class TestPayroll:
    def test_net_salary(self):
        assert calculate_net_salary(5000, 750.5, 1200.25) == 4550.25

    def test_net_salary_defaults(self):
        assert calculate_net_salary(3000) == 3000

    def test_negative_component_rejected(self):
        with pytest.raises(ValueError, match="deductions"):
            calculate_net_salary(3000, 0, -10)

    def test_summary(self):
        records = [
            PayrollRecord(id=1, employee_id=1, month=3, year=2024, basic_salary=5000, allowances=500, deductions=800),
            PayrollRecord(id=2, employee_id=2, month=3, year=2024, basic_salary=4000, deductions=None),
        ]

        summary = summarize_payroll(records)

        assert net_salary(records[0]) == 4700
        assert summary == {
            "employee_count": 2,
            "total_basic": 9000,
            "total_allowances": 500,
            "total_deductions": 800,
            "total_net": 8700,
        }

    @pytest.mark.asyncio
    async def test_fetch_payroll_for_period(self, fake_backend, backend_client):
        fake_backend.tables["payroll"] = [
            {"id": 1, "employee_id": 1, "month": 3, "year": 2024, "basic_salary": 5000,
             "employee": {"full_name": "Dana Reyes"}},
            {"id": 2, "employee_id": 1, "month": 2, "year": 2024, "basic_salary": 5000},
        ]

        records, skipped = await fetch_payroll(backend_client, 2024, 3)

        assert [r.id for r in records] == [1]
        assert records[0].employee_name == "Dana Reyes"
        assert skipped == []

    @pytest.mark.asyncio
    async def test_fetch_payroll_skips_invalid_rows(self, fake_backend, backend_client):
        fake_backend.tables["payroll"] = [
            {"id": 1, "employee_id": 1, "month": 3, "year": 2024, "basic_salary": 5000},
            {"id": 2, "employee_id": 2, "month": 3, "year": 2024, "basic_salary": -100},
        ]

        records, skipped = await fetch_payroll(backend_client, 2024, 3)

        assert [r.id for r in records] == [1]
        assert skipped[0].startswith("Skipped payroll record 2: basic_salary")
