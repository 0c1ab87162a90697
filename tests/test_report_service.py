"""
Tests for budget and social tree reports
"""

import io

import pandas as pd
import pytest

from app.schemas.state import AppState, ExpenseItem, Guest, GuestGroup
from app.services.report_service import UNGROUPED, ReportService
from app.utils.colors import group_color, hash_string, is_nearly_gray, parse_color

@pytest.fixture
def event_state():
    """Event with two roots, one group left empty and mixed expenses"""
    return AppState(
        budget_total=10000,
        guest_groups=[
            GuestGroup(id="fam", name="Family", color="#d946ef"),
            GuestGroup(id="fr", name="Friends", color="#0ea5e9"),
            GuestGroup(id="work", name="Work", color="#10b981"),
        ],
        guests=[
            Guest(id="b", name="Bruno", group_id="fr", parent_id="a"),
            Guest(id="a", name="Ana", group_id="fam", confirmed=True),
            Guest(id="c", name="Caio", group_id="fr", parent_id="b", confirmed=True),
            Guest(id="z", name="Zeca", group_id="gone"),
        ],
        expenses=[
            ExpenseItem(id="e1", category="Cake", estimated_value=1000, actual_value=900, is_contracted=True),
            ExpenseItem(id="e2", category="Band/DJ", estimated_value=3000),
            ExpenseItem(id="e3", category="Honeymoon", estimated_value=5000, include=False),
        ],
    )

def test_budget_summary(event_state):
    """Test contracted, projected and derived totals"""
    summary = ReportService.budget_summary(event_state)

    assert summary.total_contracted == 900
    assert summary.total_projected == 3000
    assert summary.total_cost == 3900
    assert summary.balance == 6100
    assert summary.guest_count == 4
    assert summary.confirmed_count == 2
    assert summary.cost_per_guest == 975
    assert summary.progress_percent == 23

def test_budget_summary_without_expenses_or_guests():
    """Test zero totals do not divide by zero"""
    summary = ReportService.budget_summary(AppState(budget_total=500))

    assert summary.total_cost == 0
    assert summary.cost_per_guest == 0
    assert summary.progress_percent == 0
    assert summary.balance == 500

def test_social_tree_frame_ordering(event_state):
    """Test roots first, then influence, then name"""
    df = ReportService.social_tree_frame(event_state)

    assert list(df["Name"]) == ["Ana", "Zeca", "Bruno", "Caio"]
    ana = df.iloc[0]
    assert ana["Level"] == "Direct"
    assert ana["Connection"] == "Host"
    assert ana["Influence"] == 2
    caio = df[df["Name"] == "Caio"].iloc[0]
    assert caio["Level"] == "2nd degree"
    assert caio["Connection"] == "-> Ana -> Bruno"

def test_unknown_group_shows_as_ungrouped(event_state):
    """Test a guest whose group was deleted"""
    df = ReportService.social_tree_frame(event_state)
    zeca = df[df["Name"] == "Zeca"].iloc[0]

    assert zeca["Group"] == UNGROUPED
    assert zeca["Color"].startswith("#")

def test_empty_social_tree_frame():
    """Test an event without guests"""
    df = ReportService.social_tree_frame(AppState())
    assert df.empty
    assert "Connection" in df.columns

def test_influencers_frame(event_state):
    """Test ranking of guests who brought others"""
    df = ReportService.influencers_frame(event_state)

    assert list(df["Name"]) == ["Ana", "Bruno"]
    assert list(df["Rank"]) == [1, 2]
    assert list(df["Guests Brought"]) == [2, 1]

def test_groups_frame_skips_empty_groups(event_state):
    """Test per-group counts, largest group first"""
    df = ReportService.groups_frame(event_state)

    assert list(df["Group"]) == ["Friends", "Family"]
    assert list(df["Guests"]) == [2, 1]
    assert list(df["Roots"]) == [0, 1]

def test_expenses_frame_excludes_ignored_lines(event_state):
    """Test excluded expenses are left out of the budget sheet"""
    df = ReportService.expenses_frame(event_state)

    assert list(df["Category"]) == ["Cake", "Band/DJ"]
    assert list(df["Status"]) == ["Contracted", "Pending"]

def test_export_workbook(event_state):
    """Test the workbook sheets"""
    content = ReportService.export_workbook(event_state, event_name="Ana & Bruno")
    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None)

    assert list(sheets) == ["Social Tree", "Influencers", "Groups", "Budget", "Summary"]
    assert len(sheets["Social Tree"]) == 4
    summary = dict(zip(sheets["Summary"]["Metric"], sheets["Summary"]["Value"]))
    assert summary["Event"] == "Ana & Bruno"

def test_export_workbook_without_influencers():
    """Test the influencers sheet is left out when nobody brought anyone"""
    state = AppState(guests=[Guest(id="1", name="Ana")])
    content = ReportService.export_workbook(state)
    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None)

    assert "Influencers" not in sheets

def test_parse_color_formats():
    """Test supported colour notations"""
    assert parse_color("#fff") == (255, 255, 255)
    assert parse_color("#0EA5E9") == (14, 165, 233)
    assert parse_color("0ea5e9") == (14, 165, 233)
    assert parse_color("rgb(10, 20, 30)") == (10, 20, 30)
    assert parse_color("rgba(10,20,30,0.5)") == (10, 20, 30)
    assert parse_color("teal") is None
    assert parse_color("") is None
    assert parse_color(None) is None

def test_group_color_replaces_gray():
    """Test gray or missing colours get a stable palette colour"""
    gray = group_color("#888888", "Friends")
    missing = group_color(None, "Friends")

    assert gray == missing
    assert gray == group_color(None, "Friends")
    assert not is_nearly_gray(parse_color(gray))

def test_hash_string_is_stable():
    """Test FNV-1a values"""
    assert hash_string("") == 2166136261
    assert hash_string("a") == 0xE40C292C
    assert hash_string("Friends") == hash_string("Friends")

def test_hierarchy_frame(event_state):
    """Test the root-by-root outline"""
    df = ReportService.hierarchy_frame(event_state)

    assert list(df["Root"]) == ["Ana", "Ana", "Ana", "Zeca"]
    assert list(df["Name"]) == ["Ana", "Bruno", "Caio", "Zeca"]
    assert list(df["Depth"]) == [0, 1, 2, 0]
    assert list(df["Influence"]) == [2, 1, 0, 0]
