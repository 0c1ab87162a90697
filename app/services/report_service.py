"""
Reports over an event state: budget summary, social tree tables and Excel export
"""

import io
from typing import Dict, Optional

import pandas as pd

from app.core.config import settings
from app.schemas.event import BudgetSummary
from app.schemas.state import AppState
from app.services.social_tree import SocialTreeNode, SocialTreeService
from app.utils.colors import group_color

PRIORITY_LABELS = {
    1: "Very Low",
    2: "Low",
    3: "Medium",
    4: "High",
    5: "Very High",
}

UNGROUPED = "Ungrouped"

class ReportService:
    """Read-only reports; nothing here feeds back into the editing state"""

    @staticmethod
    def budget_summary(state: AppState) -> BudgetSummary:
        """Contracted items count at their actual value, the rest at their estimate"""
        active = [e for e in state.expenses if e.include]
        total_contracted = sum(e.actual_value for e in active if e.is_contracted)
        total_projected = sum(e.estimated_value for e in active if not e.is_contracted)
        total_cost = total_contracted + total_projected
        guest_count = len(state.guests)

        return BudgetSummary(
            total_budget=state.budget_total,
            total_contracted=total_contracted,
            total_projected=total_projected,
            total_cost=total_cost,
            balance=state.budget_total - total_cost,
            guest_count=guest_count,
            confirmed_count=sum(1 for g in state.guests if g.confirmed),
            cost_per_guest=total_cost / guest_count if guest_count else 0,
            progress_percent=round(total_contracted / total_cost * 100) if total_cost else 0,
        )

    @staticmethod
    def social_tree_frame(state: AppState, tree: Optional[Dict[str, SocialTreeNode]] = None) -> pd.DataFrame:
        """One row per guest: roots first, then by influence, then by name"""
        if tree is None:
            tree = SocialTreeService.build(state.guests)
        group_by_id = {g.id: g for g in state.guest_groups}

        rows = []
        for guest in state.guests:
            node = tree.get(guest.id)
            group = group_by_id.get(guest.group_id) if guest.group_id else None
            rows.append({
                "Name": guest.name,
                "Group": group.name if group else UNGROUPED,
                "Color": group_color(group.color if group else None, group.id if group else f"group:{guest.id}"),
                "Level": SocialTreeService.level_label(node.level if node else 0),
                "Connection": SocialTreeService.format_connection_chain(node) if node else "Host",
                "Influence": node.child_count if node else 0,
                "Root": bool(node and node.is_root),
                "Confirmed": guest.confirmed,
                "Priority": PRIORITY_LABELS.get(guest.priority or 3),
            })

        df = pd.DataFrame(rows, columns=[
            "Name", "Group", "Color", "Level", "Connection", "Influence", "Root", "Confirmed", "Priority"
        ])
        if df.empty:
            return df

        df = df.sort_values(by=["Root", "Influence", "Name"], ascending=[False, False, True], kind="mergesort")
        return df.reset_index(drop=True)

    @staticmethod
    def hierarchy_frame(state: AppState, tree: Optional[Dict[str, SocialTreeNode]] = None) -> pd.DataFrame:
        """Root-by-root outline of who brought whom, in display order"""
        if tree is None:
            tree = SocialTreeService.build(state.guests)

        rows = []
        for root in SocialTreeService.build_root_trees(state.guests, tree):
            for row in SocialTreeService.flatten_tree(root):
                rows.append({
                    "Root": root.guest.name,
                    "Name": row.guest.name,
                    "Depth": row.depth,
                    "Last": bool(row.is_last and row.is_last[-1]),
                    "Influence": row.node.child_count,
                    "Confirmed": row.guest.confirmed,
                })

        return pd.DataFrame(rows, columns=["Root", "Name", "Depth", "Last", "Influence", "Confirmed"])

    @staticmethod
    def influencers_frame(
        state: AppState,
        tree: Optional[Dict[str, SocialTreeNode]] = None,
        limit: Optional[int] = None
    ) -> pd.DataFrame:
        if tree is None:
            tree = SocialTreeService.build(state.guests)
        if limit is None:
            limit = settings.TOP_INFLUENCERS_LIMIT
        group_by_id = {g.id: g for g in state.guest_groups}

        rows = []
        for rank, node in enumerate(SocialTreeService.top_influencers(state.guests, tree, limit), start=1):
            group = group_by_id.get(node.guest.group_id) if node.guest.group_id else None
            rows.append({
                "Rank": rank,
                "Name": node.guest.name,
                "Group": group.name if group else UNGROUPED,
                "Guests Brought": node.child_count,
                "Confirmed": node.guest.confirmed,
                "Root": node.is_root,
            })

        return pd.DataFrame(rows, columns=["Rank", "Name", "Group", "Guests Brought", "Confirmed", "Root"])

    @staticmethod
    def groups_frame(state: AppState, tree: Optional[Dict[str, SocialTreeNode]] = None) -> pd.DataFrame:
        """Per-group totals, largest first; empty groups are left out"""
        if tree is None:
            tree = SocialTreeService.build(state.guests)

        rows = []
        for group in state.guest_groups:
            members = [g for g in state.guests if g.group_id == group.id]
            if not members:
                continue
            rows.append({
                "Group": group.name,
                "Color": group_color(group.color, group.name),
                "Guests": len(members),
                "Confirmed": sum(1 for g in members if g.confirmed),
                "Roots": sum(1 for g in members if g.id in tree and tree[g.id].is_root),
            })

        df = pd.DataFrame(rows, columns=["Group", "Color", "Guests", "Confirmed", "Roots"])
        return df.sort_values(by="Guests", ascending=False, kind="mergesort").reset_index(drop=True)

    @staticmethod
    def expenses_frame(state: AppState) -> pd.DataFrame:
        rows = [
            {
                "Category": e.category,
                "Supplier": e.supplier or "",
                "Estimated": e.estimated_value,
                "Contracted": e.actual_value if e.is_contracted else None,
                "Status": "Contracted" if e.is_contracted else "Pending",
            }
            for e in state.expenses
            if e.include
        ]
        return pd.DataFrame(rows, columns=["Category", "Supplier", "Estimated", "Contracted", "Status"])

    @staticmethod
    def summary_frame(state: AppState, event_name: str = "") -> pd.DataFrame:
        summary = ReportService.budget_summary(state)
        rows = [
            ("Event", event_name),
            ("Guests", summary.guest_count),
            ("Confirmed", summary.confirmed_count),
            ("Pending", summary.guest_count - summary.confirmed_count),
            ("Groups", len(state.guest_groups)),
            ("Budget", summary.total_budget),
            ("Contracted", summary.total_contracted),
            ("Projected", summary.total_projected),
            ("Total Cost", summary.total_cost),
            ("Balance", summary.balance),
            ("Cost per Guest", summary.cost_per_guest),
        ]
        return pd.DataFrame(rows, columns=["Metric", "Value"])

    @staticmethod
    def export_workbook(state: AppState, event_name: str = "") -> bytes:
        """Excel workbook with the social tree, influencers, groups, budget and summary"""
        tree = SocialTreeService.build(state.guests)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            ReportService.social_tree_frame(state, tree).to_excel(writer, index=False, sheet_name="Social Tree")
            influencers = ReportService.influencers_frame(state, tree)
            if not influencers.empty:
                influencers.to_excel(writer, index=False, sheet_name="Influencers")
            ReportService.groups_frame(state, tree).to_excel(writer, index=False, sheet_name="Groups")
            ReportService.expenses_frame(state).to_excel(writer, index=False, sheet_name="Budget")
            ReportService.summary_frame(state, event_name).to_excel(writer, index=False, sheet_name="Summary")

        return buffer.getvalue()
