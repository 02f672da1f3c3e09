"""Built-in board layouts.

Each layout is an ordered list of blocks on a 24 x 100 grid; block titles are
the `## ` section names a board note must contain. Layouts are plain dicts so
that the registry validates them like any user-supplied definition.
"""
from __future__ import annotations

from typing import Any, Dict, List

from .types import LayoutInfo

BUILT_IN_LAYOUTS: Dict[str, List[Dict[str, Any]]] = {
    # urgent/important quadrants, 12 x 12 each
    "layout_eisenhower": [
        {"title": "Urgent and Important", "x": 0, "y": 0, "w": 12, "h": 12},
        {"title": "Important not Urgent", "x": 12, "y": 0, "w": 12, "h": 12},
        {"title": "Urgent not Important", "x": 0, "y": 12, "w": 12, "h": 12},
        {"title": "Neither Urgent nor Important", "x": 12, "y": 12, "w": 12, "h": 12},
    ],
    "layout_gtd": [
        {"title": "Inbox", "x": 0, "y": 0, "w": 12, "h": 8},
        {"title": "Next Actions", "x": 12, "y": 0, "w": 12, "h": 8},
        {"title": "Waiting For", "x": 0, "y": 8, "w": 8, "h": 8},
        {"title": "Projects", "x": 8, "y": 8, "w": 8, "h": 8},
        {"title": "Someday Maybe", "x": 16, "y": 8, "w": 8, "h": 8},
        {"title": "Reference", "x": 0, "y": 16, "w": 24, "h": 8},
    ],
    "layout_kanban": [
        {"title": "To Do", "x": 0, "y": 0, "w": 8, "h": 24},
        {"title": "In Progress", "x": 8, "y": 0, "w": 8, "h": 24},
        {"title": "Done", "x": 16, "y": 0, "w": 8, "h": 24},
    ],
    "layout_weekly": [
        {"title": "Monday", "x": 0, "y": 0, "w": 6, "h": 12},
        {"title": "Tuesday", "x": 6, "y": 0, "w": 6, "h": 12},
        {"title": "Wednesday", "x": 12, "y": 0, "w": 6, "h": 12},
        {"title": "Thursday", "x": 18, "y": 0, "w": 6, "h": 12},
        {"title": "Friday", "x": 0, "y": 12, "w": 8, "h": 12},
        {"title": "Weekend", "x": 8, "y": 12, "w": 8, "h": 12},
        {"title": "Notes", "x": 16, "y": 12, "w": 8, "h": 12},
    ],
    "layout_daily": [
        {"title": "Goals of the Day", "x": 0, "y": 0, "w": 12, "h": 8},
        {"title": "Priority Tasks", "x": 12, "y": 0, "w": 12, "h": 8},
        {"title": "Schedule", "x": 0, "y": 8, "w": 8, "h": 8},
        {"title": "Notes", "x": 8, "y": 8, "w": 8, "h": 8},
        {"title": "Learnings", "x": 16, "y": 8, "w": 8, "h": 8},
        {"title": "Reflections", "x": 0, "y": 16, "w": 24, "h": 8},
    ],
    "layout_project": [
        {"title": "Overview", "x": 0, "y": 0, "w": 24, "h": 6},
        {"title": "Objectives", "x": 0, "y": 6, "w": 8, "h": 9},
        {"title": "Milestones", "x": 8, "y": 6, "w": 8, "h": 9},
        {"title": "Resources", "x": 16, "y": 6, "w": 8, "h": 9},
        {"title": "Risks", "x": 0, "y": 15, "w": 12, "h": 9},
        {"title": "Tracking", "x": 12, "y": 15, "w": 12, "h": 9},
    ],
    "layout_simple": [
        {"title": "Ideas", "x": 0, "y": 0, "w": 12, "h": 24},
        {"title": "Actions", "x": 12, "y": 0, "w": 12, "h": 24},
    ],
    "layout_cornell": [
        {"title": "Notes", "x": 0, "y": 0, "w": 16, "h": 18},
        {"title": "Keywords", "x": 16, "y": 0, "w": 8, "h": 18},
        {"title": "Summary", "x": 0, "y": 18, "w": 24, "h": 6},
    ],
    "layout_tasks_dashboard": [
        {"title": "Today", "x": 0, "y": 0, "w": 8, "h": 12},
        {"title": "This Week", "x": 8, "y": 0, "w": 8, "h": 12},
        {"title": "Overdue", "x": 16, "y": 0, "w": 8, "h": 12},
        {"title": "Active Projects", "x": 0, "y": 12, "w": 12, "h": 12},
        {"title": "Statistics", "x": 12, "y": 12, "w": 12, "h": 12},
    ],
}


def _info(name: str, display_name: str, description: str, category: str) -> LayoutInfo:
    titles = [b["title"] for b in BUILT_IN_LAYOUTS[name]]
    return LayoutInfo(
        name=name,
        display_name=display_name,
        description=description,
        sections=titles,
        block_count=len(titles),
        category=category,
    )


LAYOUT_INFO: Dict[str, LayoutInfo] = {
    i.name: i
    for i in (
        _info("layout_eisenhower", "Eisenhower Matrix",
              "Prioritise by urgency and importance.", "productivity"),
        _info("layout_gtd", "Getting Things Done (GTD)",
              "Capture, clarify and organise commitments.", "productivity"),
        _info("layout_kanban", "Kanban Board",
              "Visualise work in progress across a simple flow.", "workflow"),
        _info("layout_weekly", "Weekly Planner",
              "One block per weekday plus weekend and notes.", "planning"),
        _info("layout_daily", "Daily Planner",
              "Goals, tasks and reflection for a single day.", "planning"),
        _info("layout_project", "Project Overview",
              "Objectives, milestones, resources, risks and tracking.", "project"),
        _info("layout_simple", "Simple Board",
              "Two columns for ideas and actions.", "basic"),
        _info("layout_cornell", "Cornell Notes",
              "Notes, keywords and a summary.", "notes"),
        _info("layout_tasks_dashboard", "Tasks Dashboard",
              "Tasks grouped by time horizon and project.", "integration"),
    )
}
