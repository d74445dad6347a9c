# Builds the plain-dict views handed to the rendering layer.

import logging
from typing import Dict, Any, List, Mapping, Optional, Sequence

from .matcher import MATCH_SCALE, Match, match_percentage
from .models import Archetype, CompassDataset
from .session import CompassSession, SessionState

logger = logging.getLogger(__name__)

DEFAULT_ICON = "🏴"
RANK_MEDALS = ("gold", "silver", "bronze")


def progress(session: CompassSession) -> Dict[str, Any]:
    answered = session.answered_total
    total = session.total_questions
    percent = min(100.0, answered / total * 100) if total else 0.0
    return {"answered": answered, "total": total, "percent": percent}


def axis_bars(dataset: CompassDataset, profile: Mapping[str, float]) -> List[Dict[str, Any]]:
    """Bar positions per axis: the right share is (value + 100) / 2, the left share the rest."""
    bars = []
    for axis_id, axis in dataset.meta.axes.items():
        value = profile.get(axis_id, 0.0)
        right_pct = (value + 100) / 2
        bars.append({
            "axis": axis_id,
            "name": axis.name,
            "left_label": axis.left,
            "right_label": axis.right,
            "value": value,
            "left_pct": 100 - right_pct,
            "right_pct": right_pct,
        })
    return bars


def question_view(session: CompassSession) -> Optional[Dict[str, Any]]:
    """Everything the quiz screen needs for the current question, or None when nothing is shown."""
    current = session.current
    if current is None:
        return None
    return {
        "text": current.question.text,
        "options": [option.text for option in current.question.options],
        "category": current.category,
        "category_label": session.dataset.category_label(current.category) if current.category else "comprehensive",
        "multi_select": current.is_comprehensive,
        "progress": progress(session),
        "can_skip": session.can_skip(),
        "can_undo": session.can_undo(),
        "can_finish_early": session.can_finish_early(),
    }


def live_preview(session: CompassSession) -> Optional[Dict[str, Any]]:
    if session.state is not SessionState.IN_PROGRESS or not session.preview_ready():
        return None
    best = session.best_match()
    if best is None:
        return None
    return {"name": best.archetype.name, "icon": best.archetype.icon}


def top_matches(ranked: Sequence[Match], limit: int = 3, scale: float = MATCH_SCALE) -> List[Dict[str, Any]]:
    results = []
    for position, match in enumerate(ranked[:limit]):
        results.append({
            "rank": position + 1,
            "medal": RANK_MEDALS[position] if position < len(RANK_MEDALS) else None,
            "name": match.archetype.name,
            "icon": match.archetype.icon or "",
            "match_pct": int(round(match_percentage(match.distance, scale))),
            "catalog_index": match.catalog_index,
        })
    return results


def results_view(session: CompassSession) -> Dict[str, Any]:
    if session.state is not SessionState.COMPLETE:
        logger.warning(f"Building results for a session that is {session.state.value}")
    profile = session.profile()
    settings = session.settings
    return {
        "axes": axis_bars(session.dataset, profile),
        "top_matches": top_matches(session.rank(), settings.top_matches, settings.match_scale),
    }


def gallery(dataset: CompassDataset) -> List[Dict[str, Any]]:
    return [
        {"index": index, "name": ideology.display_name, "icon": ideology.icon or DEFAULT_ICON}
        for index, ideology in enumerate(dataset.ideologies)
    ]


def archetype_detail(dataset: CompassDataset, archetype: Archetype) -> Dict[str, Any]:
    """
    Full detail card for one archetype.

    Stat bars span half the track per 100 points: width is |value| / 2 and the bar
    grows right from the centre for non-negative values, left otherwise. Axes the
    archetype has no stat for are shown at 0.
    """
    stat_bars = []
    for axis_id, axis in dataset.meta.axes.items():
        value = archetype.stats.get(axis_id, 0)
        width = abs(value) / 2
        stat_bars.append({
            "axis": axis_id,
            "left_label": axis.left,
            "right_label": axis.right,
            "value": value,
            "width": width,
            "offset": 50 if value >= 0 else 50 - width,
            "direction": "right" if value >= 0 else "left",
        })

    quote = None
    if archetype.quote is not None:
        quote = {
            "origin": archetype.quote.origin,
            "trans": archetype.quote.trans or "",
            "source": archetype.quote.source or "",
        }

    return {
        "name": archetype.name,
        "icon": archetype.icon or "",
        "desc": archetype.desc,
        "stats": stat_bars,
        "figures": list(archetype.figures),
        "quote": quote,
        "books": list(archetype.books),
    }
