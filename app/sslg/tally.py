"""
Result aggregation for SSLG.

Counts are recomputed from the raw vote rows on every call, there is no
counter state to keep in sync.

18-10-2026
"""

from collections import Counter

from app.sslg.ballot import candidate_slot_key, slot_label
from app.sslg.model.enums import PositionEnum


def count_votes(votes) -> Counter:
    """
    Number of vote rows per candidate id.
    """
    return Counter(vote.candidate_id for vote in votes)


def candidate_results(candidates, votes) -> list[dict]:
    counts = count_votes(votes)
    return [
        {"candidate": candidate, "vote_count": counts.get(candidate.id, 0)}
        for candidate in candidates
    ]


def _group_order(group):
    position = group["position"]
    if position.is_grade_level:
        return (position.rank, group["target_grade_level"] or 0)
    return (position.rank, 0)


def leaders(results: list[dict]) -> list[dict]:
    """
    Candidates tied for the highest count of a group.
    """
    if not results:
        return []
    top_votes = max(r["vote_count"] for r in results)
    return [r for r in results if r["vote_count"] == top_votes]


def group_results(candidates, votes) -> list[dict]:
    """
    Per-slot results ordered by ballot position.

    Inside a group candidates are sorted by count descending; the sort is
    stable so equal counts keep the incoming candidate order.
    """
    groups = {}
    for result in candidate_results(candidates, votes):
        candidate = result["candidate"]
        key = candidate_slot_key(candidate)
        if key not in groups:
            groups[key] = {
                "key": key,
                "label": slot_label(candidate.position, candidate.target_grade_level),
                "position": PositionEnum(candidate.position),
                "target_grade_level": candidate.target_grade_level,
                "results": [],
            }
        groups[key]["results"].append(result)

    ordered = sorted(groups.values(), key=_group_order)
    for group in ordered:
        group["results"].sort(key=lambda r: r["vote_count"], reverse=True)

        total_votes = sum(r["vote_count"] for r in group["results"])
        for result in group["results"]:
            result["percentage"] = result["vote_count"] / max(total_votes, 1) * 100

        group["total_votes"] = total_votes
        group["leaders"] = leaders(group["results"])
        group["is_tie"] = len(group["leaders"]) > 1

    return ordered


def quick_winners(groups: list[dict]) -> list[dict]:
    return [
        {
            "label": group["label"],
            "leaders": group["leaders"],
            "is_tie": group["is_tie"],
        }
        for group in groups
    ]
