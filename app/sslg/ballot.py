"""
Ballot composition for SSLG.

Builds the list of choices a single voter sees and keeps track of the
candidates they pick. Everything here works over already-fetched rows,
the database work lives in the cruds and the vote procedure.

18-10-2026
"""

from app.sslg.model.enums import PositionEnum


def slot_key(position: PositionEnum, target_grade_level: int | None = None) -> str:
    """
    Selection key of a ballot slot: the position, plus the target grade
    for Grade Level Representatives.
    """
    position = PositionEnum(position)
    if position.is_grade_level and target_grade_level:
        return f"{position.value}-{target_grade_level}"
    return position.value


def slot_label(position: PositionEnum, target_grade_level: int | None = None) -> str:
    position = PositionEnum(position)
    if position.is_grade_level and target_grade_level:
        return f"{position.value} (Grade {target_grade_level})"
    return position.value


def candidate_slot_key(candidate) -> str:
    return slot_key(candidate.position, candidate.target_grade_level)


def is_eligible(candidate, voter_grade_level: int) -> bool:
    """
    Grade Level Representatives are only shown to voters one grade below
    the grade they will serve; every other position is open to everyone.
    """
    if PositionEnum(candidate.position).is_grade_level:
        return candidate.target_grade_level == voter_grade_level + 1
    return True


def sort_key(candidate):
    position = PositionEnum(candidate.position)
    if position.is_grade_level:
        return (position.rank, candidate.target_grade_level or 0, candidate.full_name.casefold())
    return (position.rank, 0, candidate.full_name.casefold())


def eligible_candidates(candidates, voter_grade_level: int) -> list:
    """
    Filter and order the candidate list for a voter of the given grade.

    Positions follow the fixed ballot order, Grade Level Representatives
    are ordered by target grade and ties fall back to the candidate name,
    ignoring case.
    """
    filtered = [c for c in candidates if is_eligible(c, voter_grade_level)]
    return sorted(filtered, key=sort_key)


def group_candidates(candidates) -> list[dict]:
    """
    Group ordered candidates into ballot slots, keeping the incoming order.
    """
    groups = {}
    for candidate in candidates:
        key = candidate_slot_key(candidate)
        if key not in groups:
            groups[key] = {
                "key": key,
                "label": slot_label(candidate.position, candidate.target_grade_level),
                "position": PositionEnum(candidate.position),
                "target_grade_level": candidate.target_grade_level,
                "candidates": [],
            }
        groups[key]["candidates"].append(candidate)
    return list(groups.values())


class BallotSelections(object):
    """
    One chosen candidate per ballot slot.

    Selecting again for a slot replaces the previous choice.
    """

    def __init__(self, candidates) -> None:
        self.candidates = {c.id: c for c in candidates}
        self.selections: dict[str, str] = {}

    def __len__(self):
        return len(self.selections)

    def select(self, candidate_id: str) -> str:
        candidate = self.candidates.get(candidate_id)
        if candidate is None:
            raise KeyError(candidate_id)

        key = candidate_slot_key(candidate)
        self.selections[key] = candidate.id
        return key

    def selected(self, key: str) -> str | None:
        return self.selections.get(key)

    def to_votes(self, section_id: int) -> list[dict]:
        return [
            {"candidate_id": candidate_id, "section_id": section_id}
            for candidate_id in self.selections.values()
        ]


class Ballot(object):
    """
    Ballot for one voter: the voter, their eligible candidates grouped by
    slot, and the selections made so far.
    """

    def __init__(self, student, candidates) -> None:
        self.student = student
        self.grade_level = student.section.grade_level
        self.candidates = eligible_candidates(candidates, self.grade_level)
        self.selections = BallotSelections(self.candidates)

    @property
    def groups(self):
        return group_candidates(self.candidates)

    def select_all(self, candidate_ids: list[str]):
        for candidate_id in candidate_ids:
            self.selections.select(candidate_id)

    def to_votes(self) -> list[dict]:
        return self.selections.to_votes(self.student.section_id)
