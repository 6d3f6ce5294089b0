"""
Enums for the SSLG election model.

18-10-2026
"""

import enum


class PositionEnum(str, enum.Enum):
    president = "President"
    vice_president = "Vice-President"
    secretary = "Secretary"
    treasurer = "Treasurer"
    auditor = "Auditor"
    public_information_officer = "Public Information Officer"
    protocol_officer = "Protocol Officer"
    grade_level_representative = "Grade Level Representative"

    @property
    def rank(self):
        return list(PositionEnum).index(self)

    @property
    def is_grade_level(self):
        return self is PositionEnum.grade_level_representative


class VoteErrorEnum(str, enum.Enum):
    no_votes = "no_votes"
    student_not_found = "student_not_found"
    already_voted = "already_voted"
    section_mismatch = "section_mismatch"
    invalid_candidate = "invalid_candidate"
    ineligible_candidate = "ineligible_candidate"
    duplicate_position = "duplicate_position"
    internal_error = "internal_error"


class ChangeEventEnum(str, enum.Enum):
    insert = "INSERT"
    update = "UPDATE"
    delete = "DELETE"


class ElectionEventEnum(str, enum.Enum):
    @classmethod
    def has_member_key(cls, key):
        return key in cls.__members__.values()


class ElectionPublicEventEnum(ElectionEventEnum):
    BALLOT_CAST = "ballot_cast"
    VOTES_RESET = "votes_reset"
    STUDENT_DELETED = "student_deleted"
    CANDIDATE_DELETED = "candidate_deleted"
    SECTION_DELETED = "section_deleted"
    PARTYLIST_DELETED = "partylist_deleted"


class ElectionAdminEventEnum(ElectionEventEnum):
    BALLOT_REJECTED = "ballot_rejected"
    CANDIDATE_CONFLICT = "candidate_conflict"
    ADMIN_PIN_FAIL = "admin_pin_fail"
    FACILITATOR_PIN_FAIL = "facilitator_pin_fail"
