from enum import Enum, IntEnum

class MentorLevel(IntEnum):
    NEW = 1           # Default tier
    TRUSTED = 2       # >= 3 reviews, rating >= 3.5
    EXPERIENCED = 3   # >= 10 reviews, rating >= 4.0
    TOP = 4           # >= 25 reviews, rating >= 4.5

LEVEL_TITLES = {
    MentorLevel.NEW: "New Mentor",
    MentorLevel.TRUSTED: "Trusted Mentor",
    MentorLevel.EXPERIENCED: "Experienced Mentor",
    MentorLevel.TOP: "Top Mentor",
}

class Badge(str, Enum):
    STAR_MENTOR = "StarMentor"
    EXPERIENCED_MENTOR = "ExperiencedMentor"
    COMMUNITY_LEADER = "CommunityLeader"
    TRUSTED_MENTOR = "TrustedMentor"
    COMPLETE_PROFILE = "CompleteProfile"
    WITH_PHOTO = "WithPhoto"

class SuspicionReason(str, Enum):
    EXTREME_SCORES = "extreme_scores"    # All sub-scores at 6 or all at 1
    TOO_RECENT = "too_recent"            # Younger than the recency window
    DUPLICATE_REVIEW = "duplicate_review"
    SAME_DAY_REVIEW = "same_day_review"
