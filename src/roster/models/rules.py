"""
Business Rules and Constants
============================
Central source of truth for qualification skills, role competencies,
scoring thresholds and display labels.
"""
from typing import Dict, List, Tuple

# Qualification → skills granted, each at a fixed level (1-5)
QUALIFICATION_SKILLS: Dict[str, List[Tuple[str, int]]] = {
    "diploma_ece": [
        ("Child Development", 4),
        ("Curriculum Planning", 4),
    ],
    "certificate_iii": [
        ("Child Development", 3),
        ("Behaviour Management", 3),
    ],
    "first_aid": [
        ("First Aid", 5),
    ],
    "food_safety": [
        ("Food Safety", 5),
    ],
    "working_with_children": [
        ("Child Safety", 5),
    ],
    "bachelor_ece": [
        ("Child Development", 5),
        ("Curriculum Planning", 5),
        ("Special Needs Support", 4),
    ],
    "masters_ece": [
        ("Child Development", 5),
        ("Curriculum Planning", 5),
        ("Special Needs Support", 5),
        ("Research", 5),
    ],
}

# Role → (skill, level, overrides) base competencies.
# overrides=True sets the level outright, False only raises it.
ROLE_COMPETENCIES: Dict[str, List[Tuple[str, int, bool]]] = {
    "lead_educator": [
        ("Leadership", 5, True),
        ("Parent Communication", 4, True),
    ],
    "educator": [
        ("Parent Communication", 3, True),
        ("Behaviour Management", 3, False),
    ],
}

ROLE_LABELS: Dict[str, str] = {
    "lead_educator": "Lead Educator",
    "educator": "Educator",
    "assistant": "Assistant",
    "cook": "Cook",
    "admin": "Admin",
}

# Skill everybody is assumed to hold at a basic level
FIRST_AID_SKILL = "First Aid"
FIRST_AID_FLOOR = 2

# Scoring
MIN_SKILL_LEVEL = 1
MAX_SKILL_LEVEL = 5
MEETS_LEVEL_BASE = 70       # Contribution for exactly meeting the level
EXCEED_LEVEL_BONUS = 10     # Per level above the requirement
PARTIAL_CREDIT_MAX = 50     # Ceiling for partial credit below the requirement
NEUTRAL_SCORE = 50          # Score when a requirement carries no weighted skills
MANDATORY_SCORE_CAP = 40    # Ceiling for candidates failing mandatory checks
AUTO_ASSIGN_THRESHOLD = 50  # Minimum score for automatic assignment

# Recommendation bands (lower bound inclusive)
RECOMMENDATION_BANDS: List[Tuple[int, str]] = [
    (85, "excellent"),
    (70, "good"),
    (50, "acceptable"),
]
NOT_RECOMMENDED = "not_recommended"

# Day-of-week numbering: 0=Sunday ... 6=Saturday
DAY_LABELS: List[str] = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
WEEKDAY_NUMBERS = [1, 2, 3, 4, 5]
WEEKEND_NUMBERS = [0, 6]
