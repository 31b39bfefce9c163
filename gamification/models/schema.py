"""
Data structures for couple alignment scoring.

Defines the value objects exchanged between the scoring engine and its
callers. Everything here is a plain dataclass: the engine computes these on
demand from history supplied by the caller and never mutates them.

Factor Categories (8 total):
- communication_alignment, financial_values_match, goal_compatibility,
  spending_harmony, future_planning_sync, conflict_resolution,
  transparency_level, session_consistency
"""

import numbers
from dataclasses import dataclass, field, asdict, fields
from typing import Optional, Dict, Any, List, Tuple
from enum import Enum


class ScoreFactor(Enum):
    """The eight alignment factor categories."""
    COMMUNICATION_ALIGNMENT = "communication_alignment"
    FINANCIAL_VALUES_MATCH = "financial_values_match"
    GOAL_COMPATIBILITY = "goal_compatibility"
    SPENDING_HARMONY = "spending_harmony"
    FUTURE_PLANNING_SYNC = "future_planning_sync"
    CONFLICT_RESOLUTION = "conflict_resolution"
    TRANSPARENCY_LEVEL = "transparency_level"
    SESSION_CONSISTENCY = "session_consistency"


SCORE_FACTOR_KEYS: Tuple[str, ...] = tuple(f.value for f in ScoreFactor)


class Difficulty(Enum):
    """Effort tag attached to an improvement suggestion."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ScoreTrendDirection(Enum):
    """Direction of a score history."""
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class HistoryTrigger(Enum):
    """Reason a score history entry was recorded."""
    SESSION_COMPLETION = "session_completion"
    MANUAL_UPDATE = "manual_update"
    STREAK_BONUS = "streak_bonus"
    MILESTONE_ACHIEVEMENT = "milestone_achievement"


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not low <= value <= high:
        raise ValueError(f"{name} must be in [{low}, {high}], got {value}")


def _as_factor_key(category: Any) -> str:
    """Normalize a ScoreFactor or its string value to the string key."""
    if isinstance(category, ScoreFactor):
        return category.value
    if category not in SCORE_FACTOR_KEYS:
        raise ValueError(f"Unknown score factor: {category!r}")
    return category


@dataclass
class ScoreFactors:
    """
    Complete set of factor sub-scores for one couple.

    Every value is on a 0-100 scale. Partial factor sets (e.g. the output of
    a single session) are plain dictionaries; this class is the validated
    full record.
    """
    communication_alignment: float
    financial_values_match: float
    goal_compatibility: float
    spending_harmony: float
    future_planning_sync: float
    conflict_resolution: float
    transparency_level: float
    session_consistency: float

    def __post_init__(self):
        """Validate 0-100 bounds."""
        for key in SCORE_FACTOR_KEYS:
            _check_range(key, getattr(self, key), 0, 100)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary in canonical factor order."""
        return {key: getattr(self, key) for key in SCORE_FACTOR_KEYS}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "ScoreFactors":
        """Create from dictionary. All eight keys are required."""
        missing = [key for key in SCORE_FACTOR_KEYS if key not in data]
        if missing:
            raise ValueError(f"Missing score factors: {missing}")
        return cls(**{key: data[key] for key in SCORE_FACTOR_KEYS})


@dataclass
class ScoreWeights:
    """
    Importance weight for each factor when aggregating an overall score.

    Weights are in [0, 1] and need not sum to 1; the aggregator normalizes
    by the total weight of the factors actually present.
    """
    communication_alignment: float = 0.20
    financial_values_match: float = 0.18
    goal_compatibility: float = 0.16
    spending_harmony: float = 0.15
    future_planning_sync: float = 0.12
    conflict_resolution: float = 0.10
    transparency_level: float = 0.05
    session_consistency: float = 0.04

    def __post_init__(self):
        """Validate 0-1 bounds."""
        for key in SCORE_FACTOR_KEYS:
            _check_range(f"weight {key}", getattr(self, key), 0, 1)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary in canonical factor order."""
        return {key: getattr(self, key) for key in SCORE_FACTOR_KEYS}

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "ScoreWeights":
        """Create from dictionary; missing keys keep their defaults."""
        unknown = set(d) - set(SCORE_FACTOR_KEYS)
        if unknown:
            raise ValueError(f"Unknown weight keys: {sorted(unknown)}")
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScoreWeights":
        """Create from main config dictionary (``scoring.weights``)."""
        weights_config = (config.get("scoring") or {}).get("weights") or {}
        return cls.from_dict(weights_config)


@dataclass(frozen=True)
class SessionResponse:
    """
    One answered question pair from a session.

    Created once both partners have answered; immutable once scored.

    Attributes:
        question_id: Identifier of the question
        user_answer: Answer token from the first partner
        partner_answer: Answer token from the second partner
        compatibility_score: Compatibility of the answer pair (0-100)
        weight: Question importance weight
        category: Factor key this question contributes to
    """
    question_id: str
    user_answer: Any
    partner_answer: Any
    compatibility_score: float
    weight: float
    category: str

    def __post_init__(self):
        """Validate score range and normalize the category key."""
        _check_range("compatibility_score", self.compatibility_score, 0, 100)
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")
        # frozen: bypass __setattr__ to store the normalized key
        object.__setattr__(self, "category", _as_factor_key(self.category))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class ScoreHistoryEntry:
    """
    Timestamped score snapshot.

    History is append-only and ordered oldest to newest by the caller.
    """
    date: str  # ISO 8601
    score: float  # 0-100
    change: float  # +/- change from previous entry
    trigger: HistoryTrigger = HistoryTrigger.SESSION_COMPLETION
    session_id: Optional[str] = None
    factors: Optional[Dict[str, float]] = None

    def __post_init__(self):
        _check_range("score", self.score, 0, 100)
        if isinstance(self.trigger, str):
            object.__setattr__(self, "trigger", HistoryTrigger(self.trigger))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with string values."""
        result = {
            "date": self.date,
            "score": self.score,
            "change": self.change,
            "trigger": self.trigger.value,
        }
        if self.session_id is not None:
            result["session_id"] = self.session_id
        if self.factors is not None:
            result["factors"] = dict(self.factors)
        return result


@dataclass
class ImprovementSuggestion:
    """A ranked suggestion for raising one weak factor."""
    category: str
    current_score: float
    potential_gain: float
    difficulty: Difficulty
    suggestion: str
    action_items: List[str]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "category": self.category,
            "current_score": self.current_score,
            "potential_gain": self.potential_gain,
            "difficulty": self.difficulty.value,
            "suggestion": self.suggestion,
            "action_items": list(self.action_items),
        }


@dataclass(frozen=True)
class MilestonePrediction:
    """
    Estimate of days until a target score is reached.

    ``days_estimated == -1`` with ``confidence == 0.0`` means the estimate is
    unknown (too little history or no positive momentum).
    """
    days_estimated: int
    confidence: float

    @property
    def is_known(self) -> bool:
        return self.days_estimated != -1

    def to_dict(self) -> Dict[str, Any]:
        return {"days_estimated": self.days_estimated, "confidence": self.confidence}


@dataclass(frozen=True)
class SessionBonuses:
    """Bonus components awarded for one session."""
    completion_bonus: float
    time_bonus: int
    streak_bonus: int

    @property
    def total(self) -> float:
        return self.completion_bonus + self.time_bonus + self.streak_bonus

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScoringSession:
    """
    Scored result of one completed session.

    Attributes:
        session_id: Identifier of the session
        responses: Scored response pairs
        completion_bonus: Points for completing the question set
        time_bonus: Points for staying near the planned duration
        consistency_bonus: Points for the current streak
        total_points: Bonus-adjusted overall score (0-100)
        factor_impacts: Per-category factor scores from this session
    """
    session_id: str
    responses: List[SessionResponse]
    completion_bonus: float
    time_bonus: int
    consistency_bonus: int
    total_points: int
    factor_impacts: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "session_id": self.session_id,
            "responses": [r.to_dict() for r in self.responses],
            "completion_bonus": self.completion_bonus,
            "time_bonus": self.time_bonus,
            "consistency_bonus": self.consistency_bonus,
            "total_points": self.total_points,
            "factor_impacts": dict(self.factor_impacts),
        }


@dataclass
class ScoreTrend:
    """Summary of a score history window."""
    direction: ScoreTrendDirection
    magnitude: float
    consistency: float
    prediction: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "magnitude": self.magnitude,
            "consistency": self.consistency,
            "prediction": self.prediction,
        }


@dataclass
class PartnerComparison:
    """How two partners' factor profiles line up."""
    score_difference: int  # -100 to 100
    stronger_areas: List[str]
    growth_areas: List[str]
    sync_level: str  # very_aligned | mostly_aligned | somewhat_aligned | needs_work
    encouragement_message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score_difference": self.score_difference,
            "stronger_areas": list(self.stronger_areas),
            "growth_areas": list(self.growth_areas),
            "sync_level": self.sync_level,
            "encouragement_message": self.encouragement_message,
        }


@dataclass
class ProgressMetrics:
    """
    Aggregate progress view for one couple.

    Attributes:
        score_velocity: Points gained per week
        streak_momentum: Current streak relative to the longest streak
        engagement_level: "low", "medium" or "high"
        next_milestone_eta: Days to the target score (-1 if unknown)
        improvement_suggestions: Ranked suggestions, weakest factor first
        partner_comparison: Optional comparison against the partner's factors
    """
    score_velocity: float
    streak_momentum: float
    engagement_level: str
    next_milestone_eta: int
    improvement_suggestions: List[ImprovementSuggestion] = field(default_factory=list)
    partner_comparison: Optional[PartnerComparison] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "score_velocity": self.score_velocity,
            "streak_momentum": self.streak_momentum,
            "engagement_level": self.engagement_level,
            "next_milestone_eta": self.next_milestone_eta,
            "improvement_suggestions": [s.to_dict() for s in self.improvement_suggestions],
        }
        if self.partner_comparison:
            result["partner_comparison"] = self.partner_comparison.to_dict()
        return result


# =============================================================================
# Streak and reward records (produced by the persistence layer)
# =============================================================================

@dataclass
class StreakMilestone:
    """A streak length target, e.g. 7, 30 or 100 days."""
    target: int
    achieved: bool = False
    achieved_date: Optional[str] = None
    reward_claimed: bool = False
    badge_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StreakData:
    """Streak counters for one couple."""
    couple_id: str
    current_streak: int = 0
    longest_streak: int = 0
    total_sessions: int = 0
    last_session_date: Optional[str] = None
    streak_type: str = "weekly"
    milestone_progress: List[StreakMilestone] = field(default_factory=list)

    def __post_init__(self):
        for attr in ["current_streak", "longest_streak", "total_sessions"]:
            if getattr(self, attr) < 0:
                raise ValueError(f"{attr} must be non-negative, got {getattr(self, attr)}")
        self.milestone_progress = [
            StreakMilestone(**m) if isinstance(m, dict) else m
            for m in self.milestone_progress
        ]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StreakData":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class Milestone:
    """A score milestone shown to the couple."""
    id: str
    type: str  # score | streak | session | improvement
    target_value: float
    current_progress: float
    title: str
    description: str = ""
    estimated_completion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Badge:
    """
    Unlockable badge.

    Attributes:
        id: Badge identifier
        name: Display name
        rarity: common | rare | epic | legendary
        criteria_type: streak | score | session_count | improvement
        criteria_value: Threshold that unlocks the badge
        celebration_message: Text shown when unlocked
    """
    id: str
    name: str
    rarity: str
    criteria_type: str
    criteria_value: float
    celebration_message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
