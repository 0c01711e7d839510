"""Rubric score aggregation.

Turns per-criterion scores into category subtotals, a 0-100 total and a
recommendation label. Everything here is pure: callers load the scores,
call `score_evaluation` and persist the returned report themselves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union


class ScoreValidationError(ValueError):
    """Raised when a score cannot be aggregated (unknown category, out of range...)."""


class Category(str, Enum):
    COMPLEJIDAD = "complejidad"
    MERCADO = "mercado"
    ESCALABILIDAD = "escalabilidad"
    EQUIPO = "equipo"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ScoreValidationError(f"unknown category: {value!r}")


APROBADO = "aprobado"
RECHAZADO = "rechazado"
PENDIENTE = "pendiente"
RECOMMENDATIONS = (APROBADO, RECHAZADO, PENDIENTE)

DEFAULT_APPROVAL_THRESHOLD = 70.0
DEFAULT_REJECTION_THRESHOLD = 40.0


@dataclass(frozen=True)
class ManualScore:
    """Score given by a reviewer on the 1-4 rubric."""
    criterion_id: str
    category: Category
    raw_score: float
    justification: str = ""

    SCALE_MIN = 1
    SCALE_MAX = 4


@dataclass(frozen=True)
class AIScore:
    """Score returned by the AI provider on 0-100 plus its confidence (0-1)."""
    criterion_id: str
    category: Category
    raw_score: float
    confidence: float = 0.0
    justification: str = ""

    SCALE_MIN = 0
    SCALE_MAX = 100


Score = Union[ManualScore, AIScore]


@dataclass
class ScoreReport:
    per_category: Dict[Category, float] = field(default_factory=dict)
    total: float = 0.0
    recommendation: str = PENDIENTE

    def to_dict(self):
        return {
            "perCategory": {c.value: v for c, v in self.per_category.items()},
            "total": self.total,
            "recommendation": self.recommendation,
        }


def to_number(value, what):
    # bool is an int subclass; true/false are not scores
    if isinstance(value, bool):
        raise ScoreValidationError(f"{what} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ScoreValidationError(f"{what} must be a number, got {value!r}") from e


def parse_score(data: dict) -> Score:
    """Build a score from the `{criterionId, category, rawScore, scaleMax}` form."""
    if not isinstance(data, dict):
        raise ScoreValidationError(f"malformed score: {data!r}")
    try:
        criterion_id = str(data["criterionId"])
        raw_value = data["rawScore"]
        scale_value = data["scaleMax"]
    except KeyError as e:
        raise ScoreValidationError(f"malformed score: {data!r}") from e
    raw = to_number(raw_value, f"rawScore of {criterion_id}")
    scale_max = to_number(scale_value, f"scaleMax of {criterion_id}")
    category = Category.parse(data.get("category"))
    if scale_max == ManualScore.SCALE_MAX:
        score = ManualScore(criterion_id, category, raw, data.get("justification") or "")
    elif scale_max == AIScore.SCALE_MAX:
        confidence = data.get("confidence")
        score = AIScore(criterion_id, category, raw,
                        0.0 if confidence is None else to_number(confidence, f"confidence of {criterion_id}"),
                        data.get("justification") or "")
    else:
        raise ScoreValidationError(f"unsupported scaleMax {data['scaleMax']!r} for {criterion_id}")
    validate_score(score)
    return score


def validate_score(score: Score) -> None:
    if not isinstance(score, (ManualScore, AIScore)):
        raise ScoreValidationError(f"not a score: {score!r}")
    Category.parse(score.category)
    if not score.SCALE_MIN <= score.raw_score <= score.SCALE_MAX:
        raise ScoreValidationError(
            f"raw score {score.raw_score} for {score.criterion_id} outside "
            f"{score.SCALE_MIN}-{score.SCALE_MAX}")
    if isinstance(score, AIScore) and not 0.0 <= score.confidence <= 1.0:
        raise ScoreValidationError(f"confidence {score.confidence} for {score.criterion_id} outside 0-1")


def normalize(score: Score) -> float:
    """Map a score onto 0-100 according to its source scale."""
    if isinstance(score, ManualScore):
        return score.raw_score / ManualScore.SCALE_MAX * 100.0
    if isinstance(score, AIScore):
        return score.raw_score / AIScore.SCALE_MAX * 100.0
    raise ScoreValidationError(f"not a score: {score!r}")


def recommend(total: float,
              approve_threshold: float = DEFAULT_APPROVAL_THRESHOLD,
              reject_threshold: float = DEFAULT_REJECTION_THRESHOLD) -> str:
    if total >= approve_threshold:
        return APROBADO
    if total < reject_threshold:
        return RECHAZADO
    return PENDIENTE


def score_evaluation(scores: Iterable[Score],
                     weights: Optional[Dict[str, float]] = None,
                     approve_threshold: float = DEFAULT_APPROVAL_THRESHOLD,
                     reject_threshold: float = DEFAULT_REJECTION_THRESHOLD) -> ScoreReport:
    """Aggregate criterion scores into a ScoreReport.

    Each category subtotal is the (weighted) mean of the normalized scores
    present for it; the total is the plain mean of the subtotals that exist,
    so an unanswered category is left out instead of counting as zero.
    An empty input is not an error: it yields total 0 and `pendiente`.
    """
    scores = list(scores)
    if not scores:
        return ScoreReport()
    weights = weights or {}

    sums = {}
    weight_sums = {}
    for s in scores:
        validate_score(s)
        category = Category.parse(s.category)
        w = float(weights.get(s.criterion_id, 1.0))
        if w <= 0:
            raise ScoreValidationError(f"weight for {s.criterion_id} must be positive")
        sums[category] = sums.get(category, 0.0) + normalize(s) * w
        weight_sums[category] = weight_sums.get(category, 0.0) + w

    # keep enum order so reports are stable regardless of input order
    per_category = {c: sums[c] / weight_sums[c] for c in Category if c in sums}
    total = sum(per_category.values()) / len(per_category)
    total = round(total, 2)
    return ScoreReport(
        per_category={c: round(v, 2) for c, v in per_category.items()},
        total=total,
        recommendation=recommend(total, approve_threshold, reject_threshold),
    )


def reconcile_scores(manual: Iterable[ManualScore], ai: Iterable[AIScore]) -> List[Score]:
    """Merge both scoring paths, the manual score winning for a criterion."""
    merged = {}
    for s in ai:
        merged[s.criterion_id] = s
    for s in manual:
        merged[s.criterion_id] = s
    return list(merged.values())


def average_confidence(scores: Iterable[Score]) -> Optional[float]:
    """Mean confidence of a reconciled score set; reviewer scores count as 1.0."""
    values = [1.0 if isinstance(s, ManualScore) else s.confidence for s in scores]
    if not values:
        return None
    return round(sum(values) / len(values), 3)
