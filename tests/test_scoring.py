import pytest

from aceleradora.services.scoring import (
    AIScore, Category, ManualScore, ScoreValidationError, average_confidence, normalize,
    parse_score, reconcile_scores, recommend, score_evaluation,
)

CATEGORIES = list(Category)


def manual_set(value):
    """16 criteria, 4 per category, all with the same manual score."""
    return [ManualScore(f'{c.value}-{i}', c, value) for c in CATEGORIES for i in range(4)]


def test_all_max_manual_is_full_score():
    report = score_evaluation(manual_set(4))
    assert report.per_category == {c: 100.0 for c in CATEGORIES}
    assert report.total == 100.0
    assert report.recommendation == 'aprobado'


def test_all_max_ai_is_full_score():
    scores = [AIScore(f'{c.value}-{i}', c, 100, 0.9) for c in CATEGORIES for i in range(4)]
    report = score_evaluation(scores)
    assert report.total == 100.0
    assert report.recommendation == 'aprobado'


def test_all_min_ai_is_rejected():
    scores = [AIScore(f'{c.value}-{i}', c, 0, 0.9) for c in CATEGORIES for i in range(4)]
    report = score_evaluation(scores)
    assert report.total == 0.0
    assert report.recommendation == 'rechazado'


def test_low_performance_all_ones_is_rejected():
    report = score_evaluation(manual_set(1))
    assert report.total == 25.0
    assert report.recommendation == 'rechazado'


def test_empty_input_is_pending_not_rejected():
    report = score_evaluation([])
    assert report.to_dict() == {'perCategory': {}, 'total': 0, 'recommendation': 'pendiente'}


def test_same_input_same_output():
    scores = manual_set(3) + [AIScore('extra', Category.MERCADO, 42, 0.5)]
    assert score_evaluation(scores) == score_evaluation(scores)


def test_missing_categories_do_not_dilute_total():
    scores = [
        ManualScore('c1', Category.COMPLEJIDAD, 4),
        ManualScore('c2', Category.COMPLEJIDAD, 2),
        ManualScore('m1', Category.MERCADO, 3),
    ]
    report = score_evaluation(scores)
    assert set(report.per_category) == {Category.COMPLEJIDAD, Category.MERCADO}
    assert report.per_category[Category.COMPLEJIDAD] == 75.0
    assert report.per_category[Category.MERCADO] == 75.0
    assert report.total == 75.0


def test_manual_and_rescaled_ai_give_same_total():
    raw = [1, 2, 3, 4, 2, 3, 4, 4, 1, 1, 2, 3, 3, 3, 2, 4]
    manual = [ManualScore(str(i), CATEGORIES[i // 4], v) for i, v in enumerate(raw)]
    ai = [AIScore(str(i), CATEGORIES[i // 4], v / 4 * 100, 1.0) for i, v in enumerate(raw)]
    assert score_evaluation(manual).total == score_evaluation(ai).total


@pytest.mark.parametrize('total,expected', [
    (70, 'aprobado'), (69.99, 'pendiente'), (40, 'pendiente'), (39.99, 'rechazado'),
])
def test_recommendation_thresholds(total, expected):
    assert recommend(total) == expected


def test_thresholds_are_configurable():
    report = score_evaluation(manual_set(3), approve_threshold=80, reject_threshold=50)
    assert report.total == 75.0
    assert report.recommendation == 'pendiente'


def test_weights_apply_within_category():
    scores = [ManualScore('a', Category.EQUIPO, 4), ManualScore('b', Category.EQUIPO, 2)]
    report = score_evaluation(scores, weights={'a': 3})
    # (100*3 + 50*1) / 4
    assert report.per_category[Category.EQUIPO] == 87.5


def test_normalize_by_source():
    assert normalize(ManualScore('x', Category.MERCADO, 2)) == 50.0
    assert normalize(AIScore('x', Category.MERCADO, 50, 0.5)) == 50.0


def test_category_parse_is_case_insensitive():
    assert Category.parse('COMPLEJIDAD') is Category.COMPLEJIDAD
    with pytest.raises(ScoreValidationError):
        Category.parse('finanzas')


@pytest.mark.parametrize('score', [
    ManualScore('x', Category.MERCADO, 5),
    ManualScore('x', Category.MERCADO, 0),
    AIScore('x', Category.MERCADO, -1, 0.5),
    AIScore('x', Category.MERCADO, 101, 0.5),
    AIScore('x', Category.MERCADO, 50, 1.5),
])
def test_out_of_range_scores_are_rejected(score):
    with pytest.raises(ScoreValidationError):
        score_evaluation([score])


def test_unknown_category_is_rejected():
    with pytest.raises(ScoreValidationError):
        score_evaluation([ManualScore('x', 'finanzas', 3)])


def test_parse_score_picks_variant_from_scale():
    m = parse_score({'criterionId': 'a', 'category': 'equipo', 'rawScore': 3, 'scaleMax': 4})
    ai = parse_score({'criterionId': 'b', 'category': 'EQUIPO', 'rawScore': 80, 'scaleMax': 100,
                      'confidence': 0.7})
    assert isinstance(m, ManualScore)
    assert isinstance(ai, AIScore) and ai.confidence == 0.7
    with pytest.raises(ScoreValidationError):
        parse_score({'criterionId': 'c', 'category': 'equipo', 'rawScore': 3, 'scaleMax': 10})
    with pytest.raises(ScoreValidationError):
        parse_score({'criterionId': 'c', 'category': 'equipo'})
    with pytest.raises(ScoreValidationError):
        parse_score({'criterionId': 'd', 'category': 'equipo', 'rawScore': 80, 'scaleMax': 100,
                     'confidence': 'alta'})
    with pytest.raises(ScoreValidationError):
        parse_score({'criterionId': 'e', 'category': 'equipo', 'rawScore': True, 'scaleMax': 4})
    with pytest.raises(ScoreValidationError):
        parse_score({'criterionId': 'f', 'category': 'equipo', 'rawScore': 'tres', 'scaleMax': 4})


def test_manual_score_wins_over_ai():
    manual = [ManualScore('a', Category.MERCADO, 1)]
    ai = [AIScore('a', Category.MERCADO, 100, 0.9), AIScore('b', Category.MERCADO, 50, 0.6)]
    merged = {s.criterion_id: s for s in reconcile_scores(manual, ai)}
    assert isinstance(merged['a'], ManualScore)
    assert isinstance(merged['b'], AIScore)
    assert score_evaluation(merged.values()).total == 37.5
    assert average_confidence(merged.values()) == 0.8
    assert average_confidence([]) is None
