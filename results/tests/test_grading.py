import pytest

from results.grading import (
    PASS_GPA, PASS_PERCENTAGE, grade_for_percentage, is_passing_gpa,
    is_passing_percentage, percentage_of, quantize, result_label,
)


@pytest.mark.parametrize('percentage, expected', [
    (100, ('A+', 4.0)),
    (90, ('A+', 4.0)),
    (89.99, ('A', 3.5)),
    (80, ('A', 3.5)),
    (70, ('B+', 3.0)),
    (60, ('B', 2.5)),
    (50, ('C+', 2.0)),
    (40, ('C', 1.5)),
    (39.9, ('D', 0.0)),
    (33, ('D', 0.0)),
    (32.9, ('F', 0.0)),
    (0, ('F', 0.0)),
])
def test_grade_scale_boundaries(percentage, expected):
    assert grade_for_percentage(percentage) == expected


def test_percentage_pass_threshold_is_inclusive():
    assert PASS_PERCENTAGE == 40
    assert is_passing_percentage(40)
    assert not is_passing_percentage(39.9)
    assert result_label(40) == 'PASS'
    assert result_label(35.0) == 'FAIL'


def test_gpa_pass_threshold_is_strict_and_differs_from_percentage_rule():
    assert PASS_GPA == 1.5
    # 40% earns a C worth 1.5 points: a pass by percentage, not by GPA
    letter, gpa = grade_for_percentage(40)
    assert is_passing_percentage(40)
    assert not is_passing_gpa(gpa)
    assert is_passing_gpa(2.0)


def test_percentage_of_guards_zero_total():
    assert percentage_of(10, 0) == 0.0
    assert percentage_of(45, 50) == 90.0


def test_quantize_rounds_half_up():
    assert quantize(84.95, 1) == 85.0
    assert quantize(2.125, 2) == 2.13
