from .grading import EXCELLENCE_PERCENTAGE, is_passing_gpa, is_passing_percentage, quantize


def results_summary(grades):
    """Headline numbers for the results overview.

    A grade counts as passed when its GPA is above ``PASS_GPA``.
    """
    grades = list(grades)
    if not grades:
        return {
            'pass_rate': 0.0,
            'top_student': {'name': 'N/A', 'score': 0.0},
            'highest_score': 0.0,
            'exams_published': 0,
            'average_gpa': 0.0,
        }

    pass_count = sum(1 for g in grades if is_passing_gpa(g.gpa))
    top = grades[0]
    for g in grades[1:]:
        if float(g.percentage) > float(top.percentage):
            top = g
    average_gpa = sum(float(g.gpa) for g in grades) / len(grades)

    return {
        'pass_rate': quantize(pass_count / len(grades) * 100, 1),
        'top_student': {'name': top.student.name, 'score': quantize(top.percentage, 1)},
        'highest_score': quantize(top.percentage, 1),
        'exams_published': len({g.examination_id for g in grades}),
        'average_gpa': quantize(average_gpa, 2),
    }


def grades_summary(grades):
    """Average GPA, pass rate (percentage based) and excellence rate."""
    grades = list(grades)
    if not grades:
        return {'average_gpa': 0.0, 'pass_rate': 0.0, 'excellence_rate': 0.0}

    count = len(grades)
    passed = sum(1 for g in grades if is_passing_percentage(float(g.percentage)))
    excellent = sum(1 for g in grades if float(g.percentage) >= EXCELLENCE_PERCENTAGE)
    return {
        'average_gpa': quantize(sum(float(g.gpa) for g in grades) / count, 2),
        'pass_rate': quantize(passed / count * 100, 1),
        'excellence_rate': quantize(excellent / count * 100, 1),
    }
