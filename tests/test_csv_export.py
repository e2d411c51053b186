from datetime import datetime, timezone

from app.models.schemas import TestCase
from app.services.csv_export import build_test_case_csv


def make_test_case(**overrides) -> TestCase:
    data = dict(
        id=1,
        test_id="TC-001",
        description="D",
        prerequisites=None,
        steps=["Open app", "Click X"],
        expected_results="E",
        priority="High",
        type="Functional",
        file_ids=[1],
        created_at=datetime.now(timezone.utc),
    )
    data.update(overrides)
    return TestCase(**data)


def test_one_row_per_step():
    lines = build_test_case_csv([make_test_case()]).splitlines()

    assert lines == [
        "ID,Work Item Type,Title,Test Step,Step Action,Step Expected",
        ",Test Case,D,1,Open app,",
        ",Test Case,,2,Click X,E",
    ]


def test_single_step_gets_title_and_expected_result():
    lines = build_test_case_csv([make_test_case(steps=["Only step"])]).splitlines()
    assert lines[1] == ",Test Case,D,1,Only step,E"


def test_multiple_test_cases_restart_step_numbers():
    content = build_test_case_csv([
        make_test_case(),
        make_test_case(id=2, description="Second", steps=["A", "B", "C"], expected_results="Done"),
    ])

    assert content.splitlines()[3:] == [
        ",Test Case,Second,1,A,",
        ",Test Case,,2,B,",
        ",Test Case,,3,C,Done",
    ]


def test_quotes_commas_in_step_text():
    lines = build_test_case_csv([make_test_case(steps=["Type a, b"], expected_results='Shows "ok"')]).splitlines()
    assert lines[1] == ',Test Case,D,1,"Type a, b","Shows ""ok"""'
