import csv
import io
from typing import Iterable

from app.models.schemas import TestCase

CSV_HEADER = ["ID", "Work Item Type", "Title", "Test Step", "Step Action", "Step Expected"]
WORK_ITEM_TYPE = "Test Case"


def build_test_case_csv(test_cases: Iterable[TestCase]) -> str:
    """Flatten test cases into one CSV row per step.

    The title goes on a test case's first step row and the expected results on
    its last one; the ID column is left blank for the importing tool to fill.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for tc in test_cases:
        last = len(tc.steps) - 1
        for index, step in enumerate(tc.steps):
            writer.writerow([
                "",
                WORK_ITEM_TYPE,
                tc.description if index == 0 else "",
                index + 1,
                step,
                tc.expected_results if index == last else "",
            ])

    return output.getvalue()
