import unittest

from tests._test_path import SRC  # noqa: F401

from passportsheet.core.layout import plan_layout
from passportsheet.core.models import A4_PAGE, GridSpec, LayoutMode, SpacingSpec
from passportsheet.core.raster import Raster
from passportsheet.validation import validator as v
from passportsheet.validation.report import RuleResult, ValidationReport


def _find(report, rule_id: str):
    r = report.find(rule_id)
    if r is None:
        raise AssertionError(f"Rule not found: {rule_id}")
    return r


class TestValidator(unittest.TestCase):
    def test_default_sheet_passes(self):
        spacing = SpacingSpec(margin=20, gap=38, border=20)
        plan = plan_layout(A4_PAGE, GridSpec(5, 5), spacing)

        report = v.validate_layout(plan, spacing)

        self.assertTrue(report.passed, v.format_report_text(report))
        self.assertEqual(len(report.results), 5)
        self.assertEqual(_find(report, "Centering").metrics, {"slack_x": 1, "slack_y": 0})
        self.assertEqual(_find(report, "Interior").metrics["width"], 417)

    def test_letterbox_sheet_passes(self):
        spacing = SpacingSpec(margin=20, gap=40, border=20)
        plan = plan_layout(A4_PAGE, GridSpec(4, 4), spacing, LayoutMode.LETTERBOX)

        report = v.validate_layout(plan, spacing)

        self.assertTrue(report.passed, v.format_report_text(report))
        # No border in letterbox mode
        self.assertEqual(_find(report, "Interior").metrics["border"], 0)

    def test_oversized_border_fails_interior_only(self):
        spacing = SpacingSpec(margin=20, gap=38, border=300)
        plan = plan_layout(A4_PAGE, GridSpec(5, 5), spacing)

        report = v.validate_layout(plan, spacing)

        self.assertFalse(report.passed)
        self.assertEqual([r.rule_id for r in report.failures()], ["Interior"])

    def test_size_rule_with_raster(self):
        spacing = SpacingSpec(margin=20, gap=38)
        plan = plan_layout(A4_PAGE, GridSpec(2, 2), spacing)

        report = v.validate_layout(plan, spacing, raster=Raster.blank(100, 100))

        self.assertEqual(report.results[0].rule_id, "Size")
        self.assertFalse(_find(report, "Size").passed)

    def test_format_report_text(self):
        spacing = SpacingSpec(margin=20, gap=38, border=20)
        report = v.validate_layout(plan_layout(A4_PAGE, GridSpec(5, 5), spacing), spacing)

        txt = v.format_report_text(report)
        self.assertIn("PassportSheet Layout Report", txt)
        self.assertIn("Overall: PASS", txt)
        self.assertIn("Aspect ratio:", txt)


class TestValidationReport(unittest.TestCase):
    def test_from_results(self):
        ok = RuleResult(rule_id="A", passed=True, message="ok")
        bad = RuleResult(rule_id="B", passed=False, message="bad", metrics={"x": 1})
        rep = ValidationReport.from_results([ok, bad])

        self.assertFalse(rep.passed)
        self.assertIs(rep.find("B"), bad)
        self.assertIsNone(rep.find("C"))
        self.assertEqual(rep.failures(), [bad])
