from __future__ import annotations

from typing import List, Optional

from passportsheet.core.layout import interior_rect
from passportsheet.core.models import PASSPORT_RATIO, LayoutMode, LayoutPlan, Rect, SpacingSpec, round_half_up
from passportsheet.core.raster import Raster
from passportsheet.validation.report import RuleResult, ValidationReport


def _size_rule(plan: LayoutPlan, raster: Raster) -> RuleResult:
    w, h = raster.size
    ok = (w == plan.page.width) and (h == plan.page.height)
    return RuleResult(
        rule_id="Size",
        passed=ok,
        message=f"{w}x{h} pixels (expected {plan.page.width}x{plan.page.height}).",
        metrics={"width": w, "height": h, "expected": [plan.page.width, plan.page.height]},
    )


def _ratio_rule(plan: LayoutPlan) -> RuleResult:
    w, h = plan.photo_width, plan.photo_height
    expected_w = round_half_up(h * PASSPORT_RATIO)
    dw = w - expected_w
    ok = w > 0 and h > 0 and abs(dw) <= 1
    msg = f"Photo {w}x{h}px; 35:45 width for that height is {expected_w}px ({dw:+d}px)."
    if not ok:
        msg += " Reduce rows, columns, margin or gap."
    return RuleResult(
        rule_id="Aspect ratio",
        passed=ok,
        message=msg,
        metrics={"photo_width": w, "photo_height": h, "expected_width": expected_w},
    )


def _bounds_rule(plan: LayoutPlan) -> RuleResult:
    page_rect = Rect(0, 0, plan.page.width, plan.page.height)
    outside = [(c.row, c.col) for c in plan.cells if not c.rect.is_empty and not page_rect.contains(c.rect)]
    ok = not outside
    msg = f"All {len(plan.cells)} cells inside the page." if ok else f"{len(outside)} cell(s) extend past the page edge."
    return RuleResult(rule_id="Within page", passed=ok, message=msg, metrics={"outside": outside})


def _overlap_rule(plan: LayoutPlan) -> RuleResult:
    cells = plan.cells
    pairs = []
    for i, a in enumerate(cells):
        for b in cells[i + 1:]:
            if a.rect.overlaps(b.rect):
                pairs.append(((a.row, a.col), (b.row, b.col)))
    ok = not pairs
    msg = "No cells overlap." if ok else f"{len(pairs)} overlapping cell pair(s)."
    return RuleResult(rule_id="No overlap", passed=ok, message=msg, metrics={"pairs": pairs})


def _centering_rule(plan: LayoutPlan, spacing: SpacingSpec) -> RuleResult:
    bounds = plan.grid_bounds()
    if plan.mode is LayoutMode.UNIFORM_MAX:
        slack_x = plan.page.width - (2 * bounds.x + bounds.width)
        slack_y = plan.page.height - (2 * bounds.y + bounds.height)
        ok = slack_x in (0, 1) and slack_y in (0, 1)
        msg = f"Grid block {bounds.width}x{bounds.height} at ({bounds.x}, {bounds.y}); leftover {slack_x}/{slack_y}px."
        metrics = {"slack_x": slack_x, "slack_y": slack_y}
    else:
        # Letterbox mode anchors cells at the margin and centers photos in their cells
        anchored = bounds.x == spacing.margin and bounds.y == spacing.margin
        uneven = []
        for c in plan.cells:
            dx = (c.rect.right - c.photo.right) - (c.photo.x - c.rect.x)
            dy = (c.rect.bottom - c.photo.bottom) - (c.photo.y - c.rect.y)
            if abs(dx) > 1 or abs(dy) > 1:
                uneven.append((c.row, c.col))
        ok = anchored and not uneven
        msg = f"Cells anchored at margin {spacing.margin}px; photos centered in {len(plan.cells) - len(uneven)} cells."
        metrics = {"anchored": anchored, "uneven": uneven}
    return RuleResult(rule_id="Centering", passed=ok, message=msg, metrics=metrics)


def _interior_rule(plan: LayoutPlan, spacing: SpacingSpec) -> RuleResult:
    border = spacing.border if plan.mode is LayoutMode.UNIFORM_MAX else 0
    interior = interior_rect(Rect(0, 0, plan.photo_width, plan.photo_height), border)
    ok = not interior.is_empty
    msg = f"Image area {interior.width}x{interior.height}px inside a {border}px border."
    if not ok:
        msg += " The image will be skipped; reduce the border."
    return RuleResult(
        rule_id="Interior",
        passed=ok,
        message=msg,
        metrics={"width": interior.width, "height": interior.height, "border": border},
    )


def validate_layout(plan: LayoutPlan, spacing: SpacingSpec, raster: Optional[Raster] = None) -> ValidationReport:
    """
    Check a layout plan (and optionally its composed page) against the sheet
    guarantees: page size, 35:45 photos, cells on the page without overlap,
    centering, and room for the image inside the border.
    """
    results: List[RuleResult] = []
    if raster is not None:
        results.append(_size_rule(plan, raster))
    results.append(_ratio_rule(plan))
    results.append(_bounds_rule(plan))
    results.append(_overlap_rule(plan))
    results.append(_centering_rule(plan, spacing))
    results.append(_interior_rule(plan, spacing))
    return ValidationReport.from_results(results)


def format_report_text(report: ValidationReport) -> str:
    lines: List[str] = []
    lines.append("PassportSheet Layout Report")
    lines.append("-" * 27)
    lines.append(f"Overall: {'PASS' if report.passed else 'FAIL'}")
    lines.append("")
    for r in report.results:
        mark = "✅" if r.passed else "❌"
        lines.append(f"{mark} {r.rule_id}: {r.message}")
    return "\n".join(lines)
