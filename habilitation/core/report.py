"""
Report rendering for a computed score.

Consumes (ApplicationRecord, ScoreResult) and the grid policy for labels;
timestamps are passed in by the caller so rendering stays a pure function
of its arguments.
"""
from datetime import datetime
from html import escape
from typing import Any, Dict, List

from habilitation.core.models import ApplicationRecord, PublicationTier, ScoreResult
from habilitation.grids.researcher.policy import ResearcherGridPolicy

_TEXT = {
    "ar": {
        "title": "تقرير نقاط التأهيل الجامعي للأستاذ الباحث",
        "personal": "البيانات الشخصية",
        "full_name": "الاسم الكامل",
        "university": "الجامعة",
        "department": "القسم/المخبر",
        "specialization_field": "التخصص الدقيق",
        "specialization": "التخصص الرئيسي",
        "teaching_years": "سنوات التدريس",
        "publications": "المنشورات العلمية المدخلة",
        "tier": "الصنف",
        "first": "مؤلف أول",
        "second": "مؤلف ثاني",
        "third_plus": "مؤلف ثالث+",
        "summary": "ملخص النقاط المحسوبة",
        "no_points": "لا توجد نقاط محسوبة",
        "total": "المجموع الإجمالي",
        "points": "نقطة",
        "eligible": "مؤهل للتأهيل الجامعي",
        "not_eligible": "غير مؤهل للتأهيل",
        "threshold": "الحد الأدنى المطلوب: {points} نقطة و {years} سنوات تدريس",
        "weights": "المؤلف الأول (100%)، المؤلف الثاني (50%)، المؤلف الثالث فأكثر (25%)",
        "decisions": "القرارات الوزارية المعمول بها",
        "generated_at": "تم إنشاء التقرير في",
        "unspecified": "غير محدد",
        "disclaimer": "هذا التقرير غير رسمي ولا يمثل أي جهة حكومية.",
    },
    "en": {
        "title": "Researcher-professor university qualification points report",
        "personal": "Personal information",
        "full_name": "Full name",
        "university": "University",
        "department": "Department / laboratory",
        "specialization_field": "Field",
        "specialization": "Specialization",
        "teaching_years": "Teaching years",
        "publications": "Declared publications",
        "tier": "Tier",
        "first": "First author",
        "second": "Second author",
        "third_plus": "Third author or later",
        "summary": "Computed points",
        "no_points": "No points computed",
        "total": "Total",
        "points": "points",
        "eligible": "Eligible for university qualification",
        "not_eligible": "Not eligible",
        "threshold": "Minimum required: {points} points and {years} teaching years",
        "weights": "first author (100%), second author (50%), third author or later (25%)",
        "decisions": "Ministerial decisions",
        "generated_at": "Generated at",
        "unspecified": "not specified",
        "disclaimer": "This report is unofficial and does not represent any government body.",
    },
}


def _row(label: str, value: Any) -> str:
    return f'<div class="info-item"><span class="info-label">{escape(label)}:</span> <span>{escape(str(value))}</span></div>'


def render_html_report(
    record: ApplicationRecord,
    result: ScoreResult,
    policy: ResearcherGridPolicy,
    generated_at: datetime,
    language: str = "ar",
    min_total_points: float = 350,
    min_teaching_years: int = 3,
) -> str:
    t = _TEXT.get(language, _TEXT["en"])
    direction = "rtl" if language == "ar" else "ltr"
    unspecified = t["unspecified"]

    personal = "\n".join([
        _row(t["full_name"], record.full_name),
        _row(t["university"], record.university or unspecified),
        _row(t["department"], record.department or unspecified),
        _row(t["specialization_field"], record.specialization_field or unspecified),
        _row(t["specialization"], policy.specialization_label(record.specialization, language) or unspecified),
        _row(t["teaching_years"], record.teaching_years),
    ])

    tier_rows: List[str] = []
    for tier in PublicationTier:
        counts = record.authorship(tier)
        tier_rows.append(
            f"<tr><td>{escape(tier.value)}</td><td>{counts.first}</td>"
            f"<td>{counts.second}</td><td>{counts.third_plus}</td><td>{counts.total}</td></tr>"
        )

    if result.breakdown:
        lines = "\n".join(
            f'<div class="points-item"><span>{escape(e.label)}</span>'
            f'<span>{e.points} {escape(t["points"])}</span></div>'
            for e in result.breakdown
        )
    else:
        lines = f'<div class="points-item empty">{escape(t["no_points"])}</div>'

    status_class = "eligible" if result.eligible else "not-eligible"
    status_text = t["eligible"] if result.eligible else t["not_eligible"]
    threshold = t["threshold"].format(points=f"{min_total_points:g}", years=min_teaching_years)
    decisions = ", ".join(policy.ministry_decisions)

    return f"""<!DOCTYPE html>
<html dir="{direction}" lang="{language}">
<head>
<meta charset="UTF-8">
<title>{escape(t["title"])} - {escape(record.full_name)}</title>
<style>
body {{ font-family: sans-serif; background: #f5f9fc; color: #333; padding: 20px; }}
.report-container {{ max-width: 1000px; margin: 0 auto; background: #fff; padding: 30px; }}
.info-item, .points-item {{ display: flex; justify-content: space-between; padding: 8px; border-bottom: 1px solid #ddd; }}
.points-item.total {{ font-weight: 700; border-top: 2px solid #2a9d8f; }}
.eligible {{ background: #d4edda; color: #155724; }}
.not-eligible {{ background: #f8d7da; color: #721c24; }}
table {{ width: 100%; border-collapse: collapse; }}
td, th {{ border: 1px solid #e0e0e0; padding: 6px; text-align: center; }}
</style>
</head>
<body>
<div class="report-container">
<header>
<h1>{escape(t["title"])}</h1>
<p>{escape(t["decisions"])}: {escape(decisions)}</p>
<p>{escape(t["generated_at"])}: {escape(generated_at.isoformat())}</p>
</header>
<section class="personal-info">
<h3>{escape(t["personal"])}</h3>
{personal}
</section>
<section class="publications-section">
<h3>{escape(t["publications"])}</h3>
<table>
<tr><th>{escape(t["tier"])}</th><th>{escape(t["first"])}</th><th>{escape(t["second"])}</th><th>{escape(t["third_plus"])}</th><th>{escape(t["total"])}</th></tr>
{chr(10).join(tier_rows)}
</table>
<p>{escape(t["weights"])}</p>
</section>
<section class="points-summary">
<h3>{escape(t["summary"])}</h3>
{lines}
<div class="points-item total"><span>{escape(t["total"])}</span><span>{result.total_points} {escape(t["points"])}</span></div>
</section>
<section class="result-box">
<div class="total-points">{result.total_points} {escape(t["points"])}</div>
<div class="status {status_class}">{escape(status_text)}</div>
<p>{escape(result.eligibility_reason)}</p>
<p>{escape(threshold)}</p>
</section>
<footer><p>{escape(t["disclaimer"])}</p></footer>
</div>
</body>
</html>"""


def report_filename(record: ApplicationRecord, generated_at: datetime) -> str:
    return f"report_{record.first_name}_{record.last_name}_{generated_at.date().isoformat()}.html"


def build_export_document(
    data: Dict[str, Any],
    record: ApplicationRecord,
    result: ScoreResult,
    policy: ResearcherGridPolicy,
    exported_at: datetime,
    app_name: str,
    version: str,
    language: str = "ar",
) -> Dict[str, Any]:
    """JSON export: metadata, personal info, computed result and the raw input."""
    publications = {}
    for tier in PublicationTier:
        counts = record.authorship(tier)
        publications[tier.value] = {
            "firstAuthor": counts.first,
            "secondAuthor": counts.second,
            "thirdAuthorPlus": counts.third_plus,
        }

    calculated = result.to_dict()
    calculated["calculatedAt"] = exported_at.isoformat()

    raw_input = dict(data)
    raw_input["publications"] = publications

    return {
        "metadata": {
            "application": app_name,
            "version": version,
            "exportedAt": exported_at.isoformat(),
            "ministryDecisions": list(policy.ministry_decisions),
        },
        "personalInfo": {
            "fullName": record.full_name,
            "university": record.university,
            "department": record.department,
            "specializationField": record.specialization_field,
            "email": record.email,
            "specialization": policy.specialization_label(record.specialization, language),
            "teachingYears": record.teaching_years,
        },
        "calculatedResults": calculated,
        "rawInputData": raw_input,
    }
