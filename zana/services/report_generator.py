import os
from datetime import datetime

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from zana.models.schemas import AnalysisResult

NEXT_LINE = {"new_x": XPos.LMARGIN, "new_y": YPos.NEXT}


class PDFReport(FPDF):
    def header(self):
        self.set_font('Helvetica', 'B', 15)
        self.cell(0, 10, 'AI Content Forensics Report', align='C', **NEXT_LINE)
        self.ln(10)

    def footer(self):
        self.set_y(-15)
        self.set_font('Helvetica', 'I', 8)
        self.cell(0, 10, f'Page {self.page_no()}', align='C')


def clean_text(text):
    if not text: return ""
    # Replace common problematic characters
    replacements = {
        '‘': "'", '’': "'", '“': '"', '”': '"',
        '–': '-', '—': '-', '◦': '-', '•': '-'
    }
    for char, replacement in replacements.items():
        text = text.replace(char, replacement)
    # Core fonts are latin-1 only
    return text.encode('latin-1', 'replace').decode('latin-1')


def _band(score: float):
    """Colour and tag for a 0-1 segment likelihood."""
    if score > 0.7:
        return (200, 0, 0), "[HIGH]"
    if score > 0.4:
        return (230, 140, 0), "[MED]"
    return (0, 128, 0), "[LOW]"


def generate_report(result: AnalysisResult, reports_dir: str = "reports") -> str:
    """
    Generates a PDF report for an analysis result.
    Returns the path to the generated file.
    """
    pdf = PDFReport()
    pdf.add_page()

    # Summary Section
    pdf.set_font("Helvetica", 'B', 12)
    pdf.cell(0, 10, f"Report ID: {clean_text(result.id)}", **NEXT_LINE)
    pdf.cell(0, 10, f"Analyzed: {clean_text(result.timestamp)}", **NEXT_LINE)
    pdf.cell(0, 10, f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}", **NEXT_LINE)
    pdf.cell(0, 10, f"Content type: {'Code' if result.is_code else 'Prose'}", **NEXT_LINE)
    pdf.ln(5)

    pdf.set_font("Helvetica", 'B', 14)
    pdf.cell(0, 10, f"AI Likelihood: {result.overall_score}% (+/- {result.confidence_range})", **NEXT_LINE)
    pdf.set_font("Helvetica", size=11)
    pdf.cell(0, 8, f"Statistical: {result.statistical_score:.1f}   Structural: {result.structural_score:.1f}   "
                   f"Semantic: {result.semantic_score:.1f}", **NEXT_LINE)
    pdf.multi_cell(0, 8, f"Explanation: {clean_text(result.explanation)}", **NEXT_LINE)
    pdf.ln(5)

    # Grade
    pdf.set_font("Helvetica", 'B', 14)
    pdf.cell(0, 10, f"Grade: {clean_text(result.grade.primary_grade)}", **NEXT_LINE)
    pdf.set_font("Helvetica", size=11)
    for item in result.grade.breakdown:
        pdf.cell(0, 8, f"{clean_text(item.label)}: {item.score:.1f}/10", **NEXT_LINE)
    pdf.multi_cell(0, 8, clean_text(result.grade.summary), **NEXT_LINE)
    pdf.ln(5)

    if result.ai_words:
        pdf.set_font("Helvetica", 'B', 14)
        pdf.cell(0, 10, "Suspicious Vocabulary:", **NEXT_LINE)
        pdf.set_font("Helvetica", size=11)
        pdf.multi_cell(0, 8, clean_text(", ".join(result.ai_words)), **NEXT_LINE)
        pdf.ln(5)

    # Detailed Analysis
    pdf.set_font("Helvetica", 'B', 14)
    pdf.cell(0, 10, "Segment Analysis:", **NEXT_LINE)
    pdf.set_font("Helvetica", size=11)
    for segment in result.highlights:
        color, status_text = _band(segment.score)
        pdf.set_text_color(*color)
        pdf.cell(0, 8, f"{status_text} Likelihood: {segment.score:.0%}", **NEXT_LINE)
        pdf.set_text_color(0, 0, 0)
        pdf.multi_cell(0, 7, clean_text(segment.text.strip()), **NEXT_LINE)
        pdf.ln(3)

    if result.quality_issues:
        pdf.set_font("Helvetica", 'B', 14)
        pdf.cell(0, 10, "Quality Issues:", **NEXT_LINE)
        for issue in result.quality_issues:
            pdf.set_font("Helvetica", 'B', 11)
            pdf.cell(0, 8, f"[{issue.type.upper()}] {clean_text(issue.reason)}", **NEXT_LINE)
            pdf.set_font("Helvetica", 'I', 10)
            pdf.multi_cell(0, 7, f"Original: {clean_text(issue.original)}", **NEXT_LINE)
            pdf.multi_cell(0, 7, f"Suggestion: {clean_text(issue.suggestion)}", **NEXT_LINE)
            pdf.ln(2)

    # Ensure reports directory exists
    os.makedirs(reports_dir, exist_ok=True)
    report_path = os.path.join(reports_dir, f"report_{result.id}.pdf")
    pdf.output(report_path)

    return report_path
