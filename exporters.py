# exporters.py
"""
CSV and PDF renderings of a report built by report_builder.build_report().
Values are taken from the report as-is; only number formatting happens here.
"""
import csv
import io

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from standards_config import BBI_LIMITS, WHO_LIMITS

REPORT_COLUMNS = [
    'Sample ID', 'Project', 'Location', 'Metal', 'Concentration', 'HMPI', 'Risk Level',
    'Date', 'WHO Limit', 'BBI Limit', 'Exceeds WHO', 'Exceeds BBI',
]

TEMPLATE_HEADERS = [
    'SampleID', 'ProjectID', 'District', 'City', 'Latitude', 'Longitude',
    'Metal', 'Concentration', 'Ii', 'Mi', 'Date',
]

TEMPLATE_EXAMPLE_ROWS = [
    ['S001', '1', 'Dhanbad', 'Jharia', '23.7457', '86.4152', 'Lead', '0.09', '0.01', '0.7', '2024-01-15'],
    ['S002', '1', 'Dhanbad', 'Jharia', '23.7461', '86.4160', 'Arsenic', '0.05', '', '', '2024-01-15'],
]

PDF_SAMPLE_LINES = 10


def _exceeds(concentration, limit):
    if limit is None:
        return 'No'
    return 'Yes' if concentration > limit else 'No'


def report_rows(report):
    """One list per sample, in REPORT_COLUMNS order."""
    rows = []
    for sample in report['samples']:
        metal = sample.get('metal')
        who_limit = WHO_LIMITS.get(metal)
        bbi_limit = BBI_LIMITS.get(metal)
        concentration = sample.get('concentration')
        rows.append([
            sample.get('sample_code'),
            sample.get('project_name', 'Unknown'),
            sample.get('location', ''),
            metal,
            concentration,
            f"{sample.get('hmpi_value', 0):.2f}",
            sample.get('risk_level'),
            sample.get('date_collected'),
            who_limit if who_limit is not None else 'N/A',
            bbi_limit if bbi_limit is not None else 'N/A',
            _exceeds(concentration, who_limit),
            _exceeds(concentration, bbi_limit),
        ])
    return rows


def render_csv(report):
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(REPORT_COLUMNS)
    writer.writerows(report_rows(report))
    return output.getvalue()


def render_template_csv():
    """The bulk-upload template with two example rows."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(TEMPLATE_HEADERS)
    writer.writerows(TEMPLATE_EXAMPLE_ROWS)
    return output.getvalue()


def render_pdf(report):
    """Returns a BytesIO holding a one-page summary PDF."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    _, height = A4
    summary = report['summary']
    project = report.get('project')

    c.setFont("Helvetica-Bold", 20)
    c.drawString(40, height - 60, "AquaSure Water Quality Report")

    c.setFont("Helvetica", 12)
    y = height - 90
    if project:
        c.drawString(40, y, f"Project: {project['name']}")
        y -= 16
        c.drawString(40, y, f"Location: {project.get('location_district', '')}, {project.get('location_city', '')}")
    else:
        c.drawString(40, y, "Comprehensive Report - All Projects")
    y -= 16
    c.drawString(40, y, f"Generated on: {report['generated_on']}")
    y -= 16
    c.drawString(40, y, f"Total Samples: {summary['total_samples']}")
    y -= 16
    c.drawString(40, y, f"Average HMPI: {summary['average_hmpi']:.2f}")
    y -= 16
    c.drawString(40, y, f"High Risk Samples: {summary['high_risk_count']}")

    y -= 30
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, y, "Sample Summary:")
    c.setFont("Helvetica", 11)
    for sample in report['samples'][:PDF_SAMPLE_LINES]:
        y -= 16
        c.drawString(
            50, y,
            f"{sample.get('sample_code')}: {sample.get('metal')} - "
            f"HMPI: {sample.get('hmpi_value', 0):.2f} ({sample.get('risk_level')})"
        )

    c.showPage()
    c.save()
    buffer.seek(0)
    return buffer
