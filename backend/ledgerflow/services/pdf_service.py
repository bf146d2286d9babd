"""
PDF Report Rendering Service
Lays out report data as an A4 document with a header, one table and page numbers
"""
from io import BytesIO
from xml.sax.saxutils import escape
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import inch
from reportlab.lib import colors
from reportlab.pdfgen import canvas
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER

from ledgerflow.schemas.report import ReportData, ReportKind
from ledgerflow.utils.formatters import format_currency, format_date

HEADER_COLOR = colors.HexColor('#4338ca')


class NumberedCanvas(canvas.Canvas):
    """Canvas that knows the page count when drawing each footer ("Page i of n")."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_page_number(page_count)
            super().showPage()
        super().save()

    def _draw_page_number(self, page_count: int):
        width, _ = self._pagesize
        self.setFont('Helvetica', 9)
        self.setFillColor(colors.grey)
        self.drawCentredString(width / 2, 0.4 * inch, f"Page {self._pageNumber} of {page_count}")


def _grid(data, col_widths, right_align_from: int | None = None) -> Table:
    table = Table(data, colWidths=col_widths, repeatRows=1)
    style = [
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
        ('TOPPADDING', (0, 0), (-1, 0), 8),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#fafafa')]),
    ]
    if right_align_from is not None:
        style.append(('ALIGN', (right_align_from, 1), (-1, -1), 'RIGHT'))
    table.setStyle(TableStyle(style))
    return table


class PdfReportRenderer:
    """Rendering collaborator for ReportGenerator. Pure: data in, bytes out."""

    format = "pdf"

    def __init__(self):
        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            'ReportTitle',
            parent=styles['Heading1'],
            fontSize=20,
            alignment=TA_CENTER,
            spaceAfter=6
        )
        self.subtitle_style = ParagraphStyle(
            'ReportSubtitle',
            parent=styles['Normal'],
            fontSize=11,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#374151')
        )
        self.heading_style = ParagraphStyle(
            'ReportHeading',
            parent=styles['Heading2'],
            fontSize=14,
            textColor=colors.HexColor('#1f2937'),
            spaceAfter=6
        )
        self.normal_style = styles['Normal']

    def render(self, data: ReportData) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, topMargin=0.5*inch, bottomMargin=0.75*inch)

        elements = [
            Paragraph(f"{escape(data.business_name)} Report", self.title_style),
            Paragraph(f"Generated on: {data.generated_on.strftime('%b %d, %Y')}", self.subtitle_style),
            Paragraph(
                f"Period: {data.start.strftime('%b %d, %Y')} - {data.end.strftime('%b %d, %Y')}",
                self.subtitle_style,
            ),
            Spacer(1, 0.3*inch),
        ]

        if data.kind == ReportKind.OUTSTANDING:
            elements += self._outstanding(data)
        elif data.kind == ReportKind.SUMMARY:
            elements += self._summary(data)
        else:
            elements += self._transactions(data)

        doc.build(elements, canvasmaker=NumberedCanvas)
        return buffer.getvalue()

    def _outstanding(self, data: ReportData) -> list:
        elements = [Paragraph("Outstanding Amounts Report", self.heading_style)]
        if not data.outstanding:
            elements.append(Paragraph("No outstanding amounts found.", self.normal_style))
            return elements
        rows = [['Customer Name', 'Phone', 'Amount', 'Status']]
        rows += [[r.name, r.phone, format_currency(r.amount), r.status] for r in data.outstanding]
        elements.append(_grid(rows, [2.4*inch, 1.6*inch, 1.4*inch, 1.1*inch], right_align_from=2))
        return elements

    def _summary(self, data: ReportData) -> list:
        stats = data.summary
        elements = [Paragraph("Business Summary Report", self.heading_style)]
        rows = [
            ['Metric', 'Value'],
            ['Total Customers', str(stats.customer_count)],
            ['Outstanding Customers', str(stats.outstanding_count)],
            ['Total to Receive', format_currency(stats.total_to_receive)],
            ['Total to Pay', format_currency(stats.total_to_pay)],
            ['Net Balance', format_currency(abs(stats.net_balance))],
            ['Net Status', stats.net_status],
        ]
        elements.append(_grid(rows, [3.2*inch, 3.2*inch], right_align_from=1))

        if data.transactions:
            elements.append(Spacer(1, 0.3*inch))
            elements.append(Paragraph("Transactions in Period", self.heading_style))
            tx_rows = [['Date', 'Customer', 'Description', 'Type', 'Amount']]
            tx_rows += [
                [format_date(t.date), t.customer_name, t.description, t.sign, format_currency(t.amount)]
                for t in data.transactions
            ]
            elements.append(_grid(tx_rows, [1.1*inch, 1.6*inch, 2.2*inch, 0.5*inch, 1.1*inch], right_align_from=4))
        return elements

    def _transactions(self, data: ReportData) -> list:
        elements = [Paragraph("Transaction History Report", self.heading_style)]
        if not data.transactions:
            elements.append(Paragraph("No transactions found in the selected date range.", self.normal_style))
            return elements
        rows = [['Date', 'Customer', 'Description', 'Type', 'Amount', 'Running Balance']]
        rows += [
            [
                format_date(t.date),
                t.customer_name,
                t.description,
                t.type_label,
                format_currency(t.amount),
                format_currency(t.running_balance),
            ]
            for t in data.transactions
        ]
        elements.append(_grid(rows, [1.0*inch, 1.3*inch, 1.7*inch, 0.7*inch, 0.9*inch, 1.1*inch], right_align_from=4))
        return elements

