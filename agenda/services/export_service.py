import csv
from datetime import date
from io import BytesIO, StringIO
from typing import List, Dict, Tuple

import pandas as pd
from flask import render_template
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from agenda.utils.helpers import format_date_br, format_time_range, format_value

HISTORY_TITLE = 'Histórico de Atendimentos'
HISTORY_HEADERS = ['Cliente', 'Data', 'Horário', 'Telefone', 'Valor', 'Status']

EXPORT_FORMATS = {
    'HTML': ('text/html', 'html'),
    'CSV': ('text/csv', 'csv'),
    'PDF': ('application/pdf', 'pdf'),
    'EXCEL': ('application/vnd.openxmlformats-officedocument.spreadsheetml.sheet', 'xlsx'),
}


class ExportService:
    @staticmethod
    def history_rows(appointments, currency_symbol='R$', placeholder='-') -> List[Dict]:
        """Project appointments into the export columns"""
        rows = []
        for appointment in appointments:
            rows.append({
                'Cliente': appointment.client_name,
                'Data': format_date_br(appointment.date),
                'Horário': format_time_range(appointment),
                'Telefone': appointment.phone or placeholder,
                'Valor': format_value(appointment.value, currency_symbol) or placeholder,
                'Status': appointment.status_label,
            })
        return rows

    @staticmethod
    def _generate_html(appointments, exported_on: date, currency_symbol: str) -> BytesIO:
        """Generate a standalone HTML document with the history table"""
        html = render_template(
            'exports/history.html',
            title=HISTORY_TITLE,
            headers=HISTORY_HEADERS,
            rows=ExportService.history_rows(appointments, currency_symbol),
            exported_on=exported_on.strftime('%d/%m/%Y')
        )
        return BytesIO(html.encode('utf-8'))

    @staticmethod
    def _generate_csv(appointments) -> BytesIO:
        """
        Generate the CSV history: a plain header line, then one row per
        appointment with every field quoted.
        """
        text = StringIO()
        text.write(','.join(HISTORY_HEADERS) + '\n')

        writer = csv.DictWriter(
            text,
            fieldnames=HISTORY_HEADERS,
            quoting=csv.QUOTE_ALL,
            lineterminator='\n'
        )
        writer.writerows(ExportService.history_rows(appointments, currency_symbol=None, placeholder=''))

        return BytesIO(text.getvalue().encode('utf-8'))

    @staticmethod
    def _generate_pdf(appointments, exported_on: date, currency_symbol: str) -> BytesIO:
        """Generate PDF history"""
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=landscape(A4))
        elements = []
        styles = getSampleStyleSheet()

        elements.append(Paragraph(HISTORY_TITLE, styles['Heading1']))
        elements.append(Paragraph(f"Data de exportação: {exported_on.strftime('%d/%m/%Y')}", styles['Normal']))
        elements.append(Spacer(1, 12))

        table_data = [HISTORY_HEADERS]
        for row in ExportService.history_rows(appointments, currency_symbol):
            table_data.append([str(row[header]) for header in HISTORY_HEADERS])

        table = Table(table_data, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#f2f2f2')),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 8),
            ('LINEBELOW', (0, 0), (-1, -1), 0.5, colors.HexColor('#dddddd')),
        ]))
        elements.append(table)

        doc.build(elements)
        buffer.seek(0)
        return buffer

    @staticmethod
    def _generate_excel(appointments, currency_symbol: str) -> BytesIO:
        """Generate Excel history"""
        buffer = BytesIO()
        rows = ExportService.history_rows(appointments, currency_symbol)
        df = pd.DataFrame(rows, columns=HISTORY_HEADERS)

        with pd.ExcelWriter(buffer, engine='xlsxwriter') as writer:
            df.to_excel(writer, sheet_name='Histórico', index=False)

            workbook = writer.book
            worksheet = writer.sheets['Histórico']
            header_format = workbook.add_format({
                'bold': True,
                'bg_color': '#4285F4',
                'font_color': 'white'
            })
            for col_num, value in enumerate(df.columns.values):
                worksheet.write(0, col_num, value, header_format)
                worksheet.set_column(col_num, col_num, 18)

        buffer.seek(0)
        return buffer

    @staticmethod
    def generate_history_file(appointments, format_type: str, exported_on: date = None,
                              currency_symbol: str = 'R$') -> Tuple[BytesIO, str, str]:
        """
        Generate the history export in the requested format

        Returns:
            (file buffer, mimetype, download file name)
        """
        format_type = format_type.upper()
        if format_type not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {format_type}")
        exported_on = exported_on or date.today()

        if format_type == 'HTML':
            buffer = ExportService._generate_html(appointments, exported_on, currency_symbol)
        elif format_type == 'CSV':
            buffer = ExportService._generate_csv(appointments)
        elif format_type == 'PDF':
            buffer = ExportService._generate_pdf(appointments, exported_on, currency_symbol)
        else:  # EXCEL
            buffer = ExportService._generate_excel(appointments, currency_symbol)

        mimetype, extension = EXPORT_FORMATS[format_type]
        filename = f"historico_atendimentos_{exported_on.isoformat()}.{extension}"
        return buffer, mimetype, filename
