from io import BytesIO
import pandas as pd
from flask import send_file
from openpyxl import load_workbook
from openpyxl.styles import Font, PatternFill, Alignment
from guruwali.students.import_parser import STUDENT_IMPORT_HEADERS, HEADER_MAP
from guruwali.utils.decorators import login_required
from . import downloads_bp

SAMPLE_ROW = {
    HEADER_MAP["full_name"]: "Budi Santoso",
    HEADER_MAP["nis"]: "771231",
    HEADER_MAP["nisn"]: "0012345678",
    HEADER_MAP["classroom"]: "7A",
    HEADER_MAP["gender"]: "L",
    HEADER_MAP["birth_place"]: "Bandung",
    HEADER_MAP["birth_date"]: "2010-08-12",
    HEADER_MAP["religion"]: "Islam",
    HEADER_MAP["parent_name"]: "Ibu Ani",
    HEADER_MAP["parent_contact"]: "628123456780",
    HEADER_MAP["father_income"]: "2500000",
    "Sosial 1 Platform": "Instagram",
    "Sosial 1 Username": "budi.ig",
    "Sosial 1 Status": "Aktif",
}


@downloads_bp.route("/import/template")
@login_required
def download_student_template():
    """
    Download the Excel template teachers fill in for a bulk biodata import.
    """
    df = pd.DataFrame(
        [{header: SAMPLE_ROW.get(header, "") for header in STUDENT_IMPORT_HEADERS}],
        columns=STUDENT_IMPORT_HEADERS
    )

    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Data_Siswa", index=False)
    output.seek(0)

    # --- Header styling ---
    wb = load_workbook(output)
    ws = wb.active

    header_fill = PatternFill(start_color="1E3C72", end_color="1E3C72", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    ws.freeze_panes = "A2"

    for col in ws.columns:
        max_length = max(len(str(cell.value or "")) for cell in col)
        ws.column_dimensions[col[0].column_letter].width = max_length + 2

    output = BytesIO()
    wb.save(output)
    output.seek(0)

    return send_file(
        output,
        as_attachment=True,
        download_name="template_import_siswa.xlsx",
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
