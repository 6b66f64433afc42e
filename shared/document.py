"""BA Survey (Berita Acara Survey) document composer.

Turns a validated ``SurveyRecord`` into a self-contained HTML body laid out
like the printed paper form. Composition is a pure function of the record
and the render options: no I/O, no clock, no locale lookups, so the same
inputs always produce the same bytes.
"""
import html
from datetime import datetime
from typing import List, Optional, Tuple

import bleach

from shared.schemas import APP_TIMEZONE, SurveyRecord, RenderOptions

TITLE = "BERITA ACARA SURVEY"

PLACEHOLDER_NAME = "_______________"
DEFAULT_NOTES = "Kebutuhan tiang sesuai lampiran"
CUSTOMER_SIGNATURE_HEADING = "Pelanggan / Perwakilan Pelanggan"

# Both signature boxes share the same caps
SIGNATURE_MAX_HEIGHT = 83
SIGNATURE_MAX_WIDTH = 270

DAY_NAMES = ('Senin', 'Selasa', 'Rabu', 'Kamis', 'Jumat', 'Sabtu', 'Minggu')
MONTH_NAMES = (
    'Januari', 'Februari', 'Maret', 'April', 'Mei', 'Juni',
    'Juli', 'Agustus', 'September', 'Oktober', 'November', 'Desember',
)

SUPPORTING_DOCUMENTS = (
    "FC Sertifikat Tanah",
    "FC KTP sesuai dengan sertifikat tanah",
    "FC Akta Pendirian Perusahaan dan atau perubahannya",
)

# Formatting the notes field may carry; anything else is escaped, never dropped
NOTES_TAGS = ['p', 'br', 'strong', 'em', 'u', 'ul', 'ol', 'li', 'blockquote']

CLOSING_SENTENCE = "Demikian Berita Acara ini dibuat untuk dipergunakan sebagaimana mestinya."

STYLESHEET = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        @page { size: A4; margin: 20mm 15mm; }
        body { font-family: 'Times New Roman', serif; font-size: 12pt; padding: 0; line-height: 1.4; }
        h1 { text-align: center; font-size: 16pt; font-weight: bold; margin-bottom: 20px; text-decoration: underline; }
        .header-table { width: 100%; margin-bottom: 20px; }
        .header-table td { padding: 3px 0; vertical-align: top; }
        .header-table .label { width: 240px; white-space: nowrap; }
        .header-table .separator { width: 10px; }
        .checklist-table { width: 100%; margin-bottom: 20px; }
        .checklist-table td { padding: 4px 8px; vertical-align: top; }
        .checklist-table .col-left { width: 50%; }
        .checklist-table .col-right { width: 50%; }
        .checklist-item { margin-bottom: 5px; }
        .sub-list { padding-left: 20px; font-size: 10pt; }
        .sketch-section { margin: 20px 0; }
        .sketch-title { font-weight: bold; text-decoration: underline; margin-bottom: 10px; }
        .note-section { margin: 20px 0; font-size: 10pt; }
        .signature-section { width: 100%; margin-top: 40px; }
        .signature-table { width: 100%; }
        .signature-table td { width: 50%; text-align: center; padding: 10px; vertical-align: top; }
        .signature-box { height: 90px; display: flex; align-items: center; justify-content: center; }
        .signature-line { margin-top: 60px; border-bottom: 1px solid black; display: inline-block; width: 150px; }
        .signature-name { margin-top: 5px; }
"""


def _join_lines(text: str) -> str:
    return "<br>".join(line.strip() for line in text.splitlines())


def escape_text(value: str) -> str:
    """Make a plain-text value safe to place in HTML text content.

    ``<``, ``>`` and ``&`` become entities so tag-shaped input still shows up
    verbatim. Line breaks are kept as ``<br>``.
    """
    if not value:
        return ""
    return _join_lines(html.escape(value, quote=False))


def sanitize_notes(value: str) -> str:
    """Clean the free-form notes: basic formatting tags pass, other markup is escaped."""
    if not value:
        return ""
    return _join_lines(bleach.clean(value, tags=NOTES_TAGS, attributes={}, strip=False))


def format_check(value: bool) -> str:
    """Checklist label for a single obligation flag."""
    return "Iya" if value else "Tidak"


def local_survey_date(value: datetime) -> datetime:
    """Survey date on the WIB calendar; naive values are taken as already local."""
    if value.tzinfo is not None:
        return value.astimezone(APP_TIMEZONE)
    return value


def format_survey_date(value: datetime) -> str:
    """Long-form Indonesian date, e.g. ``Senin, 19 Oktober 2026``."""
    value = local_survey_date(value)
    return f"{DAY_NAMES[value.weekday()]}, {value.day} {MONTH_NAMES[value.month - 1]} {value.year}"


def customer_line(record: SurveyRecord) -> str:
    """Customer id and name; an absent id drops its separator too."""
    if record.customer_id:
        return f"{record.customer_id} / {record.customer_name}"
    return record.customer_name


def header_rows(record: SurveyRecord) -> List[Tuple[str, str]]:
    """Label/value rows of the header table, in form order (plain text)."""
    return [
        ("Jenis Permohonan / Tarif / Daya", f"{record.application_type} / {record.tariff_class}"),
        ("ID Pelanggan / Nama", customer_line(record)),
        ("Alamat", record.address),
        ("Hari / Tanggal", format_survey_date(record.survey_date)),
        ("Hasil Survey Lokasi", record.site_assessment),
    ]


def obligation_rows(record: SurveyRecord) -> List[Tuple[int, str, str]]:
    """Numbered checklist rows 1-5 as (number, label, Iya/Tidak)."""
    return [(number, label, format_check(value)) for number, label, value in record.obligations.items()]


def survey_title(record: SurveyRecord) -> str:
    """Short title used for exported file names and the share dialog."""
    day = local_survey_date(record.survey_date)
    return f"{record.application_type} - {record.customer_name} ({day.day}/{day.month}/{day.year})"


def _render_header(record: SurveyRecord) -> str:
    rows = []
    for label, value in header_rows(record):
        rows.append(
            "            <tr>\n"
            f"                <td class=\"label\">{label}</td>\n"
            "                <td class=\"separator\">:</td>\n"
            f"                <td>{escape_text(value)}</td>\n"
            "            </tr>"
        )
    return "        <table class=\"header-table\">\n" + "\n".join(rows) + "\n        </table>"


def _render_left_column(record: SurveyRecord) -> str:
    items = [
        f"                    <div class=\"checklist-item\">{number}. {label} : <b>{answer}</b></div>"
        for number, label, answer in obligation_rows(record)
    ]
    items.append("                    <div class=\"checklist-item\">6. Dokumen BATG</div>")
    documents = "<br>\n".join(f"                        - {doc}" for doc in SUPPORTING_DOCUMENTS)
    items.append(
        "                    <div class=\"sub-list\">\n"
        f"{documents}\n"
        "                    </div>"
    )
    return "\n".join(items)


def _render_right_column(record: SurveyRecord, unit: str) -> str:
    return (
        "                    <div class=\"checklist-item\">7. APP dipasang di bagian depan "
        f"<u><b>{escape_text(record.meter_location)}</b></u></div>\n"
        "                    <div class=\"checklist-item\" style=\"margin-top: 10px;\">"
        "8. Konstruksi bangunan gardu distribusi dilakukan oleh "
        f"<u><b>{escape_text(record.substation_construction_responsibility)}</b></u></div>\n"
        "                    <div class=\"sub-list\" style=\"margin-top: 5px;\">\n"
        "                        - Konstruksi bangunan mengikuti standar konstruksi yang berlaku "
        f"di PT. PLN (PERSERO) {unit}<br>\n"
        f"                        - Saat proses konstruksi harus dalam pengawasan PT. PLN (PERSERO) {unit}\n"
        "                    </div>"
    )


def _render_checklist(record: SurveyRecord, unit: str) -> str:
    return (
        "        <table class=\"checklist-table\">\n"
        "            <tr>\n"
        "                <td class=\"col-left\">\n"
        f"{_render_left_column(record)}\n"
        "                </td>\n"
        "                <td class=\"col-right\">\n"
        f"{_render_right_column(record, unit)}\n"
        "                </td>\n"
        "            </tr>\n"
        "        </table>"
    )


def _render_notes(record: SurveyRecord) -> str:
    notes = sanitize_notes(record.notes) or DEFAULT_NOTES
    return (
        "        <div class=\"sketch-section\">\n"
        "            <div class=\"sketch-title\">Sketsa Perluasan Jaringan :</div>\n"
        f"            <div>- {notes}</div>\n"
        "            <div>- gambar <b>TERLAMPIR</b></div>\n"
        "        </div>"
    )


def _render_closing() -> str:
    return (
        "        <div class=\"note-section\">\n"
        "            <b>note :</b><br>\n"
        "            <i>*Pilih salah satu / coret yang tidak perlu</i><br>\n"
        f"            {CLOSING_SENTENCE}\n"
        "        </div>"
    )


def _render_signature_cell(heading: str, image: Optional[str], name: str) -> str:
    if image is not None:
        mark = (
            "<div class=\"signature-box\">"
            f"<img src=\"{image}\" style=\"max-height: {SIGNATURE_MAX_HEIGHT}px; "
            f"max-width: {SIGNATURE_MAX_WIDTH}px;\" /></div>"
        )
    else:
        mark = "<div class=\"signature-line\"></div>"
    return (
        "                    <td>\n"
        f"                        <b>{heading}</b>\n"
        f"                        {mark}\n"
        f"                        <div class=\"signature-name\"><b>{escape_text(name) or PLACEHOLDER_NAME}</b></div>\n"
        "                    </td>"
    )


def _render_signatures(record: SurveyRecord, unit: str) -> str:
    customer = _render_signature_cell(
        CUSTOMER_SIGNATURE_HEADING, record.customer_signature_image, record.customer_representative_name
    )
    issuer = _render_signature_cell(unit, record.surveyor_signature_image, record.surveyor_name)
    return (
        "        <div class=\"signature-section\">\n"
        "            <table class=\"signature-table\">\n"
        "                <tr>\n"
        f"{customer}\n"
        f"{issuer}\n"
        "                </tr>\n"
        "            </table>\n"
        "        </div>"
    )


def compose(record: SurveyRecord, options: Optional[RenderOptions] = None) -> str:
    """Compose the complete BA Survey document body.

    Args:
        record: validated survey record (see ``shared.validation.validate_survey``)
        options: presentation options; defaults to ``RenderOptions()``

    Returns:
        str: self-contained HTML document, signatures embedded inline
    """
    options = options or RenderOptions()
    unit = escape_text(options.organizational_unit_name)

    sections = [
        f"        <h1>{TITLE}</h1>",
        _render_header(record),
        _render_checklist(record, unit),
        _render_notes(record),
        _render_closing(),
        _render_signatures(record, unit),
    ]
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        "    <meta charset=\"UTF-8\">\n"
        f"    <title>{TITLE}</title>\n"
        f"    <style>{STYLESHEET}    </style>\n"
        "</head>\n"
        "<body>\n"
        + "\n\n".join(sections)
        + "\n</body>\n"
        "</html>\n"
    )
