"""Tests for the BA Survey document composer."""
import itertools
import pytest
from datetime import datetime, timezone

from shared.document import (
    DEFAULT_NOTES, PLACEHOLDER_NAME, compose, customer_line, escape_text,
    format_check, format_survey_date, header_rows, obligation_rows, survey_title,
)
from shared.schemas import APP_TIMEZONE, DEFAULT_ORGANIZATIONAL_UNIT, ObligationFlags, RenderOptions
from shared.validation import validate_survey

SIGNATURE_LINE = '<div class="signature-line"></div>'
OBLIGATION_FIELDS = (
    'network_extension_mv', 'build_substation', 'network_extension_lv',
    'pole_installation', 'fee_applies',
)


class TestScenario:
    """New connection for a company, no id, notes or signatures."""

    def test_header(self, record):
        rows = header_rows(record)
        assert [label for label, _ in rows] == [
            'Jenis Permohonan / Tarif / Daya',
            'ID Pelanggan / Nama',
            'Alamat',
            'Hari / Tanggal',
            'Hasil Survey Lokasi',
        ]
        assert rows[0][1] == 'Pasang Baru / R1 / 1300VA'
        assert rows[1][1] == 'PT. Mekarjaya Propertindo'
        assert rows[3][1] == 'Senin, 19 Oktober 2026'
        assert rows[4][1] == 'Layak Pasang'

    def test_body(self, record):
        body = compose(record)
        assert body.startswith('<!DOCTYPE html>')
        assert '<h1>BERITA ACARA SURVEY</h1>' in body
        assert '<td>PT. Mekarjaya Propertindo</td>' in body
        assert '/ PT. Mekarjaya Propertindo' not in body
        assert body.count('<b>Tidak</b>') == 5
        assert '<b>Iya</b>' not in body
        assert f'<div>- {DEFAULT_NOTES}</div>' in body
        assert '<div>- gambar <b>TERLAMPIR</b></div>' in body
        assert body.count(SIGNATURE_LINE) == 2
        assert body.count(f'<b>{PLACEHOLDER_NAME}</b>') == 2
        assert '<img' not in body

    def test_fixed_sections(self, record):
        body = compose(record)
        assert '6. Dokumen BATG' in body
        assert '- FC Sertifikat Tanah<br>' in body
        assert '7. APP dipasang di bagian depan <u><b>Persil</b></u>' in body
        assert 'dilakukan oleh <u><b>Pelanggan</b></u>' in body
        assert 'Demikian Berita Acara ini dibuat untuk dipergunakan sebagaimana mestinya.' in body

    def test_self_contained(self, record, signature_data_url):
        body = compose(record.model_copy(update={'customer_signature_image': signature_data_url}))
        assert 'http://' not in body
        assert 'https://' not in body
        assert '<link' not in body
        assert '<script' not in body


class TestDeterminism:

    def test_same_record_same_bytes(self, record):
        assert compose(record).encode('utf-8') == compose(record).encode('utf-8')

    def test_equal_records_same_bytes(self, candidate, survey_date, signature_data_url):
        candidate['surveyor_signature_image'] = signature_data_url
        first = validate_survey(dict(candidate), timestamp=survey_date)
        second = validate_survey(dict(candidate), timestamp=survey_date)
        options = RenderOptions(organizational_unit_name='PLN UP3 Cikokol')
        assert compose(first, options) == compose(second, options)


class TestChecklist:

    @pytest.mark.parametrize('flags', list(itertools.product([False, True], repeat=5)))
    def test_every_combination(self, record, flags):
        obligations = ObligationFlags(**dict(zip(OBLIGATION_FIELDS, flags)))
        body = compose(record.model_copy(update={'obligations': obligations}))
        rows = obligation_rows(record.model_copy(update={'obligations': obligations}))

        assert [number for number, _, _ in rows] == [1, 2, 3, 4, 5]
        for (number, label, answer), flag in zip(rows, flags):
            expected = 'Iya' if flag else 'Tidak'
            assert answer == expected
            assert f'{number}. {label} : <b>{expected}</b>' in body
        assert body.count('<b>Iya</b>') == sum(flags)
        assert body.count('<b>Tidak</b>') == 5 - sum(flags)

    def test_labels_in_order(self, record):
        labels = [label for _, label, _ in obligation_rows(record)]
        assert labels == [
            'Perluasan JTM*', 'Bangun Gardu*', 'Perluasan JTR*', 'Tanam Tiang*', 'Dikenakan PFK*'
        ]

    def test_format_check(self):
        assert format_check(True) == 'Iya'
        assert format_check(False) == 'Tidak'


class TestOptionalFields:

    def test_customer_id_joined(self, record):
        with_id = record.model_copy(update={'customer_id': '512345678901'})
        assert customer_line(with_id) == '512345678901 / PT. Mekarjaya Propertindo'
        assert '<td>512345678901 / PT. Mekarjaya Propertindo</td>' in compose(with_id)

    def test_customer_id_absent(self, candidate):
        record = validate_survey({**candidate, 'customer_name': 'Budi', 'customer_id': ''})
        assert customer_line(record) == 'Budi'
        body = compose(record)
        assert '<td>Budi</td>' in body
        assert '/ Budi' not in body

    def test_notes_rendered(self, record):
        body = compose(record.model_copy(update={'notes': 'Kebutuhan tiang 2 btg'}))
        assert '<div>- Kebutuhan tiang 2 btg</div>' in body
        assert DEFAULT_NOTES not in body

    def test_multiline_address(self, candidate):
        candidate['address'] = 'Kp. Cihaseum\nKel. Pandeglang'
        body = compose(validate_survey(candidate))
        assert '<td>Kp. Cihaseum<br>Kel. Pandeglang</td>' in body

    def test_signature_names(self, record):
        named = record.model_copy(update={
            'customer_representative_name': 'Siti Aminah',
            'surveyor_name': 'Andi',
        })
        body = compose(named)
        assert '<b>Siti Aminah</b>' in body
        assert '<b>Andi</b>' in body
        assert PLACEHOLDER_NAME not in body

    def test_markup_in_text_is_neutralised(self, record):
        body = compose(record.model_copy(update={
            'customer_name': 'Toko A & B',
            'notes': '<b>tiang</b> baru',
            'tariff_class': 'R3 / >14kVA',
        }))
        assert '<td>Toko A &amp; B</td>' in body
        assert '<div>- &lt;b&gt;tiang&lt;/b&gt; baru</div>' in body
        assert 'R1 / 1300VA' not in body
        assert 'Pasang Baru / R3 / &gt;14kVA' in body

    @pytest.mark.parametrize('name, rendered', [
        ('<PT Maju>', '<td>&lt;PT Maju&gt;</td>'),
        ('Toko <Sinar> Jaya', '<td>Toko &lt;Sinar&gt; Jaya</td>'),
    ])
    def test_tag_shaped_name_is_shown_verbatim(self, record, name, rendered):
        body = compose(record.model_copy(update={'customer_name': name}))
        assert rendered in body
        assert '<td></td>' not in body

    def test_tag_shaped_representative_is_not_a_placeholder(self, record):
        body = compose(record.model_copy(update={'customer_representative_name': '<Andi>'}))
        assert '<b>&lt;Andi&gt;</b>' in body
        assert body.count(PLACEHOLDER_NAME) == 1

    def test_notes_keep_basic_formatting(self, record):
        body = compose(record.model_copy(update={'notes': '<strong>tiang</strong> & kabel'}))
        assert '<div>- <strong>tiang</strong> &amp; kabel</div>' in body


class TestSignatures:

    def test_customer_signature_embedded(self, record, signature_data_url):
        body = compose(record.model_copy(update={'customer_signature_image': signature_data_url}))
        assert f'<img src="{signature_data_url}"' in body
        assert body.count(SIGNATURE_LINE) == 1
        assert 'max-height: 83px; max-width: 270px;' in body

    def test_both_signatures_embedded(self, record, signature_data_url):
        other = signature_data_url.replace('AAAA', 'BBBB', 1)
        body = compose(record.model_copy(update={
            'customer_signature_image': signature_data_url,
            'surveyor_signature_image': other,
        }))
        assert SIGNATURE_LINE not in body
        assert body.count('<img src=') == 2
        assert body.index(signature_data_url) < body.index(other)

    def test_issuer_heading_uses_unit(self, record):
        body = compose(record, RenderOptions(organizational_unit_name='PLN UP3 Cikokol'))
        assert '<b>PLN UP3 Cikokol</b>' in body
        assert 'standar konstruksi yang berlaku di PT. PLN (PERSERO) PLN UP3 Cikokol' in body
        assert 'pengawasan PT. PLN (PERSERO) PLN UP3 Cikokol' in body
        assert DEFAULT_ORGANIZATIONAL_UNIT not in body

    def test_default_unit(self, record):
        body = compose(record)
        assert f'<b>{DEFAULT_ORGANIZATIONAL_UNIT}</b>' in body
        assert '<b>Pelanggan / Perwakilan Pelanggan</b>' in body
        assert compose(record) == compose(record, RenderOptions())


class TestFormatting:

    @pytest.mark.parametrize('value, expected', [
        (datetime(2026, 10, 19), 'Senin, 19 Oktober 2026'),
        (datetime(2024, 2, 29), 'Kamis, 29 Februari 2024'),
        (datetime(2025, 1, 5), 'Minggu, 5 Januari 2025'),
        (datetime(2023, 12, 1), 'Jumat, 1 Desember 2023'),
    ])
    def test_format_survey_date(self, value, expected):
        assert format_survey_date(value) == expected

    def test_survey_title(self, record):
        assert survey_title(record) == 'Pasang Baru - PT. Mekarjaya Propertindo (19/10/2026)'

    def test_survey_title_day_and_month_unpadded(self, record):
        record = record.model_copy(update={'survey_date': datetime(2025, 1, 5, 10, 0, tzinfo=APP_TIMEZONE)})
        assert survey_title(record) == 'Pasang Baru - PT. Mekarjaya Propertindo (5/1/2025)'

    def test_aware_dates_use_the_jakarta_calendar(self):
        late_utc = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)
        assert format_survey_date(late_utc) == 'Selasa, 20 Oktober 2026'

    def test_utc_survey_date_composes_local_day(self, candidate):
        record = validate_survey({**candidate, 'survey_date': '2026-10-19T20:00:00Z'})
        assert '<td>Selasa, 20 Oktober 2026</td>' in compose(record)
        assert survey_title(record).endswith('(20/10/2026)')

    def test_escape_text(self):
        assert escape_text('') == ''
        assert escape_text('Budi') == 'Budi'
        assert escape_text('a\nb') == 'a<br>b'
        assert escape_text('<x> & y') == '&lt;x&gt; &amp; y'

    def test_render_options_blank_unit(self):
        assert RenderOptions(organizational_unit_name='  ').organizational_unit_name == DEFAULT_ORGANIZATIONAL_UNIT
        assert RenderOptions(organizationalUnitName='PLN ULP Labuan').organizational_unit_name == 'PLN ULP Labuan'
