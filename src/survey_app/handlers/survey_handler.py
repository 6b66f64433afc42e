"""BA Survey form submission handler for SurveyApp."""
import logging
from dataclasses import dataclass
from typing import Optional

from shared.document import survey_title
from shared.enums import (
    ApplicationType, TariffClass, SiteAssessment, MeterLocation, ConstructionResponsibility
)
from shared.schemas import SurveyRecord
from shared.validation import ValidationError, validate_survey, resolve_tariff_class


@dataclass
class SubmissionResult:
    """Outcome of one form submission, ready for the UI to display."""
    record: Optional[SurveyRecord]
    title: Optional[str]
    document_path: Optional[str]
    message: str
    error_field: Optional[str] = None

    @property
    def accepted(self):
        return self.record is not None


def default_form():
    """Initial values of the BA Survey form."""
    return {
        'application_type': ApplicationType.NEW_CONNECTION.value,
        'tariff_selection': TariffClass.R1_1300.value,
        'tariff_override': '',
        'customer_id': '',
        'customer_name': '',
        'address': '',
        'site_assessment': SiteAssessment.PLANNING.value,
        'surveyor_name': '',
        'customer_representative_name': '',
        'notes': '',
        'meter_location': MeterLocation.ON_PROPERTY.value,
        'substation_construction_responsibility': ConstructionResponsibility.CUSTOMER.value,
        'obligations': {
            'network_extension_mv': False,
            'build_substation': False,
            'network_extension_lv': False,
            'pole_installation': False,
            'fee_applies': False,
        },
        'customer_signature_image': None,
        'surveyor_signature_image': None,
    }


def build_candidate(form):
    """Resolve the tariff picker into tariff_class and drop form-only keys.

    Raises:
        MissingTariffOverride: "other" picked with a blank override
    """
    candidate = {k: v for k, v in form.items() if k not in ('tariff_selection', 'tariff_override')}
    if 'tariff_selection' in form:
        candidate['tariff_class'] = resolve_tariff_class(
            form['tariff_selection'], form.get('tariff_override')
        )
    return candidate


class SurveyHandler:
    """Handles BA Survey submissions: validate, then export the document."""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)

    async def submit(self, form):
        """Validate the submitted form and generate its BA document.

        Validation problems come back as a message for the surveyor to fix;
        an export failure still yields an accepted record with no path.
        """
        try:
            record = validate_survey(build_candidate(form))
        except ValidationError as e:
            self.logger.warning(f"BA Survey form rejected ({e.field}): {e}")
            return SubmissionResult(None, None, None, str(e), error_field=e.field)

        title = survey_title(record)
        path = await self.app.export_service.export(record, self.app.config.render_options())
        if path:
            message = f"{title}\n\nSurvey berhasil dibuat dan BA PDF telah di-generate!"
        else:
            message = f"{title}\n\nSurvey berhasil dibuat!\n(PDF gagal di-generate)"
        self.logger.info(f"BA Survey submitted: {title} (document: {path or 'none'})")
        return SubmissionResult(record, title, path, message)
