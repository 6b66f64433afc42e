"""Validation of BA survey submissions.

The form collects loosely-typed values; ``validate_survey`` is the single
boundary that turns them into an immutable ``SurveyRecord``. Only the two
required text fields are checked. Enumerated fields are trusted because the
form restricts them to the catalogs in ``shared.enums``.
"""
import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from shared.enums import TariffClass
from shared.schemas import SurveyRecord, now

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when input validation fails."""

    field = None
    message = "Validation failed"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class MissingCustomerName(ValidationError):
    field = 'customer_name'
    message = "Nama Pelanggan harus diisi"


class MissingAddress(ValidationError):
    field = 'address'
    message = "Alamat harus diisi"


class MissingTariffOverride(ValidationError):
    field = 'tariff_class'
    message = "Tarif / Daya harus diisi"


# Candidate keys may arrive in snake_case or in the camelCase of the form payload
_FIELD_KEYS = {
    'customer_name': ('customer_name', 'customerName'),
    'address': ('address',),
    'survey_date': ('survey_date', 'surveyDate'),
}


def _lookup(candidate: Mapping[str, Any], field: str) -> Any:
    for key in _FIELD_KEYS[field]:
        if key in candidate:
            return candidate[key]
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_tariff_class(selection: Union[str, TariffClass], override: Optional[str] = None) -> str:
    """Resolve the tariff picker into the single string the record stores.

    Picking the "other" sentinel means the free-text override is used instead
    and must not be blank.
    """
    if isinstance(selection, TariffClass):
        selection = selection.value
    if selection == TariffClass.OTHER.value:
        if _is_blank(override):
            raise MissingTariffOverride()
        return override.strip()
    return selection


def validate_survey(candidate: Union[Mapping[str, Any], SurveyRecord],
                    timestamp: Optional[datetime] = None) -> SurveyRecord:
    """Validate a candidate survey and return the normalised record.

    Checks, in order: customer name, then address (both non-empty after
    trimming). The survey date is stamped with the current time when the
    candidate has none.

    Raises:
        MissingCustomerName: customer name missing or whitespace only
        MissingAddress: address missing or whitespace only
    """
    if isinstance(candidate, SurveyRecord):
        return candidate

    if _is_blank(_lookup(candidate, 'customer_name')):
        logger.debug("Survey rejected: customer name is blank")
        raise MissingCustomerName()
    if _is_blank(_lookup(candidate, 'address')):
        logger.debug("Survey rejected: address is blank")
        raise MissingAddress()

    data = {key: value for key, value in candidate.items() if value is not None}
    if _lookup(candidate, 'survey_date') is None:
        data['survey_date'] = timestamp or now()

    record = SurveyRecord.model_validate(data)
    logger.info(f"Validated survey for '{record.customer_name}' ({record.application_type})")
    return record
