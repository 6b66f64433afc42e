"""Pydantic schemas for BA Survey records and render options."""
import enum
from datetime import datetime
from typing import ClassVar, Optional, Iterator, Tuple
from zoneinfo import ZoneInfo
from pydantic import BaseModel, Field, field_validator, ConfigDict
from pydantic.alias_generators import to_camel

from shared.enums import (
    ApplicationType, TariffClass, SiteAssessment, MeterLocation, ConstructionResponsibility
)

APP_TIMEZONE = ZoneInfo('Asia/Jakarta')  # WIB, where the surveys are carried out

DEFAULT_ORGANIZATIONAL_UNIT = 'PLN UP3 Banten Selatan'


def now():
    """Return current datetime in application timezone (timezone-aware)."""
    return datetime.now(APP_TIMEZONE)


def _enum_value(v):
    """Unwrap enum members so enumerated fields always hold plain strings."""
    if isinstance(v, enum.Enum):
        return v.value
    return v


class ObligationFlags(BaseModel):
    """The five construction/fee conditions of a survey, numbered 1-5 on the form.

    Field order is the numbering order; ``items()`` relies on it.
    """
    network_extension_mv: bool = Field(default=False)
    build_substation: bool = Field(default=False)
    network_extension_lv: bool = Field(default=False)
    pole_installation: bool = Field(default=False)
    fee_applies: bool = Field(default=False)

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    LABELS: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ('network_extension_mv', 'Perluasan JTM*'),
        ('build_substation', 'Bangun Gardu*'),
        ('network_extension_lv', 'Perluasan JTR*'),
        ('pole_installation', 'Tanam Tiang*'),
        ('fee_applies', 'Dikenakan PFK*'),
    )

    def items(self) -> Iterator[Tuple[int, str, bool]]:
        """Yield (number, printed label, value) in form order."""
        for number, (name, label) in enumerate(self.LABELS, start=1):
            yield number, label, getattr(self, name)


class SurveyRecord(BaseModel):
    """Validated, immutable snapshot of one BA survey submission.

    Built by ``shared.validation.validate_survey``; enumerated fields are
    trusted to hold catalog values and are not checked here.
    """
    application_type: str = Field(default=ApplicationType.NEW_CONNECTION.value)
    tariff_class: str = Field(default=TariffClass.R1_1300.value)
    customer_id: str = Field(default="")
    customer_name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    survey_date: datetime = Field(default_factory=now)
    site_assessment: str = Field(default=SiteAssessment.PLANNING.value)
    surveyor_name: str = Field(default="")
    customer_representative_name: str = Field(default="")
    notes: str = Field(default="")
    meter_location: str = Field(default=MeterLocation.ON_PROPERTY.value)
    substation_construction_responsibility: str = Field(
        default=ConstructionResponsibility.CUSTOMER.value
    )
    obligations: ObligationFlags = Field(default_factory=ObligationFlags)
    customer_signature_image: Optional[str] = Field(default=None)
    surveyor_signature_image: Optional[str] = Field(default=None)

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    @field_validator('application_type', 'tariff_class', 'site_assessment',
                     'meter_location', 'substation_construction_responsibility', mode='before')
    @classmethod
    def unwrap_enums(cls, v):
        return _enum_value(v)

    @field_validator('customer_id', 'customer_name', 'address', 'surveyor_name',
                     'customer_representative_name', 'notes', mode='before')
    @classmethod
    def strip_text_fields(cls, v):
        if v is None:
            return ""
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)  # numeric keyboard input for the customer id
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('customer_signature_image', 'surveyor_signature_image', mode='before')
    @classmethod
    def blank_signature_is_absent(cls, v):
        # The encoded image itself is opaque; only presence matters.
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def has_customer_signature(self) -> bool:
        return self.customer_signature_image is not None

    @property
    def has_surveyor_signature(self) -> bool:
        return self.surveyor_signature_image is not None


class RenderOptions(BaseModel):
    """Presentation-only parameters for the composed document."""
    organizational_unit_name: str = Field(default=DEFAULT_ORGANIZATIONAL_UNIT)

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    @field_validator('organizational_unit_name', mode='before')
    @classmethod
    def default_when_blank(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_ORGANIZATIONAL_UNIT
        return v.strip() if isinstance(v, str) else v
