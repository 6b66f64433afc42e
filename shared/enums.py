import enum


class ApplicationType(str, enum.Enum):
    """Request categories offered on the BA Survey form (Jenis Permohonan)."""
    NEW_CONNECTION = "Pasang Baru"
    NETWORK_EXTENSION = "Perluasan Jaringan"
    CAPACITY_INCREASE = "Tambah Daya"
    CAPACITY_DECREASE = "Penurunan Daya"
    TARIFF_CHANGE = "Perubahan Tarif"
    ILLEGAL_USE_INVESTIGATION = "P2TL"
    PLANNING_SURVEY = "Survey Perencanaan"


class TariffClass(str, enum.Enum):
    """Tariff / power-capacity catalog (Tarif / Daya).

    OTHER is the sentinel the surveyor picks to type a free-text value instead.
    """
    R1_450 = "R1 / 450VA"
    R1_900 = "R1 / 900VA"
    R1_1300 = "R1 / 1300VA"
    R1_2200 = "R1 / 2200VA"
    R1M_3500 = "R1M / 3500VA"
    R1M_4400 = "R1M / 4400VA"
    R1M_5500 = "R1M / 5500VA"
    R1M_6600 = "R1M / 6600VA"
    R2 = "R2 / 3500VA - 14kVA"
    R3 = "R3 / >14kVA"
    B1 = "B1 / 450VA - 5500VA"
    B2 = "B2 / 6600VA - 200kVA"
    B3 = "B3 / >200kVA"
    P1 = "P1 / 450VA - 5500VA"
    P2 = "P2 / 6600VA - 200kVA"
    P3 = "P3 / >200kVA"
    OTHER = "Lainnya..."


class SiteAssessment(str, enum.Enum):
    """Site survey outcome (Hasil Survey Lokasi)."""
    PLANNING = "Survei Perencanaan"
    FEASIBLE = "Layak Pasang"
    INFEASIBLE = "Tidak Layak"
    NEEDS_EXTENSION = "Perlu Perluasan"
    PENDING_DOCUMENTS = "Pending Dokumen"


class MeterLocation(str, enum.Enum):
    """Where the metering equipment (APP) is installed."""
    ON_PROPERTY = "Persil"
    ON_SUBSTATION = "Gardu"


class ConstructionResponsibility(str, enum.Enum):
    """Who builds the distribution substation."""
    CUSTOMER = "Pelanggan"
    UTILITY = "PLN"
