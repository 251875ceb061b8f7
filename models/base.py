import enum


# ============================================================================
# ENUMS
# ============================================================================

class BaseTopic(str, enum.Enum):
    """Dataset families offered by geodienste.ch"""
    LWB_PERIMETER_LN_SF = "lwb_perimeter_ln_sf"
    LWB_REBBAUKATASTER = "lwb_rebbaukataster"
    LWB_PERIMETER_TERRASSENREBEN = "lwb_perimeter_terrassenreben"
    LWB_BIODIVERSITAETSFOERDERFLAECHEN = "lwb_biodiversitaetsfoerderflaechen"
    LWB_BEWIRTSCHAFTUNGSEINHEIT = "lwb_bewirtschaftungseinheit"
    LWB_NUTZUNGSFLAECHEN = "lwb_nutzungsflaechen"

    @property
    def description(self) -> str:
        """Human-readable title of the dataset family"""
        return BASE_TOPIC_DESCRIPTIONS[self]

    @property
    def topic_name(self) -> str:
        """Versioned topic name requested from the info endpoint"""
        return f"{self.value}_{TOPIC_VERSION}"


class Canton(str, enum.Enum):
    """The 26 Swiss cantons"""
    AG = "AG"
    AI = "AI"
    AR = "AR"
    BE = "BE"
    BL = "BL"
    BS = "BS"
    FR = "FR"
    GE = "GE"
    GL = "GL"
    GR = "GR"
    JU = "JU"
    LU = "LU"
    NE = "NE"
    NW = "NW"
    OW = "OW"
    SG = "SG"
    SH = "SH"
    SO = "SO"
    SZ = "SZ"
    TG = "TG"
    TI = "TI"
    UR = "UR"
    VD = "VD"
    VS = "VS"
    ZG = "ZG"
    ZH = "ZH"


class GeodiensteStatus(str, enum.Enum):
    """Export job status reported by status.json"""
    QUEUED = "queued"
    WORKING = "working"
    SUCCESS = "success"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (GeodiensteStatus.SUCCESS, GeodiensteStatus.ERROR)


TOPIC_VERSION = "v2_0"

BASE_TOPIC_DESCRIPTIONS = {
    BaseTopic.LWB_PERIMETER_LN_SF: "Perimeter LN- und Sömmerungsflächen",
    BaseTopic.LWB_REBBAUKATASTER: "Rebbaukataster",
    BaseTopic.LWB_PERIMETER_TERRASSENREBEN: "Perimeter Terrassenreben",
    BaseTopic.LWB_BIODIVERSITAETSFOERDERFLAECHEN: "Biodiversitätsförderflächen, Qualität II und Vernetzung",
    BaseTopic.LWB_BEWIRTSCHAFTUNGSEINHEIT: "Bewirtschaftungseinheit",
    BaseTopic.LWB_NUTZUNGSFLAECHEN: "Nutzungsflächen",
}
