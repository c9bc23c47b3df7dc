from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PartnerProfile:
    """Trading partner identities stamped into UNB/NAD and the file names."""

    sender_id: str = "9979383000006"
    recipient_id: str = "9906629000002"
    app_code: str = "TL"
    partner_qualifier: str = "500"  # UNB identification code qualifier
    code_list_agency: str = "293"  # NAD party id responsible agency


@dataclass
class TranslatorConfig:
    profile: PartnerProfile = field(default_factory=PartnerProfile)

    # Output
    segment_separator: str = ""  # "" keeps the interchange on one line
    monthly_archives: bool = True
    size_limit_mb: float = 50.0

    @property
    def size_limit_bytes(self) -> int:
        return int(self.size_limit_mb * 1024 * 1024)


def default_config() -> TranslatorConfig:
    return TranslatorConfig()
