"""Business profile domain service."""

from typing import Optional

from sparkreceipt.database.base import Database
from sparkreceipt.domain.entities import BusinessProfile
from sparkreceipt.domain.errors import NotFoundError, ValidationError

PROFILE_FIELDS = (
    "business_name",
    "address",
    "city",
    "state",
    "zip",
    "phone",
    "email",
    "website",
)


class BusinessProfileService:
    """Service for the business profile printed on invoices."""

    def __init__(self, db: Database):
        self.db = db

    def get_profile(self) -> Optional[BusinessProfile]:
        """Get the saved business profile, if any."""
        return self.db.get_business_profile()

    def save_profile(self, **fields: Optional[str]) -> BusinessProfile:
        """Create or update the business profile.

        Only fields passed with a non-None value are written. The profile is
        created on first save.

        Raises:
            ValidationError: If an unknown field is given
        """
        unknown = sorted(set(fields) - set(PROFILE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown profile field(s): {', '.join(unknown)}")

        values = {key: value for key, value in fields.items() if value is not None}
        profile = self.db.get_business_profile()
        if profile is None:
            values.setdefault("business_name", "")
            self.db.create_business_profile(values)
        elif values:
            self.db.update_business_profile(profile.id, values)

        saved = self.db.get_business_profile()
        if saved is None:
            raise NotFoundError("Business profile was not saved")
        return saved
