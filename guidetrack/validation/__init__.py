"""Form validation package."""

from guidetrack.validation.validator import FormValidator, agency_in_use

__all__ = ["FormValidator", "agency_in_use"]
