"""Repository for the Business aggregate."""

from dispatch.business.business import Business
from dispatch.domain import dispatch
from dispatch.utils.query import fetch_all


@dispatch.repository(part_of=Business)
class BusinessRepository:
    def find_visible(self) -> list[Business]:
        """Businesses shown on the platform (``is_hidden`` not set)."""
        return [business for business in fetch_all(self._dao) if not business.is_hidden]
