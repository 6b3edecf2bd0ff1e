"""Routing prefix allocation.

Prefixes are subdomain labels; the routing URL is
``<prefix>.<tenant_base_domain>`` and is unique across all tenants.
"""

import logging
import time
from typing import Any, Optional

from ....config.constants import UrlPrefixDefaults
from ....config.settings import TenancySettings, get_settings
from ....core.exceptions import UrlPrefixConflictError, ValidationError
from ....utils.uuid import random_base36, to_base36
from ..entities.protocols import TenantRepository
from ..utils.validation import TenantValidationRules

logger = logging.getLogger(__name__)


class UrlPrefixAllocator:
    """Allocate sequential prefixes or vet caller-supplied ones."""

    def __init__(self, tenant_repository: TenantRepository, settings: Optional[TenancySettings] = None):
        self._tenants = tenant_repository
        self._settings = settings or get_settings()

    @property
    def base_domain(self) -> str:
        return self._settings.tenant_base_domain

    def build_url(self, prefix: str) -> str:
        return f"{prefix}.{self.base_domain}"

    async def allocate(self, conn: Any) -> str:
        """Next free zero-padded prefix after the current tenant count.

        Collisions increment and retry up to ``url_prefix_max_attempts``
        checks; after that a time-based token is returned unchecked.
        """
        width = self._settings.url_prefix_width
        candidate = await self._tenants.count(conn) + 1

        for _ in range(self._settings.url_prefix_max_attempts):
            prefix = str(candidate).zfill(width)
            if not await self._tenants.routing_url_exists(conn, self.build_url(prefix)):
                return prefix
            candidate += 1

        prefix = self.fallback_prefix()
        logger.warning(
            f"No free sequential prefix after {self._settings.url_prefix_max_attempts} attempts, "
            f"using generated prefix {prefix}"
        )
        return prefix

    async def claim_custom(self, conn: Any, prefix: str) -> str:
        """Validate a caller-supplied prefix and return its URL if unused.

        Raises:
            ValidationError: malformed prefix
            UrlPrefixConflictError: URL already assigned
        """
        try:
            TenantValidationRules.validate_url_prefix(prefix)
        except ValueError as e:
            raise ValidationError(str(e), field="url_prefix") from e

        url = self.build_url(prefix)
        if await self._tenants.routing_url_exists(conn, url):
            raise UrlPrefixConflictError(url)
        return url

    @staticmethod
    def fallback_prefix() -> str:
        """Epoch milliseconds in base36 plus a random base36 suffix."""
        return to_base36(int(time.time() * 1000)) + random_base36(UrlPrefixDefaults.FALLBACK_RANDOM_LENGTH)
