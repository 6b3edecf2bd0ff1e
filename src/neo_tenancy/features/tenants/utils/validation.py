"""Tenant validation rules and utilities.

Centralized validation logic for tenant slugs and routing prefixes.
"""

import re


class TenantValidationRules:
    """Centralized tenant validation rules.

    All validators raise ValueError; callers translate it into the
    domain ValidationError or let pydantic report it.
    """

    # Regex patterns
    SLUG_PATTERN = re.compile(r'^[a-z0-9-]+$')
    URL_PREFIX_PATTERN = re.compile(r'^[a-z0-9-]+$')

    # Length constraints
    MIN_SLUG_LENGTH = 2
    MAX_SLUG_LENGTH = 63
    MAX_URL_PREFIX_LENGTH = 63

    @classmethod
    def validate_slug(cls, slug: str) -> None:
        """Validate tenant slug format and constraints.

        Args:
            slug: Tenant slug to validate

        Raises:
            ValueError: If slug is invalid
        """
        if not slug:
            raise ValueError("Slug cannot be empty")

        if len(slug) < cls.MIN_SLUG_LENGTH or len(slug) > cls.MAX_SLUG_LENGTH:
            raise ValueError(f"Slug length must be between {cls.MIN_SLUG_LENGTH}-{cls.MAX_SLUG_LENGTH} characters")

        if not cls.SLUG_PATTERN.match(slug):
            raise ValueError("Slug can only contain lowercase letters, numbers, and hyphens")

    @classmethod
    def validate_url_prefix(cls, prefix: str) -> None:
        """Validate a caller-supplied routing prefix (subdomain label).

        Raises:
            ValueError: If prefix is invalid
        """
        if not prefix:
            raise ValueError("URL prefix cannot be empty")

        if len(prefix) > cls.MAX_URL_PREFIX_LENGTH:
            raise ValueError(f"URL prefix cannot exceed {cls.MAX_URL_PREFIX_LENGTH} characters")

        if not cls.URL_PREFIX_PATTERN.match(prefix):
            raise ValueError("URL prefix can only contain lowercase letters, numbers, and hyphens")

