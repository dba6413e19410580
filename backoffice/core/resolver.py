from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from backoffice.core.stores.base import TenantStore

if TYPE_CHECKING:
    from backoffice.core.auth import AuthenticatedUser

ResolutionSource = Literal["subdomain", "domain", "path", "user"]


@dataclass(frozen=True, slots=True)
class TenantResolution:
    organization_id: int | None = None
    organization_slug: str | None = None
    source: ResolutionSource | None = None


def normalize_host(host: str) -> str:
    host = host.strip().lower()
    hostname, _, port = host.rpartition(":")
    if hostname and port.isdigit():
        return hostname
    return host


def extract_subdomain(host: str) -> str | None:
    parts = host.split(".")
    if len(parts) >= 3 and parts[0]:
        return parts[0]
    return None


def should_skip_tenant_resolution(path: str, skip_paths: Iterable[str]) -> bool:
    return any(path.startswith(skip_path) for skip_path in skip_paths)


class TenantResolver:
    """Work out which organization a request belongs to.

    Candidates are tried in order: subdomain, active custom domain, ``org_slug``
    path segment, then the authenticated user's own organization. A slug found
    by the first three is turned into an id with a store lookup; the user's
    organization id is used as-is.
    """

    def __init__(
        self,
        store: TenantStore,
        *,
        reserved_subdomains: Iterable[str] = ("www", "app"),
        org_path_pattern: str = r"^/(?:api/)?org/(?P<org_slug>[^/]+)",
    ) -> None:
        self.store = store
        self.reserved_subdomains = frozenset(reserved_subdomains)
        self._org_path = re.compile(org_path_pattern)

    def subdomain_candidate(self, host: str) -> str | None:
        subdomain = extract_subdomain(host)
        if subdomain is None or subdomain in self.reserved_subdomains:
            return None
        return subdomain

    def path_slug(self, path: str) -> str | None:
        match = self._org_path.match(path)
        if match is None:
            return None
        return match.group("org_slug") or None

    async def resolve(
        self,
        *,
        host: str,
        path: str,
        user: AuthenticatedUser | None = None,
        path_slug: str | None = None,
    ) -> TenantResolution:
        host = normalize_host(host)
        source: ResolutionSource | None = None

        slug = self.subdomain_candidate(host)
        if slug is not None:
            source = "subdomain"

        if slug is None and host:
            organization = await self.store.get_active_organization_by_domain(host)
            if organization is not None:
                slug, source = organization.slug, "domain"

        if slug is None:
            slug = path_slug or self.path_slug(path)
            if slug is not None:
                source = "path"

        if slug is None:
            if user is not None and user.organization_id is not None:
                return TenantResolution(organization_id=user.organization_id, source="user")
            return TenantResolution()

        organization = await self.store.get_organization_by_slug(slug)
        return TenantResolution(
            organization_id=organization.id if organization is not None else None,
            organization_slug=slug,
            source=source,
        )
