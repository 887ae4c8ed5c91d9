from dataclasses import dataclass, field

from camwatch.config import settings
from camwatch.models.tenant_branding import TenantBranding


@dataclass(frozen=True)
class ThemeDescriptor:
    """Declarative theme handed to the rendering layer."""

    css_variables: dict[str, str] = field(default_factory=dict)
    company_name: str | None = None
    logo_url: str | None = None
    favicon_url: str | None = None
    custom_css: str | None = None


def build_theme(branding: TenantBranding | None) -> ThemeDescriptor:
    """Map tenant branding to a theme; platform defaults fill anything unset."""
    if branding is None:
        return ThemeDescriptor(
            css_variables={
                "--primary": settings.DEFAULT_PRIMARY_COLOR,
                "--secondary": settings.DEFAULT_SECONDARY_COLOR,
                "--accent": settings.DEFAULT_ACCENT_COLOR,
            }
        )
    return ThemeDescriptor(
        css_variables={
            "--primary": branding.primary_color or settings.DEFAULT_PRIMARY_COLOR,
            "--secondary": branding.secondary_color or settings.DEFAULT_SECONDARY_COLOR,
            "--accent": branding.accent_color or settings.DEFAULT_ACCENT_COLOR,
        },
        company_name=branding.company_name or None,
        logo_url=branding.logo_url or None,
        favicon_url=branding.favicon_url or None,
        custom_css=branding.custom_css or None,
    )
