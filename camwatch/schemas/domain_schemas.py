from datetime import datetime
from pydantic import BaseModel, Field


class DomainCreate(BaseModel):
    """Register a custom domain or subdomain for the caller's tenant"""

    domain: str = Field(..., min_length=1, max_length=255)
    subdomain: str | None = Field(None, min_length=1, max_length=255)
    ssl_enabled: bool = False


class DomainResponse(BaseModel):
    id: int
    tenant_id: int
    domain: str | None
    subdomain: str | None
    is_primary: bool
    ssl_enabled: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class BrandingUpdate(BaseModel):
    """Branding fields; omitted fields keep their stored value"""

    logo_url: str | None = Field(None, max_length=1024)
    primary_color: str | None = Field(None, pattern=r"^#[0-9a-fA-F]{3,8}$")
    secondary_color: str | None = Field(None, pattern=r"^#[0-9a-fA-F]{3,8}$")
    accent_color: str | None = Field(None, pattern=r"^#[0-9a-fA-F]{3,8}$")
    company_name: str | None = Field(None, max_length=255)
    email_from_name: str | None = Field(None, max_length=255)
    favicon_url: str | None = Field(None, max_length=1024)
    custom_css: str | None = None


class BrandingResponse(BaseModel):
    tenant_id: int
    logo_url: str | None
    primary_color: str | None
    secondary_color: str | None
    accent_color: str | None
    company_name: str | None
    email_from_name: str | None
    favicon_url: str | None
    custom_css: str | None

    model_config = {"from_attributes": True}


class ThemeResponse(BaseModel):
    css_variables: dict[str, str]
    company_name: str | None = None
    logo_url: str | None = None
    favicon_url: str | None = None
    custom_css: str | None = None

    model_config = {"from_attributes": True}


class TenantDetectionResponse(BaseModel):
    """Tenant serving a host; all-null tenant fields mean the default platform"""

    tenant_id: int | None
    domain: DomainResponse | None
    branding: BrandingResponse | None
    theme: ThemeResponse


class TenantUrlResponse(BaseModel):
    tenant_id: int
    url: str | None
