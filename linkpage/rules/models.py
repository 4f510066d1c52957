from pydantic import BaseModel, Field

from linkpage.domain.sanitize import DEFAULT_BOT_SIGNATURES


class SlugRules(BaseModel):
    min_length: int = 2
    max_length: int = 48
    fallback: str = "profile"
    provision_max_attempts: int = 20

class FieldRules(BaseModel):
    display_name_max: int = 100
    bio_max: int = 500
    avatar_url_max: int = 2048
    label_max: int = 100
    url_max: int = 2048
    html_max: int = 65536

class LinkRules(BaseModel):
    types: list[str] = Field(default_factory=lambda: ["social", "website", "other"])
    icons: list[str] = Field(
        default_factory=lambda: ["facebook", "instagram", "youtube", "twitter", "linkedin", "link"]
    )
    # Route public hrefs through /go/{id} so clicks are counted.
    track_clicks: bool = False

class TemplateRules(BaseModel):
    default_slug: str = "default"

class CacheRules(BaseModel):
    revalidate_seconds: int = 86400
    edge_s_maxage_seconds: int = 86400
    edge_stale_while_revalidate_seconds: int = 604800

class ClickRules(BaseModel):
    bot_signatures: list[str] = Field(default_factory=lambda: list(DEFAULT_BOT_SIGNATURES))

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    slugs: SlugRules = Field(default_factory=SlugRules)
    fields: FieldRules = Field(default_factory=FieldRules)
    links: LinkRules = Field(default_factory=LinkRules)
    templates: TemplateRules = Field(default_factory=TemplateRules)
    cache: CacheRules = Field(default_factory=CacheRules)
    clicks: ClickRules = Field(default_factory=ClickRules)
    ops: OpsRules = Field(default_factory=OpsRules)
