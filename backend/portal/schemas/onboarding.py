"""Onboarding Pydantic schemas: versioned questionnaire response document."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OnboardingResponseV1(BaseModel):
    """Questionnaire answers, version 1.

    Every answer is optional. Keys the questionnaire does not know about are
    moved into `extra` on the way in, so older readers still render them
    under "Additional Information".
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    schema_version: Literal[1] = 1

    # Company Information
    company_name: str | None = None
    company_founded_reason: str | None = None
    years_in_business: str | None = None
    industry: str | None = None
    problems_solved: str | None = None
    long_term_goals: str | None = None

    # Target Audience
    primary_audience: str | None = None
    secondary_audience: str | None = None
    tertiary_audience: str | None = None
    ideal_consumer: str | None = None
    market_research: str | None = None
    audience_pain_points: str | None = None
    brand_perception: str | None = None
    not_target: str | None = None

    # Brand Ecosystem
    website_url: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    instagram: str | None = None
    tiktok: str | None = None
    other_presence: str | None = None

    # Business Goals
    business_problem: str | None = None
    project_goals: str | None = None
    success_definition: str | None = None

    # Brand Values & Tonality
    company_stands_for: str | None = None
    mission_vision: str | None = None
    brand_values: str | None = None
    brand_adjectives: str | None = None
    not_associated_with: str | None = None
    brand_personality: str | None = None
    tone_of_voice: str | None = None
    brand_emotions: str | None = None
    perception_change: str | None = None

    # Brand Logistics
    brand_guidelines: str | None = None
    voice_document: str | None = None
    asset_library: str | None = None
    brand_changes: str | None = None

    # Messaging Goals
    visitor_feeling: str | None = None
    visitor_goals: str | None = None
    key_message: str | None = None
    ctas: str | None = None

    # Existing Marketing
    marketing_campaigns: str | None = None
    other_agencies: str | None = None
    agency_pain_points: str | None = None

    # Competitor Analysis
    competitors: str | None = None
    differentiation: str | None = None
    competitor_advantages: str | None = None
    inspiring_brands: str | None = None

    # Project Details
    budget: str | None = None
    referral_source: str | None = None
    multiple_languages: str | None = None  # "yes" / "no"
    languages: str | None = None
    important_dates: str | None = None
    stock_photography: bool | None = None
    photoshoot: bool | None = None
    copywriting: bool | None = None
    seo: bool | None = None
    existing_analytics: str | None = None

    # Login Information
    hosting_login: str | None = None
    domain_login: str | None = None
    cms_login: str | None = None
    email_platform_login: str | None = None
    other_integrations: str | None = None

    # Brand Assets (public URLs of uploaded files)
    brand_guide_urls: list[str] | None = None
    logo_urls: list[str] | None = None
    font_urls: list[str] | None = None
    media_urls: list[str] | None = None

    # Contact Information
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    role: str | None = None
    contact_preference: str | None = None
    additional_notes: str | None = None

    extra: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_unknown_fields(cls, data: Any) -> Any:
        """Move keys that are not declared fields into `extra`."""
        if not isinstance(data, dict):
            return data
        known = set(cls.model_fields)
        supplied = data.get("extra") or {}
        if not isinstance(supplied, dict):
            raise ValueError("extra must be an object")
        extra = dict(supplied)
        out = {}
        for key, value in data.items():
            if key in known:
                out[key] = value
            else:
                extra[key] = value
        out["extra"] = extra
        return out

    def to_document(self) -> dict[str, Any]:
        """Stored form: unanswered fields dropped, schema_version always kept."""
        document = self.model_dump(exclude_none=True)
        if not document.get("extra"):
            document.pop("extra", None)
        return document


class OnboardingSubmitResponse(BaseModel):
    response_id: str
    submitted_at: datetime


class OnboardingStatusResponse(BaseModel):
    """Response model for onboarding completion status."""

    onboarding_completed: bool
    onboarding_completed_at: datetime | None = None


class RenderedFieldResponse(BaseModel):
    label: str
    value: str | list[str]


class RenderedSectionResponse(BaseModel):
    title: str
    fields: list[RenderedFieldResponse]


class OnboardingViewResponse(BaseModel):
    """Latest onboarding submission rendered into questionnaire sections."""

    response_id: str
    submitted_at: datetime | None = None
    sections: list[RenderedSectionResponse]


class AssetUploadResponse(BaseModel):
    kind: str
    url: str
