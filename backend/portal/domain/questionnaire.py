"""Onboarding questionnaire sections and the read-side renderer.

The stored response document is tolerated in any shape: every field is
optional and unknown keys are carried along. Rendering turns a document into
an ordered list of titled sections ready for display or export.

Pure functions -- no I/O, no database access.
"""

from dataclasses import dataclass, field
from typing import Any

MISSING = "N/A"

# Field kinds
TEXT = "text"
FLAG = "flag"
URLS = "urls"


@dataclass(frozen=True)
class QuestionField:
    key: str
    label: str
    kind: str = TEXT


@dataclass(frozen=True)
class Section:
    title: str
    fields: tuple[QuestionField, ...]


@dataclass
class RenderedField:
    label: str
    value: str | list[str]


@dataclass
class RenderedSection:
    title: str
    fields: list[RenderedField] = field(default_factory=list)


def _q(key: str, label: str, kind: str = TEXT) -> QuestionField:
    return QuestionField(key=key, label=label, kind=kind)


SECTIONS: tuple[Section, ...] = (
    Section(
        "Company Information",
        (
            _q("company_name", "Company Name"),
            _q("years_in_business", "Years in Business"),
            _q("industry", "Industry"),
            _q("company_founded_reason", "Why Founded"),
            _q("problems_solved", "Problems Solved"),
            _q("long_term_goals", "Long-term Goals"),
        ),
    ),
    Section(
        "Target Audience",
        (
            _q("primary_audience", "Primary Audience"),
            _q("secondary_audience", "Secondary Audience"),
            _q("tertiary_audience", "Tertiary Audience"),
            _q("ideal_consumer", "Ideal Consumer"),
            _q("market_research", "Market Research"),
            _q("audience_pain_points", "Audience Pain Points"),
            _q("brand_perception", "Brand Perception"),
            _q("not_target", "Not Our Audience"),
        ),
    ),
    Section(
        "Brand Ecosystem",
        (
            _q("website_url", "Website"),
            _q("facebook", "Facebook"),
            _q("instagram", "Instagram"),
            _q("linkedin", "LinkedIn"),
            _q("twitter", "Twitter/X"),
            _q("tiktok", "TikTok"),
            _q("other_presence", "Other Presence"),
        ),
    ),
    Section(
        "Business Goals",
        (
            _q("business_problem", "Business Problem"),
            _q("project_goals", "Project Goals"),
            _q("success_definition", "Success Definition"),
        ),
    ),
    Section(
        "Brand Values & Tonality",
        (
            _q("company_stands_for", "What Company Stands For"),
            _q("mission_vision", "Mission/Vision"),
            _q("brand_values", "Brand Values"),
            _q("brand_adjectives", "Brand Adjectives"),
            _q("not_associated_with", "Not Associated With"),
            _q("brand_personality", "Brand Personality"),
            _q("tone_of_voice", "Tone of Voice"),
            _q("brand_emotions", "Brand Emotions"),
            _q("perception_change", "Perception Change"),
        ),
    ),
    Section(
        "Brand Logistics",
        (
            _q("brand_guidelines", "Brand Guidelines"),
            _q("voice_document", "Voice Document"),
            _q("asset_library", "Asset Library"),
            _q("brand_changes", "Planned Brand Changes"),
        ),
    ),
    Section(
        "Messaging Goals",
        (
            _q("visitor_feeling", "Visitor Feeling"),
            _q("visitor_goals", "Visitor Goals"),
            _q("key_message", "Key Message"),
            _q("ctas", "Calls to Action"),
        ),
    ),
    Section(
        "Existing Marketing",
        (
            _q("marketing_campaigns", "Marketing Campaigns"),
            _q("other_agencies", "Other Agencies"),
            _q("agency_pain_points", "Agency Pain Points"),
        ),
    ),
    Section(
        "Competitor Analysis",
        (
            _q("competitors", "Top Competitors"),
            _q("differentiation", "Differentiation"),
            _q("competitor_advantages", "Competitor Advantages"),
            _q("inspiring_brands", "Inspiring Brands"),
        ),
    ),
    Section(
        "Project Details",
        (
            _q("budget", "Budget"),
            _q("referral_source", "Referral Source"),
            _q("multiple_languages", "Multiple Languages"),
            _q("languages", "Languages"),
            _q("important_dates", "Important Dates"),
            _q("stock_photography", "Stock Photography", FLAG),
            _q("photoshoot", "Custom Photoshoot", FLAG),
            _q("copywriting", "Copywriting", FLAG),
            _q("seo", "SEO Services", FLAG),
            _q("existing_analytics", "Existing Analytics"),
        ),
    ),
    Section(
        "Login Information",
        (
            _q("hosting_login", "Hosting Login"),
            _q("domain_login", "Domain Login"),
            _q("cms_login", "CMS Login"),
            _q("email_platform_login", "Email Platform Login"),
            _q("other_integrations", "Other Integrations"),
        ),
    ),
    Section(
        "Brand Assets",
        (
            _q("brand_guide_urls", "Brand Guide", URLS),
            _q("logo_urls", "Logos", URLS),
            _q("font_urls", "Fonts", URLS),
            _q("media_urls", "Media", URLS),
        ),
    ),
    Section(
        "Contact Information",
        (
            _q("first_name", "First Name"),
            _q("last_name", "Last Name"),
            _q("email", "Email"),
            _q("phone", "Phone"),
            _q("role", "Role"),
            _q("contact_preference", "Contact Preference"),
            _q("additional_notes", "Additional Notes"),
        ),
    ),
)

ADDITIONAL_SECTION_TITLE = "Additional Information"

# Keys with bookkeeping meaning that never render as answers
RESERVED_KEYS = frozenset({"schema_version", "extra"})

KNOWN_KEYS: frozenset[str] = frozenset(q.key for s in SECTIONS for q in s.fields)


def is_absent(value: Any) -> bool:
    """True for values that count as 'not answered'."""
    return value is None or value == "" or value == [] or value == {}


def _format_scalar(value: Any, kind: str) -> str:
    if is_absent(value):
        return MISSING
    if kind == FLAG or isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _format_urls(value: Any) -> str | list[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        return _format_scalar(value, TEXT)
    return [str(v) for v in value]


def render_section(section: Section, document: dict[str, Any]) -> RenderedSection | None:
    """Render one section, or None when none of its fields were answered."""
    if all(is_absent(document.get(q.key)) for q in section.fields):
        return None

    rendered = RenderedSection(title=section.title)
    for q in section.fields:
        value = document.get(q.key)
        if q.kind == URLS:
            # Empty upload lists are left out rather than shown as N/A
            if not is_absent(value):
                rendered.fields.append(RenderedField(q.label, _format_urls(value)))
            continue
        rendered.fields.append(RenderedField(q.label, _format_scalar(value, q.kind)))
    return rendered


def collect_extra(document: dict[str, Any]) -> dict[str, Any]:
    """Answers outside the known questionnaire: the explicit `extra` map plus stray keys."""
    stored = document.get("extra") or {}
    extra = dict(stored) if isinstance(stored, dict) else {"extra": stored}
    for key, value in document.items():
        if key not in KNOWN_KEYS and key not in RESERVED_KEYS:
            extra.setdefault(key, value)
    return {k: v for k, v in extra.items() if not is_absent(v)}


def _humanize(key: str) -> str:
    return key.replace("_", " ").strip().capitalize()


def render_document(document: dict[str, Any]) -> list[RenderedSection]:
    """Render a stored onboarding document into display sections.

    Args:
        document: Response document as stored (any subset of fields)

    Returns:
        Sections in questionnaire order, skipping unanswered sections,
        followed by an "Additional Information" section when unknown
        fields are present.
    """
    sections = [r for r in (render_section(s, document) for s in SECTIONS) if r is not None]

    extra = collect_extra(document)
    if extra:
        sections.append(
            RenderedSection(
                title=ADDITIONAL_SECTION_TITLE,
                fields=[RenderedField(_humanize(k), _format_scalar(v, TEXT)) for k, v in extra.items()],
            )
        )
    return sections
