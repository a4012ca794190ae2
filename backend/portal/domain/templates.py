"""Default phase templates.

Every new project is seeded with these five phases, in order, together with
their default tasks and deliverables. Admins customise from there.
"""

from copy import deepcopy

PHASE_TEMPLATES: list[dict] = [
    {
        "name": "Discovery",
        "next_steps": "Initial consultation and project kickoff",
        "tasks": [
            "Initial consultation call",
            "Send client questionnaire",
            "Review competitors and inspiration",
            "Define project goals",
            "Contract signed",
        ],
        "deliverables": ["Signed Contract", "Project Brief"],
    },
    {
        "name": "Strategy",
        "next_steps": "Define site architecture and content strategy",
        "tasks": [
            "Create sitemap",
            "Define user flows",
            "Content strategy document",
            "Technical requirements spec",
        ],
        "deliverables": ["Site Architecture", "Content Strategy Doc"],
    },
    {
        "name": "Design",
        "next_steps": "Create mood board and visual designs",
        "tasks": [
            "Create mood board",
            "Define style guide",
            "Design homepage",
            "Design inner pages",
            "Mobile responsive designs",
            "Final design approval",
        ],
        "deliverables": ["Mood Board", "Style Guide", "Homepage Design", "Full Site Designs"],
    },
    {
        "name": "Development",
        "next_steps": "Build the website",
        "tasks": [
            "Set up development environment",
            "Build component library",
            "Develop homepage",
            "Build remaining pages",
            "Implement animations",
            "CMS integration",
        ],
        "deliverables": ["Staging Site", "CMS Setup"],
    },
    {
        "name": "Launch",
        "next_steps": "Final testing and go live",
        "tasks": [
            "QA testing",
            "SEO optimization",
            "Analytics setup",
            "Final client walkthrough",
            "Go live!",
        ],
        "deliverables": ["Live Website", "Training Documentation"],
    },
]

PHASE_NAMES: tuple[str, ...] = tuple(t["name"] for t in PHASE_TEMPLATES)


def get_phase_template(phase_order: int) -> dict:
    """Return a deep copy of the template for one phase.

    Args:
        phase_order: Phase position (0-4)

    Returns:
        {"name": str, "next_steps": str, "tasks": [str], "deliverables": [str]}

    Raises:
        ValueError: If phase_order is not in range 0-4
    """
    if not 0 <= phase_order < len(PHASE_TEMPLATES):
        raise ValueError(f"Invalid phase_order: {phase_order}. Must be 0-{len(PHASE_TEMPLATES) - 1}.")

    return deepcopy(PHASE_TEMPLATES[phase_order])
