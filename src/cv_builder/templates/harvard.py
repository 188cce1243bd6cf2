from cv_builder.templates.base import CVTemplate


class HarvardTemplate(CVTemplate):
    """Classic academic layout; headings follow the usual US/academic naming."""

    id = "harvard"
    name = "Harvard Classic"
    description = "Traditional serif layout for academic and research roles"
    layout = "single-column"
    theme = "classic"
    heading_overrides = {
        "summary": "Profile",
        "experience": "Professional Experience",
        "publications": "Publications",
    }
