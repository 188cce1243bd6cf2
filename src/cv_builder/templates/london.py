from cv_builder.templates.base import CVTemplate


class LondonTemplate(CVTemplate):
    id = "london"
    name = "London Minimal"
    description = "Minimal single-column layout with generous whitespace"
    layout = "single-column"
    theme = "minimal"
    heading_overrides = {
        "experience": "Experience",
        "skills": "Skills",
        "certifications": "Certifications",
    }
