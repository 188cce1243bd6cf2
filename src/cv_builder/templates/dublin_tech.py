from cv_builder.templates.base import CVTemplate


class DublinTechTemplate(CVTemplate):
    id = "dublin-tech"
    name = "Dublin Tech"
    description = "Two-column layout for software and data roles"
    layout = "two-column"
    theme = "tech"
    sidebar_sections = frozenset({"skills", "languages", "certifications", "awards"})
    heading_overrides = {"skills": "Technical Skills"}
