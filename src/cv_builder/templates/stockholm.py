from cv_builder.templates.base import CVTemplate


class StockholmTemplate(CVTemplate):
    """Two columns: narrative sections in the main column, short lists on the side."""

    id = "stockholm"
    name = "Stockholm"
    description = "Modern two-column layout with a skills sidebar"
    layout = "two-column"
    theme = "modern"
    sidebar_sections = frozenset({"skills", "education", "languages", "certifications"})
