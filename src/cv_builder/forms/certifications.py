from cv_builder.forms.base import ItemForm


class CertificationForm(ItemForm):
    section_type = "certifications"
    fields = ("name", "issuer", "date", "expiry_date", "credential_id")
    labels = {
        "name": "Certification name",
        "issuer": "Issuer name",
        "date": "Date",
        "expiry_date": "Expiry date",
        "credential_id": "Credential ID",
    }
    required = ("name", "issuer", "date")
